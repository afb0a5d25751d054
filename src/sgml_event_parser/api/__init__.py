"""Public parsing API.

Progressive disclosure from the module-level :func:`parse` and
:func:`parse_file` functions to a reusable, configured :class:`Parser`.
"""

from .parser import Parser, parse, parse_file

__all__ = [
    "Parser",
    "parse",
    "parse_file",
]
