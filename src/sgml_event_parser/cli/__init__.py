"""Command-line interface module for the SGML event parser.

This module provides the ``sgml-events`` tool, which prints the event stream
of SGML documents as text, JSON, or re-rendered markup.
"""

from .main import main

__all__ = ["main"]
