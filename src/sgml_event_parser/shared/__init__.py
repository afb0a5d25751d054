"""Shared utilities for SGML event parsing.

This module provides logging, source positions and the error hierarchy used
across all processing layers. Parser configuration lives in
:mod:`sgml_event_parser.shared.config`.
"""

from .errors import (
    EntityError,
    IncompleteParseError,
    ParseError,
    SgmlError,
    UnresolvedReferenceError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .position import TokenPosition

__all__ = [
    "CorrelationLogger",
    "EntityError",
    "IncompleteParseError",
    "ParseError",
    "SgmlError",
    "TokenPosition",
    "UnresolvedReferenceError",
    "get_logger",
]
