"""SGML Event Parser.

Parses SGML documents, including HTML and XML, into a flat stream of events:
start tags split into opening, attributes and closing; end tags; character
data; markup declarations; processing instructions and marked sections.
Entity and character references are expanded, with lookups supplied by the
caller.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_file()
- Level 2: Configured parser - Parser, Parser.builder(), ParserConfig
- Level 3: Tokenizer and reference expansion - SgmlTokenizer, expand_entities()
"""

__version__ = "0.1.0"
__author__ = "SGML Event Parser Team"

from .api import Parser, parse, parse_file
from .character import CData, CharacterData, RcData, expand_entities, with_function_characters
from .shared.config import NameNormalization, ParserBuilder, ParserConfig
from .shared.errors import (
    EntityError,
    IncompleteParseError,
    ParseError,
    SgmlError,
    UnresolvedReferenceError,
)
from .tokenization import (
    Attribute,
    Character,
    CloseStartTag,
    EndTag,
    MarkedSection,
    MarkedSectionHandling,
    MarkupDeclaration,
    OpenStartTag,
    ProcessingInstruction,
    SgmlEvent,
    SgmlFragment,
    SgmlTokenizer,
    XmlCloseEmptyElement,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_file",

    # Level 2: Configured parser
    "NameNormalization",
    "Parser",
    "ParserBuilder",
    "ParserConfig",

    # Level 3: Tokenizer and character data
    "CData",
    "CharacterData",
    "RcData",
    "SgmlTokenizer",
    "expand_entities",
    "with_function_characters",

    # Events
    "Attribute",
    "Character",
    "CloseStartTag",
    "EndTag",
    "MarkedSection",
    "MarkedSectionHandling",
    "MarkupDeclaration",
    "OpenStartTag",
    "ProcessingInstruction",
    "SgmlEvent",
    "SgmlFragment",
    "XmlCloseEmptyElement",

    # Errors
    "EntityError",
    "IncompleteParseError",
    "ParseError",
    "SgmlError",
    "UnresolvedReferenceError",
]
