"""Tokenization engine for SGML event parsing.

This module turns decoded SGML text into a flat stream of events using a
cursor-driven state machine.

Key Components:
    SgmlTokenizer: Main tokenization class
    SgmlEvent: Base class of the events in the stream
    SgmlFragment: Ordered sequence of events, renderable back to markup
    MarkedSectionStatus: Resolved status of a marked section
    MarkedSectionHandling: Policy for marked sections
    TokenizerState: State machine states for tokenization processing
"""

from .events import (
    Attribute,
    Character,
    CloseStartTag,
    EndTag,
    EventType,
    MarkedSection,
    MarkupDeclaration,
    OpenStartTag,
    ProcessingInstruction,
    SgmlEvent,
    XmlCloseEmptyElement,
    quote_attribute_value,
)
from .fragment import SgmlFragment
from .marked_sections import (
    MarkedSectionHandling,
    MarkedSectionStatus,
)
from .tokenizer import (
    SgmlTokenizer,
    TokenizerState,
)

__all__ = [
    "Attribute",
    "Character",
    "CloseStartTag",
    "EndTag",
    "EventType",
    "MarkedSection",
    "MarkedSectionHandling",
    "MarkedSectionStatus",
    "MarkupDeclaration",
    "OpenStartTag",
    "ProcessingInstruction",
    "SgmlEvent",
    "SgmlFragment",
    "SgmlTokenizer",
    "TokenizerState",
    "XmlCloseEmptyElement",
    "quote_attribute_value",
]
