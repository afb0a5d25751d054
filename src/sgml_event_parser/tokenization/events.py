"""Events produced by the SGML tokenizer.

Some aspects to keep in mind when working with events:

* Start tags are represented by *two or more* events: one event for the
  opening of the tag (``<A``), one event for each attribute
  (``HREF="example"``), and one event for the closing of the tag (``>`` or
  ``/>``).
* End tags (``</A>``) are single events.
* Comments are ignored and never show up as events.
"""

from dataclasses import dataclass, replace
from enum import Enum, auto
from typing import ClassVar, Optional

from sgml_event_parser.character.data import ESCAPED_AMPERSAND, ESCAPED_QUOTE, CharacterData


class EventType(Enum):
    """Kinds of events in an SGML event stream."""

    MARKUP_DECLARATION = auto()         # <!DOCTYPE ...>
    PROCESSING_INSTRUCTION = auto()     # <?example>
    MARKED_SECTION = auto()             # <![IGNORE[...]]>, kept unmodified
    OPEN_START_TAG = auto()             # <example
    ATTRIBUTE = auto()                  # name="value"
    CLOSE_START_TAG = auto()            # >
    XML_CLOSE_EMPTY_ELEMENT = auto()    # />
    END_TAG = auto()                    # </example>
    CHARACTER = auto()                  # Text between tags


@dataclass(frozen=True)
class SgmlEvent:
    """Base class of all events."""

    event_type: ClassVar[EventType]

    def into_owned(self) -> "SgmlEvent":
        """Return an equal event that shares nothing with this one."""
        return replace(self)


@dataclass(frozen=True)
class MarkupDeclaration(SgmlEvent):
    """A markup declaration, like ``<!SGML ...>`` or ``<!DOCTYPE ...>``.

    The text includes the delimiters. Declarations that only hold comments
    are not reported.
    """

    event_type: ClassVar[EventType] = EventType.MARKUP_DECLARATION

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class ProcessingInstruction(SgmlEvent):
    """A processing instruction, e.g. ``<?EXAMPLE>``, delimiters included."""

    event_type: ClassVar[EventType] = EventType.PROCESSING_INSTRUCTION

    text: str

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class MarkedSection(SgmlEvent):
    """A marked section kept as found, like ``<![IGNORE[...]]>``."""

    event_type: ClassVar[EventType] = EventType.MARKED_SECTION

    status_keywords: str
    section: str

    def __str__(self) -> str:
        return f"<![{self.status_keywords}[{self.section}]]>"


@dataclass(frozen=True)
class OpenStartTag(SgmlEvent):
    """The beginning of a start tag, e.g. ``<EXAMPLE``.

    Empty start tags (``<>``) have an empty name.
    """

    event_type: ClassVar[EventType] = EventType.OPEN_START_TAG

    name: str

    def __str__(self) -> str:
        return f"<{self.name}"


@dataclass(frozen=True)
class Attribute(SgmlEvent):
    """An attribute inside a start tag, e.g. ``FOO="bar"``.

    ``value`` is None for attributes written without a value.
    """

    event_type: ClassVar[EventType] = EventType.ATTRIBUTE

    name: str
    value: Optional[CharacterData] = None

    def into_owned(self) -> "Attribute":
        value = self.value.into_owned() if self.value is not None else None
        return replace(self, value=value)

    def __str__(self) -> str:
        if self.value is None:
            return self.name
        return f"{self.name}={quote_attribute_value(self.value)}"


@dataclass(frozen=True)
class CloseStartTag(SgmlEvent):
    """Closing of a start tag, ``>``."""

    event_type: ClassVar[EventType] = EventType.CLOSE_START_TAG

    def __str__(self) -> str:
        return ">"


@dataclass(frozen=True)
class XmlCloseEmptyElement(SgmlEvent):
    """XML-style closing of an empty element, ``/>``."""

    event_type: ClassVar[EventType] = EventType.XML_CLOSE_EMPTY_ELEMENT

    def __str__(self) -> str:
        return "/>"


@dataclass(frozen=True)
class EndTag(SgmlEvent):
    """An end tag, e.g. ``</EXAMPLE>``. Empty end tags (``</>``) have an empty name."""

    event_type: ClassVar[EventType] = EventType.END_TAG

    name: str

    def __str__(self) -> str:
        return f"</{self.name}>"


@dataclass(frozen=True)
class Character(SgmlEvent):
    """Any run of characters that is not part of a tag."""

    event_type: ClassVar[EventType] = EventType.CHARACTER

    data: CharacterData

    def into_owned(self) -> "Character":
        return replace(self, data=self.data.into_owned())

    def __str__(self) -> str:
        return self.data.escape()


def quote_attribute_value(value: CharacterData) -> str:
    """Quote an attribute value, escaping as little as possible.

    ``"`` is preferred, ``'`` is used when the value contains ``"`` but no
    ``'``, and otherwise ``"`` is used with inner quotes escaped.
    """
    text = value.as_str()
    escape_ampersand = value.escapes_ampersand()
    if not escape_ampersand and '"' not in text:
        return f'"{text}"'
    if not escape_ampersand and "'" not in text:
        return f"'{text}'"
    if escape_ampersand:
        text = text.replace("&", ESCAPED_AMPERSAND)
    return '"' + text.replace('"', ESCAPED_QUOTE) + '"'
