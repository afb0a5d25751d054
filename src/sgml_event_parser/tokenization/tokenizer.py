"""Core SGML tokenization with a cursor-driven state machine.

The tokenizer classifies the whole input into events. Each markup construct
is recognized from its opening delimiter, which selects a state; the state's
handler consumes the construct and returns the position after it. Parsing is
all-or-nothing: malformed markup or an unresolved reference raises, and no
partial event stream is returned.
"""

import logging
import re
import time
from enum import Enum, auto
from typing import TYPE_CHECKING, Callable, Dict, List, Optional, Tuple

from sgml_event_parser.character.data import CData, CharacterData
from sgml_event_parser.character.syntax import (
    COM,
    DSC,
    DSO,
    MDO,
    MSC,
    MSO,
    NAME_PATTERN,
    NAME_RE,
    NAME_START_PATTERN,
    PIO,
    SGML_WHITESPACE,
    TAGC,
    skip_whitespace,
)
from sgml_event_parser.shared.errors import (
    EntityError,
    IncompleteParseError,
    ParseError,
    SgmlError,
    UnresolvedReferenceError,
)
from sgml_event_parser.shared.logging import get_logger

from .events import (
    Attribute,
    Character,
    CloseStartTag,
    EndTag,
    MarkedSection,
    MarkupDeclaration,
    OpenStartTag,
    ProcessingInstruction,
    SgmlEvent,
    XmlCloseEmptyElement,
)
from .fragment import SgmlFragment
from .marked_sections import MarkedSectionHandling, MarkedSectionStatus

if TYPE_CHECKING:
    from sgml_event_parser.shared.config import ParserConfig

MS_PER_SECOND = 1000

# A "<" only opens markup when followed by one of these; otherwise it is data
_MARKUP_OPEN_RE = re.compile(
    r"<(?:[!?>]|/(?:>|" + NAME_START_PATTERN + r")|" + NAME_START_PATTERN + r")"
)
_ATTRIBUTE_RE = re.compile(
    r"(?P<name>" + NAME_PATTERN + r")"
    r"(?:[ \t\r\n]*=[ \t\r\n]*"
    r"(?:\"(?P<double>[^\"]*)\"|'(?P<single>[^']*)'"
    r"|(?P<unquoted>(?:[^ \t\r\n\"'<>/=]|/(?!>))+)))?"
)
_END_TAG_RE = re.compile(r"</(?P<name>" + NAME_PATTERN + r")?[ \t\r\n]*>")
_MARKED_SECTION_OPEN_RE = re.compile(r"<!\[(?P<keywords>[^\[\]<>]*)\[")

_QUOTES = "\"'"


class TokenizerState(Enum):
    """State machine states: CONTENT, then one per markup construct."""

    CONTENT = auto()                 # Between constructs
    CHARACTER_DATA = auto()          # Text between markup
    START_TAG = auto()               # <name attributes>
    END_TAG = auto()                 # </name>
    MARKUP_DECLARATION = auto()      # <!...>, including comment declarations
    MARKED_SECTION = auto()          # <![keywords[...]]>
    PROCESSING_INSTRUCTION = auto()  # <?...>


class SgmlTokenizer:
    """Converts SGML text into a flat stream of events.

    A tokenizer holds per-parse state and is meant to be used by one thread
    at a time; the configuration it reads is never modified and can be shared.
    """

    def __init__(
        self,
        config: "ParserConfig",
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize the tokenizer.

        Args:
            config: Parsing policy to apply
            correlation_id: Optional correlation ID for tracking requests
        """
        self.config = config
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "sgml_tokenizer")
        self._handlers: Dict[TokenizerState, Callable[[int, int], int]] = {
            TokenizerState.CHARACTER_DATA: self._process_character_data,
            TokenizerState.START_TAG: self._process_start_tag,
            TokenizerState.END_TAG: self._process_end_tag,
            TokenizerState.MARKUP_DECLARATION: self._process_markup_declaration,
            TokenizerState.MARKED_SECTION: self._process_marked_section,
            TokenizerState.PROCESSING_INSTRUCTION: self._process_processing_instruction,
        }
        self._reset_state("")

    def _reset_state(self, text: str) -> None:
        self.text = text
        self.state = TokenizerState.CONTENT
        self.events: List[SgmlEvent] = []

    def tokenize(self, text: str) -> SgmlFragment:
        """Tokenize a complete document.

        Args:
            text: Decoded document text

        Returns:
            Fragment holding every event in document order

        Raises:
            ParseError: Malformed markup; ``UnresolvedReferenceError`` for
                references without a replacement
        """
        start_time = time.perf_counter()
        self._reset_state(text)
        debug_enabled = self.logger.is_enabled_for(logging.DEBUG)
        if debug_enabled:
            self.logger.debug(
                "Starting tokenization",
                extra={"content_length": len(text)}
            )

        try:
            consumed = self._tokenize_content(0, len(text))
            if consumed != len(text):
                raise IncompleteParseError.at("Unexpected trailing input", text, consumed)
        except SgmlError as e:
            self.logger.warning(
                "Tokenization failed",
                extra={
                    "error": str(e),
                    "state": self.state.name,
                    "events_before_failure": len(self.events),
                }
            )
            raise

        fragment = SgmlFragment(self.events)
        if debug_enabled:
            self.logger.debug(
                "Tokenization completed",
                extra={
                    "event_count": len(fragment),
                    "processing_time_ms": (time.perf_counter() - start_time) * MS_PER_SECOND,
                }
            )
        return fragment

    def _tokenize_content(self, pos: int, end: int) -> int:
        """Run the state machine over text[pos:end] and return where it stopped."""
        while pos < end:
            self.state = self._classify(pos, end)
            pos = self._handlers[self.state](pos, end)
            self.state = TokenizerState.CONTENT
        return pos

    def _classify(self, pos: int, end: int) -> TokenizerState:
        text = self.text
        if text.startswith(MSO, pos, end):
            return TokenizerState.MARKED_SECTION
        if _MARKUP_OPEN_RE.match(text, pos, end) is None:
            return TokenizerState.CHARACTER_DATA
        delimiter = text[pos + 1]
        if delimiter == "!":
            return TokenizerState.MARKUP_DECLARATION
        if delimiter == "?":
            return TokenizerState.PROCESSING_INSTRUCTION
        if delimiter == "/":
            return TokenizerState.END_TAG
        return TokenizerState.START_TAG

    # Character data

    def _process_character_data(self, pos: int, end: int) -> int:
        match = _MARKUP_OPEN_RE.search(self.text, pos + 1, end)
        stop = match.start() if match else end
        self._emit_rcdata(pos, stop)
        return stop

    def _emit_rcdata(self, start: int, stop: int) -> None:
        """Trim, expand and emit text[start:stop] as character data."""
        raw = self.text[start:stop]
        trimmed = self.config.trim(raw)
        if not trimmed:
            return
        offset = start + len(raw) - len(raw.lstrip(SGML_WHITESPACE)) if trimmed is not raw else start
        self.events.append(Character(self._parse_rcdata(trimmed, offset)))

    def _parse_rcdata(self, rcdata: str, offset: int) -> CharacterData:
        try:
            return self.config.parse_rcdata(rcdata)
        except EntityError as e:
            raise UnresolvedReferenceError.from_entity_error(e, self.text, offset) from e

    # Tags

    def _process_start_tag(self, pos: int, end: int) -> int:
        text = self.text
        name_match = NAME_RE.match(text, pos + 1, end)
        name = name_match.group() if name_match else ""
        cursor = name_match.end() if name_match else pos + 1
        self.events.append(OpenStartTag(self.config.normalize_name(name)))

        while True:
            cursor = skip_whitespace(text, cursor, end)
            if text.startswith(TAGC, cursor, end):
                self.events.append(CloseStartTag())
                return cursor + 1
            if text.startswith("/>", cursor, end):
                self.events.append(XmlCloseEmptyElement())
                return cursor + 2
            if cursor >= end:
                raise ParseError.at("Unterminated start tag", text, pos)
            attribute = _ATTRIBUTE_RE.match(text, cursor, end)
            if attribute is None:
                raise ParseError.at("Invalid attribute in start tag", text, cursor)
            self.events.append(self._build_attribute(attribute))
            cursor = attribute.end()

    def _build_attribute(self, match: "re.Match[str]") -> Attribute:
        name = self.config.normalize_name(match.group("name"))
        for group in ("double", "single", "unquoted"):
            value = match.group(group)
            if value is not None:
                return Attribute(name, self._parse_rcdata(value, match.start(group)))
        return Attribute(name, None)

    def _process_end_tag(self, pos: int, end: int) -> int:
        match = _END_TAG_RE.match(self.text, pos, end)
        if match is None:
            raise ParseError.at("Invalid end tag", self.text, pos)
        self.events.append(EndTag(self.config.normalize_name(match.group("name") or "")))
        return match.end()

    # Declarations and processing instructions

    def _process_processing_instruction(self, pos: int, end: int) -> int:
        close = self.text.find(TAGC, pos + len(PIO), end)
        if close < 0:
            raise ParseError.at("Unterminated processing instruction", self.text, pos)
        if not self.config.ignore_processing_instructions:
            self.events.append(ProcessingInstruction(self.text[pos:close + 1]))
        return close + 1

    def _process_markup_declaration(self, pos: int, end: int) -> int:
        text = self.text
        cursor = pos + len(MDO)
        if text.startswith(TAGC, cursor, end):
            # Empty declaration <!>
            return cursor + 1
        if text.startswith(COM, cursor, end):
            return self._skip_comment_declaration(pos, end)
        if NAME_RE.match(text, cursor, end) is None:
            raise ParseError.at("Invalid markup declaration", text, pos)

        close = self._scan_declaration(pos, end)
        if not self.config.ignore_markup_declarations:
            try:
                declaration = self.config.parse_markup_declaration_text(text[pos:close])
            except EntityError as e:
                raise UnresolvedReferenceError.from_entity_error(e, text, pos) from e
            self.events.append(MarkupDeclaration(declaration))
        return close

    def _skip_comment_declaration(self, pos: int, end: int) -> int:
        """Skip ``<!-- ... -- -- ... -->``, returning the index after ``>``."""
        text = self.text
        cursor = pos + len(MDO)
        while text.startswith(COM, cursor, end):
            close = text.find(COM, cursor + len(COM), end)
            if close < 0:
                raise ParseError.at("Unterminated comment", text, cursor)
            cursor = skip_whitespace(text, close + len(COM), end)
        if not text.startswith(TAGC, cursor, end):
            raise ParseError.at("Invalid comment declaration", text, pos)
        return cursor + 1

    def _scan_declaration(self, pos: int, end: int) -> int:
        """Find the end of the declaration opened at pos.

        Literals, comments and declaration subsets are skipped as units, so
        a ``>`` inside them does not close the declaration.
        """
        text = self.text
        cursor = pos + len(MDO)
        while cursor < end:
            char = text[cursor]
            if char == TAGC:
                return cursor + 1
            if char in _QUOTES:
                cursor = self._skip_literal(cursor, end)
            elif text.startswith(COM, cursor, end):
                close = text.find(COM, cursor + len(COM), end)
                if close < 0:
                    raise ParseError.at("Unterminated comment", text, cursor)
                cursor = close + len(COM)
            elif char == DSO:
                cursor = self._skip_declaration_subset(cursor + 1, end)
            else:
                cursor += 1
        raise ParseError.at("Unterminated markup declaration", text, pos)

    def _skip_declaration_subset(self, pos: int, end: int) -> int:
        text = self.text
        cursor = pos
        while cursor < end:
            char = text[cursor]
            if char == DSC:
                return cursor + 1
            if char in _QUOTES:
                cursor = self._skip_literal(cursor, end)
            elif text.startswith(MSO, cursor, end):
                _, cursor = self._find_marked_section_end(cursor + len(MSO), end, nested=True)
            elif text.startswith(MDO, cursor, end):
                cursor = self._scan_declaration(cursor, end)
            elif text.startswith(PIO, cursor, end):
                close = text.find(TAGC, cursor, end)
                if close < 0:
                    raise ParseError.at("Unterminated processing instruction", text, cursor)
                cursor = close + 1
            else:
                cursor += 1
        raise ParseError.at("Unterminated declaration subset", text, pos - 1)

    def _skip_literal(self, pos: int, end: int) -> int:
        close = self.text.find(self.text[pos], pos + 1, end)
        if close < 0:
            raise ParseError.at("Unterminated literal", self.text, pos)
        return close + 1

    # Marked sections

    def _process_marked_section(self, pos: int, end: int) -> int:
        text = self.text
        match = _MARKED_SECTION_OPEN_RE.match(text, pos, end)
        if match is None:
            raise ParseError.at("Invalid marked section", text, pos)
        status_keywords = match.group("keywords")
        status = self._resolve_status(status_keywords, match.start("keywords"), pos)

        content_start = match.end()
        content_end, close = self._find_marked_section_end(
            content_start, end, nested=not status.is_character_data
        )

        if self.config.marked_section_handling is MarkedSectionHandling.KEEP_UNMODIFIED:
            self.events.append(MarkedSection(status_keywords, text[content_start:content_end]))
        elif status is MarkedSectionStatus.CDATA:
            section = self.config.trim(text[content_start:content_end])
            if section:
                self.events.append(Character(CData(section)))
        elif status is MarkedSectionStatus.RCDATA:
            self._emit_rcdata(content_start, content_end)
        elif status is MarkedSectionStatus.INCLUDE:
            self._tokenize_content(content_start, content_end)
        return close

    def _resolve_status(self, status_keywords: str, offset: int, pos: int) -> MarkedSectionStatus:
        try:
            status = self.config.parse_marked_section_keywords(status_keywords)
        except EntityError as e:
            raise UnresolvedReferenceError.from_entity_error(e, self.text, offset) from e
        if status is None:
            raise ParseError.at(
                f"Unsupported marked section keywords {status_keywords.strip(SGML_WHITESPACE)!r}",
                self.text,
                pos,
            )
        return status

    def _find_marked_section_end(self, start: int, end: int, nested: bool) -> Tuple[int, int]:
        """Locate the ``]]>`` closing a section whose content starts at start.

        Returns the end of the content and the index after ``]]>``. Character
        data sections end at the first ``]]>``; other sections may nest.
        """
        text = self.text
        depth = 0
        cursor = start
        while True:
            close = text.find(MSC, cursor, end)
            if close < 0:
                raise ParseError.at("Unterminated marked section", text, start)
            if nested:
                opening = text.find(MSO, cursor, close)
                if opening >= 0:
                    depth += 1
                    cursor = opening + len(MSO)
                    continue
            if depth == 0:
                return close, close + len(MSC)
            depth -= 1
            cursor = close + len(MSC)
