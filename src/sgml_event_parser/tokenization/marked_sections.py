"""Status keywords of marked sections (``<![ KEYWORDS [ ... ]]>``).

A marked section may carry several status keywords; the one with the highest
precedence decides how its content is read:

    IGNORE > CDATA > RCDATA > INCLUDE

``TEMP`` only flags the section as temporary and has no effect. An empty
keyword list means ``INCLUDE``.
"""

import re
from enum import Enum
from typing import Optional

from sgml_event_parser.character.syntax import SGML_WHITESPACE

TEMP_KEYWORD = "TEMP"

_KEYWORD_RE = re.compile(r"[^ \t\r\n]+")


class MarkedSectionStatus(Enum):
    """Resolved status of a marked section, in increasing precedence."""

    INCLUDE = 1     # Content is parsed as markup
    RCDATA = 2      # Content is replaceable character data
    CDATA = 3       # Content is character data, taken literally
    IGNORE = 4      # Content is discarded

    @property
    def precedence(self) -> int:
        return self.value

    @property
    def is_character_data(self) -> bool:
        return self in (MarkedSectionStatus.CDATA, MarkedSectionStatus.RCDATA)

    @classmethod
    def from_keyword(cls, keyword: str) -> "MarkedSectionStatus":
        """Parse a single status keyword, ignoring case and surrounding whitespace.

        Raises:
            ValueError: The keyword is not a status keyword
        """
        normalized = keyword.strip(SGML_WHITESPACE).upper()
        try:
            return cls[normalized]
        except KeyError:
            raise ValueError(f"Invalid marked section keyword: {keyword!r}") from None

    @classmethod
    def from_keywords(cls, keywords: str) -> "MarkedSectionStatus":
        """Resolve a whitespace-separated keyword list to its effective status.

        Raises:
            ValueError: Any keyword is not a status keyword
        """
        status = cls.INCLUDE
        for keyword in _KEYWORD_RE.findall(keywords):
            if keyword.upper() == TEMP_KEYWORD:
                continue
            candidate = cls.from_keyword(keyword)
            if candidate.precedence > status.precedence:
                status = candidate
        return status


class MarkedSectionHandling(Enum):
    """How marked sections (``<![CDATA[example]]>``) should be handled."""

    KEEP_UNMODIFIED = "keep"            # Emit MarkedSection events as found
    ACCEPT_ONLY_CHARACTER_DATA = "character-data"   # Expand CDATA and RCDATA only
    EXPAND_ALL = "expand"               # Also expand INCLUDE and IGNORE

    def parse_keywords(self, status_keywords: str) -> Optional[MarkedSectionStatus]:
        """Resolve status keywords under this mode, or None if rejected.

        In ``ACCEPT_ONLY_CHARACTER_DATA`` mode exactly one keyword is accepted,
        and it must be ``CDATA`` or ``RCDATA``; even ``CDATA CDATA`` is rejected.
        """
        if self is MarkedSectionHandling.ACCEPT_ONLY_CHARACTER_DATA:
            try:
                status = MarkedSectionStatus.from_keyword(status_keywords)
            except ValueError:
                return None
            return status if status.is_character_data else None
        try:
            return MarkedSectionStatus.from_keywords(status_keywords)
        except ValueError:
            return None
