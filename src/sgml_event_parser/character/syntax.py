"""Concrete SGML syntax shared by the reference scanner and the tokenizer.

Whitespace follows the reference concrete syntax: space, tab, carriage return
and line feed. Form feed and other Unicode spaces are ordinary characters.
"""

import re

SGML_WHITESPACE = " \t\r\n"

# Delimiters of the reference concrete syntax
ERO = "&"       # entity reference open
PERO = "%"      # parameter entity reference open
CRO = "#"       # character reference open (after ERO)
REFC = ";"      # reference close
STAGO = "<"     # start tag open
ETAGO = "</"    # end tag open
TAGC = ">"      # tag close
MDO = "<!"      # markup declaration open
MSO = "<!["     # marked section open
MSC = "]]>"     # marked section close
PIO = "<?"      # processing instruction open
COM = "--"      # comment start or end
DSO = "["       # declaration subset open
DSC = "]"       # declaration subset close

NAME_START_PATTERN = r"(?:[^\W\d]|:)"
NAME_CHAR_PATTERN = r"[\w:.\-]"
NAME_PATTERN = NAME_START_PATTERN + NAME_CHAR_PATTERN + "*"

NAME_RE = re.compile(NAME_PATTERN)
WHITESPACE_RE = re.compile(r"[ \t\r\n]*")

_NAME_START_RE = re.compile(NAME_START_PATTERN)
_NAME_CHAR_RE = re.compile(NAME_CHAR_PATTERN)


def is_sgml_whitespace(char: str) -> bool:
    """Return True for the four SGML whitespace characters."""
    return char in SGML_WHITESPACE and len(char) == 1


def is_blank(text: str) -> bool:
    """Return True if the text is empty or only holds SGML whitespace."""
    return not text.lstrip(SGML_WHITESPACE)


def trim_sgml_whitespace(text: str) -> str:
    """Strip SGML whitespace from both ends of the text."""
    return text.strip(SGML_WHITESPACE)


def is_name_start_char(char: str) -> bool:
    return _NAME_START_RE.fullmatch(char) is not None


def is_name_char(char: str) -> bool:
    return _NAME_CHAR_RE.fullmatch(char) is not None


def skip_whitespace(text: str, pos: int, end: int) -> int:
    """Return the index of the first non-whitespace character at or after pos."""
    return WHITESPACE_RE.match(text, pos, end).end()
