"""Expansion of character, entity and parameter entity references.

Three entry points share one scanning engine:

* :func:`expand_characters` resolves ``&#60;`` style references only; any named
  reference is an error.
* :func:`expand_entities` also resolves ``&name;`` through a lookup.
* :func:`expand_parameter_entities` resolves ``%name;`` through a lookup and
  never recognizes character reference syntax.

The ``;`` terminator is optional, as SGML allows a reference to be closed by
any character that cannot continue it. Text without the trigger character is
returned unchanged, as the very same object.
"""

import re
from typing import Callable, Mapping, NamedTuple, Optional, Union

from sgml_event_parser.shared.errors import EntityError

from .syntax import CRO, ERO, NAME_CHAR_PATTERN, NAME_PATTERN, PERO, REFC

EntityLookup = Union[Callable[[str], Optional[str]], Mapping[str, str]]

MAX_CODE_POINT = 0x10FFFF
SURROGATE_RANGE_START = 0xD800
SURROGATE_RANGE_END = 0xDFFF
# Longer decimal codes are out of range whatever their value
MAX_DECIMAL_DIGITS = len(str(MAX_CODE_POINT))

_CHAR_REF_RE = re.compile(
    CRO + r"(?:(?P<decimal>[0-9]+)|[xX](?P<hex>" + NAME_CHAR_PATTERN + r"+))"
)
_ENTITY_REF_RE = re.compile(CRO + "?" + NAME_PATTERN)
_HEX_DIGITS_RE = re.compile(r"[0-9a-fA-F]+")

# SGML function characters, usable as ``&#RE;`` and friends
FUNCTION_CHARACTERS = {
    "#RE": "\r",
    "#RS": "\n",
    "#SPACE": " ",
    "#TAB": "\t",
}


class Reference(NamedTuple):
    """A reference recognized after the prefix character.

    Exactly one of ``name`` and ``char`` is set.
    """

    end: int
    name: Optional[str] = None
    char: Optional[str] = None


Matcher = Callable[[str, int], Optional[Reference]]


def _code_point_to_char(code: Optional[int]) -> Optional[str]:
    if code is None or code > MAX_CODE_POINT:
        return None
    if SURROGATE_RANGE_START <= code <= SURROGATE_RANGE_END:
        return None
    return chr(code)


def match_entity_or_char_ref(text: str, pos: int) -> Optional[Reference]:
    """Match a character reference, falling back to an entity name.

    Numeric codes outside Unicode and non-hexadecimal ``#x`` forms are
    returned as named references so the lookup gets a chance at them.
    """
    match = _CHAR_REF_RE.match(text, pos)
    if match is not None:
        if match.group("decimal") is not None:
            digits = match.group("decimal").lstrip("0")
            code: Optional[int] = (
                int(digits or "0") if len(digits) <= MAX_DECIMAL_DIGITS else None
            )
        else:
            digits = match.group("hex")
            code = int(digits, 16) if _HEX_DIGITS_RE.fullmatch(digits) else None
        char = _code_point_to_char(code)
        if char is not None:
            return Reference(match.end(), char=char)
        return Reference(match.end(), name=match.group())
    return match_entity_ref(text, pos)


def match_entity_ref(text: str, pos: int) -> Optional[Reference]:
    """Match an entity name, optionally preceded by ``#``."""
    match = _ENTITY_REF_RE.match(text, pos)
    if match is None:
        return None
    return Reference(match.end(), name=match.group())


def _as_callable(lookup: Optional[EntityLookup]) -> Callable[[str], Optional[str]]:
    if lookup is None:
        return _no_entities
    if isinstance(lookup, Mapping):
        return lookup.get
    return lookup


def _no_entities(name: str) -> Optional[str]:
    return None


def expand(text: str, prefix: str, matcher: Matcher, lookup: Optional[EntityLookup]) -> str:
    """Expand every reference introduced by prefix in text.

    Args:
        text: Text to scan
        prefix: Single trigger character, ``&`` or ``%``
        matcher: Grammar tried right after each prefix occurrence
        lookup: Replacement source for named references

    Returns:
        The expanded text; ``text`` itself when prefix does not occur

    Raises:
        EntityError: A named reference had no replacement
    """
    index = text.find(prefix)
    if index < 0:
        return text

    resolve = _as_callable(lookup)
    pieces = []
    position = 0
    while index >= 0:
        pieces.append(text[position:index])
        after_prefix = index + len(prefix)
        reference = matcher(text, after_prefix)
        if reference is None:
            # Resume right after the prefix so a later reference still counts
            pieces.append(prefix)
            position = after_prefix
        else:
            end = reference.end
            if text.startswith(REFC, end):
                end += len(REFC)
            if reference.char is not None:
                pieces.append(reference.char)
            else:
                replacement = resolve(reference.name)
                if replacement is None:
                    raise EntityError(reference.name, (index, end))
                pieces.append(replacement)
            position = end
        index = text.find(prefix, position)

    pieces.append(text[position:])
    return "".join(pieces)


def expand_characters(text: str) -> str:
    """Expand character references (``&#123;``); named references are errors.

    >>> expand_characters("&#60;hello&#44; world&#33;&#62;")
    '<hello, world!>'
    """
    return expand(text, ERO, match_entity_or_char_ref, None)


def expand_entities(text: str, lookup: Optional[EntityLookup]) -> str:
    """Expand entity (``&foo;``) and character (``&#123;``) references.

    Character references are resolved without consulting the lookup. Function
    names (``&#SPACE;``) and character references beyond Unicode
    (``&#1234567;``) are passed to the lookup under their ``#`` name.

    >>> expand_entities("caf&eacute; &#9749;", {"eacute": "é"})
    'café ☕'
    """
    return expand(text, ERO, match_entity_or_char_ref, lookup)


def expand_parameter_entities(text: str, lookup: Optional[EntityLookup]) -> str:
    """Expand parameter entity references (``%foo;``).

    Parameter references only appear in markup declarations and marked
    section keywords; general entities and character references are left
    as they are.
    """
    return expand(text, PERO, match_entity_ref, lookup)


def with_function_characters(lookup: Optional[EntityLookup] = None) -> Callable[[str], Optional[str]]:
    """Wrap a lookup so SGML function characters (``&#RE;``, ``&#SPACE;``) resolve.

    Function names are matched case-insensitively; anything else goes to the
    wrapped lookup.
    """
    resolve = _as_callable(lookup)

    def lookup_with_functions(name: str) -> Optional[str]:
        if name.startswith(CRO):
            function_char = FUNCTION_CHARACTERS.get(name.upper())
            if function_char is not None:
                return function_char
        return resolve(name)

    return lookup_with_functions
