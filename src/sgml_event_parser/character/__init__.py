"""Character processing layer for SGML event parsing.

This module provides the concrete SGML syntax (whitespace and name
characters), reference expansion and the character data model.
"""

from .data import (
    CData,
    CharacterData,
    RcData,
)
from .entities import (
    FUNCTION_CHARACTERS,
    EntityLookup,
    expand,
    expand_characters,
    expand_entities,
    expand_parameter_entities,
    match_entity_or_char_ref,
    match_entity_ref,
    with_function_characters,
)
from .syntax import (
    SGML_WHITESPACE,
    is_blank,
    is_name_char,
    is_name_start_char,
    is_sgml_whitespace,
    trim_sgml_whitespace,
)

__all__ = [
    "FUNCTION_CHARACTERS",
    "SGML_WHITESPACE",
    "CData",
    "CharacterData",
    "EntityLookup",
    "RcData",
    "expand",
    "expand_characters",
    "expand_entities",
    "expand_parameter_entities",
    "is_blank",
    "is_name_char",
    "is_name_start_char",
    "is_sgml_whitespace",
    "match_entity_or_char_ref",
    "match_entity_ref",
    "trim_sgml_whitespace",
    "with_function_characters",
]
