"""Configuration for SGML event parsing.

:class:`ParserConfig` is an immutable description of the parsing policy:
whitespace trimming, name case normalization, marked section handling,
suppression of declarations and processing instructions, and the two entity
lookups used during reference expansion. :class:`ParserBuilder` assembles one
through chained setters.
"""

import json
from dataclasses import dataclass, field, fields, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from sgml_event_parser.character.data import CData
from sgml_event_parser.character.entities import (
    EntityLookup,
    expand_entities,
    expand_parameter_entities,
)
from sgml_event_parser.character.syntax import trim_sgml_whitespace
from sgml_event_parser.tokenization.marked_sections import (
    MarkedSectionHandling,
    MarkedSectionStatus,
)

if TYPE_CHECKING:
    from sgml_event_parser.api.parser import Parser
    from sgml_event_parser.tokenization.fragment import SgmlFragment

# Fields that hold callables and are left out of dict/JSON export
LOOKUP_FIELDS = ("entity_lookup", "parameter_entity_lookup")


class NameNormalization(Enum):
    """How tag and attribute names should be handled."""

    UNCHANGED = "unchanged"         # Keep names as written
    TO_LOWERCASE = "lowercase"      # Fold names to lowercase
    TO_UPPERCASE = "uppercase"      # Fold names to uppercase

    def normalize(self, name: str) -> str:
        """Apply the normalization; names already in the right case are returned as is."""
        if self is NameNormalization.TO_LOWERCASE and any(c.isupper() for c in name):
            return name.lower()
        if self is NameNormalization.TO_UPPERCASE and any(c.islower() for c in name):
            return name.upper()
        return name


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ParserConfig:
    """Parsing policy shared, read-only, by every parse that uses it.

    Defaults: whitespace is trimmed, names keep their case, only ``CDATA`` and
    ``RCDATA`` marked sections are accepted, no named entity resolves
    (character references still do), and declarations and processing
    instructions stay in the event stream.

    Lookups map a reference name to its replacement text, or None when the
    name is undefined. A mapping may be given instead of a callable.
    """

    trim_whitespace: bool = True
    name_normalization: NameNormalization = NameNormalization.UNCHANGED
    marked_section_handling: MarkedSectionHandling = (
        MarkedSectionHandling.ACCEPT_ONLY_CHARACTER_DATA
    )
    ignore_markup_declarations: bool = False
    ignore_processing_instructions: bool = False
    entity_lookup: Optional[EntityLookup] = field(default=None, compare=False, repr=False)
    parameter_entity_lookup: Optional[EntityLookup] = field(
        default=None, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        """Validate the configuration."""
        for flag in ("trim_whitespace", "ignore_markup_declarations",
                     "ignore_processing_instructions"):
            if not isinstance(getattr(self, flag), bool):
                raise ConfigValidationError(f"{flag} must be a bool", field_name=flag)
        if not isinstance(self.name_normalization, NameNormalization):
            raise ConfigValidationError(
                "name_normalization must be a NameNormalization",
                field_name="name_normalization",
                suggestions=[member.name for member in NameNormalization],
            )
        if not isinstance(self.marked_section_handling, MarkedSectionHandling):
            raise ConfigValidationError(
                "marked_section_handling must be a MarkedSectionHandling",
                field_name="marked_section_handling",
                suggestions=[member.name for member in MarkedSectionHandling],
            )
        for name in LOOKUP_FIELDS:
            lookup = getattr(self, name)
            if lookup is not None and not (callable(lookup) or hasattr(lookup, "get")):
                raise ConfigValidationError(
                    f"{name} must be a callable or a mapping", field_name=name
                )

    def trim(self, text: str) -> str:
        """Trim text according to the configured rules."""
        if self.trim_whitespace:
            return trim_sgml_whitespace(text)
        return text

    def normalize_name(self, name: str) -> str:
        return self.name_normalization.normalize(name)

    def parse_rcdata(self, rcdata: str) -> CData:
        """Expand references in replaceable character data, giving its final form.

        Raises:
            EntityError: A reference had no replacement
        """
        return CData(expand_entities(rcdata, self.entity_lookup))

    def parse_markup_declaration_text(self, text: str) -> str:
        """Expand parameter entities in markup declaration text.

        Raises:
            EntityError: A parameter reference had no replacement
        """
        return expand_parameter_entities(text, self.parameter_entity_lookup)

    def parse_marked_section_keywords(
        self, status_keywords: str
    ) -> Optional[MarkedSectionStatus]:
        """Resolve marked section keywords under the configured handling mode.

        Outside ``ACCEPT_ONLY_CHARACTER_DATA`` mode, parameter entities in the
        keywords are expanded first.

        Raises:
            EntityError: A parameter reference had no replacement
        """
        mode = self.marked_section_handling
        if mode is not MarkedSectionHandling.ACCEPT_ONLY_CHARACTER_DATA:
            status_keywords = self.parse_markup_declaration_text(status_keywords)
        return mode.parse_keywords(status_keywords)

    def override(self, **changes: Any) -> "ParserConfig":
        """Create a new configuration with specific fields replaced.

        Example:
            >>> config = ParserConfig()
            >>> config.override(trim_whitespace=False).trim_whitespace
            False
        """
        try:
            return replace(self, **changes)
        except TypeError as e:
            raise ConfigValidationError(str(e)) from e

    def to_dict(self) -> Dict[str, Any]:
        """Convert the configuration to a dictionary.

        Lookups cannot be serialized; only whether each one is registered
        is reported.
        """
        result: Dict[str, Any] = {}
        for config_field in fields(self):
            value = getattr(self, config_field.name)
            if config_field.name in LOOKUP_FIELDS:
                result[f"has_{config_field.name}"] = value is not None
            elif isinstance(value, Enum):
                result[config_field.name] = value.name
            else:
                result[config_field.name] = value
        return result

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        entity_lookup: Optional[EntityLookup] = None,
        parameter_entity_lookup: Optional[EntityLookup] = None,
    ) -> "ParserConfig":
        """Create a configuration from a dictionary produced by :meth:`to_dict`.

        Enum members may be given by name (``"TO_LOWERCASE"``) or by value
        (``"lowercase"``). Unknown keys are rejected.
        """
        known = {config_field.name for config_field in fields(cls)}
        values: Dict[str, Any] = {}
        for key, value in data.items():
            if key.startswith("has_") and key[4:] in LOOKUP_FIELDS:
                continue
            if key not in known or key in LOOKUP_FIELDS:
                raise ConfigValidationError(f"Unknown configuration field: {key}",
                                            field_name=key)
            values[key] = value

        for key, enum_type in (("name_normalization", NameNormalization),
                               ("marked_section_handling", MarkedSectionHandling)):
            if isinstance(values.get(key), str):
                values[key] = _enum_from_string(enum_type, values[key], key)

        return cls(
            entity_lookup=entity_lookup,
            parameter_entity_lookup=parameter_entity_lookup,
            **values,
        )

    @classmethod
    def from_json(cls, json_str: str) -> "ParserConfig":
        return cls.from_dict(json.loads(json_str))


def _enum_from_string(enum_type: Any, raw: str, field_name: str) -> Any:
    if raw in enum_type.__members__:
        return enum_type[raw]
    try:
        return enum_type(raw)
    except ValueError:
        raise ConfigValidationError(
            f"Invalid value for {field_name}: {raw!r}",
            field_name=field_name,
            suggestions=list(enum_type.__members__),
        ) from None


class ParserBuilder:
    """A fluent interface for configuring parsers.

    Example:
        >>> parser = (
        ...     ParserBuilder()
        ...     .lowercase_names()
        ...     .expand_entities({"eacute": "é"})
        ...     .build()
        ... )
    """

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        self._changes: Dict[str, Any] = {}
        self._base = config or ParserConfig()

    def _set(self, **changes: Any) -> "ParserBuilder":
        self._changes.update(changes)
        return self

    def trim_whitespace(self, trim_whitespace: bool) -> "ParserBuilder":
        """Define whether whitespace surrounding text should be trimmed."""
        return self._set(trim_whitespace=trim_whitespace)

    def name_normalization(self, name_normalization: NameNormalization) -> "ParserBuilder":
        return self._set(name_normalization=name_normalization)

    def lowercase_names(self) -> "ParserBuilder":
        return self.name_normalization(NameNormalization.TO_LOWERCASE)

    def uppercase_names(self) -> "ParserBuilder":
        return self.name_normalization(NameNormalization.TO_UPPERCASE)

    def expand_entities(self, lookup: EntityLookup) -> "ParserBuilder":
        """Define the lookup used to resolve entities (``&name;``)."""
        return self._set(entity_lookup=lookup)

    def expand_parameter_entities(self, lookup: EntityLookup) -> "ParserBuilder":
        """Define the lookup used to resolve parameter entities (``%name;``)."""
        return self._set(parameter_entity_lookup=lookup)

    def marked_section_handling(self, mode: MarkedSectionHandling) -> "ParserBuilder":
        return self._set(marked_section_handling=mode)

    def expand_marked_sections(self) -> "ParserBuilder":
        """Accept all marked sections, including ``INCLUDE`` and ``IGNORE``."""
        return self.marked_section_handling(MarkedSectionHandling.EXPAND_ALL)

    def ignore_markup_declarations(self, ignore: bool = True) -> "ParserBuilder":
        """Change whether markup declarations (``<!EXAMPLE>``) are dropped."""
        return self._set(ignore_markup_declarations=ignore)

    def ignore_processing_instructions(self, ignore: bool = True) -> "ParserBuilder":
        """Change whether processing instructions (``<?example>``) are dropped."""
        return self._set(ignore_processing_instructions=ignore)

    def into_config(self) -> ParserConfig:
        """Return the configuration built so far."""
        return self._base.override(**self._changes)

    def build(self) -> "Parser":
        # Imported here to avoid a circular dependency with the API layer
        from sgml_event_parser.api.parser import Parser

        return Parser(self.into_config())

    def parse(self, text: str) -> "SgmlFragment":
        """Parse text with the built parser.

        To reuse the same parser for several inputs, call :meth:`build` once
        and use :meth:`Parser.parse`.
        """
        return self.build().parse(text)
