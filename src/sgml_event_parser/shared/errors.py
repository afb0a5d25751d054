"""Exception hierarchy for SGML parsing.

All errors raised while expanding references or tokenizing a document derive
from :class:`SgmlError`. Parsing is all-or-nothing: the first error aborts the
parse and no partial event stream is returned.
"""

from typing import Optional, Tuple

from .position import TokenPosition

# Characters of source shown around an error position
CONTEXT_RADIUS = 20


class SgmlError(Exception):
    """Base exception for all SGML processing errors."""


class EntityError(SgmlError):
    """A named reference whose lookup returned no replacement.

    Attributes:
        entity: Name of the reference as written, without the prefix
            character but including a leading ``#`` for malformed
            character references
        position: ``(start, end)`` string indices of the reference, from the
            prefix character through the optional ``;`` terminator. The
            indices count code points of the decoded text, not bytes of an
            encoded buffer.
    """

    def __init__(self, entity: str, position: Tuple[int, int]) -> None:
        super().__init__(f"entity '{entity}' is not defined")
        self.entity = entity
        self.position = position

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, EntityError):
            return NotImplemented
        return (self.entity, self.position) == (other.entity, other.position)

    def __hash__(self) -> int:
        return hash((self.entity, self.position))

    def __repr__(self) -> str:
        return f"EntityError(entity={self.entity!r}, position={self.position!r})"


class ParseError(SgmlError):
    """Malformed markup found while tokenizing a document.

    Attributes:
        message: Short description of the problem
        position: Where the offending construct starts
        context: Excerpt of the source around the position
    """

    def __init__(
        self,
        message: str,
        position: TokenPosition,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(f"{message} at {position}")
        self.message = message
        self.position = position
        self.context = context

    @classmethod
    def at(cls, message: str, text: str, offset: int) -> "ParseError":
        """Build an error for the given string index of text."""
        return cls(message, TokenPosition.from_offset(text, offset), excerpt(text, offset))


class UnresolvedReferenceError(ParseError):
    """A reference inside the document could not be resolved.

    ``span`` is expressed in string indices (code points) of the whole
    document, unlike :attr:`EntityError.position` which is relative to the
    expanded segment.
    """

    def __init__(
        self,
        entity: str,
        span: Tuple[int, int],
        position: TokenPosition,
        context: Optional[str] = None,
    ) -> None:
        super().__init__(f"entity '{entity}' is not defined", position, context)
        self.entity = entity
        self.span = span

    @classmethod
    def from_entity_error(
        cls, error: EntityError, text: str, segment_start: int
    ) -> "UnresolvedReferenceError":
        """Relocate an expansion error to document coordinates."""
        start = segment_start + error.position[0]
        end = segment_start + error.position[1]
        return cls(
            error.entity,
            (start, end),
            TokenPosition.from_offset(text, start),
            excerpt(text, start),
        )


class IncompleteParseError(ParseError):
    """Input was left over after all top-level constructs were classified."""


def excerpt(text: str, offset: int, radius: int = CONTEXT_RADIUS) -> str:
    """Return the source around offset on a single line."""
    start = max(0, offset - radius)
    snippet = text[start:offset + radius]
    return snippet.replace("\r", " ").replace("\n", " ")
