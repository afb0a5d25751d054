"""Source position tracking for error reporting."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TokenPosition:
    """Position of a construct in the parsed text.

    ``line`` and ``column`` are 1-based; ``offset`` is the 0-based string index.
    """

    line: int
    column: int
    offset: int

    def __post_init__(self) -> None:
        """Validate position values."""
        if self.line < 1:
            raise ValueError("Line number must be >= 1")
        if self.column < 1:
            raise ValueError("Column number must be >= 1")
        if self.offset < 0:
            raise ValueError("Offset must be >= 0")

    @classmethod
    def from_offset(cls, text: str, offset: int) -> "TokenPosition":
        """Compute the line and column of a string index in text."""
        offset = max(0, min(offset, len(text)))
        line_start = text.rfind("\n", 0, offset) + 1
        return cls(
            line=text.count("\n", 0, offset) + 1,
            column=offset - line_start + 1,
            offset=offset,
        )

    def __str__(self) -> str:
        return f"line {self.line}, column {self.column}"
