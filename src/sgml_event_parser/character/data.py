"""Character data values carried by attribute and character events."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, replace

ESCAPED_QUOTE = "&#34;"
ESCAPED_AMPERSAND = "&#38;"


@dataclass(frozen=True)
class CharacterData(ABC):
    """Text found in a document, either final or still holding references.

    Use one of the concrete variants, :class:`CData` or :class:`RcData`.
    """

    text: str

    @property
    @abstractmethod
    def verbatim(self) -> bool:
        """True when the text is final and must be escaped to be re-parsed."""
        pass

    def as_str(self) -> str:
        return self.text

    def escapes_ampersand(self) -> bool:
        """Whether ``&`` needs escaping when this value is written back."""
        return self.verbatim and "&" in self.text

    def escape(self) -> str:
        """Render the text so it reads back as the same value.

        ``"`` is always escaped; ``&`` only for final data, where a literal
        ampersand could otherwise be mistaken for a reference.
        """
        text = self.text
        if self.escapes_ampersand():
            text = text.replace("&", ESCAPED_AMPERSAND)
        if '"' in text:
            text = text.replace('"', ESCAPED_QUOTE)
        return text

    def into_owned(self) -> "CharacterData":
        """Return an equal value that shares nothing with this one."""
        return replace(self)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class CData(CharacterData):
    """Final character data: references already expanded, or never allowed."""

    @property
    def verbatim(self) -> bool:
        return True


@dataclass(frozen=True)
class RcData(CharacterData):
    """Replaceable character data that was not passed through expansion.

    Any ``&`` in the text is still reference syntax and is written back as is.
    """

    @property
    def verbatim(self) -> bool:
        return False
