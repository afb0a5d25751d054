"""Ordered collections of SGML events."""

from typing import Iterable, Iterator, List, Sequence, Union, overload

from .events import Attribute, SgmlEvent


class SgmlFragment(Sequence[SgmlEvent]):
    """A sequence of events in document order.

    ``str(fragment)`` renders the events back to markup; attributes are
    separated from what precedes them by a single space.
    """

    __slots__ = ("_events",)

    def __init__(self, events: Iterable[SgmlEvent] = ()) -> None:
        self._events: List[SgmlEvent] = list(events)

    @classmethod
    def from_events(cls, events: Iterable[SgmlEvent]) -> "SgmlFragment":
        return cls(events)

    @property
    def events(self) -> List[SgmlEvent]:
        """A copy of the events as a list."""
        return list(self._events)

    def into_owned(self) -> "SgmlFragment":
        """Return a fragment whose events share nothing with this one."""
        return SgmlFragment(event.into_owned() for event in self._events)

    @overload
    def __getitem__(self, index: int) -> SgmlEvent: ...

    @overload
    def __getitem__(self, index: slice) -> "SgmlFragment": ...

    def __getitem__(self, index: Union[int, slice]) -> Union[SgmlEvent, "SgmlFragment"]:
        if isinstance(index, slice):
            return SgmlFragment(self._events[index])
        return self._events[index]

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[SgmlEvent]:
        return iter(self._events)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SgmlFragment):
            return self._events == other._events
        if isinstance(other, list):
            return self._events == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"SgmlFragment({self._events!r})"

    def __str__(self) -> str:
        parts = []
        for event in self._events:
            if isinstance(event, Attribute):
                parts.append(" ")
            parts.append(str(event))
        return "".join(parts)
