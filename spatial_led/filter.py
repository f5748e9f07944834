from __future__ import annotations

from typing import Iterable, Iterator, Tuple

from .led import Led


class Filter:
    """Immutable, ordered, duplicate-free set of LED indices.

    Filters are built from accessors or predicates on a :class:`Sled` and
    combined with ``|`` (union), ``&`` (intersection) and ``-`` (difference).
    """

    __slots__ = ("_indices", "_members")

    def __init__(self, indices: Iterable[int] = ()) -> None:
        members = frozenset(int(i) for i in indices)
        if any(i < 0 for i in members):
            raise ValueError("filter indices must be non-negative")
        self._members = members
        self._indices: Tuple[int, ...] = tuple(sorted(members))

    @classmethod
    def from_indices(cls, indices: Iterable[int]) -> "Filter":
        return cls(indices)

    @classmethod
    def from_range(cls, start: int, stop: int) -> "Filter":
        return cls(range(start, stop))

    @classmethod
    def from_leds(cls, leds: Iterable[Led]) -> "Filter":
        return cls(led.index for led in leds)

    @property
    def indices(self) -> Tuple[int, ...]:
        return self._indices

    def __iter__(self) -> Iterator[int]:
        return iter(self._indices)

    def __len__(self) -> int:
        return len(self._indices)

    def __bool__(self) -> bool:
        return bool(self._indices)

    def __contains__(self, index: object) -> bool:
        return index in self._members

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Filter):
            return NotImplemented
        return self._members == other._members

    def __hash__(self) -> int:
        return hash(self._members)

    def __or__(self, other: "Filter") -> "Filter":
        if not isinstance(other, Filter):
            return NotImplemented
        return Filter(self._members | other._members)

    def __and__(self, other: "Filter") -> "Filter":
        if not isinstance(other, Filter):
            return NotImplemented
        return Filter(self._members & other._members)

    def __sub__(self, other: "Filter") -> "Filter":
        if not isinstance(other, Filter):
            return NotImplemented
        return Filter(self._members - other._members)

    def union(self, other: "Filter") -> "Filter":
        return self | other

    def intersection(self, other: "Filter") -> "Filter":
        return self & other

    def difference(self, other: "Filter") -> "Filter":
        return self - other

    def complement(self, size: int) -> "Filter":
        """Indices in ``range(size)`` not in this filter."""

        return Filter(i for i in range(size) if i not in self._members)

    def max_index(self) -> int:
        return self._indices[-1] if self._indices else -1

    def __repr__(self) -> str:
        if len(self._indices) > 8:
            head = ", ".join(str(i) for i in self._indices[:8])
            return f"Filter([{head}, ...], len={len(self._indices)})"
        return f"Filter({list(self._indices)})"


__all__ = ["Filter"]
