"""Line interval algebra: inclusive line ranges and coalesced range sets."""

from __future__ import annotations

from dataclasses import dataclass
from numbers import Integral
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from reviewcov.model.types import LinePair


@dataclass(frozen=True, slots=True, order=True)
class LineRange:
    """Inclusive ``[start, end]`` span of 0-indexed line numbers."""

    start: int
    end: int

    def __post_init__(self) -> None:
        """Validate that the range boundaries are sane."""
        if self.start < 0 or self.end < 0:
            msg = "LineRange.start/end must be >= 0"
            raise ValueError(msg)
        if self.end < self.start:
            msg = "LineRange.end must be >= start"
            raise ValueError(msg)

    @classmethod
    def coerce(cls, value: object) -> LineRange | None:
        """Return *value* as a :class:`LineRange`, or ``None`` when it is not a valid range.

        Accepts an existing range or any two-element sequence of integers.
        Booleans, floats with a fractional part, inverted and negative pairs
        are rejected.
        """
        if isinstance(value, LineRange):
            return value
        if isinstance(value, (str, bytes)):
            return None
        try:
            start, end = value  # type: ignore[misc]
        except (TypeError, ValueError):
            return None
        start_i = _as_line(start)
        end_i = _as_line(end)
        if start_i is None or end_i is None or start_i < 0 or end_i < start_i:
            return None
        return cls(start_i, end_i)

    @property
    def line_count(self) -> int:
        return self.end - self.start + 1

    def overlaps(self, other: LineRange) -> bool:
        """Return ``True`` when both ranges share at least one line."""
        return self.start <= other.end and other.start <= self.end

    def touches(self, other: LineRange) -> bool:
        """Return ``True`` when the ranges overlap or are directly adjacent."""
        return self.start <= other.end + 1 and other.start <= self.end + 1

    def contains(self, line: int) -> bool:
        return self.start <= line <= self.end

    def as_pair(self) -> LinePair:
        return (self.start, self.end)


def _as_line(value: object) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, Integral):
        return int(value)
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _subtract(current: LineRange, removed: LineRange) -> list[LineRange]:
    """Return what is left of *current* once *removed* is cut out of it."""
    if not current.overlaps(removed):
        return [current]
    pieces: list[LineRange] = []
    if current.start < removed.start:
        pieces.append(LineRange(current.start, removed.start - 1))
    if current.end > removed.end:
        pieces.append(LineRange(removed.end + 1, current.end))
    return pieces


def _shift(current: LineRange, change_start: int, change_end: int, delta: int) -> LineRange | None:
    if current.end < change_start:
        return current
    if current.start > change_end:
        return LineRange(max(0, current.start + delta), max(0, current.end + delta))
    end = max(0, current.end + delta)
    start = max(0, current.start + delta) if change_start <= current.start else current.start
    if end < start:
        # consumed by a deletion
        return None
    return LineRange(start, end)


class RangeSet:
    """Ordered, maximally coalesced set of :class:`LineRange` objects.

    No two members overlap or touch, and members are kept in ascending
    ``start`` order. The only mutators are :meth:`add`, :meth:`remove` and
    :meth:`shift`, each of which restores that invariant before returning.
    """

    __slots__ = ("_ranges",)

    def __init__(self, ranges: Iterable[LineRange] = ()) -> None:
        self._ranges: list[LineRange] = []
        for r in ranges:
            self.add(r)

    @classmethod
    def from_pairs(cls, pairs: Iterable[object]) -> RangeSet:
        """Build a set from raw pairs, silently dropping malformed entries."""
        out = cls()
        for pair in pairs:
            r = LineRange.coerce(pair)
            if r is not None:
                out.add(r)
        return out

    @classmethod
    def union(cls, sets: Iterable[RangeSet]) -> RangeSet:
        out = cls()
        for s in sets:
            for r in s:
                out.add(r)
        return out

    # -- mutation -------------------------------------------------------------

    def add(self, new: LineRange) -> None:
        """Insert *new*, merging it with every range it overlaps or touches."""
        start, end = new.start, new.end
        kept: list[LineRange] = []
        for current in self._ranges:
            if current.touches(new):
                start = min(start, current.start)
                end = max(end, current.end)
            else:
                kept.append(current)
        kept.append(LineRange(start, end))
        kept.sort()
        self._ranges = kept

    def remove(self, removed: LineRange) -> None:
        """Cut *removed* out of every member, splitting members where needed."""
        out: list[LineRange] = []
        for current in self._ranges:
            out.extend(_subtract(current, removed))
        self._ranges = out

    def shift(self, change_start: int, change_end: int, delta: int) -> None:
        """Realign members after *delta* lines were inserted/removed in ``[change_start, change_end]``."""
        shifted = (_shift(r, change_start, change_end, delta) for r in self._ranges)
        self._ranges = []
        for r in shifted:
            if r is not None:
                self.add(r)

    # -- queries --------------------------------------------------------------

    @property
    def line_count(self) -> int:
        return sum(r.line_count for r in self._ranges)

    def contains(self, line: int) -> bool:
        return any(r.contains(line) for r in self._ranges)

    def lines(self) -> Iterator[int]:
        for r in self._ranges:
            yield from range(r.start, r.end + 1)

    def as_pairs(self) -> list[LinePair]:
        return [r.as_pair() for r in self._ranges]

    def copy(self) -> RangeSet:
        out = RangeSet()
        out._ranges = list(self._ranges)
        return out

    def __iter__(self) -> Iterator[LineRange]:
        return iter(tuple(self._ranges))

    def __len__(self) -> int:
        return len(self._ranges)

    def __bool__(self) -> bool:
        return bool(self._ranges)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RangeSet):
            return NotImplemented
        return self._ranges == other._ranges

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"RangeSet({self.as_pairs()!r})"


__all__ = ["LineRange", "RangeSet"]
