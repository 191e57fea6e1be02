"""Per-category, per-file storage of reviewed line ranges."""

from __future__ import annotations

from typing import TYPE_CHECKING

from reviewcov import logger
from reviewcov.model.ranges import LineRange, RangeSet
from reviewcov.model.types import Category

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping

    from reviewcov.model.types import FileKey, LinePair

RangeLike = LineRange | tuple[int, int] | list[int]


class RangeStore:
    """Three strongly typed ``file -> RangeSet`` mappings, one per :class:`Category`.

    Every public operation is total: invalid ranges or unknown files turn the
    call into a no-op instead of raising. A file whose set becomes empty is
    dropped from its category, so key presence always means "has ranges".
    """

    def __init__(self) -> None:
        self._by_category: dict[Category, dict[FileKey, RangeSet]] = {c: {} for c in Category}

    # -- single category --------------------------------------------------------

    def add_range(self, category: Category | str, file: FileKey, value: RangeLike) -> None:
        cat = _category(category)
        r = LineRange.coerce(value)
        if cat is None or r is None:
            logger.debug("ignoring add of %r to %s/%s", value, category, file)
            return
        files = self._by_category[cat]
        files.setdefault(file, RangeSet()).add(r)

    def remove_range(self, category: Category | str, file: FileKey, value: RangeLike) -> None:
        cat = _category(category)
        r = LineRange.coerce(value)
        if cat is None or r is None:
            logger.debug("ignoring removal of %r from %s/%s", value, category, file)
            return
        files = self._by_category[cat]
        current = files.get(file)
        if current is None:
            return
        current.remove(r)
        if not current:
            del files[file]

    def get_ranges(self, category: Category | str, file: FileKey) -> tuple[LineRange, ...]:
        cat = _category(category)
        if cat is None:
            return ()
        current = self._by_category[cat].get(file)
        return tuple(current) if current is not None else ()

    # -- all categories ---------------------------------------------------------

    def remove_range_all(self, file: FileKey, value: RangeLike) -> None:
        for cat in Category:
            self.remove_range(cat, file, value)

    def mark(self, category: Category | str, file: FileKey, value: RangeLike) -> None:
        """Classify *value* as *category*, replacing any other classification of those lines."""
        if _category(category) is None or LineRange.coerce(value) is None:
            logger.debug("ignoring mark of %r as %s in %s", value, category, file)
            return
        self.remove_range_all(file, value)
        self.add_range(category, file, value)

    def apply_line_delta(self, file: FileKey, change_start: int, change_end: int, delta: int) -> None:
        """Shift every range of *file* after *delta* lines were inserted/removed in the change span."""
        if change_start < 0 or change_end < change_start:
            logger.debug("ignoring line delta for %s: bad change span %s..%s", file, change_start, change_end)
            return
        for files in self._by_category.values():
            current = files.get(file)
            if current is None:
                continue
            current.shift(change_start, change_end, delta)
            if not current:
                del files[file]

    def get_unioned_ranges(self, file: FileKey) -> RangeSet:
        return RangeSet.union(files[file] for files in self._by_category.values() if file in files)

    def covered_line_count(self, file: FileKey) -> int:
        """Number of distinct lines of *file* classified in any category."""
        return self.get_unioned_ranges(file).line_count

    def ranges_by_category(self, file: FileKey) -> dict[Category, tuple[LineRange, ...]]:
        return {cat: self.get_ranges(cat, file) for cat in Category}

    # -- file level -------------------------------------------------------------

    def has_ranges(self, file: FileKey) -> bool:
        return any(file in files for files in self._by_category.values())

    def files(self) -> set[FileKey]:
        out: set[FileKey] = set()
        for files in self._by_category.values():
            out.update(files)
        return out

    def clear_file(self, file: FileKey) -> bool:
        removed = False
        for files in self._by_category.values():
            if files.pop(file, None) is not None:
                removed = True
        return removed

    def clear(self) -> None:
        for files in self._by_category.values():
            files.clear()

    def rename(self, old: FileKey, new: FileKey) -> None:
        if old == new:
            return
        for files in self._by_category.values():
            moved = files.pop(old, None)
            if moved is not None:
                files[new] = moved

    # -- snapshot helpers ---------------------------------------------------------

    def iter_category(self, category: Category) -> Iterator[tuple[FileKey, RangeSet]]:
        files = self._by_category[category]
        for file in sorted(files):
            yield file, files[file]

    def replace_category(self, category: Category, data: Mapping[FileKey, RangeSet]) -> None:
        self._by_category[category] = {file: ranges.copy() for file, ranges in data.items() if ranges}

    def to_pairs(self, category: Category) -> dict[FileKey, list[LinePair]]:
        return {file: ranges.as_pairs() for file, ranges in self.iter_category(category)}


def _category(value: Category | str) -> Category | None:
    if isinstance(value, Category):
        return value
    try:
        return Category(value)
    except ValueError:
        return None


__all__ = ["RangeLike", "RangeStore"]
