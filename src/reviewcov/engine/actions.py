"""User-facing review operations composed from the store and the scope tracker.

Every function mutates a :class:`~reviewcov.engine.state.ReviewState` in place
and returns ``True`` when something changed, so callers know whether the
state needs saving and the coverage tree rebuilding.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from reviewcov import logger
from reviewcov.model.ranges import LineRange
from reviewcov.model.types import Category, EntryKind

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from reviewcov.engine.collaborators import EntryStat, FileEnumerator
    from reviewcov.engine.state import ReviewState
    from reviewcov.model.types import FileKey, FileStatus


@dataclass(frozen=True, slots=True)
class ScopeEntry:
    uri: FileKey
    kind: EntryKind


def selection(anchor: int, active: int) -> LineRange | None:
    """Return the lines between two cursor positions, in either order."""
    if anchor < 0 or active < 0:
        return None
    return LineRange(min(anchor, active), max(anchor, active))


def resolve_entries(uris: Iterable[FileKey], stat: EntryStat) -> list[ScopeEntry]:
    """Pair each distinct uri with its entry kind; stat failures count as files."""
    entries: list[ScopeEntry] = []
    seen: set[FileKey] = set()
    for uri in uris:
        if uri in seen:
            continue
        seen.add(uri)
        try:
            kind = stat.kind_of(uri)
        except OSError as exc:
            logger.debug("stat failed for %s, treating it as a file: %s", uri, exc)
            kind = EntryKind.FILE
        entries.append(ScopeEntry(uri, kind))
    return entries


# --------------------------------------------------------------------------- #
# Line ranges                                                                 #
# --------------------------------------------------------------------------- #


def mark_lines(state: ReviewState, category: Category | str, uri: FileKey, start: int, end: int) -> bool:
    lines = selection(start, end)
    if lines is None:
        return False
    try:
        cat = Category(category)
    except ValueError:
        logger.debug("ignoring mark with unknown category %r", category)
        return False
    before = state.ranges.ranges_by_category(uri)
    state.ranges.mark(cat, uri, lines)
    return state.ranges.ranges_by_category(uri) != before


def clear_lines(state: ReviewState, uri: FileKey, start: int, end: int) -> bool:
    lines = selection(start, end)
    if lines is None:
        return False
    before = state.ranges.ranges_by_category(uri)
    state.ranges.remove_range_all(uri, lines)
    return state.ranges.ranges_by_category(uri) != before


def edit_lines(state: ReviewState, uri: FileKey, change_start: int, change_end: int, delta: int) -> bool:
    """Adjust recorded ranges after a text edit replaced *change_start..change_end*."""
    before = state.ranges.ranges_by_category(uri)
    state.ranges.apply_line_delta(uri, change_start, change_end, delta)
    return state.ranges.ranges_by_category(uri) != before


def clear_file(state: ReviewState, uri: FileKey) -> bool:
    """Forget every range of *uri* in every category; its status is kept."""
    return state.ranges.clear_file(uri)


def set_status(state: ReviewState, uri: FileKey, status: FileStatus | str) -> bool:
    return state.scope.set_file_status(uri, status)


def rename(state: ReviewState, old: FileKey, new: FileKey) -> bool:
    if old == new or not (state.scope.is_tracked(old) or state.scope.is_directly_ignored(old)):
        return False
    state.scope.change_filename(old, new)
    return True


# --------------------------------------------------------------------------- #
# Scope                                                                       #
# --------------------------------------------------------------------------- #


def add_to_scope(state: ReviewState, entries: Sequence[ScopeEntry], files: FileEnumerator) -> bool:
    """Track files, and every file below folders, clearing their ignore markers."""
    scope = state.scope
    changed = False
    for entry in entries:
        if entry.kind is EntryKind.FILE:
            changed |= scope.ensure_tracked(entry.uri)
            changed |= scope.unignore_entry(entry.uri)
            continue
        changed |= scope.unignore_entry(entry.uri)
        found = files.files_under(entry.uri)
        logger.info("adding %d file(s) under %s", len(found), entry.uri)
        for uri in found:
            changed |= scope.ensure_tracked(uri)
            changed |= scope.unignore_entry(uri)
    return changed


def remove_from_scope(state: ReviewState, entries: Sequence[ScopeEntry]) -> bool:
    """Stop tracking files, and every tracked file below folders."""
    scope = state.scope
    changed = False
    for entry in entries:
        if entry.kind is EntryKind.FILE:
            changed |= scope.remove_tracked(entry.uri)
            continue
        for uri in scope.get_tracked_uris_under(entry.uri):
            changed |= scope.remove_tracked(uri)
        changed |= scope.unignore_entry(entry.uri)
    return changed


def ignore(state: ReviewState, entries: Sequence[ScopeEntry]) -> bool:
    changed = False
    for entry in entries:
        changed |= state.scope.ignore_entry(entry.uri, entry.kind)
    return changed


def unignore(state: ReviewState, entries: Sequence[ScopeEntry]) -> bool:
    changed = False
    for entry in entries:
        changed |= state.scope.unignore_entry(entry.uri)
    return changed


def clear_ignores(state: ReviewState) -> bool:
    return state.scope.clear_ignored_entries()


__all__ = [
    "ScopeEntry",
    "add_to_scope",
    "clear_file",
    "clear_ignores",
    "clear_lines",
    "edit_lines",
    "ignore",
    "mark_lines",
    "remove_from_scope",
    "rename",
    "resolve_entries",
    "selection",
    "set_status",
    "unignore",
]
