"""Which files take part in coverage accounting, and which are ignored."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from reviewcov import logger
from reviewcov.model.types import EntryKind, FileStatus
from reviewcov.model.uri import is_strictly_under

if TYPE_CHECKING:
    from collections.abc import Iterable

    from reviewcov.engine.store import RangeStore
    from reviewcov.model.types import FileKey


@dataclass(frozen=True, slots=True)
class IgnoredEntry:
    uri: FileKey
    kind: EntryKind


class ScopeTracker:
    """Track whole-file statuses and ignore markers on top of a :class:`RangeStore`.

    A file is *tracked* when it carries a status or has ranges in any
    category. Folder markers ignore every descendant by path prefix; file
    markers only ever apply to their own key.
    """

    def __init__(self, store: RangeStore) -> None:
        self._store = store
        self._statuses: dict[FileKey, FileStatus] = {}
        self._ignored: dict[FileKey, EntryKind] = {}

    # -- tracking ---------------------------------------------------------------

    def is_tracked(self, uri: FileKey) -> bool:
        return uri in self._statuses or self._store.has_ranges(uri)

    def ensure_tracked(self, uri: FileKey) -> bool:
        if self.is_tracked(uri):
            return False
        self._statuses[uri] = FileStatus.CLEAR
        return True

    def remove_tracked(self, uri: FileKey) -> bool:
        removed = self._statuses.pop(uri, None) is not None
        if self._store.clear_file(uri):
            removed = True
        if self._ignored.pop(uri, None) is not None:
            removed = True
        return removed

    def get_all_tracked_uris(self) -> list[FileKey]:
        return sorted(set(self._statuses) | self._store.files())

    def get_tracked_uris_under(self, folder_uri: FileKey) -> list[FileKey]:
        return [uri for uri in self.get_all_tracked_uris() if is_strictly_under(uri, folder_uri)]

    # -- statuses ---------------------------------------------------------------

    def get_file_status(self, uri: FileKey) -> FileStatus | None:
        return self._statuses.get(uri)

    def set_file_status(self, uri: FileKey, status: FileStatus | str) -> bool:
        try:
            value = FileStatus(status)
        except ValueError:
            logger.debug("ignoring unknown status %r for %s", status, uri)
            return False
        if self._statuses.get(uri) is value:
            return False
        self._statuses[uri] = value
        return True

    def clear_file_status(self, uri: FileKey) -> bool:
        return self._statuses.pop(uri, None) is not None

    def statuses(self) -> dict[FileKey, FileStatus]:
        return dict(sorted(self._statuses.items()))

    # -- ignore markers ---------------------------------------------------------

    def ignore_entry(self, uri: FileKey, kind: EntryKind | str) -> bool:
        try:
            value = EntryKind(kind)
        except ValueError:
            logger.debug("ignoring marker of unknown kind %r for %s", kind, uri)
            return False
        if self._ignored.get(uri) is value:
            return False
        self._ignored[uri] = value
        return True

    def unignore_entry(self, uri: FileKey) -> bool:
        return self._ignored.pop(uri, None) is not None

    def clear_ignored_entries(self) -> bool:
        had_entries = bool(self._ignored)
        self._ignored.clear()
        return had_entries

    def ignored_kind(self, uri: FileKey) -> EntryKind | None:
        return self._ignored.get(uri)

    def is_directly_ignored(self, uri: FileKey) -> bool:
        return uri in self._ignored

    def is_ignored(self, uri: FileKey) -> bool:
        if uri in self._ignored:
            return True
        return any(
            kind is EntryKind.FOLDER and is_strictly_under(uri, marker) for marker, kind in self._ignored.items()
        )

    def get_ignored_entries(self) -> list[IgnoredEntry]:
        return [IgnoredEntry(uri, kind) for uri, kind in self._ignored.items()]

    # -- bulk -------------------------------------------------------------------

    def change_filename(self, old: FileKey, new: FileKey) -> None:
        """Move status, ranges and ignore marker from *old* to *new*."""
        if old == new:
            return
        status = self._statuses.pop(old, None)
        if status is not None:
            self._statuses[new] = status
        self._store.rename(old, new)
        kind = self._ignored.pop(old, None)
        if kind is not None:
            self._ignored[new] = kind
        logger.debug("renamed %s -> %s", old, new)

    def load(self, statuses: Iterable[tuple[FileKey, FileStatus]], ignored: Iterable[IgnoredEntry]) -> None:
        self._statuses = dict(statuses)
        self._ignored = {entry.uri: entry.kind for entry in ignored}

    def clear(self) -> None:
        self._statuses.clear()
        self._ignored.clear()


__all__ = ["IgnoredEntry", "ScopeTracker"]
