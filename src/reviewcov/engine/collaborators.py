"""Interfaces the engine expects from its host environment."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from reviewcov.model.types import EntryKind, FileKey


@dataclass(frozen=True, slots=True)
class WorkspaceFolder:
    uri: FileKey
    name: str


class WorkspaceResolver(Protocol):
    def resolve(self, uri: FileKey) -> WorkspaceFolder | None:
        """Return the workspace folder containing *uri*, if any."""
        ...


class LineCounter(Protocol):
    async def line_count(self, uri: FileKey) -> int:
        """Return the number of lines of the document at *uri*."""
        ...


class EntryStat(Protocol):
    def kind_of(self, uri: FileKey) -> EntryKind:
        """Return whether *uri* is a file or a folder; unknown entries are files."""
        ...


class FileEnumerator(Protocol):
    def files_under(self, folder_uri: FileKey) -> list[FileKey]:
        """Return every file below *folder_uri*."""
        ...


__all__ = ["EntryStat", "FileEnumerator", "LineCounter", "WorkspaceFolder", "WorkspaceResolver"]
