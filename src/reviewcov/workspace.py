"""Local file-system collaborators for the review engine.

The engine only sees opaque ``file://`` URIs. This module maps them back to
paths to find the owning workspace folder, count document lines, tell files
from folders and enumerate the files below a folder.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlsplit
from urllib.request import url2pathname

from pathspec import GitIgnoreSpec

from reviewcov import logger
from reviewcov.config import DEFAULT_EXCLUDES
from reviewcov.engine.collaborators import WorkspaceFolder
from reviewcov.model.types import EntryKind

if TYPE_CHECKING:
    from collections.abc import Sequence

    from reviewcov.model.types import FileKey


def path_to_uri(path: Path | str) -> FileKey:
    return Path(path).resolve().as_uri()


def uri_to_path(uri: FileKey) -> Path | None:
    """Return the local path of a ``file://`` URI or a bare absolute path."""
    parts = urlsplit(uri)
    if parts.scheme == "file":
        return Path(url2pathname(parts.path))
    if not parts.scheme and not parts.netloc:
        return Path(uri)
    return None


def count_lines(path: Path) -> int:
    """Number of lines an editor shows for *path*; an empty file has one."""
    text = path.read_text(encoding="utf-8", errors="replace")
    return text.count("\n") + 1


class LocalWorkspace:
    """Workspace folders on the local disk.

    A URI belongs to the innermost configured folder that contains it, so
    nested workspace folders behave the way a multi-root editor shows them.
    """

    def __init__(self, folders: Sequence[Path], *, exclude: Sequence[str] = DEFAULT_EXCLUDES) -> None:
        resolved = [Path(folder).resolve() for folder in folders]
        # innermost first
        self._folders = sorted(dict.fromkeys(resolved), key=lambda p: len(p.parts), reverse=True)
        self._exclude = GitIgnoreSpec.from_lines(exclude)

    @property
    def folders(self) -> tuple[Path, ...]:
        return tuple(self._folders)

    def resolve(self, uri: FileKey) -> WorkspaceFolder | None:
        path = uri_to_path(uri)
        if path is None:
            return None
        for folder in self._folders:
            if path == folder or folder in path.parents:
                return WorkspaceFolder(uri=folder.as_uri(), name=folder.name or str(folder))
        return None

    def kind_of(self, uri: FileKey) -> EntryKind:
        path = uri_to_path(uri)
        if path is not None and path.is_dir():
            return EntryKind.FOLDER
        return EntryKind.FILE

    def files_under(self, folder_uri: FileKey) -> list[FileKey]:
        root = uri_to_path(folder_uri)
        if root is None or not root.is_dir():
            return []
        found: list[FileKey] = []
        for path in sorted(root.rglob("*")):
            rel = path.relative_to(root).as_posix()
            if self._exclude.match_file(rel) or not path.is_file():
                continue
            found.append(path.resolve().as_uri())
        logger.debug("found %d file(s) under %s", len(found), root)
        return found


class FileLineCounter:
    """Count lines of local files without blocking the event loop."""

    async def line_count(self, uri: FileKey) -> int:
        path = uri_to_path(uri)
        if path is None:
            msg = f"not a local file: {uri}"
            raise OSError(msg)
        return await asyncio.to_thread(count_lines, path)


__all__ = ["FileLineCounter", "LocalWorkspace", "count_lines", "path_to_uri", "uri_to_path"]
