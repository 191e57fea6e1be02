"""Shared type aliases and enumerations used across reviewcov."""

from __future__ import annotations

from enum import StrEnum
from typing import TypeAlias

# ---------------------------------------------------------------------------
# Common type aliases
# ---------------------------------------------------------------------------

FileKey: TypeAlias = str
"""Opaque, stable file identifier (normally a canonical URI string)."""

LinePair: TypeAlias = tuple[int, int]
"""Inclusive ``(start, end)`` pair of 0-indexed line numbers."""


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Category(StrEnum):
    """Review classification applied to a line range."""

    OK = "ok"
    WARNING = "warning"
    DANGER = "danger"


class FileStatus(StrEnum):
    """Whole-file review verdict, independent of line ranges."""

    OK = "ok"
    WARNING = "warning"
    DANGER = "danger"
    CLEAR = "clear"
    OUT_OF_SCOPE = "outOfScope"

    @property
    def is_verdict(self) -> bool:
        """Return ``True`` when the status marks every line as reviewed."""
        return self in _VERDICTS


_VERDICTS = frozenset({FileStatus.OK, FileStatus.WARNING, FileStatus.DANGER})


class EntryKind(StrEnum):
    """Kind of an ignore marker."""

    FILE = "file"
    FOLDER = "folder"


class NodeKind(StrEnum):
    """Kind of a coverage tree node."""

    WORKSPACE = "workspace"
    FOLDER = "folder"
    FILE = "file"


FULL_COVERAGE: int = 100


__all__ = [
    "FULL_COVERAGE",
    "Category",
    "EntryKind",
    "FileKey",
    "FileStatus",
    "LinePair",
    "NodeKind",
]
