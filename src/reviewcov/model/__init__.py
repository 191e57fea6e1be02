"""Domain model for reviewcov (pure types + interval algebra; no IO)."""

from .metrics import format_coverage, pct
from .ranges import LineRange, RangeSet
from .types import Category, EntryKind, FileKey, FileStatus, NodeKind

__all__ = [
    "Category",
    "EntryKind",
    "FileKey",
    "FileStatus",
    "LineRange",
    "NodeKind",
    "RangeSet",
    "format_coverage",
    "pct",
]
