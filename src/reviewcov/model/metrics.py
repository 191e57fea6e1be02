from __future__ import annotations

from reviewcov.model.types import FULL_COVERAGE

NO_DATA = "—"


def pct(covered: int, total: int, *, full: float = float(FULL_COVERAGE)) -> float:
    """Return the coverage percentage, defaulting to `full` when no total exists."""
    return full if total == 0 else (covered / total) * full


def format_coverage(covered: int, total: int) -> str:
    """Return ``"<pct> (<covered>/<total>)"``, or an em dash when there is no line data.

    Exactly full coverage prints as ``100%``; anything else keeps one decimal.
    """
    if total <= 0:
        return NO_DATA
    percentage = "100%" if covered == total else f"{pct(covered, total):.1f}%"
    return f"{percentage} ({covered}/{total})"


__all__ = ["NO_DATA", "format_coverage", "pct"]
