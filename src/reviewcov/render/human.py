"""Human readable coverage tree rendered with Rich."""

from __future__ import annotations

from io import StringIO
from typing import TYPE_CHECKING

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from reviewcov.model.metrics import format_coverage
from reviewcov.model.types import FileStatus, NodeKind

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from reviewcov.engine.tree import CoverageNode, CoverageSummary, CoverageTree
    from reviewcov.model.ranges import LineRange
    from reviewcov.model.types import Category

NO_TRACKED_FILES = "Mark files or selections to build coverage."
ALL_IGNORED = "All tracked entries are currently ignored."

_ATTENTION = frozenset({FileStatus.WARNING, FileStatus.DANGER})
_STATUS_STYLE = {
    FileStatus.OK: "green",
    FileStatus.WARNING: "yellow",
    FileStatus.DANGER: "red",
}


def describe_node(node: CoverageNode) -> str:
    """``"<pct> (<covered>/<total>)"`` plus an ``ignored``/``excluded`` marker."""
    parts = [format_coverage(node.covered_lines, node.total_lines)]
    if node.direct_ignore:
        parts.append("ignored")
    elif node.effective_ignored:
        parts.append("excluded")
    return " · ".join(parts)


def describe_summary(summary: CoverageSummary) -> str:
    return format_coverage(summary.covered_lines, summary.total_lines)


def summary_message(summary: CoverageSummary) -> str | None:
    if summary.tracked_files == 0:
        return NO_TRACKED_FILES
    if summary.included_files == 0:
        return ALL_IGNORED
    return None


def _is_done(node: CoverageNode) -> bool:
    fully = node.total_lines > 0 and node.covered_lines >= node.total_lines
    return node.kind is NodeKind.FILE and fully and node.status not in _ATTENTION


def _node_label(node: CoverageNode) -> str:
    label = escape(node.label)
    if node.kind is not NodeKind.FILE:
        label = f"[bold]{label}[/bold]"
    elif _is_done(node):
        label = f"[dim]{label}[/dim]"
    text = f"{label}  [cyan]{escape(describe_node(node))}[/cyan]"
    if node.status in _STATUS_STYLE:
        style = _STATUS_STYLE[node.status]
        text += f"  [{style}]{node.status.value}[/{style}]"
    return text


def _attach(branch: Tree, tree: CoverageTree, node: CoverageNode) -> None:
    child_branch = branch.add(_node_label(node))
    for child in tree.children(node):
        _attach(child_branch, tree, child)


def render_tree(tree: CoverageTree, *, color: bool = True) -> str:
    """Render the coverage forest under a single heading carrying the summary."""
    summary = tree.summary
    heading = f"[bold]Review coverage[/bold]  [cyan]{escape(describe_summary(summary))}[/cyan]"
    root = Tree(heading, guide_style="dim")
    for node in tree.roots:
        _attach(root, tree, node)

    buf = StringIO()
    console = Console(file=buf, force_terminal=color, no_color=not color, width=120)
    console.print(root)
    message = summary_message(summary)
    if message is not None:
        console.print(message)
    return buf.getvalue().rstrip()


def render_ranges(
    file_label: str,
    ranges: Mapping[Category, Sequence[LineRange]],
    *,
    status: FileStatus | None = None,
    color: bool = True,
) -> str:
    """Render the reviewed ranges of one file as a table, one row per range.

    Line numbers are shown 1-based, the way editors number them.
    """
    title = escape(file_label) if status is None else f"{escape(file_label)} ({status.value})"
    table = Table(title=title, box=box.SIMPLE_HEAVY, header_style="bold")
    table.add_column("Category")
    table.add_column("Lines", justify="right")
    table.add_column("Count", justify="right")

    for category, items in ranges.items():
        style = _STATUS_STYLE[FileStatus(category.value)]
        for r in items:
            span = str(r.start + 1) if r.start == r.end else f"{r.start + 1}-{r.end + 1}"
            table.add_row(f"[{style}]{category.value}[/{style}]", span, str(r.line_count))

    buf = StringIO()
    console = Console(file=buf, force_terminal=color, no_color=not color, width=120)
    console.print(table)
    return buf.getvalue().rstrip()


__all__ = [
    "ALL_IGNORED",
    "NO_TRACKED_FILES",
    "describe_node",
    "describe_summary",
    "render_ranges",
    "render_tree",
    "summary_message",
]
