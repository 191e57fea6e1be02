"""Coverage tree: an index-based arena of workspace, folder and file nodes.

Trees are built in one pass from per-file coverage facts and are immutable
afterwards. Children and parents are referenced by index into
:attr:`CoverageTree.nodes`, so no node owns another.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from urllib.parse import unquote

from reviewcov.model.types import EntryKind, NodeKind
from reviewcov.model.uri import basename, relative_segments, split_uri, with_path

if TYPE_CHECKING:
    from collections.abc import Iterator, Mapping, Sequence

    from reviewcov.engine.collaborators import WorkspaceFolder
    from reviewcov.model.types import FileKey, FileStatus


@dataclass(frozen=True, slots=True)
class FileCoverageInfo:
    """Per-file facts gathered before the tree is assembled."""

    uri: FileKey
    workspace: WorkspaceFolder
    covered_lines: int
    total_lines: int
    status: FileStatus | None = None


@dataclass(frozen=True, slots=True)
class CoverageNode:
    index: int
    id: str
    kind: NodeKind
    label: str
    uri: FileKey
    status: FileStatus | None
    direct_ignore: bool
    effective_ignored: bool
    covered_lines: int
    total_lines: int
    aggregate_covered: int
    aggregate_total: int
    children: tuple[int, ...]
    parent: int | None


@dataclass(frozen=True, slots=True)
class CoverageSummary:
    covered_lines: int = 0
    total_lines: int = 0
    tracked_files: int = 0
    included_files: int = 0
    ignored_entries: int = 0


@dataclass(frozen=True, slots=True)
class CoverageTree:
    """Read-only snapshot of one aggregation pass."""

    nodes: tuple[CoverageNode, ...] = ()
    root_indexes: tuple[int, ...] = ()
    summary: CoverageSummary = field(default_factory=CoverageSummary)
    generation: int = 0
    by_uri: Mapping[FileKey, int] = field(default_factory=dict)

    @property
    def roots(self) -> tuple[CoverageNode, ...]:
        return tuple(self.nodes[i] for i in self.root_indexes)

    def children(self, node: CoverageNode) -> tuple[CoverageNode, ...]:
        return tuple(self.nodes[i] for i in node.children)

    def parent(self, node: CoverageNode) -> CoverageNode | None:
        return None if node.parent is None else self.nodes[node.parent]

    def node_for_uri(self, uri: FileKey) -> CoverageNode | None:
        index = self.by_uri.get(uri)
        return None if index is None else self.nodes[index]

    def ancestors(self, node: CoverageNode) -> Iterator[CoverageNode]:
        current = self.parent(node)
        while current is not None:
            yield current
            current = self.parent(current)

    def walk(self) -> Iterator[CoverageNode]:
        """Yield nodes depth-first, parents before children."""
        stack = list(reversed(self.root_indexes))
        while stack:
            node = self.nodes[stack.pop()]
            yield node
            stack.extend(reversed(node.children))

    def files(self) -> Iterator[CoverageNode]:
        return (node for node in self.walk() if node.kind is NodeKind.FILE)


# --------------------------------------------------------------------------- #
# Building                                                                    #
# --------------------------------------------------------------------------- #


@dataclass(slots=True)
class _Draft:
    id: str
    kind: NodeKind
    label: str
    uri: FileKey
    direct_ignore: bool
    parent: int | None
    status: FileStatus | None = None
    effective_ignored: bool = False
    covered_lines: int = 0
    total_lines: int = 0
    aggregate_covered: int = 0
    aggregate_total: int = 0
    children: list[int] = field(default_factory=list)


class _Arena:
    def __init__(self, ignored: Mapping[FileKey, EntryKind]) -> None:
        self.drafts: list[_Draft] = []
        self.by_uri: dict[FileKey, int] = {}
        self._ignored = ignored

    def folder_ignored(self, uri: FileKey) -> bool:
        # file-kind markers never apply to folders
        return self._ignored.get(uri) is EntryKind.FOLDER

    def add(self, draft: _Draft) -> int:
        index = len(self.drafts)
        self.drafts.append(draft)
        if draft.parent is not None:
            self.drafts[draft.parent].children.append(index)
        self.by_uri[draft.uri] = index
        return index

    def ensure_folder(self, parent: int, segment: str, uri: FileKey) -> int:
        for child in self.drafts[parent].children:
            draft = self.drafts[child]
            if draft.kind is not NodeKind.FILE and draft.uri == uri:
                return child
        return self.add(
            _Draft(
                id=uri,
                kind=NodeKind.FOLDER,
                label=unquote(segment),
                uri=uri,
                direct_ignore=self.folder_ignored(uri),
                parent=parent,
            )
        )

    def finalise(self, index: int, parent_ignored: bool) -> None:
        node = self.drafts[index]
        node.effective_ignored = parent_ignored or node.direct_ignore
        if node.kind is NodeKind.FILE:
            if node.effective_ignored:
                node.aggregate_covered = node.aggregate_total = 0
            else:
                node.aggregate_covered = node.covered_lines
                node.aggregate_total = node.total_lines
            return

        covered = total = 0
        for child in node.children:
            self.finalise(child, node.effective_ignored)
            covered += self.drafts[child].aggregate_covered
            total += self.drafts[child].aggregate_total
        node.covered_lines = covered
        node.total_lines = total
        if node.effective_ignored:
            node.aggregate_covered = node.aggregate_total = 0
        else:
            node.aggregate_covered = covered
            node.aggregate_total = total

    def freeze(self) -> tuple[CoverageNode, ...]:
        return tuple(
            CoverageNode(
                index=i,
                id=d.id,
                kind=d.kind,
                label=d.label,
                uri=d.uri,
                status=d.status,
                direct_ignore=d.direct_ignore,
                effective_ignored=d.effective_ignored,
                covered_lines=d.covered_lines,
                total_lines=d.total_lines,
                aggregate_covered=d.aggregate_covered,
                aggregate_total=d.aggregate_total,
                children=tuple(d.children),
                parent=d.parent,
            )
            for i, d in enumerate(self.drafts)
        )


def build_tree(
    infos: Sequence[FileCoverageInfo],
    ignored: Mapping[FileKey, EntryKind],
    *,
    generation: int = 0,
) -> CoverageTree:
    """Assemble the workspace → folder → file forest and roll line counts up."""
    arena = _Arena(ignored)
    roots: dict[FileKey, int] = {}

    for info in infos:
        ws_uri = info.workspace.uri
        root = roots.get(ws_uri)
        if root is None:
            root = arena.add(
                _Draft(
                    id=ws_uri,
                    kind=NodeKind.WORKSPACE,
                    label=info.workspace.name,
                    uri=ws_uri,
                    direct_ignore=arena.folder_ignored(ws_uri),
                    parent=None,
                )
            )
            roots[ws_uri] = root

        segments = relative_segments(info.uri, ws_uri) or [basename(info.uri)]
        current = root
        current_path = split_uri(ws_uri).path.rstrip("/")
        for segment in segments[:-1]:
            current_path = f"{current_path}/{segment}"
            current = arena.ensure_folder(current, segment, with_path(ws_uri, current_path))

        arena.add(
            _Draft(
                id=info.uri,
                kind=NodeKind.FILE,
                label=unquote(segments[-1]),
                uri=info.uri,
                status=info.status,
                direct_ignore=info.uri in ignored,
                parent=current,
                covered_lines=info.covered_lines,
                total_lines=info.total_lines,
            )
        )

    for root in roots.values():
        arena.finalise(root, parent_ignored=False)

    nodes = arena.freeze()
    root_indexes = tuple(roots.values())
    summary = compute_summary(nodes, root_indexes, ignored_entries=len(ignored))
    return CoverageTree(
        nodes=nodes,
        root_indexes=root_indexes,
        summary=summary,
        generation=generation,
        by_uri=dict(arena.by_uri),
    )


def compute_summary(
    nodes: Sequence[CoverageNode],
    root_indexes: Sequence[int],
    *,
    ignored_entries: int = 0,
) -> CoverageSummary:
    covered = total = tracked = included = 0
    stack = list(root_indexes)
    while stack:
        node = nodes[stack.pop()]
        if node.kind is not NodeKind.FILE:
            stack.extend(node.children)
            continue
        tracked += 1
        if not node.effective_ignored:
            included += 1
            covered += node.covered_lines
            total += node.total_lines
    return CoverageSummary(
        covered_lines=covered,
        total_lines=total,
        tracked_files=tracked,
        included_files=included,
        ignored_entries=ignored_entries,
    )


__all__ = [
    "CoverageNode",
    "CoverageSummary",
    "CoverageTree",
    "FileCoverageInfo",
    "build_tree",
    "compute_summary",
]
