"""Hierarchical coverage aggregation over the tracked files of a review state."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from reviewcov import logger
from reviewcov.engine.tree import CoverageTree, FileCoverageInfo, build_tree

if TYPE_CHECKING:
    from reviewcov.engine.collaborators import LineCounter, WorkspaceResolver
    from reviewcov.engine.state import ReviewState
    from reviewcov.engine.tree import CoverageNode, CoverageSummary
    from reviewcov.model.types import FileKey


class CoverageAggregator:
    """Build coverage trees on demand and cache the latest one.

    Concurrent requests for the same generation share a single build.
    :meth:`refresh` bumps the generation, so a build that was started before
    the refresh is never published as the current tree.
    """

    def __init__(self, state: ReviewState, workspaces: WorkspaceResolver, line_counter: LineCounter) -> None:
        self._state = state
        self._workspaces = workspaces
        self._line_counter = line_counter
        self._generation = 0
        self._tree: CoverageTree | None = None
        self._build: asyncio.Task[CoverageTree] | None = None
        self._build_generation = -1

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def cached(self) -> CoverageTree | None:
        return self._tree

    def refresh(self) -> None:
        """Invalidate the cached tree; the next read rebuilds it."""
        self._generation += 1
        self._tree = None
        self._build = None

    async def tree(self) -> CoverageTree:
        if self._tree is not None and self._tree.generation == self._generation:
            return self._tree
        if self._needs_build():
            self._build_generation = self._generation
            self._build = asyncio.ensure_future(self._run_build(self._generation))
        # callers cancelled while waiting must not cancel the shared build
        return await asyncio.shield(self._build)

    async def summary(self) -> CoverageSummary:
        return (await self.tree()).summary

    async def node_for_uri(self, uri: FileKey) -> CoverageNode | None:
        return (await self.tree()).node_for_uri(uri)

    # -- building ---------------------------------------------------------------

    def _needs_build(self) -> bool:
        build = self._build
        if build is None or self._build_generation != self._generation:
            return True
        # a failed build is retried on the next read
        return build.done() and (build.cancelled() or build.exception() is not None)

    async def _run_build(self, generation: int) -> CoverageTree:
        uris = self._state.scope.get_all_tracked_uris()
        logger.debug("building coverage tree for %d tracked file(s), generation %d", len(uris), generation)
        infos = await asyncio.gather(*(self._collect(uri) for uri in uris))
        ignored = {entry.uri: entry.kind for entry in self._state.scope.get_ignored_entries()}
        tree = build_tree([info for info in infos if info is not None], ignored, generation=generation)
        if generation == self._generation:
            self._tree = tree
        return tree

    async def _collect(self, uri: FileKey) -> FileCoverageInfo | None:
        try:
            workspace = self._workspaces.resolve(uri)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Cannot resolve workspace for %s: %s", uri, exc)
            return None
        if workspace is None:
            logger.debug("skipping %s: outside every workspace folder", uri)
            return None

        total = await self._count_lines(uri)
        covered = self._state.ranges.covered_line_count(uri)
        status = self._state.scope.get_file_status(uri)
        if status is not None and status.is_verdict:
            covered = total

        if total > 0:
            covered = min(covered, total)
        elif covered > 0:
            # unreadable or empty document with recorded ranges
            total = covered

        return FileCoverageInfo(
            uri=uri,
            workspace=workspace,
            covered_lines=max(covered, 0),
            total_lines=max(total, 0),
            status=status,
        )

    async def _count_lines(self, uri: FileKey) -> int:
        try:
            count = await self._line_counter.line_count(uri)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to read %s: %s", uri, exc)
            return 0
        return max(int(count), 0)


__all__ = ["CoverageAggregator"]
