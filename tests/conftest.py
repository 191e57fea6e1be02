from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest
from click.testing import CliRunner

from reviewcov.engine.aggregate import CoverageAggregator
from reviewcov.engine.collaborators import WorkspaceFolder
from reviewcov.engine.state import ReviewState
from reviewcov.model.types import EntryKind
from reviewcov.model.uri import basename, is_same_or_under


class FakeWorkspace:
    """In-memory workspace folders, stat and file listing keyed by URI."""

    def __init__(self, folders: list[str], *, files: list[str] | None = None, dirs: list[str] | None = None) -> None:
        # innermost first
        self.folders = sorted(folders, key=len, reverse=True)
        self.files = list(files or [])
        self.dirs = set(dirs or [])

    def resolve(self, uri: str) -> WorkspaceFolder | None:
        for folder in self.folders:
            if is_same_or_under(uri, folder):
                return WorkspaceFolder(uri=folder, name=basename(folder))
        return None

    def kind_of(self, uri: str) -> EntryKind:
        return EntryKind.FOLDER if uri in self.dirs else EntryKind.FILE

    def files_under(self, folder_uri: str) -> list[str]:
        prefix = folder_uri.rstrip("/") + "/"
        return [uri for uri in self.files if uri.startswith(prefix)]


class FakeLineCounter:
    """Line counts from a mapping; unknown URIs raise like unreadable files."""

    def __init__(self, counts: Mapping[str, int], *, delay: float = 0.0) -> None:
        self.counts = dict(counts)
        self.delay = delay
        self.calls: list[str] = []

    async def line_count(self, uri: str) -> int:
        self.calls.append(uri)
        if self.delay:
            await asyncio.sleep(self.delay)
        try:
            return self.counts[uri]
        except KeyError:
            msg = f"cannot open {uri}"
            raise OSError(msg) from None


WS = "file:///ws"


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a Click CLI runner for invoking the command-line interface."""
    return CliRunner()


@pytest.fixture
def state() -> ReviewState:
    return ReviewState()


@pytest.fixture
def workspace() -> FakeWorkspace:
    return FakeWorkspace([WS])


@pytest.fixture
def make_aggregator(
    state: ReviewState,
    workspace: FakeWorkspace,
) -> Callable[..., tuple[CoverageAggregator, FakeLineCounter]]:
    def build(counts: Mapping[str, int], *, delay: float = 0.0) -> tuple[CoverageAggregator, FakeLineCounter]:
        counter = FakeLineCounter(counts, delay=delay)
        return CoverageAggregator(state, workspace, counter), counter

    return build


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A small project on disk with a pyproject.toml marking its root."""
    (tmp_path / "pyproject.toml").write_text("[project]\nname = 'demo'\n", encoding="utf-8")
    src = tmp_path / "src"
    src.mkdir()
    (src / "app.py").write_text("".join(f"line {i}\n" for i in range(9)), encoding="utf-8")
    (src / "util.py").write_text("a\nb\nc\n", encoding="utf-8")
    gen = src / "generated"
    gen.mkdir()
    (gen / "models.py").write_text("x\n" * 4, encoding="utf-8")
    return tmp_path
