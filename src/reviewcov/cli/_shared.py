"""State shared by every command: resolved paths, workspace and state file I/O."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import unquote

import typer

from reviewcov import logger
from reviewcov.cli.exit_codes import EXIT_CANTCREAT, EXIT_DATAERR, EXIT_NOINPUT
from reviewcov.config import DEFAULT_STATE_FILE, LOG_FORMAT, find_project_root, load_settings
from reviewcov.errors import StateFileError, StateFileNotFoundError
from reviewcov.state_file import load_state, save_state
from reviewcov.workspace import LocalWorkspace, path_to_uri

if TYPE_CHECKING:
    from collections.abc import Sequence

    from reviewcov.engine.state import ReviewState
    from reviewcov.model.types import FileKey


@dataclass(slots=True)
class GlobalOptions:
    """Options given before the command name."""

    state_file: Path | None = None
    workspaces: list[Path] = field(default_factory=list)
    quiet: bool = False
    verbose: bool = False


@dataclass(slots=True)
class Session:
    state_path: Path
    workspace: LocalWorkspace
    quiet: bool = False
    explicit_state: bool = False

    def load(self, *, read_only: bool = False) -> ReviewState:
        """Load the review state; read-only commands insist on an explicitly named file existing."""
        try:
            return load_state(self.state_path, must_exist=read_only and self.explicit_state)
        except StateFileNotFoundError as exc:
            typer.echo(f"ERROR: {exc}", err=True)
            raise typer.Exit(code=EXIT_NOINPUT) from exc
        except StateFileError as exc:
            typer.echo(f"ERROR: {exc}", err=True)
            raise typer.Exit(code=EXIT_DATAERR) from exc

    def save(self, state: ReviewState) -> None:
        try:
            save_state(state, self.state_path)
        except OSError as exc:
            typer.echo(f"ERROR: cannot write {self.state_path}: {exc}", err=True)
            raise typer.Exit(code=EXIT_CANTCREAT) from exc

    def uri(self, path: Path) -> FileKey:
        return path_to_uri(path)

    def display(self, uri: FileKey) -> str:
        """Short label for *uri*: its path relative to the owning workspace."""
        folder = self.workspace.resolve(uri)
        if folder is None:
            return uri
        rel = unquote(uri[len(folder.uri) :].lstrip("/"))
        return f"{folder.name}/{rel}" if rel else folder.name

    def say(self, message: str) -> None:
        if not self.quiet:
            typer.echo(message)

    def commit(self, state: ReviewState, *, changed: bool, message: str) -> None:
        """Save *state* when *changed* and report the outcome."""
        if not changed:
            self.say("Nothing to change.")
            return
        self.save(state)
        self.say(message)


def configure_runtime(*, quiet: bool, verbose: bool) -> None:
    """Configure logging based on *quiet*/*verbose*."""
    level = logging.ERROR if quiet else (logging.DEBUG if verbose else logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logger.setLevel(level)


def build_session(options: GlobalOptions, *, cwd: Path | None = None) -> Session:
    """Resolve the state file and workspace folders from flags, config and defaults."""
    root = find_project_root(cwd or Path.cwd())
    settings = load_settings(root)

    state_path = options.state_file or settings.state_file or root / DEFAULT_STATE_FILE
    folders: Sequence[Path] = options.workspaces or settings.workspaces or (root,)
    logger.debug("project root: %s", root)
    logger.debug("state file: %s", state_path)
    logger.debug("workspace folders: %s", ", ".join(str(f) for f in folders))
    return Session(
        state_path=Path(state_path).resolve(),
        workspace=LocalWorkspace(folders, exclude=settings.exclude),
        quiet=options.quiet,
        explicit_state=options.state_file is not None,
    )


def session_from(ctx: typer.Context) -> Session:
    options = ctx.obj if isinstance(ctx.obj, GlobalOptions) else GlobalOptions()
    return build_session(options)


def one_based(line: int) -> int:
    """Convert a 1-based command line number to a 0-based line index."""
    return line - 1


__all__ = ["GlobalOptions", "Session", "build_session", "configure_runtime", "one_based", "session_from"]
