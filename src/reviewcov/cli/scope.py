"""Commands that decide which files count towards coverage."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from reviewcov.cli._shared import Session, session_from
from reviewcov.engine import actions

_Paths = Annotated[list[Path], typer.Argument(help="Files or folders.")]


def _entries(session: Session, paths: list[Path]) -> list[actions.ScopeEntry]:
    return actions.resolve_entries((session.uri(p) for p in paths), session.workspace)


def add_cmd(ctx: typer.Context, paths: _Paths) -> None:
    """Track files, or every file below a folder."""
    session = session_from(ctx)
    state = session.load()
    before = len(state.scope.get_all_tracked_uris())
    changed = actions.add_to_scope(state, _entries(session, paths), session.workspace)
    added = len(state.scope.get_all_tracked_uris()) - before
    session.commit(state, changed=changed, message=f"Tracking {added} more file(s).")


def remove_cmd(ctx: typer.Context, paths: _Paths) -> None:
    """Stop tracking files, or every tracked file below a folder."""
    session = session_from(ctx)
    state = session.load()
    before = len(state.scope.get_all_tracked_uris())
    changed = actions.remove_from_scope(state, _entries(session, paths))
    removed = before - len(state.scope.get_all_tracked_uris())
    session.commit(state, changed=changed, message=f"Stopped tracking {removed} file(s).")


def ignore_cmd(ctx: typer.Context, paths: _Paths) -> None:
    """Exclude files or folders from coverage totals without forgetting them."""
    session = session_from(ctx)
    state = session.load()
    changed = actions.ignore(state, _entries(session, paths))
    session.commit(state, changed=changed, message=f"Ignoring {len(paths)} entr{'y' if len(paths) == 1 else 'ies'}.")


def unignore_cmd(ctx: typer.Context, paths: _Paths) -> None:
    """Count previously ignored files or folders again."""
    session = session_from(ctx)
    state = session.load()
    changed = actions.unignore(state, _entries(session, paths))
    session.commit(state, changed=changed, message="Ignore markers removed.")


def clear_ignores_cmd(ctx: typer.Context) -> None:
    """Remove every ignore marker."""
    session = session_from(ctx)
    state = session.load()
    changed = actions.clear_ignores(state)
    session.commit(state, changed=changed, message="All ignore markers cleared.")


def register(app: typer.Typer) -> None:
    scope_app = typer.Typer(help="Add files or folders to, or remove them from, the review scope.", no_args_is_help=True)
    scope_app.command("add")(add_cmd)
    scope_app.command("remove")(remove_cmd)
    app.add_typer(scope_app, name="scope")

    app.command("ignore")(ignore_cmd)
    app.command("unignore")(unignore_cmd)
    app.command("clear-ignores")(clear_ignores_cmd)


__all__ = ["register"]
