from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from reviewcov.cli._shared import session_from
from reviewcov.engine import actions
from reviewcov.model.types import FileStatus


def status_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="File to classify.")],
    status: Annotated[
        FileStatus | None,
        typer.Argument(help="Whole-file status; omit to print the current one.", case_sensitive=False),
    ] = None,
) -> None:
    """Show or set the whole-file review status."""
    session = session_from(ctx)
    state = session.load()
    uri = session.uri(path)
    if status is None:
        current = state.scope.get_file_status(uri)
        if current is not None:
            typer.echo(current.value)
        else:
            typer.echo("none" if state.scope.is_tracked(uri) else "untracked")
        return
    changed = actions.set_status(state, uri, status)
    session.commit(state, changed=changed, message=f"{session.display(uri)} is now {status.value}.")


def rename_cmd(
    ctx: typer.Context,
    old: Annotated[Path, typer.Argument(help="Previous file path.")],
    new: Annotated[Path, typer.Argument(help="New file path.")],
) -> None:
    """Carry review data over to a renamed file."""
    session = session_from(ctx)
    state = session.load()
    old_uri, new_uri = session.uri(old), session.uri(new)
    changed = actions.rename(state, old_uri, new_uri)
    session.commit(
        state,
        changed=changed,
        message=f"Moved review data from {session.display(old_uri)} to {session.display(new_uri)}.",
    )


def register(app: typer.Typer) -> None:
    app.command("status")(status_cmd)
    app.command("rename")(rename_cmd)


__all__ = ["register"]
