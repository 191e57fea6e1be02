"""Commands that classify, clear and shift line ranges of a single file."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from reviewcov.cli._shared import one_based, session_from
from reviewcov.engine import actions
from reviewcov.io import color_allowed, resolve_use_color
from reviewcov.model.types import Category
from reviewcov.render.human import render_ranges


def _span(start: int, end: int | None) -> str:
    if end is None or end == start:
        return f"line {start}"
    return f"lines {min(start, end)}-{max(start, end)}"


def mark_cmd(
    ctx: typer.Context,
    category: Annotated[Category, typer.Argument(help="Review verdict for the lines.", case_sensitive=False)],
    path: Annotated[Path, typer.Argument(help="File the lines belong to.")],
    start: Annotated[int, typer.Argument(help="First line (1-based).", min=1)],
    end: Annotated[int | None, typer.Argument(help="Last line (1-based, default: START).", min=1)] = None,
) -> None:
    """Classify a line range, replacing any earlier verdict for those lines."""
    session = session_from(ctx)
    state = session.load()
    uri = session.uri(path)
    changed = actions.mark_lines(state, category, uri, one_based(start), one_based(end or start))
    session.commit(
        state,
        changed=changed,
        message=f"Marked {_span(start, end)} of {session.display(uri)} as {category.value}.",
    )


def clear_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="File to clear.")],
    start: Annotated[int | None, typer.Argument(help="First line (1-based); omit to clear the whole file.", min=1)] = None,
    end: Annotated[int | None, typer.Argument(help="Last line (1-based, default: START).", min=1)] = None,
) -> None:
    """Remove verdicts from a line range, or from the whole file."""
    session = session_from(ctx)
    state = session.load()
    uri = session.uri(path)
    if start is None:
        changed = actions.clear_file(state, uri)
        what = "all lines"
    else:
        changed = actions.clear_lines(state, uri, one_based(start), one_based(end or start))
        what = _span(start, end)
    session.commit(state, changed=changed, message=f"Cleared {what} of {session.display(uri)}.")


def edit_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="Edited file.")],
    start: Annotated[int, typer.Argument(help="First line of the replaced text (1-based).", min=1)],
    end: Annotated[int, typer.Argument(help="Last line of the replaced text (1-based).", min=1)],
    delta: Annotated[
        int,
        typer.Option("--delta", "-d", help="Lines added (positive) or removed (negative) by the edit."),
    ] = 0,
) -> None:
    """Shift recorded ranges after lines were inserted or deleted."""
    session = session_from(ctx)
    state = session.load()
    uri = session.uri(path)
    changed = actions.edit_lines(state, uri, one_based(start), one_based(end), delta)
    session.commit(state, changed=changed, message=f"Shifted ranges of {session.display(uri)} by {delta:+d}.")


def ranges_cmd(
    ctx: typer.Context,
    path: Annotated[Path, typer.Argument(help="File to inspect.")],
    color: Annotated[bool, typer.Option("--color", help="Force color output")] = False,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable color output")] = False,
) -> None:
    """Show the reviewed ranges of a file."""
    session = session_from(ctx)
    state = session.load(read_only=True)
    uri = session.uri(path)
    use_color = resolve_use_color(color=color, no_color=no_color, allowed=color_allowed(None))
    text = render_ranges(
        session.display(uri),
        state.ranges.ranges_by_category(uri),
        status=state.scope.get_file_status(uri),
        color=use_color,
    )
    typer.echo(text)


def register(app: typer.Typer) -> None:
    app.command("mark")(mark_cmd)
    app.command("clear")(clear_cmd)
    app.command("edit")(edit_cmd)
    app.command("ranges")(ranges_cmd)


__all__ = ["register"]
