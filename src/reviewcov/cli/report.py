from __future__ import annotations

import asyncio
from enum import StrEnum
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from reviewcov.cli._shared import session_from
from reviewcov.cli.exit_codes import EXIT_OK
from reviewcov.engine.aggregate import CoverageAggregator
from reviewcov.io import color_allowed, resolve_use_color, write_output
from reviewcov.render.human import render_tree
from reviewcov.render.json import format_json
from reviewcov.workspace import FileLineCounter

if TYPE_CHECKING:
    from reviewcov.cli._shared import Session
    from reviewcov.engine.state import ReviewState
    from reviewcov.engine.tree import CoverageTree


class ReportFormat(StrEnum):
    HUMAN = "human"
    JSON = "json"


async def build_tree(session: Session, state: ReviewState) -> CoverageTree:
    aggregator = CoverageAggregator(state, session.workspace, FileLineCounter())
    return await aggregator.tree()


def report_cmd(
    ctx: typer.Context,
    format_: Annotated[
        ReportFormat,
        typer.Option("--format", "-f", help="Output format.", case_sensitive=False),
    ] = ReportFormat.HUMAN,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write output to PATH (use '-' for stdout)."),
    ] = None,
    color: Annotated[
        bool,
        typer.Option("--color", help="Force color output"),
    ] = False,
    no_color: Annotated[
        bool,
        typer.Option("--no-color", help="Disable color output"),
    ] = False,
) -> None:
    """Show review coverage per workspace, folder and file."""
    session = session_from(ctx)
    state = session.load(read_only=True)
    tree = asyncio.run(build_tree(session, state))

    if format_ is ReportFormat.JSON:
        text = format_json(tree)
    else:
        use_color = resolve_use_color(color=color, no_color=no_color, allowed=color_allowed(output))
        text = render_tree(tree, color=use_color)

    write_output(text, output)
    raise typer.Exit(code=EXIT_OK)


def register(app: typer.Typer) -> None:
    app.command("report")(report_cmd)


__all__ = ["ReportFormat", "build_tree", "register"]
