from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from typer.main import get_command

from reviewcov import __version__
from reviewcov.cli import files, lines, report, scope
from reviewcov.cli._shared import GlobalOptions, configure_runtime


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"reviewcov {__version__}")
        raise typer.Exit


def create_app() -> typer.Typer:
    app = typer.Typer(
        help="Track which lines of a code base have been reviewed and roll that up into coverage.",
        no_args_is_help=True,
    )

    @app.callback()
    def _root(
        ctx: typer.Context,
        *,
        version: Annotated[
            bool,
            typer.Option("--version", help="Show version and exit", callback=_show_version, is_eager=True),
        ] = False,
        state: Annotated[
            Path | None,
            typer.Option("--state", help="Review state file (default: .reviewcov.json in the project root)."),
        ] = None,
        workspace: Annotated[
            list[Path] | None,
            typer.Option("-w", "--workspace", help="Workspace folder (repeatable; default: the project root)."),
        ] = None,
        verbose: Annotated[
            bool,
            typer.Option("-v", "--verbose", help="Log debug details to stderr."),
        ] = False,
        quiet: Annotated[
            bool,
            typer.Option("-q", "--quiet", help="Only print errors."),
        ] = False,
    ) -> None:
        configure_runtime(quiet=quiet, verbose=verbose)
        ctx.obj = GlobalOptions(
            state_file=state,
            workspaces=list(workspace or []),
            quiet=quiet,
            verbose=verbose,
        )

    lines.register(app)
    files.register(app)
    scope.register(app)
    report.register(app)

    return app


def main() -> None:
    app = create_app()
    get_command(app)()


# Click-compatible object for tooling that imports it
cli = get_command(create_app())

__all__ = ["cli", "create_app", "main"]
