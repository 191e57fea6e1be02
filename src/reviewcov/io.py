import sys
from pathlib import Path

import click.utils as click_utils


def write_output(text: str, destination: Path | None) -> None:
    """Write output to stdout or a file (PATH or '-' for stdout)."""
    if destination is None or destination == Path("-"):
        print(text)
        return
    destination.parent.mkdir(parents=True, exist_ok=True)
    destination.write_text(text + "\n", encoding="utf-8")


def color_allowed(destination: Path | None) -> bool:
    """Return whether ANSI styling may be written to *destination*."""
    if destination not in {None, Path("-")}:
        return False
    stdout = sys.stdout
    is_tty = bool(getattr(stdout, "isatty", lambda: False)())
    return is_tty and not click_utils.should_strip_ansi(stdout)


def resolve_use_color(*, color: bool, no_color: bool, allowed: bool) -> bool:
    # CLI flags take precedence over the terminal default.
    if no_color:
        return False
    if color:
        return True
    return allowed
