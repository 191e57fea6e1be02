"""Central configuration and constants for ``reviewcov``."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from functools import cache
from importlib import resources
from pathlib import Path

from reviewcov import logger

# Default logging format used by the CLI entry point.
LOG_FORMAT = "%(levelname)s: %(message)s"

# State file written next to the project when nothing else is configured.
DEFAULT_STATE_FILE = ".reviewcov.json"

# Quiescence window before a burst of change notifications triggers a rebuild.
DEBOUNCE_SECONDS = 0.25

# gitwildmatch patterns never enumerated when a folder is added to scope.
DEFAULT_EXCLUDES: tuple[str, ...] = (".git/", ".hg/", ".svn/", "__pycache__/", ".DS_Store", DEFAULT_STATE_FILE)


_SCHEMA_FILES: dict[str, str] = {
    "snapshot": "snapshot.schema.json",
    "report": "report.schema.json",
}


@cache
def get_schema(name: str = "snapshot") -> dict[str, object]:
    """Load and cache one of the packaged JSON schemas."""
    try:
        filename = _SCHEMA_FILES[name]
    except KeyError as exc:
        choices = ", ".join(sorted(_SCHEMA_FILES))
        msg = f"Unsupported schema: {name!r}. Available schemas: {choices}"
        raise ValueError(msg) from exc
    return json.loads(resources.files("reviewcov.data").joinpath(filename).read_text(encoding="utf-8"))


@dataclass(frozen=True, slots=True)
class Settings:
    """Project level settings from ``[tool.reviewcov]``."""

    state_file: Path | None = None
    workspaces: tuple[Path, ...] = field(default_factory=tuple)
    exclude: tuple[str, ...] = DEFAULT_EXCLUDES


def _read_tool_table(pyproject: Path) -> dict[str, object]:
    try:
        with pyproject.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Failed to parse %s: %s", pyproject, e)
        return {}
    tool = data.get("tool", {})
    table = tool.get("reviewcov", {}) if isinstance(tool, dict) else {}
    return table if isinstance(table, dict) else {}


def load_settings(project_root: Path) -> Settings:
    """Return the ``[tool.reviewcov]`` settings of *project_root*.

    Relative paths are resolved against the project root. Values of the wrong
    type are ignored rather than rejected.
    """
    pyproject = project_root / "pyproject.toml"
    if not pyproject.is_file():
        return Settings()

    table = _read_tool_table(pyproject)

    state_file: Path | None = None
    raw_state = table.get("state_file")
    if isinstance(raw_state, str) and raw_state.strip():
        state_file = (project_root / raw_state.strip()).resolve()
        logger.info("Using state file from config: %s", state_file)

    workspaces: list[Path] = []
    raw_workspaces = table.get("workspaces", [])
    if isinstance(raw_workspaces, list):
        workspaces.extend(
            (project_root / item.strip()).resolve()
            for item in raw_workspaces
            if isinstance(item, str) and item.strip()
        )

    exclude = list(DEFAULT_EXCLUDES)
    raw_exclude = table.get("exclude", [])
    if isinstance(raw_exclude, list):
        exclude.extend(item for item in raw_exclude if isinstance(item, str) and item.strip())

    return Settings(state_file=state_file, workspaces=tuple(workspaces), exclude=tuple(exclude))


def find_project_root(start: Path) -> Path:
    """Heuristic project root finder: walks upward looking for pyproject.toml or .git."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        if (p / "pyproject.toml").exists():
            return p
        if (p / ".git").exists():
            return p
    return cur


__all__ = [
    "DEBOUNCE_SECONDS",
    "DEFAULT_EXCLUDES",
    "DEFAULT_STATE_FILE",
    "LOG_FORMAT",
    "Settings",
    "find_project_root",
    "get_schema",
    "load_settings",
]
