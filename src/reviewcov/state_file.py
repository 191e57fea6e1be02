"""Reading and writing the persisted review state."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

from reviewcov import logger
from reviewcov.engine.state import ReviewState
from reviewcov.errors import InvalidStateFileError, StateFileNotFoundError

if TYPE_CHECKING:
    from pathlib import Path


def load_state(path: Path, *, must_exist: bool = False) -> ReviewState:
    """Load the review state stored at *path*.

    A missing file yields an empty state unless *must_exist* is set. Text that
    is not JSON raises :class:`InvalidStateFileError` so it is never silently
    overwritten; well-formed JSON with a bad shape is repaired on load.
    """
    if not path.exists():
        if must_exist:
            msg = f"State file not found: {path}"
            raise StateFileNotFoundError(msg)
        logger.info("No state file at %s, starting empty", path)
        return ReviewState()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        msg = f"Could not read state file {path}: {e}"
        raise InvalidStateFileError(msg) from e
    return ReviewState.from_json(data)


def save_state(state: ReviewState, path: Path) -> None:
    payload = json.dumps(state.to_json(), indent=2, sort_keys=True)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(payload + "\n", encoding="utf-8")
    logger.debug("saved review state to %s", path)


__all__ = ["load_state", "save_state"]
