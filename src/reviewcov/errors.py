"""Centralised exception hierarchy for reviewcov."""

from __future__ import annotations


class ReviewcovError(Exception):
    """Base class for all custom reviewcov exceptions."""


class StateFileError(ReviewcovError):
    """Base class for errors related to the persisted review state file."""


class StateFileNotFoundError(StateFileError):
    """State file could not be located on disk."""


class InvalidStateFileError(StateFileError):
    """State file was found but does not contain readable JSON."""


__all__ = [
    "InvalidStateFileError",
    "ReviewcovError",
    "StateFileError",
    "StateFileNotFoundError",
]
