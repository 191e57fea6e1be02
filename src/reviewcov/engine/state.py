"""Review state: range store + scope tracker, and its persisted JSON snapshot."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, cast

from jsonschema import validate

from reviewcov import logger
from reviewcov.config import get_schema
from reviewcov.engine.scope import IgnoredEntry, ScopeTracker
from reviewcov.engine.store import RangeStore
from reviewcov.model.ranges import RangeSet
from reviewcov.model.types import Category, EntryKind, FileKey, FileStatus

STATUS_KEY = "file_review_statuses"
IGNORED_KEY = "ignored_entries"


def category_key(category: Category) -> str:
    return f"files_to_{category.value}"


def _mapping(data: Mapping[str, Any], key: str) -> Mapping[Any, Any]:
    value = data.get(key)
    if isinstance(value, Mapping):
        return value
    if value is not None:
        logger.warning("Ignoring malformed %r in review state (expected an object)", key)
    return {}


def _parse_category(raw: Mapping[Any, Any]) -> dict[FileKey, RangeSet]:
    out: dict[FileKey, RangeSet] = {}
    for uri, pairs in raw.items():
        if not isinstance(uri, str) or not isinstance(pairs, (list, tuple)):
            logger.debug("dropping malformed range list for %r", uri)
            continue
        ranges = RangeSet.from_pairs(pairs)
        if len(ranges) < len(pairs):
            logger.debug("coalesced or dropped %d range(s) for %s", len(pairs) - len(ranges), uri)
        if ranges:
            out[uri] = ranges
    return out


def _parse_statuses(raw: Mapping[Any, Any]) -> list[tuple[FileKey, FileStatus]]:
    out: list[tuple[FileKey, FileStatus]] = []
    for uri, status in raw.items():
        if not isinstance(uri, str) or not isinstance(status, str):
            continue
        try:
            out.append((uri, FileStatus(status)))
        except ValueError:
            logger.debug("dropping unknown status %r for %s", status, uri)
    return out


def _parse_ignored(raw: object) -> list[IgnoredEntry]:
    if not isinstance(raw, list):
        if raw is not None:
            logger.warning("Ignoring malformed %r in review state (expected a list)", IGNORED_KEY)
        return []
    out: list[IgnoredEntry] = []
    for item in raw:
        if not isinstance(item, Mapping):
            continue
        uri = item.get("uri")
        kind = item.get("type")
        if not isinstance(uri, str) or not isinstance(kind, str):
            continue
        try:
            out.append(IgnoredEntry(uri, EntryKind(kind)))
        except ValueError:
            logger.debug("dropping ignore marker of unknown type %r for %s", kind, uri)
    return out


class ReviewState:
    """Everything a reviewer has recorded for a workspace."""

    def __init__(self) -> None:
        self.ranges = RangeStore()
        self.scope = ScopeTracker(self.ranges)

    @classmethod
    def from_json(cls, data: object) -> ReviewState:
        state = cls()
        state.load_from_json(data)
        return state

    def load_from_json(self, data: object) -> None:
        """Replace the current state with the snapshot in *data*.

        Missing or malformed top-level keys count as empty and malformed
        entries are dropped one by one; loading never fails as a whole.
        """
        if not isinstance(data, Mapping):
            if data is not None:
                logger.warning("Ignoring review state of type %s", type(data).__name__)
            data = {}

        for category in Category:
            self.ranges.replace_category(category, _parse_category(_mapping(data, category_key(category))))
        self.scope.load(_parse_statuses(_mapping(data, STATUS_KEY)), _parse_ignored(data.get(IGNORED_KEY)))

    def to_json(self) -> dict[str, Any]:
        payload: dict[str, Any] = {category_key(c): self.ranges.to_pairs(c) for c in Category}
        payload[STATUS_KEY] = {uri: status.value for uri, status in self.scope.statuses().items()}
        payload[IGNORED_KEY] = [
            {"uri": entry.uri, "type": entry.kind.value} for entry in self.scope.get_ignored_entries()
        ]
        plain = cast("dict[str, Any]", _as_plain(payload))
        validate(plain, get_schema("snapshot"))
        return plain

    def clear(self) -> None:
        self.ranges.clear()
        self.scope.clear()


def _as_plain(obj: object) -> object:
    # tuples -> lists; jsonschema does not accept tuples as arrays
    if isinstance(obj, Mapping):
        return {key: _as_plain(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_as_plain(item) for item in obj]
    return obj


__all__ = ["IGNORED_KEY", "STATUS_KEY", "ReviewState", "category_key"]
