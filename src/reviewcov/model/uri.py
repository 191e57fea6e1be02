"""Helpers for the opaque file keys used throughout reviewcov.

Keys are normally canonical URIs (``file:///ws/src/a.py``) but bare paths
(``/ws/src/a.py``) work too: they simply have an empty scheme and authority.
Containment is decided on the path component only, and only between keys that
share scheme and authority.
"""

from __future__ import annotations

from typing import NamedTuple
from urllib.parse import urlsplit, urlunsplit


class UriParts(NamedTuple):
    scheme: str
    authority: str
    path: str


def split_uri(uri: str) -> UriParts:
    parts = urlsplit(uri)
    return UriParts(parts.scheme, parts.netloc, parts.path)


def with_path(uri: str, path: str) -> str:
    """Return *uri* with its path replaced by *path*."""
    scheme, authority, _ = split_uri(uri)
    if not scheme and not authority:
        return path
    return urlunsplit((scheme, authority, path, "", ""))


def _folder_prefix(path: str) -> str:
    return path if path.endswith("/") else f"{path}/"


def is_strictly_under(uri: str, folder_uri: str) -> bool:
    """Return ``True`` when *uri* lies beneath *folder_uri* (and is not the folder itself)."""
    child = split_uri(uri)
    folder = split_uri(folder_uri)
    if (child.scheme, child.authority) != (folder.scheme, folder.authority):
        return False
    return child.path.startswith(_folder_prefix(folder.path)) and child.path != folder.path


def is_same_or_under(uri: str, folder_uri: str) -> bool:
    child = split_uri(uri)
    folder = split_uri(folder_uri)
    if (child.scheme, child.authority) != (folder.scheme, folder.authority):
        return False
    return child.path.rstrip("/") == folder.path.rstrip("/") or child.path.startswith(_folder_prefix(folder.path))


def relative_segments(uri: str, root_uri: str) -> list[str]:
    """Return the path segments of *uri* below *root_uri*."""
    root_path = split_uri(root_uri).path.rstrip("/")
    path = split_uri(uri).path
    rest = path[len(root_path) :] if path.startswith(root_path) else path
    return [seg for seg in rest.split("/") if seg]


def basename(uri: str) -> str:
    segments = [seg for seg in split_uri(uri).path.split("/") if seg]
    return segments[-1] if segments else uri


__all__ = [
    "UriParts",
    "basename",
    "is_same_or_under",
    "is_strictly_under",
    "relative_segments",
    "split_uri",
    "with_path",
]
