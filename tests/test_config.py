"""Tests for configuration helpers and module side-effect behavior."""

from __future__ import annotations

import importlib
import logging
import sys
import textwrap
from typing import TYPE_CHECKING

import pytest

from reviewcov import config
from reviewcov.config import DEFAULT_EXCLUDES, Settings, find_project_root, get_schema, load_settings

if TYPE_CHECKING:
    from pathlib import Path

    from _pytest.logging import LogCaptureFixture
    from _pytest.monkeypatch import MonkeyPatch


def test_get_schema_cached(monkeypatch: MonkeyPatch) -> None:
    """``get_schema`` should load the schema once and cache the result."""
    config.get_schema.cache_clear()
    calls = 0
    original = config.resources.files

    def tracking_files(package: str):
        nonlocal calls
        calls += 1
        return original(package)

    monkeypatch.setattr(config.resources, "files", tracking_files)

    schema1 = config.get_schema()
    schema2 = config.get_schema()

    assert schema1 == schema2
    assert calls == 1
    config.get_schema.cache_clear()


def test_get_schema_rejects_unknown_names() -> None:
    with pytest.raises(ValueError, match="Available schemas: report, snapshot"):
        get_schema("coverage")


def test_import_has_no_side_effects(monkeypatch: MonkeyPatch) -> None:
    """Importing the package should not configure logging."""
    basic_called = False

    def fake_basic(*args, **kwargs):
        nonlocal basic_called
        basic_called = True

    monkeypatch.setattr(logging, "basicConfig", fake_basic)

    monkeypatch.delitem(sys.modules, "reviewcov")
    monkeypatch.delitem(sys.modules, "reviewcov.engine.state")

    importlib.import_module("reviewcov.engine.state")

    assert not basic_called


def test_load_settings_without_pyproject(tmp_path: Path) -> None:
    assert load_settings(tmp_path) == Settings()


def test_load_settings_reads_tool_table(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        textwrap.dedent(
            """
            [tool.reviewcov]
            state_file = "review/state.json"
            workspaces = ["src", "  ", "docs"]
            exclude = ["*.lock", 3]
            """
        ),
        encoding="utf-8",
    )
    settings = load_settings(tmp_path)
    assert settings.state_file == (tmp_path / "review" / "state.json").resolve()
    assert settings.workspaces == ((tmp_path / "src").resolve(), (tmp_path / "docs").resolve())
    assert settings.exclude == (*DEFAULT_EXCLUDES, "*.lock")


def test_load_settings_ignores_values_of_the_wrong_type(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        '[tool.reviewcov]\nstate_file = 1\nworkspaces = "src"\nexclude = "*.lock"\n',
        encoding="utf-8",
    )
    assert load_settings(tmp_path) == Settings()


def test_load_settings_warns_on_bad_toml(tmp_path: Path, caplog: LogCaptureFixture) -> None:
    (tmp_path / "pyproject.toml").write_text("[tool.reviewcov\n", encoding="utf-8")
    with caplog.at_level(logging.WARNING, logger="reviewcov"):
        assert load_settings(tmp_path) == Settings()
    assert "Failed to parse" in caplog.text


def test_find_project_root_walks_upward(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text("", encoding="utf-8")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert find_project_root(nested) == tmp_path.resolve()


def test_find_project_root_stops_at_git(tmp_path: Path) -> None:
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    inner = repo / "pkg"
    inner.mkdir()
    assert find_project_root(inner) == repo.resolve()
