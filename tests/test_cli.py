import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from reviewcov import __version__
from reviewcov.cli import EXIT_DATAERR, EXIT_NOINPUT, EXIT_OK, cli
from reviewcov.render.human import NO_TRACKED_FILES
from reviewcov.workspace import path_to_uri

# --------------------------------------------------------------------------- #
# helpers                                                                     #
# --------------------------------------------------------------------------- #


def _run(runner: CliRunner, args: list[str]) -> tuple[int, str]:
    """Invoke the CLI and return *(exit_code, output)* for convenience."""
    result = runner.invoke(cli, args)
    return result.exit_code, result.output


def _src(runner: CliRunner, *args: str) -> tuple[int, str]:
    """Run a command with ``src`` as the only workspace folder."""
    return _run(runner, ["-w", "src", *args])


def _state(project: Path) -> dict:
    return json.loads((project / ".reviewcov.json").read_text(encoding="utf-8"))


@pytest.fixture
def in_project(project: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.chdir(project)
    return project


# --------------------------------------------------------------------------- #
# tests                                                                       #
# --------------------------------------------------------------------------- #


def test_cli_version(cli_runner: CliRunner) -> None:
    code, out = _run(cli_runner, ["--version"])
    assert code == EXIT_OK
    assert out.strip() == f"reviewcov {__version__}"


def test_cli_without_command_shows_help(cli_runner: CliRunner) -> None:
    _code, out = _run(cli_runner, [])
    assert "Usage" in out


def test_mark_and_ranges(cli_runner: CliRunner, in_project: Path) -> None:
    code, out = _src(cli_runner, "mark", "ok", "src/app.py", "1", "5")
    assert code == EXIT_OK
    assert out.strip() == "Marked lines 1-5 of src/app.py as ok."

    app = path_to_uri(in_project / "src" / "app.py")
    assert _state(in_project)["files_to_ok"] == {app: [[0, 4]]}

    code, out = _src(cli_runner, "mark", "DANGER", "src/app.py", "9")
    assert code == EXIT_OK
    assert out.strip() == "Marked line 9 of src/app.py as danger."

    code, out = _src(cli_runner, "ranges", "src/app.py", "--no-color")
    assert code == EXIT_OK
    assert "src/app.py" in out
    assert "1-5" in out
    assert "danger" in out
    assert "\x1b[" not in out


def test_mark_swapped_bounds_and_repeat(cli_runner: CliRunner, in_project: Path) -> None:
    code, out = _src(cli_runner, "mark", "warning", "src/app.py", "5", "2")
    assert code == EXIT_OK
    assert "lines 2-5" in out
    code, out = _src(cli_runner, "mark", "warning", "src/app.py", "2", "5")
    assert code == EXIT_OK
    assert out.strip() == "Nothing to change."


def test_mark_rejects_unknown_category_and_line_zero(cli_runner: CliRunner, in_project: Path) -> None:
    code, _out = _src(cli_runner, "mark", "great", "src/app.py", "1")
    assert code == 2
    code, _out = _src(cli_runner, "mark", "ok", "src/app.py", "0")
    assert code == 2
    assert not (in_project / ".reviewcov.json").exists()


def test_clear_lines_and_whole_file(cli_runner: CliRunner, in_project: Path) -> None:
    app = path_to_uri(in_project / "src" / "app.py")
    _src(cli_runner, "mark", "ok", "src/app.py", "1", "10")

    code, out = _src(cli_runner, "clear", "src/app.py", "3", "4")
    assert code == EXIT_OK
    assert out.strip() == "Cleared lines 3-4 of src/app.py."
    assert _state(in_project)["files_to_ok"] == {app: [[0, 1], [4, 9]]}

    code, out = _src(cli_runner, "clear", "src/app.py")
    assert code == EXIT_OK
    assert out.strip() == "Cleared all lines of src/app.py."
    assert _state(in_project)["files_to_ok"] == {}


def test_edit_shifts_ranges(cli_runner: CliRunner, in_project: Path) -> None:
    app = path_to_uri(in_project / "src" / "app.py")
    _src(cli_runner, "mark", "ok", "src/app.py", "5", "6")

    code, out = _src(cli_runner, "edit", "src/app.py", "1", "1", "--delta", "2")
    assert code == EXIT_OK
    assert out.strip() == "Shifted ranges of src/app.py by +2."
    assert _state(in_project)["files_to_ok"] == {app: [[6, 7]]}


def test_status_and_rename(cli_runner: CliRunner, in_project: Path) -> None:
    code, out = _src(cli_runner, "status", "src/app.py")
    assert (code, out.strip()) == (EXIT_OK, "untracked")

    _src(cli_runner, "mark", "ok", "src/util.py", "1")
    code, out = _src(cli_runner, "status", "src/util.py")
    assert (code, out.strip()) == (EXIT_OK, "none")

    code, out = _src(cli_runner, "status", "src/app.py", "warning")
    assert (code, out.strip()) == (EXIT_OK, "src/app.py is now warning.")
    code, out = _src(cli_runner, "status", "src/app.py")
    assert out.strip() == "warning"

    code, out = _src(cli_runner, "rename", "src/app.py", "src/main.py")
    assert code == EXIT_OK
    assert out.strip() == "Moved review data from src/app.py to src/main.py."
    statuses = _state(in_project)["file_review_statuses"]
    assert statuses == {path_to_uri(in_project / "src" / "main.py"): "warning"}


def test_scope_add_and_remove_folder(cli_runner: CliRunner, in_project: Path) -> None:
    code, out = _src(cli_runner, "scope", "add", "src")
    assert code == EXIT_OK
    assert out.strip() == "Tracking 3 more file(s)."

    code, out = _src(cli_runner, "scope", "remove", "src/generated")
    assert code == EXIT_OK
    assert out.strip() == "Stopped tracking 1 file(s)."
    assert sorted(_state(in_project)["file_review_statuses"]) == [
        path_to_uri(in_project / "src" / "app.py"),
        path_to_uri(in_project / "src" / "util.py"),
    ]


def test_scope_add_honours_configured_excludes(cli_runner: CliRunner, in_project: Path) -> None:
    (in_project / "pyproject.toml").write_text(
        '[tool.reviewcov]\nworkspaces = ["src"]\nexclude = ["generated/"]\n',
        encoding="utf-8",
    )
    code, out = _run(cli_runner, ["scope", "add", "src"])
    assert code == EXIT_OK
    assert out.strip() == "Tracking 2 more file(s)."


def test_ignore_unignore_and_clear(cli_runner: CliRunner, in_project: Path) -> None:
    code, out = _src(cli_runner, "ignore", "src/generated")
    assert (code, out.strip()) == (EXIT_OK, "Ignoring 1 entry.")
    assert _state(in_project)["ignored_entries"] == [
        {"uri": path_to_uri(in_project / "src" / "generated"), "type": "folder"}
    ]

    code, out = _src(cli_runner, "ignore", "src/app.py", "src/util.py")
    assert out.strip() == "Ignoring 2 entries."

    code, out = _src(cli_runner, "unignore", "src/generated")
    assert out.strip() == "Ignore markers removed."

    code, out = _src(cli_runner, "clear-ignores")
    assert out.strip() == "All ignore markers cleared."
    code, out = _src(cli_runner, "clear-ignores")
    assert out.strip() == "Nothing to change."
    assert _state(in_project)["ignored_entries"] == []


def test_quiet_suppresses_messages(cli_runner: CliRunner, in_project: Path) -> None:
    code, out = _run(cli_runner, ["-q", "-w", "src", "mark", "ok", "src/util.py", "1"])
    assert code == EXIT_OK
    assert out == ""
    assert (in_project / ".reviewcov.json").is_file()


def test_report_human(cli_runner: CliRunner, in_project: Path) -> None:
    _src(cli_runner, "mark", "ok", "src/app.py", "1", "5")
    _src(cli_runner, "status", "src/util.py", "ok")

    code, out = _src(cli_runner, "report", "--no-color")
    assert code == EXIT_OK
    assert out.splitlines()[0] == "Review coverage  64.3% (9/14)"
    assert "app.py  50.0% (5/10)" in out
    assert "util.py  100% (4/4)  ok" in out
    assert "\x1b[" not in out


def test_report_human_without_state(cli_runner: CliRunner, in_project: Path) -> None:
    code, out = _src(cli_runner, "report")
    assert code == EXIT_OK
    assert NO_TRACKED_FILES in out
    assert not (in_project / ".reviewcov.json").exists()


def test_report_json_to_file(cli_runner: CliRunner, in_project: Path) -> None:
    _src(cli_runner, "mark", "ok", "src/app.py", "1", "5")
    _src(cli_runner, "ignore", "src/generated")

    out_file = in_project / "reports" / "review.json"
    code, _out = _src(cli_runner, "report", "--format", "json", "--output", str(out_file))
    assert code == EXIT_OK
    data = json.loads(out_file.read_text(encoding="utf-8"))
    assert data["summary"] == {
        "covered_lines": 5,
        "total_lines": 10,
        "tracked_files": 1,
        "included_files": 1,
        "ignored_entries": 1,
    }
    (root,) = data["roots"]
    assert root["label"] == "src"


def test_report_json_to_stdout(cli_runner: CliRunner, in_project: Path) -> None:
    _src(cli_runner, "mark", "ok", "src/app.py", "1", "5")
    code, out = _src(cli_runner, "report", "-f", "json")
    assert code == EXIT_OK
    assert json.loads(out)["summary"]["covered_lines"] == 5


def test_config_state_file_and_workspaces(cli_runner: CliRunner, in_project: Path) -> None:
    (in_project / "pyproject.toml").write_text(
        '[tool.reviewcov]\nstate_file = "review/state.json"\nworkspaces = ["src"]\n',
        encoding="utf-8",
    )
    code, out = _run(cli_runner, ["mark", "ok", "src/util.py", "1"])
    assert code == EXIT_OK
    assert out.strip() == "Marked line 1 of src/util.py as ok."
    assert (in_project / "review" / "state.json").is_file()
    assert not (in_project / ".reviewcov.json").exists()


def test_state_option_selects_file(cli_runner: CliRunner, in_project: Path) -> None:
    target = in_project / "elsewhere.json"
    code, _out = _run(cli_runner, ["--state", str(target), "-w", "src", "status", "src/app.py", "ok"])
    assert code == EXIT_OK
    assert json.loads(target.read_text(encoding="utf-8"))["file_review_statuses"] == {
        path_to_uri(in_project / "src" / "app.py"): "ok"
    }


def test_invalid_state_file_is_not_overwritten(cli_runner: CliRunner, in_project: Path) -> None:
    state_file = in_project / ".reviewcov.json"
    state_file.write_text("{oops", encoding="utf-8")

    code, out = _src(cli_runner, "mark", "ok", "src/app.py", "1")
    assert code == EXIT_DATAERR
    assert "ERROR: Could not read state file" in out
    assert state_file.read_text(encoding="utf-8") == "{oops"


@pytest.mark.parametrize("command", [["report"], ["ranges", "src/app.py"]])
def test_explicit_missing_state_file(cli_runner: CliRunner, in_project: Path, command: list[str]) -> None:
    missing = in_project / "missing.json"
    code, out = _run(cli_runner, ["--state", str(missing), "-w", "src", *command])
    assert code == EXIT_NOINPUT
    assert "State file not found" in out
