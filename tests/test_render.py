from __future__ import annotations

import json

import pytest
from jsonschema import validate

from reviewcov import __version__
from reviewcov.config import get_schema
from reviewcov.engine.collaborators import WorkspaceFolder
from reviewcov.engine.tree import CoverageNode, CoverageSummary, CoverageTree, FileCoverageInfo, build_tree
from reviewcov.model.metrics import format_coverage, pct
from reviewcov.model.ranges import LineRange
from reviewcov.model.types import Category, EntryKind, FileStatus
from reviewcov.render.human import (
    ALL_IGNORED,
    NO_TRACKED_FILES,
    describe_node,
    render_ranges,
    render_tree,
    summary_message,
)
from reviewcov.render.json import format_json, report_payload

WS = WorkspaceFolder(uri="file:///ws", name="ws")


def _tree(ignored: dict[str, EntryKind] | None = None) -> CoverageTree:
    infos = [
        FileCoverageInfo("file:///ws/src/a.py", WS, covered_lines=3, total_lines=9, status=FileStatus.CLEAR),
        FileCoverageInfo("file:///ws/src/b.py", WS, covered_lines=4, total_lines=4, status=FileStatus.OK),
        FileCoverageInfo("file:///ws/empty.py", WS, covered_lines=0, total_lines=0),
    ]
    return build_tree(infos, ignored or {})


def _file_node(tree: CoverageTree, uri: str) -> CoverageNode:
    node = tree.node_for_uri(uri)
    assert node is not None
    return node


# --------------------------------------------------------------------------- #
# metrics                                                                     #
# --------------------------------------------------------------------------- #


@pytest.mark.parametrize(
    ("covered", "total", "expected"),
    [
        (0, 0, "—"),
        (5, 5, "100% (5/5)"),
        (1, 3, "33.3% (1/3)"),
        (999, 1000, "99.9% (999/1000)"),
        (0, 7, "0.0% (0/7)"),
    ],
)
def test_format_coverage(covered: int, total: int, expected: str) -> None:
    assert format_coverage(covered, total) == expected


def test_pct_defaults_to_full_without_lines() -> None:
    assert pct(0, 0) == 100.0
    assert pct(1, 4) == 25.0


# --------------------------------------------------------------------------- #
# human                                                                       #
# --------------------------------------------------------------------------- #


def test_describe_node_marks_direct_and_inherited_ignores() -> None:
    tree = _tree({"file:///ws/src": EntryKind.FOLDER})
    assert describe_node(_file_node(tree, "file:///ws/src")) == "— · ignored"
    assert describe_node(_file_node(tree, "file:///ws/src/a.py")) == "33.3% (3/9) · excluded"
    assert describe_node(_file_node(tree, "file:///ws/empty.py")) == "—"


def test_summary_messages() -> None:
    assert summary_message(CoverageSummary()) == NO_TRACKED_FILES
    assert summary_message(CoverageSummary(tracked_files=2, included_files=0)) == ALL_IGNORED
    assert summary_message(CoverageSummary(tracked_files=2, included_files=1)) is None


def test_render_tree_plain_text() -> None:
    text = render_tree(_tree(), color=False)
    assert "\x1b[" not in text
    assert text.splitlines()[0] == "Review coverage  53.8% (7/13)"
    assert "ws  53.8% (7/13)" in text
    assert "src  53.8% (7/13)" in text
    assert "a.py  33.3% (3/9)" in text
    assert "b.py  100% (4/4)  ok" in text
    assert "empty.py  —" in text
    assert NO_TRACKED_FILES not in text


def test_render_tree_messages() -> None:
    assert NO_TRACKED_FILES in render_tree(build_tree([], {}), color=False)
    assert ALL_IGNORED in render_tree(_tree({"file:///ws": EntryKind.FOLDER}), color=False)


def test_render_ranges_is_one_based() -> None:
    text = render_ranges(
        "ws/src/a.py",
        {Category.OK: (LineRange(0, 4),), Category.WARNING: (), Category.DANGER: (LineRange(9, 9),)},
        status=FileStatus.WARNING,
        color=False,
    )
    assert "ws/src/a.py" in text
    assert "warning" in text
    assert "1-5" in text
    assert "10" in text
    assert "danger" in text


# --------------------------------------------------------------------------- #
# json                                                                        #
# --------------------------------------------------------------------------- #


def test_report_payload_validates_against_schema() -> None:
    payload = report_payload(_tree({"file:///ws/src/a.py": EntryKind.FILE}))
    validate(payload, get_schema("report"))
    assert payload["tool"] == {"name": "reviewcov", "version": __version__}
    assert payload["schema_version"] == 1
    assert payload["summary"] == {
        "covered_lines": 4,
        "total_lines": 4,
        "tracked_files": 3,
        "included_files": 2,
        "ignored_entries": 1,
    }


def test_format_json_nests_children() -> None:
    data = json.loads(format_json(_tree()))
    (root,) = data["roots"]
    assert root["kind"] == "workspace"
    assert root["aggregate_total"] == 13
    labels = [child["label"] for child in root["children"]]
    assert labels == ["src", "empty.py"]
    src = root["children"][0]
    assert [c["status"] for c in src["children"]] == ["clear", "ok"]
    assert root["children"][1]["status"] is None
