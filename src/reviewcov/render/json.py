from __future__ import annotations

import json
from typing import TYPE_CHECKING

from jsonschema import validate

from reviewcov import __version__
from reviewcov.config import get_schema

if TYPE_CHECKING:
    from reviewcov.engine.tree import CoverageNode, CoverageSummary, CoverageTree


def _summary_payload(summary: CoverageSummary) -> dict[str, int]:
    return {
        "covered_lines": summary.covered_lines,
        "total_lines": summary.total_lines,
        "tracked_files": summary.tracked_files,
        "included_files": summary.included_files,
        "ignored_entries": summary.ignored_entries,
    }


def _node_payload(tree: CoverageTree, node: CoverageNode) -> dict[str, object]:
    return {
        "kind": node.kind.value,
        "label": node.label,
        "uri": node.uri,
        "status": node.status.value if node.status is not None else None,
        "direct_ignore": node.direct_ignore,
        "effective_ignored": node.effective_ignored,
        "covered_lines": node.covered_lines,
        "total_lines": node.total_lines,
        "aggregate_covered": node.aggregate_covered,
        "aggregate_total": node.aggregate_total,
        "children": [_node_payload(tree, child) for child in tree.children(node)],
    }


def report_payload(tree: CoverageTree) -> dict[str, object]:
    schema = get_schema("report")
    payload: dict[str, object] = {
        "schema": str(schema["$id"]),
        "schema_version": 1,
        "tool": {"name": "reviewcov", "version": __version__},
        "summary": _summary_payload(tree.summary),
        "roots": [_node_payload(tree, root) for root in tree.roots],
    }
    validate(payload, schema)
    return payload


def format_json(tree: CoverageTree) -> str:
    """Render a coverage tree as schema-validated JSON."""
    return json.dumps(report_payload(tree), indent=2, sort_keys=True)


__all__ = ["format_json", "report_payload"]
