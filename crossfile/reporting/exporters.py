from __future__ import annotations
from pathlib import Path
import json

from crossfile.analysis.dependency_graph import DependencyGraph, to_digraph, write_dep_json
from crossfile.reporting.schema import build_report


def export_dependency_graph(graph: DependencyGraph, reports_dir: Path) -> Path:
    out = reports_dir / "dep-graph.json"
    return write_dep_json(to_digraph(graph), out)


def export_json_report(result, reports_dir: Path) -> Path:
    reports_dir.mkdir(parents=True, exist_ok=True)
    out = reports_dir / "report.json"
    payload = build_report(result)
    out.write_text(json.dumps(payload.model_dump(by_alias=True), indent=2), encoding="utf-8")
    return out
