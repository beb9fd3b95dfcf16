from __future__ import annotations
from pathlib import Path
from typing import Dict, List

from crossfile.analysis.dependency_graph import graph_metrics
from crossfile.analysis.severity import explain
from crossfile.reporting.assembler import ReportIssue


def _toc() -> str:
    return (
        "\n- [Summary](#summary)\n"
        "- [Top issues](#top-issues)\n"
        "- [Per-category](#per-category)\n"
        "- [Dependencies](#dependencies)\n"
    )


def _location(issue: ReportIssue) -> str:
    where = ", ".join(issue.files)
    return f"{where}:{issue.line}" if issue.line else where


def _cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " ")


def _summary(result) -> List[str]:
    counts: Dict[str, int] = {}
    for i in result.issues:
        counts[i.severity] = counts.get(i.severity, 0) + 1
    lines = ["\n## Summary\n"]
    lines.append(f"- Files analyzed: {result.files_analyzed}\n")
    lines.append(
        f"- Errors: {counts.get('error', 0)}  |  Warnings: {counts.get('warning', 0)}"
        f"  |  Info: {counts.get('info', 0)}\n"
    )
    if result.truncated:
        lines.append("- Analysis was truncated:\n")
        for event in result.budget_events:
            lines.append(f"  - {event}\n")
    return lines


def _top_issues(issues: List[ReportIssue], max_rows: int) -> List[str]:
    lines = ["\n## Top issues\n"]
    if not issues:
        lines.append("- No issues found.\n")
        return lines
    lines.append("| Severity | Category | Location | Message |\n")
    lines.append("|---|---|---|---|\n")
    for i in issues[:max_rows]:
        lines.append(f"| {i.severity} | {i.category} | {_cell(_location(i))} | {_cell(i.message)} |\n")
    return lines


def _per_category(issues: List[ReportIssue], top_n: int) -> List[str]:
    groups: Dict[str, List[ReportIssue]] = {}
    for i in issues:
        groups.setdefault(i.category, []).append(i)
    lines = ["\n## Per-category\n"]
    if not groups:
        lines.append("- No issues found.\n")
        return lines
    for cat, items in sorted(groups.items(), key=lambda kv: (-len(kv[1]), kv[0])):
        lines.append(f"\n### {cat.replace('_', ' ').capitalize()} ({len(items)})\n")
        lines.append(f"_{explain(cat)}_\n\n")
        for i in items[:top_n]:
            lines.append(f"- [{i.severity}] {i.message} ({_location(i)})\n")
            if i.suggestion:
                lines.append(f"  - Fix: {i.suggestion}\n")
    return lines


def _dependencies(result) -> List[str]:
    graph = result.graph
    metrics = graph_metrics(graph, top=5)
    lines = ["\n## Dependencies\n"]
    lines.append(f"- Nodes: {len(graph.nodes)}\n")
    lines.append(f"- Edges: {sum(metrics.fan_out.values())}\n")
    lines.append("- Top fan-in:\n")
    for n, v in metrics.top_fan_in:
        lines.append(f"  - {n}: {v}\n")
    lines.append("- Top fan-out:\n")
    for n, v in metrics.top_fan_out:
        lines.append(f"  - {n}: {v}\n")
    lines.append(f"- Cycles detected: {len(graph.cycles)}\n")
    for c in graph.cycles[:5]:
        lines.append(f"  - {' -> '.join(c)}\n")
    lines.append(f"- Missing dependencies: {len(graph.missing)}\n")
    lines.append(f"- Unused files: {len(graph.unused)}\n")
    return lines


def write_report(result, out_dir: Path, max_rows: int = 20, top_n: int = 10) -> Path:
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / "report.md"
    lines: List[str] = ["# Cross-file Analysis Report\n", _toc()]
    lines.extend(_summary(result))
    lines.extend(_top_issues(result.issues, max_rows))
    lines.extend(_per_category(result.issues, top_n))
    lines.extend(_dependencies(result))
    out_path.write_text("".join(lines), encoding="utf-8")
    return out_path
