"""
Plain-text project digest: the structure of the analyzed file set followed
by the issues found, capped per section so it stays readable on large
projects.
"""

from __future__ import annotations
from typing import Any, List, Mapping, Sequence
import re

from crossfile.analysis.dependency_graph import DependencyGraph
from crossfile.analysis.graph_analyzer import ENTRY_PATTERNS, DependencyIssue
from crossfile.analysis.quality import QualityReport
from crossfile.parsing.ir import SourceFile
from crossfile.presets import DEFAULT_RULES


# route handlers are entry points for the digest but may still be imported
DIGEST_ENTRY_PATTERNS = ENTRY_PATTERNS + (re.compile(r"route\.(tsx?|jsx?)$"),)


def entry_points(graph: DependencyGraph) -> List[str]:
    """Files matching an entry-point name or imported by nothing."""
    return [
        p for p, n in graph.nodes.items()
        if not n.dependents or any(pat.search(p) for pat in DIGEST_ENTRY_PATTERNS)
    ]


def _cap(rules: Mapping[str, Any] | None, key: str) -> int:
    value = ((rules or {}).get("digest") or {}).get(key)
    return int(DEFAULT_RULES["digest"][key] if value is None else value)


def _file_listing(files: Sequence[SourceFile], graph: DependencyGraph) -> List[str]:
    out: List[str] = []
    for f in files:
        node = graph.nodes.get(f.path)
        line = f"  - {f.path}"
        if node and node.dependencies:
            line += f" (imports: {len(node.dependencies)})"
        if node and node.dependents:
            line += f" (used by: {len(node.dependents)})"
        out.append(line)
    return out


def _dependency_section(dep_issues: Sequence[DependencyIssue]) -> List[str]:
    if not dep_issues:
        return []
    out = ["", "DEPENDENCY ISSUES DETECTED:"]
    for issue in dep_issues:
        out.append(f"- {issue.type.upper()}: {issue.message}")
        out.append(f"  Severity: {issue.severity}")
        out.append(f"  Affected Files: {', '.join(issue.files)}")
    return out


def _quality_section(quality: QualityReport, rules: Mapping[str, Any] | None) -> List[str]:
    out = ["", "CODE QUALITY ISSUES DETECTED:", ""]

    out.append(f"DUPLICATE CODE ({len(quality.duplicates)} instances):")
    for dup in quality.duplicates[:_cap(rules, "max_duplicates")]:
        out.append(f"- {dup.similarity * 100:.0f}% similar code found in:")
        for b in dup.blocks:
            out.append(f"  {b.file} (lines {b.start_line}-{b.end_line})")

    out.append("")
    out.append(f"DEAD CODE ({len(quality.dead_code)} instances):")
    for dead in quality.dead_code[:_cap(rules, "max_dead_code")]:
        out.append(f'- {dead.type} "{dead.name}" in {dead.file}:{dead.line} - {dead.reason}')

    out.append("")
    out.append(f"REDUNDANT CODE ({len(quality.redundant)} instances):")
    for red in quality.redundant[:_cap(rules, "max_redundant")]:
        out.append(f"- {red.file}:{red.line} - {red.message}")

    out.append("")
    out.append(f"HIGH COMPLEXITY ({len(quality.complexity)} functions):")
    for comp in quality.complexity[:_cap(rules, "max_complexity")]:
        out.append(f"- {comp.function} in {comp.file}:{comp.line} (complexity: {comp.complexity})")

    if quality.truncated:
        out.append("")
        out.append("NOTE: duplicate detection stopped early ({})".format("; ".join(quality.truncation_reasons)))
    return out


def build_digest(
    files: Sequence[SourceFile],
    graph: DependencyGraph,
    quality: QualityReport | None,
    dep_issues: Sequence[DependencyIssue],
    rules: Mapping[str, Any] | None = None,
) -> str:
    total_lines = sum(len(f.lines) for f in files)
    lines = [
        "PROJECT STRUCTURE:",
        f"Total Files: {len(files)}",
        f"Total Lines: {total_lines}",
    ]
    roots = entry_points(graph)
    if roots:
        lines.append(f"Entry Points: {', '.join(roots)}")
    lines.append("")
    lines.append("FILES IN PROJECT:")
    lines.extend(_file_listing(files, graph))
    lines.extend(_dependency_section(dep_issues))
    if quality is not None:
        lines.extend(_quality_section(quality, rules))
    return "\n".join(lines)
