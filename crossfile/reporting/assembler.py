from __future__ import annotations
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Sequence, Tuple

from crossfile.analysis.dependency_graph import DependencyGraph
from crossfile.analysis.graph_analyzer import DependencyIssue, dependency_issues
from crossfile.analysis.quality import QualityReport
from crossfile.analysis.severity import Severity, fix_text, pick_severity, severity_rank
from crossfile.presets import DEFAULT_RULES


@dataclass(frozen=True)
class ReportIssue:
    category: str
    severity: Severity
    message: str
    files: Tuple[str, ...]
    line: Optional[int] = None
    suggestion: str = ""


def _from_dependency(issue: DependencyIssue) -> ReportIssue:
    return ReportIssue(
        category=issue.type,
        severity=issue.severity,
        message=issue.message,
        files=issue.files,
        suggestion=fix_text(issue.type),
    )


def assemble_issues(
    graph: DependencyGraph,
    quality: QualityReport,
    rules: Mapping[str, Any] | None = None,
    dep_issues: Sequence[DependencyIssue] | None = None,
) -> List[ReportIssue]:
    """
    Flatten graph issues and quality findings into one list ordered by
    severity (error, warning, info); input order is kept within a severity.
    """
    error_at = ((rules or {}).get("complexity") or {}).get("error_at")
    error_at = int(DEFAULT_RULES["complexity"]["error_at"] if error_at is None else error_at)
    issues: List[ReportIssue] = [
        _from_dependency(d) for d in (dep_issues if dep_issues is not None else dependency_issues(graph))
    ]

    for dup in quality.duplicates:
        a, b = dup.blocks
        issues.append(ReportIssue(
            category="duplicate",
            severity=pick_severity("duplicate"),
            message=(
                f"{dup.similarity * 100:.0f}% similar code in {a.file} (lines {a.start_line}-{a.end_line}) "
                f"and {b.file} (lines {b.start_line}-{b.end_line})"
            ),
            files=(a.file, b.file),
            line=a.start_line,
            suggestion=fix_text("duplicate", {"other_file": b.file}),
        ))

    for dead in quality.dead_code:
        issues.append(ReportIssue(
            category="dead_code",
            severity=pick_severity("dead_code"),
            message=f'Unused {dead.type} "{dead.name}" in {dead.file}: {dead.reason}',
            files=(dead.file,),
            line=dead.line,
            suggestion=fix_text("dead_code", {"kind": dead.type}),
        ))

    for red in quality.redundant:
        issues.append(ReportIssue(
            category="redundant",
            severity=pick_severity("redundant"),
            message=f"{red.message} in {red.file}",
            files=(red.file,),
            line=red.line,
            suggestion=red.suggestion,
        ))

    for comp in quality.complexity:
        issues.append(ReportIssue(
            category="complexity",
            severity=pick_severity("complexity", comp.complexity, error_at),
            message=f'Function "{comp.function}" in {comp.file} has cyclomatic complexity {comp.complexity}',
            files=(comp.file,),
            line=comp.line,
            suggestion=fix_text("complexity"),
        ))

    # sorted() is stable
    return sorted(issues, key=lambda i: severity_rank(i.severity))
