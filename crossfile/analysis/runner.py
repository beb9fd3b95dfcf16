from __future__ import annotations

import typing as t
from dataclasses import dataclass, field

from crossfile.analysis.dependency_graph import DependencyGraph
from crossfile.analysis.graph_analyzer import DependencyIssue, build_dependency_graph, dependency_issues
from crossfile.analysis.quality import QualityReport, analyze_quality
from crossfile.core.config import AnalysisBudget
from crossfile.core.errors import BudgetExceeded, InvalidInput
from crossfile.parsing.ir import SourceFile, as_source_file
from crossfile.presets import DEFAULT_RULES, merge_rules
from crossfile.reporting.assembler import ReportIssue, assemble_issues
from crossfile.reporting.digest import build_digest
from crossfile.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)


@dataclass
class AnalysisResult:
    graph: DependencyGraph
    quality: QualityReport
    dependency_issues: list[DependencyIssue]
    issues: list[ReportIssue]
    digest: str
    truncated: bool = False
    budget_events: list[str] = field(default_factory=list)
    files_analyzed: int = 0


def _coerce_files(files: t.Iterable[t.Any]) -> list[SourceFile]:
    if isinstance(files, (str, bytes)) or not isinstance(files, t.Iterable):
        raise InvalidInput(f"expected a collection of files, got {type(files).__name__}")
    out: list[SourceFile] = []
    seen: set[str] = set()
    for obj in files:
        f = as_source_file(obj)
        if f.path in seen:
            raise InvalidInput(f"duplicate file path {f.path!r}")
        seen.add(f.path)
        out.append(f)
    return out


def run_analysis(
    files: t.Iterable[t.Any],
    rules: t.Mapping[str, t.Any] | None = None,
    budget: AnalysisBudget | None = None,
    max_workers: int | None = None,
    raise_on_budget: bool = False,
) -> AnalysisResult:
    """
    Analyze one file set end to end: dependency graph, graph issues, quality
    findings, the merged issue list and the project digest.

    Budget hits truncate the work and are recorded in ``budget_events``; with
    ``raise_on_budget`` they raise ``BudgetExceeded`` carrying the partial
    result instead.
    """
    rules = merge_rules(DEFAULT_RULES, rules)
    budget = budget or AnalysisBudget.from_rules(rules)
    source_files = _coerce_files(files)
    events: list[str] = []
    limit: t.Any = None

    if len(source_files) > budget.max_files:
        reason = f"file budget of {budget.max_files} reached, {len(source_files) - budget.max_files} files skipped"
        logger.warning("Analysis truncated: %s", reason)
        events.append(reason)
        limit = budget.max_files
        source_files = source_files[:budget.max_files]

    logger.info("Analyzing %d files", len(source_files))
    with LogContext(logger, "Dependency analysis"):
        graph = build_dependency_graph(source_files, max_workers=max_workers)
        dep_issues = dependency_issues(graph)
    with LogContext(logger, "Quality analysis"):
        quality = analyze_quality(source_files, graph, rules=rules, budget=budget, max_workers=max_workers)
    if quality.truncated:
        events.extend(quality.truncation_reasons)

    issues = assemble_issues(graph, quality, rules=rules, dep_issues=dep_issues)
    digest = build_digest(source_files, graph, quality, dep_issues, rules=rules)
    result = AnalysisResult(
        graph=graph,
        quality=quality,
        dependency_issues=dep_issues,
        issues=issues,
        digest=digest,
        truncated=bool(events),
        budget_events=events,
        files_analyzed=len(source_files),
    )
    logger.info(
        "Analysis done: %d nodes, %d issues%s",
        len(graph.nodes), len(issues), " (truncated)" if result.truncated else "",
    )
    if raise_on_budget and events:
        raise BudgetExceeded(events[0], limit=limit, partial=result)
    return result
