from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Sequence, Tuple

from crossfile.analysis.dependency_graph import DependencyGraph
from crossfile.analysis.detectors.complexity import ComplexityFinding, detect_complexity
from crossfile.analysis.detectors.dead_code import DeadCodeFinding, detect_dead_code
from crossfile.analysis.detectors.duplication import DuplicateFinding, detect_duplicates
from crossfile.analysis.detectors.redundancy import RedundantFinding, detect_redundancy
from crossfile.core.config import AnalysisBudget
from crossfile.parsing.ir import SourceFile
from crossfile.presets import DEFAULT_RULES
from crossfile.utils.logging_config import LogContext, get_logger

logger = get_logger(__name__)

PerFile = Tuple[List[DeadCodeFinding], List[RedundantFinding], List[ComplexityFinding]]


@dataclass
class QualityReport:
    duplicates: List[DuplicateFinding] = field(default_factory=list)
    dead_code: List[DeadCodeFinding] = field(default_factory=list)
    redundant: List[RedundantFinding] = field(default_factory=list)
    complexity: List[ComplexityFinding] = field(default_factory=list)
    truncated: bool = False
    truncation_reasons: List[str] = field(default_factory=list)


def _rule(rules: Mapping[str, Any] | None, section: str, key: str) -> Any:
    value = ((rules or {}).get(section) or {}).get(key)
    return DEFAULT_RULES[section][key] if value is None else value


def _scan_file(f: SourceFile, exports: Sequence[str], warn_at: int) -> PerFile:
    return (
        detect_dead_code(f, exports),
        detect_redundancy(f),
        detect_complexity(f, warn_at=warn_at),
    )


def analyze_quality(
    files: Sequence[SourceFile],
    graph: DependencyGraph,
    rules: Mapping[str, Any] | None = None,
    budget: AnalysisBudget | None = None,
    max_workers: int | None = None,
) -> QualityReport:
    budget = budget or AnalysisBudget.from_rules(rules)
    warn_at = int(_rule(rules, "complexity", "warn_at"))
    report = QualityReport()

    def exports_of(f: SourceFile) -> Sequence[str]:
        node = graph.nodes.get(f.path)
        return node.exports if node else ()

    with LogContext(logger, "Per-file quality scan"):
        if max_workers and max_workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                slots = list(executor.map(lambda f: _scan_file(f, exports_of(f), warn_at), files))
        else:
            slots = [_scan_file(f, exports_of(f), warn_at) for f in files]
    for dead, redundant, complexity in slots:
        report.dead_code.extend(dead)
        report.redundant.extend(redundant)
        report.complexity.extend(complexity)

    with LogContext(logger, "Cross-file duplicate detection"):
        dup = detect_duplicates(
            files,
            window=int(_rule(rules, "duplication", "window")),
            min_chars=int(_rule(rules, "duplication", "min_chars")),
            threshold=float(_rule(rules, "duplication", "similarity_threshold")),
            budget=budget,
        )
    report.duplicates = dup.findings
    report.truncated = dup.truncated
    report.truncation_reasons = list(dup.reasons)
    logger.debug(
        "Quality: %d duplicates (%d comparisons), %d dead, %d redundant, %d complex",
        len(report.duplicates), dup.comparisons, len(report.dead_code),
        len(report.redundant), len(report.complexity),
    )
    return report
