"""
Graph-level findings: dependency cycles, unresolved relative imports and
files nothing imports.

These are heuristics over the lexical graph. Unused-file detection is an
allow-list of entry-point filenames, not reachability from a declared entry,
and cycles are de-duplicated by their serialized path only, so one loop
entered from two different ancestors can be reported twice.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Dict, List, Literal, Mapping, Sequence

from crossfile.analysis.dependency_graph import DependencyGraph, FileNode, MissingDependency, build_nodes
from crossfile.parsing.ir import SourceFile
from crossfile.utils.logging_config import get_logger

logger = get_logger(__name__)

ENTRY_PATTERNS = (
    re.compile(r"^index\."),
    re.compile(r"^main\."),
    re.compile(r"^app\."),
    re.compile(r"^src/index\."),
    re.compile(r"^src/main\."),
    re.compile(r"page\.(tsx?|jsx?)$"),
    re.compile(r"layout\.(tsx?|jsx?)$"),
)

IssueType = Literal["circular", "missing", "unused"]
IssueSeverity = Literal["error", "warning"]


@dataclass(frozen=True)
class DependencyIssue:
    type: IssueType
    severity: IssueSeverity
    message: str
    files: tuple[str, ...]


def is_entry_point(path: str) -> bool:
    return any(p.search(path) for p in ENTRY_PATTERNS)


def detect_cycles(nodes: Mapping[str, FileNode]) -> List[List[str]]:
    cycles: List[List[str]] = []
    seen: set[str] = set()
    visited: set[str] = set()
    on_stack: set[str] = set()

    for start in nodes:
        if start in visited:
            continue
        visited.add(start)
        on_stack.add(start)
        trail = [start]
        stack = [(start, iter(nodes[start].dependencies))]
        while stack:
            current, deps = stack[-1]
            descended = False
            for dep in deps:
                if dep not in visited:
                    visited.add(dep)
                    on_stack.add(dep)
                    trail.append(dep)
                    dep_node = nodes.get(dep)
                    stack.append((dep, iter(dep_node.dependencies if dep_node else ())))
                    descended = True
                    break
                if dep in on_stack:
                    cycle = trail[trail.index(dep):] + [dep]
                    key = "->".join(cycle)
                    if key not in seen:
                        seen.add(key)
                        cycles.append(cycle)
            if not descended:
                stack.pop()
                trail.pop()
                on_stack.discard(current)
    return cycles


def detect_missing(nodes: Mapping[str, FileNode]) -> List[MissingDependency]:
    return [
        MissingDependency(file=path, missing_specifier=spec)
        for path, node in nodes.items()
        for spec in node.missing
    ]


def detect_unused(nodes: Mapping[str, FileNode]) -> List[str]:
    return [path for path, node in nodes.items() if not node.dependents and not is_entry_point(path)]


def analyze_graph(nodes: Dict[str, FileNode]) -> DependencyGraph:
    graph = DependencyGraph(
        nodes=nodes,
        cycles=detect_cycles(nodes),
        missing=detect_missing(nodes),
        unused=detect_unused(nodes),
    )
    logger.debug(
        "Graph analysis: %d cycles, %d missing, %d unused",
        len(graph.cycles), len(graph.missing), len(graph.unused),
    )
    return graph


def build_dependency_graph(files: Sequence[SourceFile], max_workers: int | None = None) -> DependencyGraph:
    return analyze_graph(build_nodes(files, max_workers=max_workers))


def dependency_issues(graph: DependencyGraph) -> List[DependencyIssue]:
    issues: List[DependencyIssue] = []
    for cycle in graph.cycles:
        issues.append(DependencyIssue(
            type="circular",
            severity="error",
            message=f"Circular dependency detected: {' -> '.join(cycle)}",
            files=tuple(cycle),
        ))
    for m in graph.missing:
        issues.append(DependencyIssue(
            type="missing",
            severity="error",
            message=f'Missing dependency "{m.missing_specifier}" in {m.file}',
            files=(m.file,),
        ))
    for path in graph.unused:
        issues.append(DependencyIssue(
            type="unused",
            severity="warning",
            message=f'File "{path}" is not imported by any other file',
            files=(path,),
        ))
    return issues
