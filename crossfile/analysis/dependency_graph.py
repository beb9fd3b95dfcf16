from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Tuple
import json

import networkx as nx

from crossfile.analysis.resolver import resolve
from crossfile.parsing.ir import SourceFile
from crossfile.parsing.signatures import extract_signatures
from crossfile.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class FileNode:
    path: str
    imports: List[str] = field(default_factory=list)
    exports: List[str] = field(default_factory=list)
    dependencies: List[str] = field(default_factory=list)
    dependents: List[str] = field(default_factory=list)
    missing: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class MissingDependency:
    file: str
    missing_specifier: str


@dataclass
class DependencyGraph:
    nodes: Dict[str, FileNode] = field(default_factory=dict)
    cycles: List[List[str]] = field(default_factory=list)
    missing: List[MissingDependency] = field(default_factory=list)
    unused: List[str] = field(default_factory=list)


@dataclass
class DepMetrics:
    fan_in: Dict[str, int]
    fan_out: Dict[str, int]
    top_fan_in: List[Tuple[str, int]]
    top_fan_out: List[Tuple[str, int]]


def _build_node(f: SourceFile, file_set: frozenset[str]) -> FileNode:
    sig = extract_signatures(f.content, f.language)
    node = FileNode(path=f.path, imports=sig.imports, exports=sig.exports)
    for spec in sig.imports:
        res = resolve(spec, f.path, file_set, f.language)
        if res.kind == "resolved" and res.path not in node.dependencies:
            node.dependencies.append(res.path)
        elif res.kind == "unresolved":
            node.missing.append(spec)
    return node


def build_nodes(files: Sequence[SourceFile], max_workers: int | None = None) -> Dict[str, FileNode]:
    """
    Two passes: every FileNode first (optionally fanned out over threads, each
    worker filling its own slot), then ``dependents`` back-references once all
    nodes exist.
    """
    file_set = frozenset(f.path for f in files)
    if max_workers and max_workers > 1 and len(files) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            built = list(executor.map(lambda f: _build_node(f, file_set), files))
    else:
        built = [_build_node(f, file_set) for f in files]

    nodes: Dict[str, FileNode] = {n.path: n for n in built}
    for path, node in nodes.items():
        for dep in node.dependencies:
            dep_node = nodes.get(dep)
            if dep_node is not None and path not in dep_node.dependents:
                dep_node.dependents.append(path)
    logger.debug("Built %d nodes, %d edges", len(nodes), sum(len(n.dependencies) for n in nodes.values()))
    return nodes


def to_digraph(graph: DependencyGraph) -> nx.DiGraph:
    G = nx.DiGraph()
    for path, node in graph.nodes.items():
        G.add_node(path, exports=len(node.exports), missing=len(node.missing))
    G.add_edges_from(edges(graph))
    return G


def graph_metrics(graph: DependencyGraph, top: int = 10) -> DepMetrics:
    G = to_digraph(graph)
    fan_in = {str(n): int(G.in_degree(n)) for n in G.nodes}
    fan_out = {str(n): int(G.out_degree(n)) for n in G.nodes}
    return DepMetrics(
        fan_in=fan_in,
        fan_out=fan_out,
        top_fan_in=sorted(fan_in.items(), key=lambda x: x[1], reverse=True)[:top],
        top_fan_out=sorted(fan_out.items(), key=lambda x: x[1], reverse=True)[:top],
    )


def edges(graph: DependencyGraph) -> Iterable[Tuple[str, str]]:
    for path, node in graph.nodes.items():
        for dep in node.dependencies:
            yield path, dep


def write_dep_json(G: nx.DiGraph, path: Path) -> Path:
    data = {
        "nodes": [{"id": str(n), **G.nodes[n]} for n in G.nodes],
        "edges": [{"source": str(u), "target": str(v)} for u, v in G.edges],
    }
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")
    return path
