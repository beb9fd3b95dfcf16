from __future__ import annotations
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Severity = Literal["error", "warning", "info"]


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SourceFileJSON(_Model):
    path: str = Field(..., description="Project-relative path, forward slashes")
    content: str
    language: Optional[str] = Field(None, description="Free-form language tag, usually the file extension")


class AnalyzeRequest(_Model):
    files: List[SourceFileJSON]
    rules: Optional[Dict[str, Any]] = Field(None, description="Overrides merged over the default rules")


class FileNodeJSON(_Model):
    path: str
    imports: List[str]
    exports: List[str]
    dependencies: List[str]
    dependents: List[str]
    missing: List[str]


class MissingDependencyJSON(_Model):
    file: str
    missing_specifier: str


class DependencyIssueJSON(_Model):
    type: Literal["circular", "missing", "unused"]
    severity: Literal["error", "warning"]
    message: str
    files: List[str]


class GraphJSON(_Model):
    nodes: Dict[str, FileNodeJSON]
    cycles: List[List[str]]
    missing: List[MissingDependencyJSON]
    unused: List[str]


class CodeBlockJSON(_Model):
    content: str
    start_line: int = Field(..., ge=1)
    end_line: int = Field(..., ge=1)
    file: str


class DuplicateJSON(_Model):
    blocks: List[CodeBlockJSON]
    similarity: float = Field(..., ge=0.0, le=1.0)
    lines: int


class DeadCodeJSON(_Model):
    type: Literal["import", "function", "variable", "class"]
    name: str
    file: str
    line: int = Field(..., ge=1)
    reason: str


class RedundantJSON(_Model):
    type: Literal["duplicate_logic", "unnecessary_complexity", "unused_code", "redundant_condition"]
    file: str
    line: int = Field(..., ge=1)
    message: str
    suggestion: str


class ComplexityJSON(_Model):
    file: str
    function: str
    line: int = Field(..., ge=1)
    complexity: int = Field(..., ge=1)


class QualityJSON(_Model):
    duplicates: List[DuplicateJSON]
    dead_code: List[DeadCodeJSON]
    redundant_code: List[RedundantJSON]
    complexity_issues: List[ComplexityJSON]
    truncated: bool = False


class IssueJSON(_Model):
    category: str
    severity: Severity
    message: str
    files: List[str]
    line: Optional[int] = None
    suggestion: str = ""


class SummaryJSON(_Model):
    files_analyzed: int = Field(..., ge=0)
    total_issues: int = Field(..., ge=0)
    by_severity: Dict[str, int]
    by_category: Dict[str, int]


class ReportJSON(_Model):
    summary: SummaryJSON
    issues: List[IssueJSON]
    dependency_graph: GraphJSON
    dependency_issues: List[DependencyIssueJSON]
    quality: QualityJSON
    digest: str
    truncated: bool = False
    budget_events: List[str] = Field(default_factory=list)


def _counts(values: List[str]) -> Dict[str, int]:
    out: Dict[str, int] = {}
    for v in values:
        out[v] = out.get(v, 0) + 1
    return out


def build_report(result: Any) -> ReportJSON:
    """Convert an ``AnalysisResult`` into its JSON model."""
    graph = result.graph
    quality = result.quality
    return ReportJSON(
        summary=SummaryJSON(
            files_analyzed=result.files_analyzed,
            total_issues=len(result.issues),
            by_severity=_counts([i.severity for i in result.issues]),
            by_category=_counts([i.category for i in result.issues]),
        ),
        issues=[
            IssueJSON(
                category=i.category, severity=i.severity, message=i.message,
                files=list(i.files), line=i.line, suggestion=i.suggestion,
            )
            for i in result.issues
        ],
        dependency_graph=GraphJSON(
            nodes={
                n.path: FileNodeJSON(
                    path=n.path, imports=n.imports, exports=n.exports,
                    dependencies=n.dependencies, dependents=n.dependents, missing=n.missing,
                )
                for n in graph.nodes.values()
            },
            cycles=graph.cycles,
            missing=[MissingDependencyJSON(file=m.file, missing_specifier=m.missing_specifier) for m in graph.missing],
            unused=graph.unused,
        ),
        dependency_issues=[
            DependencyIssueJSON(type=d.type, severity=d.severity, message=d.message, files=list(d.files))
            for d in result.dependency_issues
        ],
        quality=QualityJSON(
            duplicates=[
                DuplicateJSON(
                    blocks=[
                        CodeBlockJSON(content=b.content, start_line=b.start_line, end_line=b.end_line, file=b.file)
                        for b in d.blocks
                    ],
                    similarity=d.similarity,
                    lines=d.lines,
                )
                for d in quality.duplicates
            ],
            dead_code=[
                DeadCodeJSON(type=d.type, name=d.name, file=d.file, line=d.line, reason=d.reason)
                for d in quality.dead_code
            ],
            redundant_code=[
                RedundantJSON(type=r.type, file=r.file, line=r.line, message=r.message, suggestion=r.suggestion)
                for r in quality.redundant
            ],
            complexity_issues=[
                ComplexityJSON(file=c.file, function=c.function, line=c.line, complexity=c.complexity)
                for c in quality.complexity
            ],
            truncated=quality.truncated,
        ),
        digest=result.digest,
        truncated=result.truncated,
        budget_events=list(result.budget_events),
    )


def to_payload(result: Any) -> dict:
    return build_report(result).model_dump(by_alias=True)
