from __future__ import annotations
from dataclasses import dataclass
from typing import Iterable, List
import re

from crossfile.parsing.functions import extract_functions
from crossfile.parsing.ir import FunctionIR, SourceFile

# each match adds one decision point; "else if" also counts through its "if"
DECISION_PATTERNS = (
    re.compile(r"\bif\b"),
    re.compile(r"\belse\s+if\b"),
    re.compile(r"\belif\b"),
    re.compile(r"\bwhile\b"),
    re.compile(r"\bfor\b"),
    re.compile(r"\bcase\b"),
    re.compile(r"\bcatch\b"),
    re.compile(r"&&"),
    re.compile(r"\|\|"),
    re.compile(r"\?\s*[^\s:?.][^:\n]*:"),
)


@dataclass(frozen=True)
class ComplexityFinding:
    file: str
    function: str
    line: int
    complexity: int


def cyclomatic_complexity(code: str) -> int:
    return 1 + sum(len(p.findall(code or "")) for p in DECISION_PATTERNS)


def score_functions(functions: Iterable[FunctionIR]) -> List[tuple[FunctionIR, int]]:
    return [(fn, cyclomatic_complexity(fn.body)) for fn in functions]


def detect_complexity(f: SourceFile, warn_at: int = 10) -> List[ComplexityFinding]:
    findings: List[ComplexityFinding] = []
    for fn, complexity in score_functions(extract_functions(f.content, f.language)):
        if complexity > warn_at:
            findings.append(ComplexityFinding(
                file=f.path,
                function=fn.name,
                line=fn.line,
                complexity=complexity,
            ))
    return findings
