from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple
import re
import time

from crossfile.core.config import AnalysisBudget
from crossfile.parsing.ir import SourceFile
from crossfile.utils.logging_config import get_logger

logger = get_logger(__name__)

_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_LINE_COMMENT_RE = re.compile(r"//[^\n]*")
_HASH_COMMENT_RE = re.compile(r"^[ \t]*#[^\n]*", re.MULTILINE)
_WS_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class CodeBlock:
    content: str
    start_line: int
    end_line: int
    file: str


@dataclass(frozen=True)
class DuplicateFinding:
    blocks: Tuple[CodeBlock, CodeBlock]
    similarity: float
    lines: int


@dataclass
class DuplicationResult:
    findings: List[DuplicateFinding] = field(default_factory=list)
    truncated: bool = False
    reasons: List[str] = field(default_factory=list)
    comparisons: int = 0


def normalize(text: str) -> str:
    """Strip line and block comments, then collapse whitespace runs."""
    text = _BLOCK_COMMENT_RE.sub("", text or "")
    text = _LINE_COMMENT_RE.sub("", text)
    text = _HASH_COMMENT_RE.sub("", text)
    return _WS_RE.sub(" ", text).strip()


def similarity(a: str, b: str) -> float:
    """Equal characters at the same offset divided by the longer length."""
    max_len = max(len(a), len(b))
    if max_len == 0:
        return 1.0
    matches = sum(1 for x, y in zip(a, b) if x == y)
    return matches / max_len


def code_blocks(f: SourceFile, window: int = 5, min_chars: int = 50) -> List[CodeBlock]:
    lines = f.content.split("\n")
    out: List[CodeBlock] = []
    for i in range(0, len(lines) - window + 1):
        content = normalize("\n".join(lines[i:i + window]))
        if len(content) < min_chars:
            continue
        out.append(CodeBlock(content=content, start_line=i + 1, end_line=i + window, file=f.path))
    return out


def detect_duplicates(
    files: Sequence[SourceFile],
    window: int = 5,
    min_chars: int = 50,
    threshold: float = 0.8,
    budget: AnalysisBudget | None = None,
) -> DuplicationResult:
    budget = budget or AnalysisBudget()
    result = DuplicationResult()
    start = time.monotonic()

    per_file: List[List[CodeBlock]] = []
    for f in files:
        blocks = code_blocks(f, window=window, min_chars=min_chars)
        if len(blocks) > budget.max_windows_per_file:
            logger.warning("%s: %d windows capped at %d", f.path, len(blocks), budget.max_windows_per_file)
            result.truncated = True
            result.reasons.append(
                f"{f.path}: {len(blocks)} windows capped at {budget.max_windows_per_file}"
            )
            blocks = blocks[:budget.max_windows_per_file]
        per_file.append(blocks)

    for i in range(len(per_file)):
        for j in range(i + 1, len(per_file)):
            for a, b in _candidate_pairs(per_file[i], per_file[j], threshold):
                if result.comparisons >= budget.max_comparisons:
                    return _stop(result, f"comparison budget of {budget.max_comparisons} reached")
                if result.comparisons % 1000 == 0 and time.monotonic() - start > budget.time_budget_s:
                    return _stop(result, f"time budget of {budget.time_budget_s}s reached")
                result.comparisons += 1
                sim = similarity(a.content, b.content)
                if sim > threshold:
                    result.findings.append(DuplicateFinding(blocks=(a, b), similarity=sim, lines=window))
                    if len(result.findings) >= budget.max_duplicates:
                        return _stop(result, f"duplicate cap of {budget.max_duplicates} reached")
    return result


def _candidate_pairs(
    left: List[CodeBlock], right: List[CodeBlock], threshold: float
) -> Iterable[Tuple[CodeBlock, CodeBlock]]:
    # similarity <= min_len / max_len, so pairs whose length ratio is already
    # at or under the threshold can never be reported
    for a in left:
        la = len(a.content)
        for b in right:
            lb = len(b.content)
            if min(la, lb) <= threshold * max(la, lb):
                continue
            yield a, b


def _stop(result: DuplicationResult, reason: str) -> DuplicationResult:
    logger.warning("Duplicate detection truncated: %s", reason)
    result.truncated = True
    result.reasons.append(reason)
    return result
