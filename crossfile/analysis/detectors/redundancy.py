from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Literal, Optional, Sequence, Tuple

from crossfile.parsing.ir import SourceFile
from crossfile.parsing.languages import ECMASCRIPT, JAVA, PHP, PYTHON, language_family

RedundantType = Literal["duplicate_logic", "unnecessary_complexity", "unused_code", "redundant_condition"]

# (lines, index) -> matched?
LineCheck = Callable[[Sequence[str], int], bool]


@dataclass(frozen=True)
class RedundantFinding:
    type: RedundantType
    file: str
    line: int
    message: str
    suggestion: str


@dataclass(frozen=True)
class Rule:
    type: RedundantType
    check: LineCheck
    message: str
    suggestion: str


def _rx(pattern: str) -> LineCheck:
    compiled = re.compile(pattern)
    return lambda lines, i: compiled.search(lines[i]) is not None


def _previous_statement(lines: Sequence[str], i: int) -> Optional[str]:
    for j in range(i - 1, -1, -1):
        text = lines[j].strip()
        if text and not text.startswith("#"):
            return lines[j]
    return None


def _pass_after_statement(lines: Sequence[str], i: int) -> bool:
    line = lines[i]
    if line.strip() != "pass":
        return False
    prev = _previous_statement(lines, i)
    if prev is None:
        return False
    indent = len(line) - len(line.lstrip())
    prev_indent = len(prev) - len(prev.lstrip())
    return prev_indent == indent and not prev.rstrip().endswith(":")


ALWAYS_TRUE = Rule(
    "redundant_condition", _rx(r"\bif\s*\(\s*true\s*\)"),
    "Condition is always true", "Remove the if statement and keep only the code block",
)
ALWAYS_FALSE = Rule(
    "redundant_condition", _rx(r"\bif\s*\(\s*false\s*\)"),
    "Condition is always false", "Remove this entire if block as it will never execute",
)
DOUBLE_NEGATION = Rule(
    "unnecessary_complexity", _rx(r"!!\s*[\w$]"),
    "Double negation detected", "Use Boolean() or remove unnecessary negations",
)

RULES: Dict[str, Tuple[Rule, ...]] = {
    ECMASCRIPT: (
        ALWAYS_TRUE,
        ALWAYS_FALSE,
        DOUBLE_NEGATION,
        Rule("unused_code", _rx(r"\bconsole\.(?:log|debug|info|warn)\s*\("),
             "Console statement found", "Remove console statements before production deployment"),
    ),
    JAVA: (
        ALWAYS_TRUE,
        ALWAYS_FALSE,
        Rule("unused_code", _rx(r"\bSystem\.out\.println\b"),
             "Debug print statement found", "Remove System.out.println before production"),
    ),
    PHP: (
        ALWAYS_TRUE,
        ALWAYS_FALSE,
        DOUBLE_NEGATION,
        Rule("unused_code", _rx(r"\b(?:var_dump|print_r)\s*\("),
             "Debug statement found", "Remove var_dump/print_r before production"),
    ),
    PYTHON: (
        Rule("redundant_condition", _rx(r"^\s*(?:el)?if\s+True\s*:"),
             "Condition is always True", "Remove the if statement and unindent the code block"),
        Rule("redundant_condition", _rx(r"^\s*(?:el)?if\s+False\s*:"),
             "Condition is always False", "Remove this entire if block as it will never execute"),
        Rule("unused_code", _pass_after_statement,
             "Empty pass statement", "Remove pass or add implementation"),
    ),
}


def detect_redundancy(f: SourceFile) -> List[RedundantFinding]:
    rules = RULES.get(language_family(f.language), ())
    if not rules:
        return []
    lines = f.content.split("\n")
    out: List[RedundantFinding] = []
    for i in range(len(lines)):
        for rule in rules:
            if rule.check(lines, i):
                out.append(RedundantFinding(
                    type=rule.type, file=f.path, line=i + 1,
                    message=rule.message, suggestion=rule.suggestion,
                ))
    return out
