from __future__ import annotations
import re
from collections import Counter
from typing import Iterable, List

from crossfile.parsing.ir import FunctionIR, ImportBinding, VariableIR
from crossfile.parsing.languages import LanguageRules, LineTemplate, rules_for

_TOKEN_RE = re.compile(r"[A-Za-z_$][\w$]*")


def identifier_counts(lines: Iterable[str]) -> Counter:
    """Occurrences of every identifier-shaped token; a leading ``$`` is ignored."""
    counts: Counter = Counter()
    for line in lines:
        for tok in _TOKEN_RE.findall(line):
            tok = tok.lstrip("$")
            if tok:
                counts[tok] += 1
    return counts


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip())


def brace_body(lines: List[str], start: int) -> tuple[str, int]:
    """Body from ``start`` until braces balance again; returns (text, last index)."""
    # arrow with an expression body on the declaration line
    if "=>" in lines[start] and "{" not in lines[start]:
        return lines[start], start
    depth = 0
    started = False
    end = start
    for i in range(start, len(lines)):
        line = lines[i]
        end = i
        for ch in line:
            if ch == "{":
                depth += 1
                started = True
            elif ch == "}":
                depth -= 1
        if started and depth <= 0:
            break
        if not started and line.rstrip().endswith(";"):
            break
    return "\n".join(lines[start:end + 1]), end


def indent_body(lines: List[str], start: int) -> tuple[str, int]:
    """Body from the ``def`` line until a non-blank line dedents below the first body line."""
    base = -1
    end = start
    for i in range(start + 1, len(lines)):
        line = lines[i]
        if not line.strip():
            continue
        indent = _indent(line)
        if base == -1:
            if indent <= _indent(lines[start]):
                break
            base = indent
        if indent < base:
            break
        end = i
    return "\n".join(lines[start:end + 1]), end


def _isolate(rules: LanguageRules, lines: List[str], index: int) -> tuple[str, int]:
    if rules.body_style == "indent":
        return indent_body(lines, index)
    return brace_body(lines, index)


def extract_functions(content: str, language: str | None) -> list[FunctionIR]:
    rules = rules_for(language)
    if rules is None or not rules.functions:
        return []
    lines = content.split("\n")
    out: list[FunctionIR] = []
    for idx, line in enumerate(lines):
        names: list[str] = []
        for template in rules.functions:
            for name in template(line):
                if name not in names:
                    names.append(name)
        if not names:
            continue
        body, end = _isolate(rules, lines, idx)
        for name in names:
            out.append(FunctionIR(name=name, line=idx + 1, end_line=end + 1, body=body))
    return out


def _scan_lines(content: str, templates: Iterable[LineTemplate]) -> Iterable[tuple[str, int]]:
    templates = tuple(templates)
    if not templates:
        return
    for idx, line in enumerate(content.split("\n")):
        for template in templates:
            for name in template(line):
                yield name, idx + 1


def extract_variables(content: str, language: str | None) -> list[VariableIR]:
    rules = rules_for(language)
    if rules is None:
        return []
    return [VariableIR(name=n, line=ln) for n, ln in _scan_lines(content, rules.variables)]


def extract_classes(content: str, language: str | None) -> list[VariableIR]:
    rules = rules_for(language)
    if rules is None:
        return []
    return [VariableIR(name=n, line=ln) for n, ln in _scan_lines(content, rules.classes)]


def extract_import_bindings(content: str, language: str | None) -> list[ImportBinding]:
    rules = rules_for(language)
    if rules is None:
        return []
    return [ImportBinding(name=n, line=ln) for n, ln in _scan_lines(content, rules.bindings)]
