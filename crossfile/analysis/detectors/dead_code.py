from __future__ import annotations
from dataclasses import dataclass
from typing import Collection, List, Literal

from crossfile.parsing.functions import (
    extract_classes,
    extract_functions,
    extract_import_bindings,
    extract_variables,
    identifier_counts,
)
from crossfile.parsing.ir import SourceFile
from crossfile.parsing.languages import PYTHON, language_family

DeadCodeType = Literal["import", "function", "variable", "class"]


@dataclass(frozen=True)
class DeadCodeFinding:
    type: DeadCodeType
    name: str
    file: str
    line: int
    reason: str


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def detect_dead_code(f: SourceFile, exports: Collection[str] = ()) -> List[DeadCodeFinding]:
    """
    Single-file dead-code heuristics over identifier token counts.

    Imports are checked against tokens outside import lines; functions and
    variables count as used once their name occurs more than once anywhere
    in the file. Comments and strings count as usages.
    """
    lines = f.content.split("\n")
    counts = identifier_counts(lines)
    out: List[DeadCodeFinding] = []

    bindings = extract_import_bindings(f.content, f.language)
    import_lines = {b.line for b in bindings}
    outside_imports = identifier_counts(
        line for idx, line in enumerate(lines, start=1) if idx not in import_lines
    )
    for b in bindings:
        if outside_imports[b.name.lstrip("$")] == 0:
            out.append(DeadCodeFinding(
                type="import", name=b.name, file=f.path, line=b.line,
                reason="Import is never used in this file",
            ))

    is_python = language_family(f.language) == PYTHON
    exported = set(exports)
    function_lines: set[tuple[str, int]] = set()
    for fn in extract_functions(f.content, f.language):
        function_lines.add((fn.name, fn.line))
        if is_python and _is_dunder(fn.name):
            continue
        if fn.name in exported or counts[fn.name.lstrip("$")] > 1:
            continue
        out.append(DeadCodeFinding(
            type="function", name=fn.name, file=f.path, line=fn.line,
            reason="Function is never called or exported",
        ))

    for var in extract_variables(f.content, f.language):
        if (var.name, var.line) in function_lines:
            continue
        if is_python and _is_dunder(var.name):
            continue
        if counts[var.name.lstrip("$")] == 1:
            out.append(DeadCodeFinding(
                type="variable", name=var.name, file=f.path, line=var.line,
                reason="Variable is declared but never used",
            ))

    for cls in extract_classes(f.content, f.language):
        if cls.name in exported or counts[cls.name.lstrip("$")] > 1:
            continue
        out.append(DeadCodeFinding(
            type="class", name=cls.name, file=f.path, line=cls.line,
            reason="Class is never referenced or exported",
        ))
    return out
