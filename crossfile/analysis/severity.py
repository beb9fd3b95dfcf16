from __future__ import annotations
from typing import Literal, Mapping

Severity = Literal["error", "warning", "info"]

Category = Literal["circular", "missing", "unused", "duplicate", "dead_code", "redundant", "complexity"]

SEVERITY_ORDER: Mapping[str, int] = {"error": 0, "warning": 1, "info": 2}

DEFAULT_SEVERITY: Mapping[str, Severity] = {
    "circular": "error",
    "missing": "error",
    "unused": "warning",
    "duplicate": "warning",
    "dead_code": "warning",
    "redundant": "info",
    "complexity": "warning",
}


def pick_severity(category: str, complexity: int | None = None, error_at: int = 20) -> Severity:
    if category == "complexity" and complexity is not None and complexity >= error_at:
        return "error"
    return DEFAULT_SEVERITY.get(category, "info")


def severity_rank(severity: str) -> int:
    return SEVERITY_ORDER.get(severity, len(SEVERITY_ORDER))


def explain(category: str) -> str:
    if category == "circular":
        return "Import cycles couple modules together and make load order fragile."
    if category == "missing":
        return "A relative import points at a file that is not part of the project."
    if category == "unused":
        return "Nothing imports this file and it is not a recognised entry point."
    if category == "duplicate":
        return "Duplicated logic leads to divergence and bugs, increasing maintenance effort."
    if category == "dead_code":
        return "Unused declarations add noise and hide what the module really does."
    if category == "redundant":
        return "The pattern does nothing useful at runtime or reads more complex than it is."
    if category == "complexity":
        return "High cyclomatic complexity makes code harder to test and maintain and hides defects."
    return "Quality issue."


def fix_text(category: str, extra: dict | None = None) -> str:
    if category == "circular":
        return "Extract the shared pieces into a module both sides can import, or invert one dependency."
    if category == "missing":
        return "Create the missing file or fix the import path."
    if category == "unused":
        return "Delete the file or import it from where it is meant to be used."
    if category == "duplicate":
        other = (extra or {}).get("other_file")
        tail = f" (see also {other})" if other else ""
        return f"Extract common code into a shared function or module{tail}."
    if category == "dead_code":
        kind = (extra or {}).get("kind", "declaration")
        return f"Remove the unused {kind} or export it if other files need it."
    if category == "complexity":
        return "Extract helpers, return early and name complex boolean expressions."
    return "Simplify or remove the flagged code."
