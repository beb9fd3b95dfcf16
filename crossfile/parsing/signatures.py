from __future__ import annotations
from typing import Iterable

from crossfile.parsing.ir import Signatures
from crossfile.parsing.languages import rules_for


def _unique(values: Iterable[str]) -> list[str]:
    seen: dict[str, None] = {}
    for v in values:
        if v and v not in seen:
            seen[v] = None
    return list(seen)


def extract_imports(content: str, language: str | None) -> list[str]:
    rules = rules_for(language)
    if rules is None:
        return []
    return _unique(spec for template in rules.imports for spec in template(content or ""))


def extract_exports(content: str, language: str | None) -> list[str]:
    rules = rules_for(language)
    if rules is None:
        return []
    return _unique(name for template in rules.exports for name in template(content or ""))


def extract_signatures(content: str, language: str | None) -> Signatures:
    """Raw import specifiers (as written) and exported names of one file."""
    return Signatures(
        imports=extract_imports(content, language),
        exports=extract_exports(content, language),
    )
