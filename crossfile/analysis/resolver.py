from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Collection, Literal, Optional

from crossfile.parsing.languages import PYTHON, language_family

ResolutionKind = Literal["resolved", "external", "unresolved"]

SOURCE_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".py", ".java", ".php")
INDEX_FILES = ("index.js", "index.ts", "index.tsx", "index.py", "__init__.py")

_PY_RELATIVE = re.compile(r"^(\.+)([\w.]*)$")


@dataclass(frozen=True)
class Resolution:
    kind: ResolutionKind
    path: Optional[str] = None


def is_external(specifier: str) -> bool:
    return not (specifier.startswith(".") or specifier.startswith("/"))


def _python_to_path(specifier: str) -> str:
    """``..pkg.mod`` -> ``../pkg/mod``; ``.`` -> ``./``."""
    m = _PY_RELATIVE.match(specifier)
    if not m:
        return specifier
    dots, rest = m.group(1), m.group(2)
    prefix = "./" if len(dots) == 1 else "../" * (len(dots) - 1)
    return prefix + rest.replace(".", "/")


def _dirname(path: str) -> str:
    return path.rsplit("/", 1)[0] if "/" in path else ""


def normalize_path(base_dir: str, specifier: str) -> str:
    joined = specifier.lstrip("/") if specifier.startswith("/") else f"{base_dir}/{specifier}"
    parts: list[str] = []
    for part in joined.split("/"):
        if part == "..":
            if parts:
                parts.pop()
        elif part and part != ".":
            parts.append(part)
    return "/".join(parts)


def candidates(normalized: str) -> list[str]:
    out = [normalized] if normalized else []
    out.extend(f"{normalized}{ext}" for ext in SOURCE_EXTENSIONS if normalized)
    prefix = f"{normalized}/" if normalized else ""
    out.extend(f"{prefix}{index}" for index in INDEX_FILES)
    return out


def resolve(
    specifier: str,
    importing_path: str,
    file_set: Collection[str],
    language: str | None = None,
) -> Resolution:
    """Map a raw import specifier to a member of ``file_set``; first candidate wins."""
    if language_family(language) == PYTHON:
        specifier = _python_to_path(specifier)
    if is_external(specifier):
        return Resolution("external")
    normalized = normalize_path(_dirname(importing_path.replace("\\", "/")), specifier)
    for cand in candidates(normalized):
        if cand in file_set:
            return Resolution("resolved", cand)
    return Resolution("unresolved")
