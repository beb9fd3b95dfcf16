from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Mapping

from crossfile.core.errors import InvalidInput


@dataclass(frozen=True)
class SourceFile:
    path: str
    content: str
    language: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.path, str) or not self.path.strip():
            raise InvalidInput(f"file path must be a non-empty string, got {self.path!r}")
        if not isinstance(self.content, str):
            raise InvalidInput(f"content of {self.path!r} must be a string, got {type(self.content).__name__}")
        if self.language is None:
            object.__setattr__(self, "language", "")
        elif not isinstance(self.language, str):
            raise InvalidInput(f"language of {self.path!r} must be a string, got {type(self.language).__name__}")
        object.__setattr__(self, "path", self.path.replace("\\", "/"))

    @property
    def lines(self) -> list[str]:
        return self.content.split("\n")


def as_source_file(obj: Any) -> SourceFile:
    """Accept a SourceFile or a mapping with path/content/language keys."""
    if isinstance(obj, SourceFile):
        return obj
    if isinstance(obj, Mapping):
        return SourceFile(path=obj.get("path"), content=obj.get("content"), language=obj.get("language"))
    raise InvalidInput(f"expected a SourceFile or a mapping, got {type(obj).__name__}")


@dataclass
class Signatures:
    imports: list[str] = field(default_factory=list)
    exports: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ImportBinding:
    """A local name introduced by an import statement."""
    name: str
    line: int


@dataclass(frozen=True)
class FunctionIR:
    name: str
    line: int
    end_line: int
    body: str


@dataclass(frozen=True)
class VariableIR:
    name: str
    line: int
