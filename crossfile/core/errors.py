from __future__ import annotations
import typing as t


class CrossfileError(Exception):
    """Base class for every error raised by the engine."""


class InvalidInput(CrossfileError, ValueError):
    """Malformed file set: wrong types, empty or duplicate paths."""


class BudgetExceeded(CrossfileError):
    """A size or time budget was hit; ``partial`` holds what was computed."""

    def __init__(self, reason: str, limit: t.Any = None, partial: t.Any = None):
        super().__init__(reason)
        self.reason = reason
        self.limit = limit
        self.partial = partial

    def __repr__(self) -> str:
        return f"BudgetExceeded(reason={self.reason!r}, limit={self.limit!r})"
