from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import List, Mapping


@dataclass(frozen=True)
class AnalysisBudget:
    max_files: int = 5000
    max_windows_per_file: int = 2000
    max_comparisons: int = 5_000_000
    max_duplicates: int = 500
    time_budget_s: float = 30.0

    @classmethod
    def from_rules(cls, rules: Mapping | None) -> "AnalysisBudget":
        raw = (rules or {}).get("budget", {}) if isinstance(rules, Mapping) else {}
        base = cls()
        return cls(
            max_files=int(raw.get("max_files", base.max_files)),
            max_windows_per_file=int(raw.get("max_windows_per_file", base.max_windows_per_file)),
            max_comparisons=int(raw.get("max_comparisons", base.max_comparisons)),
            max_duplicates=int(raw.get("max_duplicates", base.max_duplicates)),
            time_budget_s=float(raw.get("time_budget_s", base.time_budget_s)),
        )


@dataclass
class AnalyzeConfig:
    path: Path
    include: List[str]
    exclude: List[str]
    max_bytes: int
    output_dir: Path
    rules_path: Path | None = None
    max_workers: int | None = None

    def resolve_output_dir(self) -> Path:
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir
