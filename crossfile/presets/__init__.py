from __future__ import annotations
import copy
from pathlib import Path
from typing import Any, Mapping

import yaml

from crossfile.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_RULES_PATH = Path("presets/rules.yaml")

DEFAULT_RULES: dict[str, Any] = {
    "complexity": {"warn_at": 10, "error_at": 20},
    "duplication": {"window": 5, "min_chars": 50, "similarity_threshold": 0.8},
    "budget": {
        "max_files": 5000,
        "max_windows_per_file": 2000,
        "max_comparisons": 5_000_000,
        "max_duplicates": 500,
        "time_budget_s": 30.0,
    },
    "digest": {"max_duplicates": 5, "max_dead_code": 10, "max_redundant": 10, "max_complexity": 5},
}


def merge_rules(base: Mapping[str, Any], override: Mapping[str, Any] | None) -> dict[str, Any]:
    out = copy.deepcopy(dict(base))
    for key, value in (override or {}).items():
        if isinstance(value, Mapping) and isinstance(out.get(key), Mapping):
            out[key] = merge_rules(out[key], value)
        else:
            out[key] = copy.deepcopy(value)
    return out


def load_rules(rules_path: Path | None) -> dict[str, Any]:
    p = rules_path or DEFAULT_RULES_PATH
    if not p.exists():
        return merge_rules(DEFAULT_RULES, None)
    try:
        loaded = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        logger.warning("Ignoring unreadable rules file %s: %s", p, exc)
        return merge_rules(DEFAULT_RULES, None)
    if not isinstance(loaded, Mapping):
        logger.warning("Ignoring rules file %s: top level is not a mapping", p)
        return merge_rules(DEFAULT_RULES, None)
    return merge_rules(DEFAULT_RULES, loaded)


def save_rules(rules: Mapping[str, Any], rules_path: Path | None) -> Path:
    p = rules_path or DEFAULT_RULES_PATH
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(yaml.safe_dump(dict(rules), sort_keys=False), encoding="utf-8")
    return p
