from __future__ import annotations
from pathlib import Path
import os
from typing import Optional

import pathspec

from crossfile.parsing.ir import SourceFile
from crossfile.utils.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_INCLUDE = [
    "**/*.js", "**/*.jsx", "**/*.mjs", "**/*.cjs",
    "**/*.ts", "**/*.tsx",
    "**/*.py",
    "**/*.java",
    "**/*.php",
]

DEFAULT_EXCLUDE = ["**/*.min.js", "**/*.d.ts"]

HARD_EXCLUDE_DIRS = {
    ".git", ".hg", ".svn",
    ".venv", "venv", "env",
    "__pycache__",
    "node_modules", "vendor",
    "dist", "build", ".next", ".turbo",
    ".idea", ".vscode",
    ".cache", ".pytest_cache",
}


def detect_language(path: Path) -> str:
    """The extension without its dot is the language tag."""
    return path.suffix.lower().lstrip(".")


def _compile_gitignore(root: Path, extra_excludes: list[str]) -> pathspec.PathSpec:
    lines: list[str] = []
    gi = root / ".gitignore"
    if gi.exists():
        lines.extend(gi.read_text(encoding="utf-8", errors="ignore").splitlines())
    lines.extend(extra_excludes or [])
    return pathspec.PathSpec.from_lines("gitwildmatch", lines)


def walk_repo(
    root: Path,
    include: Optional[list[str]] = None,
    exclude: Optional[list[str]] = None,
    max_bytes: int = 2_000_000,
    follow_symlinks: bool = False,
) -> list[SourceFile]:
    """
    Load every matching file under ``root`` as a ``SourceFile`` with a
    root-relative POSIX path, sorted by path. Honors ``.gitignore``.
    """
    root = root.resolve()
    ignored = _compile_gitignore(root, list(exclude or DEFAULT_EXCLUDE))
    wanted = pathspec.PathSpec.from_lines("gitwildmatch", include or DEFAULT_INCLUDE)
    results: list[SourceFile] = []

    for dirpath, dirnames, filenames in os.walk(root, followlinks=follow_symlinks):
        dir_rel = Path(dirpath).relative_to(root)

        pruned = []
        for d in dirnames:
            if d in HARD_EXCLUDE_DIRS or ignored.match_file((dir_rel / d).as_posix() + "/"):
                pruned.append(d)
        for d in pruned:
            dirnames.remove(d)

        for fname in filenames:
            fpath = Path(dirpath, fname)
            rel_str = (dir_rel / fname).as_posix()
            if ignored.match_file(rel_str) or not wanted.match_file(rel_str):
                continue
            try:
                size = fpath.stat().st_size
            except FileNotFoundError:
                continue
            if size > max_bytes:
                logger.info("Skipping %s: %d bytes exceeds %d", rel_str, size, max_bytes)
                continue
            text = fpath.read_text(encoding="utf-8", errors="ignore")
            results.append(SourceFile(path=rel_str, content=text, language=detect_language(fpath)))
    logger.debug("Walked %s: %d files", root, len(results))
    return sorted(results, key=lambda f: f.path)
