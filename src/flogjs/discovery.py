"""Collect JavaScript / TypeScript source files from paths."""

from __future__ import annotations

import fnmatch
from pathlib import Path
from typing import Iterable

SOURCE_EXTENSIONS = (".js", ".jsx", ".ts", ".tsx", ".mjs", ".cjs")
SKIP_DIRS = frozenset({"node_modules", "__pycache__"})


def is_source_file(path: Path) -> bool:
    return path.suffix.lower() in SOURCE_EXTENSIONS


def _matches(path: Path, patterns: Iterable[str]) -> bool:
    posix = path.as_posix()
    for pattern in patterns:
        if fnmatch.fnmatch(posix, pattern) or fnmatch.fnmatch(path.name, pattern):
            return True
        # "**/x" should also match "x" at the top of the tree
        if pattern.startswith("**/") and fnmatch.fnmatch(path.name, pattern[3:]):
            return True
    return False


def _walk(directory: Path) -> Iterable[Path]:
    for entry in sorted(directory.iterdir()):
        if entry.is_dir():
            if entry.name in SKIP_DIRS or entry.name.startswith("."):
                continue
            yield from _walk(entry)
        elif is_source_file(entry):
            yield entry


def expand_paths(
    inputs: Iterable[str | Path],
    exclude: Iterable[str] = (),
    include: Iterable[str] = (),
) -> list[Path]:
    """Expand files and directories into a unique, ordered list of source files.

    Directories are walked recursively, skipping ``node_modules`` and hidden
    directories. Files named explicitly are kept even if they would be
    excluded; ``include`` patterns, when given, restrict directory walks.
    """
    exclude = list(exclude)
    include = list(include)
    seen: set[Path] = set()
    files: list[Path] = []

    for raw in inputs:
        path = Path(raw).resolve()
        if path.is_dir():
            for found in _walk(path):
                rel = found.relative_to(path)
                if _matches(rel, exclude):
                    continue
                if include and not _matches(rel, include):
                    continue
                if found not in seen:
                    seen.add(found)
                    files.append(found)
        elif path.is_file() and is_source_file(path):
            if path not in seen:
                seen.add(path)
                files.append(path)

    return files
