# topmark:header:start
#
#   project      : Probity
#   file         : files.py
#   file_relpath : src/probity/cli/files.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Resolve CLI/config paths into the ordered list of files to analyse."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from probity.config.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

    from probity.config.logging import ProbityLogger

logger: ProbityLogger = get_logger(__name__)

SOURCE_SUFFIXES: frozenset[str] = frozenset({".py", ".pyi"})


def resolve_file_list(paths: Iterable[str | Path]) -> tuple[list[str], bool]:
    """Expand paths into absolute source file paths.

    Directories are searched recursively for Python sources (sorted, hidden
    directories skipped); files are taken as given. Duplicates are dropped,
    keeping first-seen order.

    Args:
        paths (Iterable[str | Path]): Files and directories.

    Returns:
        tuple[list[str], bool]: ``(files, only_files)`` where ``only_files`` is
        True when every given path was a file (the run is scoped to explicit files).
    """
    files: list[str] = []
    seen: set[str] = set()
    only_files: bool = True

    def _add(path: Path) -> None:
        key = str(path.resolve())
        if key not in seen:
            seen.add(key)
            files.append(key)

    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            only_files = False
            for candidate in sorted(path.rglob("*")):
                rel_parts = candidate.relative_to(path).parts
                if any(part.startswith(".") for part in rel_parts):
                    continue
                if candidate.is_file() and candidate.suffix in SOURCE_SUFFIXES:
                    _add(candidate)
        elif path.exists():
            _add(path)
        else:
            logger.warning("Path does not exist: %s", path)

    logger.debug("Resolved %d file(s) (only_files=%s)", len(files), only_files)
    return files, only_files
