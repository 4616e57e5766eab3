"""File discovery: source files and package configurations under a repository root."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator
from fnmatch import fnmatch
from pathlib import Path

from constbox.kernel.config.models import DEFAULT_EXCLUDED_DIRS, DEFAULT_EXCLUDED_ROOT_PATHS
from constbox.kernel.exceptions import RepositoryError
from constbox.kernel.logging import get_logger

logger = get_logger(__name__)


def check_repository(root: Path) -> Path:
    """Return the resolved repository root.

    Raises
    ------
    RepositoryError
        If ``root`` is missing, not a directory or not readable
    """
    if not root.exists():
        raise RepositoryError(str(root), "does not exist")
    if not root.is_dir():
        raise RepositoryError(str(root), "not a directory")
    if not os.access(root, os.R_OK | os.X_OK):
        raise RepositoryError(str(root), "not readable")
    return root.resolve()


def matches_any(path: str, patterns: Iterable[str]) -> bool:
    """True if the repository-relative ``path`` matches one of the glob patterns.

    ``*`` also matches ``/``, so ``vendor/*`` covers everything below ``vendor``.
    """
    return any(fnmatch(path, pattern) for pattern in patterns)


def _walk_files(root: Path) -> Iterator[str]:
    """Yield repository-relative POSIX paths of all files, skipping excluded dirs."""
    for dirpath, dirnames, filenames in os.walk(root):
        rel_dir = Path(dirpath).relative_to(root).as_posix()
        # Prune in place so os.walk does not descend
        dirnames[:] = sorted(
            d
            for d in dirnames
            if d not in DEFAULT_EXCLUDED_DIRS
            and (d if rel_dir == "." else f"{rel_dir}/{d}") not in DEFAULT_EXCLUDED_ROOT_PATHS
        )
        for filename in sorted(filenames):
            yield filename if rel_dir == "." else f"{rel_dir}/{filename}"


def discover_source_files(root: Path, include: Iterable[str]) -> list[str]:
    """Source files matching any include pattern, sorted."""
    patterns = tuple(include)
    files = []
    for path in sorted(_walk_files(root)):
        # "**/*.rb" should also match top-level files
        if matches_any(path, patterns) or matches_any(f"./{path}", patterns):
            files.append(path)
    logger.debug("Discovered {count} source files under {root}", count=len(files), root=root)
    return files


def discover_box_files(root: Path, filenames: Iterable[str]) -> list[str]:
    """Package configuration files, sorted."""
    names = frozenset(filenames)
    boxes = [path for path in sorted(_walk_files(root)) if path.rsplit("/", 1)[-1] in names]
    logger.debug("Discovered {count} package configurations", count=len(boxes))
    return boxes
