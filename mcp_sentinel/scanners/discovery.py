"""File discovery: walk a target and list the files to scan, in a stable order."""

from __future__ import annotations

import fnmatch
import logging
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from mcp_sentinel.exceptions import DiscoveryError, TargetNotFoundError
from mcp_sentinel.models import ErrorKind, ScanError

logger = logging.getLogger(__name__)

# Directories never descended into
DEFAULT_SKIP_DIRS: frozenset[str] = frozenset({
    ".git",
    ".hg",
    ".svn",
    "node_modules",
    "vendor",
    "venv",
    ".venv",
    "env",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".tox",
    "dist",
    "build",
    ".next",
    ".nuxt",
    "coverage",
    "target",
})


@dataclass(frozen=True)
class DiscoveredFile:
    path: Path
    display_path: str  # target-relative, forward slashes
    size: int


def _matches(rel_path: str, patterns: Sequence[str]) -> bool:
    name = rel_path.rsplit("/", 1)[-1]
    return any(
        fnmatch.fnmatch(rel_path, pattern)
        or fnmatch.fnmatch(rel_path, f"**/{pattern}")
        or fnmatch.fnmatch(name, pattern)
        for pattern in patterns
    )


def discover_files(
    target: str | Path,
    include_patterns: Sequence[str] = (),
    exclude_patterns: Sequence[str] = (),
    errors: list[ScanError] | None = None,
) -> list[DiscoveredFile]:
    """List scannable files under ``target`` sorted by relative path.

    Subdirectories that cannot be listed are appended to ``errors`` as
    file_unreadable records; their files are missing from the result.

    Raises:
        TargetNotFoundError: ``target`` does not exist.
        DiscoveryError: ``target`` exists but cannot be listed or stat'ed.
    """
    root = Path(target)
    if not root.exists():
        raise TargetNotFoundError(str(target))

    if root.is_file():
        try:
            size = root.stat().st_size
        except OSError as e:
            raise DiscoveryError(str(target), str(e)) from e
        return [DiscoveredFile(path=root, display_path=root.name, size=size)]

    try:
        with os.scandir(root):
            pass
    except OSError as e:
        raise DiscoveryError(str(target), str(e)) from e

    def _walk_error(error: OSError) -> None:
        where = Path(os.path.relpath(error.filename, root)).as_posix() if error.filename else str(root)
        logger.warning("Cannot list %s: %s", where, error.strerror or error)
        if errors is not None:
            errors.append(ScanError(
                kind=ErrorKind.FILE_UNREADABLE,
                file=where,
                message=f"Cannot list directory: {error.strerror or error}",
            ))

    files: list[DiscoveredFile] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_walk_error):
        current = Path(dirpath)
        rel_dir = current.relative_to(root).as_posix()
        prefix = "" if rel_dir == "." else f"{rel_dir}/"

        dirnames[:] = sorted(
            d for d in dirnames
            if d not in DEFAULT_SKIP_DIRS and not _matches(f"{prefix}{d}", exclude_patterns)
        )

        for name in sorted(filenames):
            rel_path = f"{prefix}{name}"
            if exclude_patterns and _matches(rel_path, exclude_patterns):
                continue
            if include_patterns and not _matches(rel_path, include_patterns):
                continue
            full = current / name
            try:
                size = full.stat().st_size
            except OSError:
                # Left for the reader to report as unreadable
                size = 0
            files.append(DiscoveredFile(path=full, display_path=rel_path, size=size))

    files.sort(key=lambda f: f.display_path)
    return files
