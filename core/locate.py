"""Recursive discovery of package.json manifests."""

import os
from collections.abc import Iterable
from pathlib import Path

from .paths import get_absolute_paths

MANIFEST_NAME = "package.json"

# Dependency caches and test fixtures never hold manifests worth updating
DEFAULT_IGNORED_DIRS = frozenset({"node_modules", "test"})


def _is_within(path: Path, directories: Iterable[Path]) -> bool:
    return any(path == directory or directory in path.parents for directory in directories)


def _walk_manifests(search_root: Path, excluded: list[Path]) -> Iterable[Path]:
    """Yield manifests under ``search_root``, pruning ignored and excluded directories."""
    for dirpath, dirnames, filenames in os.walk(search_root):
        current = Path(dirpath)
        dirnames[:] = sorted(
            name
            for name in dirnames
            if name not in DEFAULT_IGNORED_DIRS and not _is_within(current / name, excluded)
        )
        if MANIFEST_NAME in filenames:
            yield current / MANIFEST_NAME


def search_roots(root: Path, include_dirs: Iterable[str] | None = None) -> list[Path]:
    """Directories searched for manifests; ``root`` itself when nothing is included."""
    roots = get_absolute_paths(include_dirs, root)
    return roots or [root.resolve()]


def find_manifests(
    root: Path,
    include_dirs: Iterable[str] | None = None,
    exclude_dirs: Iterable[str] | None = None,
) -> list[Path]:
    """Find package.json files under the included directories.

    Args:
        root: Directory relative include/exclude paths are resolved against
        include_dirs: Sub-directories to search; ``root`` when empty
        exclude_dirs: Sub-directories whose contents are ignored

    Returns:
        Absolute manifest paths, deduplicated and sorted. Empty when nothing
        matched.
    """
    excluded = get_absolute_paths(exclude_dirs, root)
    found: set[Path] = set()

    for search_root in search_roots(root, include_dirs):
        if not search_root.is_dir() or _is_within(search_root, excluded):
            continue
        found.update(_walk_manifests(search_root, excluded))

    return sorted(found, key=str)
