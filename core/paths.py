"""Directory list helpers."""

import re
from collections.abc import Iterable
from pathlib import Path


def parse_comma_separated_list(values: str) -> list[str]:
    """Split a comma separated list of directories.

    Whitespace anywhere in the value is dropped, as are empty entries, so
    ``"lambdas/a, lambdas/b,"`` becomes ``["lambdas/a", "lambdas/b"]``.
    """
    return [value for value in re.sub(r"\s+", "", values).split(",") if value]


def get_absolute_paths(directories: Iterable[str] | None, root: Path) -> list[Path]:
    """Resolve directories relative to ``root``.

    Args:
        directories: Relative (or absolute) directory paths
        root: Directory the relative paths are anchored to

    Returns:
        Absolute, normalised paths in the given order
    """
    if not directories:
        return []
    return [(root / directory).resolve() for directory in directories]
