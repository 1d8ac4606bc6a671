"""Path segment matching between changed files and a package root."""

import os
from typing import List, Sequence


def split_segments(path: str) -> List[str]:
    """Normalize ``path`` and split it into its directory segments."""
    normalized = os.path.normpath(path)
    if normalized == os.curdir:
        return []
    return normalized.split(os.sep)


def is_descendant_or_self(package_segments: Sequence[str], file_path: str) -> bool:
    """Check whether ``file_path`` lies inside (or is) the package directory.

    Segments are compared whole, so ``packages/foo`` never matches
    ``packages/foobar/x``. An empty package path is the repository root and
    matches everything.
    """
    file_segments = split_segments(file_path)
    if len(file_segments) < len(package_segments):
        return False
    return all(segment == file_segments[i] for i, segment in enumerate(package_segments))
