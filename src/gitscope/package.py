"""
Locate the package being released.

A package is the nearest directory, walking up from the working directory,
that holds a manifest (``pyproject.toml`` or ``package.json``). Its path is
expressed relative to the repository root as a tuple of segments.
"""

import json
import os
import tomllib
from pathlib import Path
from typing import Any, Optional, Union

from loguru import logger

from gitscope.errors import PackageResolutionError
from gitscope.git.paths import split_segments
from gitscope.types.package import PackageInfo

MANIFEST_FILES = ("pyproject.toml", "package.json")

PathLike = Union[str, os.PathLike]


def _manifest_in(directory: Path) -> Optional[Path]:
    for name in MANIFEST_FILES:
        candidate = directory / name
        if candidate.is_file():
            return candidate
    return None


def _lookup(data: Any, *keys: str) -> Any:
    """Walk nested tables, returning None as soon as a level is not a table."""
    for key in keys:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def find_package_root(start: PathLike) -> Path:
    """Return the nearest directory at or above ``start`` holding a manifest."""
    start_path = Path(start).resolve()
    for directory in (start_path, *start_path.parents):
        if _manifest_in(directory) is not None:
            return directory
    raise PackageResolutionError(f"No package manifest found above {start_path}")


def read_package_name(root: PathLike) -> str:
    """Read the declared package name from the manifest in ``root``."""
    manifest = _manifest_in(Path(root))
    if manifest is None:
        raise PackageResolutionError(f"No package manifest in {root}")

    try:
        if manifest.name == "package.json":
            name = _lookup(json.loads(manifest.read_text(encoding="utf-8")), "name")
        else:
            data = tomllib.loads(manifest.read_text(encoding="utf-8"))
            name = _lookup(data, "project", "name") or _lookup(data, "tool", "poetry", "name")
    except (OSError, ValueError) as e:
        raise PackageResolutionError(f"Cannot read {manifest}: {e}") from e

    if not isinstance(name, str) or not name:
        raise PackageResolutionError(f"{manifest} does not declare a package name")
    return name


def resolve_package(cwd: PathLike, repository_root: PathLike) -> PackageInfo:
    """Resolve the package containing ``cwd`` relative to ``repository_root``."""
    root = find_package_root(cwd)
    # Both sides resolved so symlinked checkouts still compare equal
    relative = os.path.relpath(os.path.realpath(root), os.path.realpath(repository_root))
    segments = split_segments(relative)
    if segments and segments[0] == os.pardir:
        raise PackageResolutionError(f"Package root {root} is outside the repository {repository_root}")

    package = PackageInfo(root=root, name=read_package_name(root), segments=tuple(segments))
    logger.debug(f"Resolved package {package.name} at {package.relative_path}")
    return package
