"""Package location types."""

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple


@dataclass(frozen=True)
class PackageInfo:
    """The package being released and where it sits inside the repository."""

    root: Path  # Directory holding the package manifest
    name: str  # Name declared in the manifest
    segments: Tuple[str, ...]  # Package root relative to the repo root; empty for the root itself

    @property
    def relative_path(self) -> str:
        return "/".join(self.segments) or "."
