"""State shared with the host release pipeline."""

from typing import Any, Dict, List, Optional, Protocol, TypedDict

from .commit import Commit


class HostLogger(Protocol):
    """Logger handed to hooks by the host pipeline."""

    def log(self, fmt: str, *args: Any) -> None: ...


class NextRelease(TypedDict, total=False):
    """Release computed by the host; only ``version`` is rewritten."""

    version: Optional[str]
    git_tag: str
    notes: str


class ReleaseState(TypedDict, total=False):
    """
    Context passed to every lifecycle hook.

    Using TypedDict so hosts can hand over a plain dict. total=False means all
    fields are optional; gitscope only rewrites ``commits`` and the next
    release version.
    """

    commits: List[Commit]  # Commits since the last release, newest first
    next_release: NextRelease  # Present once the host computed a version
    nextRelease: NextRelease  # Same, as named by camelCase hosts
    last_release: Dict[str, Any]
    logger: HostLogger  # Host logger exposing log(fmt, *args)
    options: Dict[str, Any]  # Host options; "debug" enables diagnostics
    cwd: str
    env: Dict[str, str]
