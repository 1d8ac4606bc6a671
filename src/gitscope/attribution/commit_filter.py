"""
Commit attribution for monorepo packages.

Reduces a list of commits to those that changed at least one file inside the
current package directory. File lists come from the shared AttributionCache
and are fetched with bounded concurrency.

Commits may be ``Commit`` records or plain mappings from the host pipeline.
Either way the retained commits are the caller's records plus ``files``.
"""

import os
from typing import Any, Iterable, List, Mapping, Optional, Sequence, TypeVar

from loguru import logger

from gitscope.attribution.cache import AttributionCache
from gitscope.attribution.limiter import gather_limited
from gitscope.config import Settings
from gitscope.git.history import HistoryReader
from gitscope.git.paths import is_descendant_or_self
from gitscope.package import resolve_package
from gitscope.types.commit import Commit
from gitscope.types.package import PackageInfo

CommitLike = TypeVar("CommitLike", Commit, Mapping[str, Any])


def _field(commit: Any, name: str) -> Any:
    if isinstance(commit, Mapping):
        return commit.get(name)
    return getattr(commit, name)


def _attach_files(commit: CommitLike, files: Sequence[str]) -> CommitLike:
    if isinstance(commit, Mapping):
        return {**commit, "files": list(files)}
    return commit.with_files(files)


def _subject(commit: Any) -> str:
    message = _field(commit, "message")
    return message.strip().splitlines()[0] if message and message.strip() else _field(commit, "hash")[:8]


class CommitFilter:
    """Keeps only the commits relevant to the package containing ``cwd``."""

    def __init__(
        self,
        reader: HistoryReader,
        cache: Optional[AttributionCache] = None,
        max_concurrency: Optional[int] = None,
        cwd: Optional[str] = None,
    ):
        self.reader = reader
        self.cache = cache if cache is not None else AttributionCache(reader)
        self.max_concurrency = max_concurrency or Settings.from_env().max_concurrency
        self.cwd = cwd or os.getcwd()

    def resolve_package(self) -> PackageInfo:
        """Locate the current package relative to the repository root."""
        return resolve_package(self.cwd, self.reader.repository_root())

    async def with_files(self, commits: Iterable[CommitLike]) -> List[CommitLike]:
        """Attach changed files to every commit, keeping the input order."""

        def fetch(commit: CommitLike):
            async def attach() -> CommitLike:
                return _attach_files(commit, await self.cache.get_files(_field(commit, "hash")))

            return attach

        return await gather_limited(self.max_concurrency, [fetch(commit) for commit in commits])

    async def filter_to_package(self, commits: Iterable[CommitLike]) -> List[CommitLike]:
        """Return the commits that touched the current package, in original order."""
        package = self.resolve_package()
        logger.debug(f'Filter commits by package path: "{package.relative_path}"')

        retained = []
        for commit in await self.with_files(commits):
            package_file = next(
                (f for f in _field(commit, "files") if is_descendant_or_self(package.segments, f)),
                None,
            )
            if package_file is not None:
                logger.debug(f'Including commit "{_subject(commit)}" because it modified package file "{package_file}"')
                retained.append(commit)

        return retained
