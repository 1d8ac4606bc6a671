"""
Monorepo-aware lifecycle hooks.

Each hook filters the release state's commits down to the current package and,
past commit analysis, scopes the next release version to a package tag before
handing the state to the wrapped release plugin.
"""

from importlib import metadata
from typing import Any, Mapping, Optional

from loguru import logger

from gitscope.attribution.cache import AttributionCache
from gitscope.attribution.commit_filter import CommitFilter
from gitscope.config import Settings
from gitscope.git.history import HistoryReader
from gitscope.plugin.tag import tag_format, version_to_git_tag
from gitscope.plugin.transforms import (
    Hook,
    call_hook,
    compose,
    map_commits,
    map_next_release_version,
    with_options_transforms,
)
from gitscope.types.package import PackageInfo
from gitscope.types.state import ReleaseState

HOOK_NAMES = ("analyze_commits", "generate_notes", "success", "fail")


def _is_debug(state: ReleaseState) -> bool:
    return bool((state.get("options") or {}).get("debug"))


def _plugin_version() -> str:
    try:
        return metadata.version("gitscope")
    except metadata.PackageNotFoundError:
        return "unknown"


def _host_log(state: ReleaseState, fmt: str, *args: Any) -> None:
    host_logger = state.get("logger")
    if host_logger is None:
        logger.info(fmt % args)
    else:
        host_logger.log(fmt, *args)


def log_plugin_version(step: str):
    """Transform emitting a one-line diagnostic when the host runs in debug mode."""

    def transform(hook: Hook) -> Hook:
        async def wrapped(plugin_config: Any, state: ReleaseState) -> Any:
            if _is_debug(state):
                logger.debug(f"Running {step} version {_plugin_version()}")
            return await call_hook(hook, plugin_config, state)

        return wrapped

    return transform


class MonorepoPlugin:
    """Wraps a release plugin's hooks so they only see the current package."""

    def __init__(self, delegate: Mapping[str, Hook], commit_filter: CommitFilter):
        self.delegate = dict(delegate)
        self.commit_filter = commit_filter
        self._package: Optional[PackageInfo] = None

        only_package_commits = with_options_transforms([map_commits(commit_filter.filter_to_package)])
        scoped_version = with_options_transforms([map_next_release_version(self._version_to_git_tag)])

        self.analyze_commits = compose(
            log_plugin_version("analyze_commits"),
            only_package_commits,
            self._log_filtered_commit_count,
        )(self._delegate_for("analyze_commits"))

        self.generate_notes = compose(
            log_plugin_version("generate_notes"), only_package_commits, scoped_version
        )(self._delegate_for("generate_notes"))

        self.success = compose(
            log_plugin_version("success"), only_package_commits, scoped_version
        )(self._delegate_for("success"))

        self.fail = compose(
            log_plugin_version("fail"), only_package_commits, scoped_version
        )(self._delegate_for("fail"))

    @property
    def package(self) -> PackageInfo:
        """The package being released, resolved on first use."""
        if self._package is None:
            self._package = self.commit_filter.resolve_package()
        return self._package

    @property
    def tag_format(self) -> str:
        return tag_format(self.package.name)

    def get_hook(self, name: str) -> Hook:
        """Return the wrapped hook called ``name``."""
        if name not in HOOK_NAMES:
            raise KeyError(f"Unknown lifecycle hook: {name}")
        return getattr(self, name)

    def _delegate_for(self, name: str) -> Hook:
        async def delegate(plugin_config: Any, state: ReleaseState) -> Any:
            hook = self.delegate.get(name)
            if hook is None:
                return None
            return await call_hook(hook, plugin_config, state)

        return delegate

    def _version_to_git_tag(self, version: str) -> Optional[str]:
        return version_to_git_tag(self.package.name, version)

    def _log_filtered_commit_count(self, hook: Hook) -> Hook:
        async def wrapped(plugin_config: Any, state: ReleaseState) -> Any:
            result = await call_hook(hook, plugin_config, state)
            if _is_debug(state):
                _host_log(
                    state,
                    "Found %s commits for package %s since last release",
                    len(state.get("commits", [])),
                    self.package.name,
                )
            return result

        return wrapped


def load_plugin(
    delegate: Mapping[str, Hook],
    cwd: Optional[str] = None,
    cache: Optional[AttributionCache] = None,
    settings: Optional[Settings] = None,
) -> MonorepoPlugin:
    """Factory function to create a MonorepoPlugin for the package containing ``cwd``."""
    settings = settings or Settings.from_env()
    reader = cache.reader if cache is not None else HistoryReader(cwd or ".")
    commit_filter = CommitFilter(reader, cache=cache, max_concurrency=settings.max_concurrency, cwd=cwd)
    return MonorepoPlugin(delegate, commit_filter)
