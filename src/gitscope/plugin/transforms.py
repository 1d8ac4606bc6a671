"""
Middleware for lifecycle hooks.

A hook is a callable ``(plugin_config, state) -> result`` that may return an
awaitable. A transform takes a hook and returns a wrapped hook; ``compose``
chains transforms right to left, so the leftmost one runs first. State
updaters are coroutines that take the release state and return an updated
shallow copy.
"""

import inspect
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Union

from gitscope.types.state import ReleaseState

Hook = Callable[[Any, ReleaseState], Any]
Transform = Callable[[Hook], Hook]
StateUpdater = Callable[[ReleaseState], Awaitable[ReleaseState]]

NEXT_RELEASE_KEYS = ("next_release", "nextRelease")


async def _resolve(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


async def call_hook(hook: Hook, plugin_config: Any, state: ReleaseState) -> Any:
    """Invoke a sync or async hook and return its result."""
    return await _resolve(hook(plugin_config, state))


def compose(*transforms: Transform) -> Transform:
    """Compose transforms right to left: ``compose(f, g)(hook) == f(g(hook))``."""

    def apply(hook: Hook) -> Hook:
        for transform in reversed(transforms):
            hook = transform(hook)
        return hook

    return apply


def map_commits(fn: Callable[[List[Any]], Union[List[Any], Awaitable[List[Any]]]]) -> StateUpdater:
    """Updater replacing ``state["commits"]`` with ``fn(commits)``."""

    async def update(state: ReleaseState) -> ReleaseState:
        commits = await _resolve(fn(state.get("commits", [])))
        return {**state, "commits": commits}

    return update


def map_next_release_version(
    fn: Callable[[str], Union[Optional[str], Awaitable[Optional[str]]]],
) -> StateUpdater:
    """Updater rewriting the next release version.

    Hosts may pass the release as ``next_release`` or ``nextRelease``; each key
    present is rewritten. States without a next release version are returned
    unchanged.
    """

    async def update(state: ReleaseState) -> ReleaseState:
        updated = state
        for key in NEXT_RELEASE_KEYS:
            next_release = state.get(key) or {}
            version = next_release.get("version")
            if version:
                updated = {**updated, key: {**next_release, "version": await _resolve(fn(version))}}
        return updated

    return update


def with_options_transforms(updaters: Iterable[StateUpdater]) -> Transform:
    """Transform applying ``updaters`` in order to the state before delegating."""
    updaters = list(updaters)

    def transform(hook: Hook) -> Hook:
        async def wrapped(plugin_config: Any, state: ReleaseState) -> Any:
            for update in updaters:
                state = await update(state)
            return await call_hook(hook, plugin_config, state)

        return wrapped

    return transform
