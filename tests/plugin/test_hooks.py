"""Tests for the monorepo lifecycle hooks."""

import json
from unittest.mock import Mock

import pytest

from gitscope.attribution.commit_filter import CommitFilter
from gitscope.config import Settings
from gitscope.git.history import HistoryReader
from gitscope.plugin.hooks import HOOK_NAMES, MonorepoPlugin, load_plugin
from gitscope.types.commit import Commit

FILES = {
    "c1": ["packages/foo/index.js"],
    "c2": ["packages/bar/index.js"],
    "c3": ["packages/foo/x.js", "packages/bar/y.js"],
}


@pytest.fixture
def workspace(tmp_path):
    """Checkout with packages foo and bar."""
    for name in ("foo", "bar"):
        package = tmp_path / "packages" / name
        package.mkdir(parents=True)
        (package / "package.json").write_text(json.dumps({"name": name}))
    return tmp_path


@pytest.fixture
def commit_filter(workspace):
    reader = Mock(spec=HistoryReader)
    reader.repository_root.return_value = str(workspace)
    reader.files_changed_by.side_effect = lambda commit_hash: FILES[commit_hash]
    return CommitFilter(reader, max_concurrency=2, cwd=str(workspace / "packages" / "foo"))


@pytest.fixture
def delegate():
    """Async delegate hooks recording the state they were given."""
    received = {}

    def make(name):
        async def hook(plugin_config, state):
            received[name] = state
            return f"{name} result"

        return hook

    hooks = {name: make(name) for name in HOOK_NAMES}
    hooks["received"] = received
    return hooks


@pytest.fixture
def sample_state():
    return {
        "commits": [Commit(hash=h, message=f"commit {h}") for h in ("c3", "c2", "c1")],
        "next_release": {"version": "1.2.3", "notes": ""},
        "logger": Mock(),
        "options": {"debug": False},
        "branch": "main",
    }


@pytest.mark.asyncio
async def test_analyze_commits_filters_without_tagging(commit_filter, delegate, sample_state):
    plugin = MonorepoPlugin(delegate, commit_filter)

    result = await plugin.analyze_commits({"preset": "angular"}, sample_state)

    received = delegate["received"]["analyze_commits"]
    assert result == "analyze_commits result"
    assert [c.hash for c in received["commits"]] == ["c3", "c1"]
    assert received["next_release"]["version"] == "1.2.3"
    assert received["branch"] == "main"


@pytest.mark.asyncio
@pytest.mark.parametrize("hook_name", ["generate_notes", "success", "fail"])
async def test_hooks_scope_version_to_package(commit_filter, delegate, sample_state, hook_name):
    plugin = MonorepoPlugin(delegate, commit_filter)

    result = await plugin.get_hook(hook_name)({}, sample_state)

    received = delegate["received"][hook_name]
    assert result == f"{hook_name} result"
    assert [c.hash for c in received["commits"]] == ["c3", "c1"]
    assert received["next_release"] == {"version": "foo-v1.2.3", "notes": ""}
    # The caller's state is left alone
    assert sample_state["next_release"]["version"] == "1.2.3"
    assert [c.hash for c in sample_state["commits"]] == ["c3", "c2", "c1"]


@pytest.mark.asyncio
async def test_missing_version_is_not_rewritten(commit_filter, delegate, sample_state):
    del sample_state["next_release"]
    plugin = MonorepoPlugin(delegate, commit_filter)

    await plugin.success({}, sample_state)

    assert "next_release" not in delegate["received"]["success"]


@pytest.mark.asyncio
async def test_delegate_errors_propagate(commit_filter, sample_state):
    async def broken(plugin_config, state):
        raise RuntimeError("publish failed")

    plugin = MonorepoPlugin({"fail": broken}, commit_filter)

    with pytest.raises(RuntimeError, match="publish failed"):
        await plugin.fail({}, sample_state)


@pytest.mark.asyncio
async def test_sync_delegate(commit_filter, sample_state):
    plugin = MonorepoPlugin({"generate_notes": lambda cfg, state: len(state["commits"])}, commit_filter)

    assert await plugin.generate_notes({}, sample_state) == 2


@pytest.mark.asyncio
async def test_hook_without_delegate(commit_filter, sample_state):
    plugin = MonorepoPlugin({}, commit_filter)

    assert await plugin.analyze_commits({}, sample_state) is None


@pytest.mark.asyncio
async def test_debug_logs_filtered_commit_count(commit_filter, delegate, sample_state):
    sample_state["options"]["debug"] = True
    plugin = MonorepoPlugin(delegate, commit_filter)

    await plugin.analyze_commits({}, sample_state)

    sample_state["logger"].log.assert_called_once_with(
        "Found %s commits for package %s since last release", 2, "foo"
    )


@pytest.mark.asyncio
async def test_no_commit_count_without_debug(commit_filter, delegate, sample_state):
    plugin = MonorepoPlugin(delegate, commit_filter)

    await plugin.analyze_commits({}, sample_state)
    await plugin.generate_notes({}, {**sample_state, "options": {"debug": True}})

    sample_state["logger"].log.assert_not_called()


def test_tag_format(commit_filter, delegate):
    assert MonorepoPlugin(delegate, commit_filter).tag_format == "foo-v${version}"


def test_unknown_hook(commit_filter, delegate):
    with pytest.raises(KeyError):
        MonorepoPlugin(delegate, commit_filter).get_hook("publish")


@pytest.mark.asyncio
async def test_load_plugin_end_to_end(monorepo):
    """Plugin built for package ``b`` of a real repository."""
    received = {}

    async def generate_notes(plugin_config, state):
        received.update(state)
        return "notes"

    plugin = load_plugin(
        {"generate_notes": generate_notes},
        cwd=str(monorepo.path / "b"),
        settings=Settings(max_concurrency=1),
    )
    commits = [
        {"hash": monorepo.commit3, "message": "fix: touch both packages"},
        {"hash": monorepo.commit2, "message": "feat(b): add index"},
        {"hash": monorepo.commit1, "message": "feat(a): add index"},
    ]

    assert await plugin.generate_notes({}, {"commits": commits, "next_release": {"version": "2.0.0"}}) == "notes"
    assert [c.hash for c in received["commits"]] == [monorepo.commit3, monorepo.commit2]
    assert received["commits"][1] == {"hash": monorepo.commit2, "message": "feat(b): add index", "files": ["b/index.js"]}
    assert received["next_release"]["version"] == "pkg-b-v2.0.0"
    assert plugin.tag_format == "pkg-b-v${version}"


@pytest.mark.asyncio
async def test_camel_case_next_release_is_scoped(commit_filter, delegate):
    """Hosts naming the release ``nextRelease`` get the package tag too."""
    plugin = MonorepoPlugin(delegate, commit_filter)

    await plugin.success({}, {"commits": [], "nextRelease": {"version": "1.2.3"}})

    assert delegate["received"]["success"]["nextRelease"] == {"version": "foo-v1.2.3"}
