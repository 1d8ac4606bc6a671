"""Shared fixtures: a small monorepo with two packages."""

from pathlib import Path
from typing import Dict, NamedTuple

import pytest
from git import Repo


def create_commit(repo: Repo, files: Dict[str, str], message: str) -> str:
    """Helper function to write files and commit them in the test repository."""
    root = Path(repo.working_dir)
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
    repo.index.add(list(files))
    return repo.index.commit(message).hexsha


class Monorepo(NamedTuple):
    repo: Repo
    path: Path
    scaffold: str  # adds the manifests
    commit1: str  # a/index.js
    commit2: str  # b/index.js
    commit3: str  # a/x.js and b/y.js


@pytest.fixture
def monorepo(tmp_path) -> Monorepo:
    """Repository with package ``a`` (package.json) and ``b`` (pyproject.toml)."""
    repo_path = tmp_path / "monorepo"
    repo_path.mkdir()
    repo = Repo.init(repo_path)

    scaffold = create_commit(
        repo,
        {
            "package.json": '{"name": "root"}',
            "a/package.json": '{"name": "pkg-a"}',
            "b/pyproject.toml": '[project]\nname = "pkg-b"\n',
        },
        "chore: scaffold packages",
    )
    commit1 = create_commit(repo, {"a/index.js": "a"}, "feat(a): add index")
    commit2 = create_commit(repo, {"b/index.js": "b"}, "feat(b): add index")
    commit3 = create_commit(repo, {"a/x.js": "x", "b/y.js": "y"}, "fix: touch both packages\n\nSome details.\n")

    return Monorepo(repo, repo_path, scaffold, commit1, commit2, commit3)
