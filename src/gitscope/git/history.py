"""
Read commits and changed files from the git history.

All git access goes through GitPython, which shells out to the git binary.
Failures of any kind are reported as HistoryUnavailable.
"""

from typing import Dict, Iterator, List, Optional

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from git.objects.commit import Commit as GitCommit
from loguru import logger

from gitscope.errors import HistoryUnavailable
from gitscope.types.commit import Commit


class HistoryReader:
    """Access to the history of the repository containing ``path``."""

    def __init__(self, path: str = "."):
        try:
            self.repo = Repo(path, search_parent_directories=True)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise HistoryUnavailable(f"Not a git repository: {path}") from e

    def _tags_by_commit(self) -> Dict[str, List[str]]:
        """Map commit hashes to the names of the tags pointing at them."""
        tags: Dict[str, List[str]] = {}
        for tag in self.repo.tags:
            try:
                sha = tag.commit.hexsha
            except ValueError:
                # Tag points at a tree or blob, not a commit
                continue
            tags.setdefault(sha, []).append(tag.name)
        return {sha: sorted(names) for sha, names in tags.items()}

    def _create_commit(self, commit: GitCommit, tags: Dict[str, List[str]]) -> Commit:
        return Commit(
            hash=commit.hexsha,
            message=commit.message,
            tags=tags.get(commit.hexsha, []),
            committer_date=commit.committed_datetime,
        )

    def commits_since(self, ref: Optional[str] = None) -> Iterator[Commit]:
        """Yield commits reachable from HEAD but not from ``ref``, newest first."""
        rev_range = f"{ref}..HEAD" if ref else "HEAD"
        logger.debug(f"Reading commits in {rev_range}")
        try:
            tags = self._tags_by_commit()
            for commit in self.repo.iter_commits(rev_range):
                yield self._create_commit(commit, tags)
        except GitCommandError as e:
            raise HistoryUnavailable(f"Cannot list commits in {rev_range}: {e}") from e

    def files_changed_by(self, commit_hash: str) -> List[str]:
        """List the files changed by a commit, relative to the repository root.

        Root commits report every file they introduce; merge commits report the
        files that differ from any parent.
        """
        try:
            output = self.repo.git.diff_tree(
                "--root", "-m", "-r", "--no-commit-id", "--name-only", "-z", commit_hash
            )
        except GitCommandError as e:
            raise HistoryUnavailable(f"Cannot list files changed by {commit_hash}: {e}") from e

        # dict keeps first-seen order while dropping per-parent duplicates
        return list(dict.fromkeys(path for path in output.split("\0") if path))

    def repository_root(self) -> str:
        """Absolute path of the repository's working tree."""
        root = self.repo.working_tree_dir
        if root is None:
            raise HistoryUnavailable(f"Repository has no working tree: {self.repo.git_dir}")
        return str(root)
