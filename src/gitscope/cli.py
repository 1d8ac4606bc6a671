"""Command line entry point listing the commits attributed to a package."""

import argparse
import asyncio
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv
from loguru import logger

from gitscope.attribution.commit_filter import CommitFilter
from gitscope.config import Settings
from gitscope.errors import GitscopeError
from gitscope.git.history import HistoryReader
from gitscope.plugin.tag import tag_format
from gitscope.types.commit import Commit


def format_commit(commit: Commit) -> str:
    """Format a single commit as one summary line."""
    subject = commit.message.splitlines()[0] if commit.message else ""
    return f"{commit.hash[:8]} {subject} ({len(commit.files or [])} files)"


async def package_commits(commit_filter: CommitFilter, since: Optional[str] = None) -> List[Commit]:
    """Return the commits since ``since`` that touched the filter's package."""
    return await commit_filter.filter_to_package(commit_filter.reader.commits_since(since))


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="List the commits that touched the current monorepo package")
    parser.add_argument("--cwd", type=str, help="Directory inside the package", default=".")
    parser.add_argument("--since", type=str, help="Git reference of the last release (default: full history)")
    parser.add_argument("--tag-format", action="store_true", help="Only print the package tag format")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    load_dotenv()
    if not args.verbose:
        logger.remove()
        logger.add(sys.stderr, level="INFO")

    cwd = os.path.abspath(args.cwd)
    settings = Settings.from_env()

    try:
        commit_filter = CommitFilter(HistoryReader(cwd), max_concurrency=settings.max_concurrency, cwd=cwd)
        package = commit_filter.resolve_package()
        if args.tag_format:
            print(tag_format(package.name))
            return 0
        commits = asyncio.run(package_commits(commit_filter, args.since))
    except GitscopeError as e:
        logger.error(str(e))
        return 1

    logger.info(f"Found {len(commits)} commits for package {package.name} since {args.since or 'the first commit'}")
    for commit in commits:
        print(format_commit(commit))
    print(f"Tag format: {tag_format(package.name)}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
