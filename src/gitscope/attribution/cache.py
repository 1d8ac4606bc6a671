"""Process-wide memo of the files changed by each commit."""

import asyncio
from typing import Dict, List

from gitscope.git.history import HistoryReader


class AttributionCache:
    """Memoizes ``HistoryReader.files_changed_by`` by commit hash.

    Entries are never evicted: a commit's file list cannot change once it is
    in the history. Concurrent first lookups of the same hash may each run
    the reader; they store identical lists, so the last write wins.
    """

    def __init__(self, reader: HistoryReader):
        self.reader = reader
        self._files: Dict[str, List[str]] = {}

    def __contains__(self, commit_hash: str) -> bool:
        return commit_hash in self._files

    def __len__(self) -> int:
        return len(self._files)

    async def get_files(self, commit_hash: str) -> List[str]:
        """Return the files changed by ``commit_hash``, reading git at most once."""
        if commit_hash in self._files:
            return self._files[commit_hash]

        files = await asyncio.to_thread(self.reader.files_changed_by, commit_hash)
        self._files[commit_hash] = files
        return files
