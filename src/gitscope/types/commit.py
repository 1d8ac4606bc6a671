"""Commit records read from the git history."""

from datetime import datetime
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Commit(BaseModel):
    """Structured representation of a Git commit."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    hash: str = Field(..., description="The commit hash")
    message: str = Field("", description="The trimmed commit message")
    tags: List[str] = Field(default_factory=list, alias="gitTags", description="Tags pointing at the commit")
    committer_date: Optional[datetime] = Field(None, alias="committerDate", description="The commit timestamp")
    files: Optional[List[str]] = Field(None, description="Files changed by the commit, relative to the repo root")

    @field_validator("message", mode="before")
    @classmethod
    def _strip_message(cls, value: Any) -> Any:
        return value.strip() if isinstance(value, str) else value

    def with_files(self, files: Iterable[str]) -> "Commit":
        """Return a copy of this commit carrying its changed files."""
        return self.model_copy(update={"files": list(files)})
