"""Runtime settings for gitscope, read from the environment."""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from loguru import logger

MAX_THREADS_ENV = "SRM_MAX_THREADS"
DEFAULT_MAX_CONCURRENCY = 500


def _parse_max_concurrency(raw: Optional[str]) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_MAX_CONCURRENCY
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value < 1:
        logger.warning(f"Ignoring invalid {MAX_THREADS_ENV}={raw!r}, using {DEFAULT_MAX_CONCURRENCY}")
        return DEFAULT_MAX_CONCURRENCY
    return value


@dataclass(frozen=True)
class Settings:
    """Settings shared by the commit filter and the plugin hooks."""

    max_concurrency: int = DEFAULT_MAX_CONCURRENCY

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        return cls(max_concurrency=_parse_max_concurrency(env.get(MAX_THREADS_ENV)))
