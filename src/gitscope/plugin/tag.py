"""Package-scoped release tags."""

from typing import Optional


def version_to_git_tag(name: str, version: Optional[str]) -> Optional[str]:
    """Scope ``version`` to the package, e.g. ``my-pkg-v1.2.3``."""
    if not version:
        return None
    return f"{name}-v{version}"


def tag_format(name: str) -> str:
    """Tag template with a single ``${version}`` placeholder for the host to expand."""
    return f"{name}-v${{version}}"
