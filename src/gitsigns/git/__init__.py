"""Async git operations for editor git signs.

Example:
    ```python
    from gitsigns.git import GitClient

    client = GitClient()
    await client.detect_version()
    record = await client.run_blame("src/app.py", toplevel, buffer_lines, 42)
    ```
"""

from __future__ import annotations

from gitsigns.git.client import GitClient
from gitsigns.git.hunks import (
    create_patch,
    find_hunk,
    find_nearest_hunk,
    get_summary,
)
from gitsigns.git.version import VersionGate
from gitsigns.models import (
    BlameRecord,
    FileStatus,
    Hunk,
    HunkRange,
    HunkSummary,
    RepoInfo,
    ToolVersion,
)

__all__ = [
    "BlameRecord",
    "FileStatus",
    "GitClient",
    "Hunk",
    "HunkRange",
    "HunkSummary",
    "RepoInfo",
    "ToolVersion",
    "VersionGate",
    "create_patch",
    "find_hunk",
    "find_nearest_hunk",
    "get_summary",
]
