"""gitsigns exception hierarchy.

All exceptions can be imported from this package:
    from gitsigns.exceptions import GitCommandError, ParseError
"""

from __future__ import annotations

# Base exception
from gitsigns.exceptions.base import GitSignsError

# Configuration exceptions
from gitsigns.exceptions.config import ConfigError

# Git-related exceptions
from gitsigns.exceptions.git import (
    GitCommandError,
    GitError,
    VersionAlreadySetError,
    VersionGateError,
    VersionNotSetError,
)

# Line protocol exceptions
from gitsigns.exceptions.parse import (
    BlameParseError,
    HunkParseError,
    ParseError,
    RepoInfoParseError,
    VersionParseError,
)

# Runner-related exceptions
from gitsigns.exceptions.runner import (
    CommandNotFoundError,
    RunnerError,
    WorkingDirectoryError,
)

__all__ = [
    # Base
    "GitSignsError",
    # Config
    "ConfigError",
    # Git
    "GitCommandError",
    "GitError",
    "VersionAlreadySetError",
    "VersionGateError",
    "VersionNotSetError",
    # Parse
    "BlameParseError",
    "HunkParseError",
    "ParseError",
    "RepoInfoParseError",
    "VersionParseError",
    # Runner
    "CommandNotFoundError",
    "RunnerError",
    "WorkingDirectoryError",
]
