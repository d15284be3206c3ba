"""Async subprocess execution with line-oriented output streaming.

For git operations, use :class:`gitsigns.git.GitClient`, which composes the
runner with the line protocol parsers.
"""

from __future__ import annotations

from gitsigns.runners.command import CommandRunner, ExitCallback, LineCallback
from gitsigns.runners.models import CommandResult, StreamLine, StreamName

__all__ = [
    "CommandResult",
    "CommandRunner",
    "ExitCallback",
    "LineCallback",
    "StreamLine",
    "StreamName",
]
