from __future__ import annotations

from pathlib import Path

from gitsigns.exceptions.base import GitSignsError


class RunnerError(GitSignsError):
    """Base exception for process runner failures.

    Attributes:
        message: Human-readable error message.
    """

    pass


class WorkingDirectoryError(RunnerError):
    """Working directory does not exist or is not accessible.

    Attributes:
        message: Human-readable error message.
        path: The path that was not found.
    """

    def __init__(self, message: str, path: Path | str | None = None) -> None:
        """Initialize the WorkingDirectoryError.

        Args:
            message: Human-readable error message.
            path: The path that was not found.
        """
        self.path = path
        super().__init__(message)


class CommandNotFoundError(RunnerError):
    """Executable could not be spawned (missing from PATH or not executable).

    Attributes:
        message: Human-readable error message.
        executable: The command that could not be launched.
    """

    def __init__(self, message: str, executable: str | None = None) -> None:
        """Initialize the CommandNotFoundError.

        Args:
            message: Human-readable error message.
            executable: The command that could not be launched.
        """
        self.executable = executable
        super().__init__(message)
