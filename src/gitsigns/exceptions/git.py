"""Git operation exceptions.

Exceptions for state-changing git commands and for the version gate that
selects command-line flags.
"""

from __future__ import annotations

from collections.abc import Sequence

from gitsigns.exceptions.base import GitSignsError


class GitError(GitSignsError):
    """Base exception for git operations.

    Attributes:
        message: Human-readable error message.
        operation: Facade operation that failed (e.g. ``"stage_lines"``).
    """

    def __init__(self, message: str, operation: str | None = None) -> None:
        self.operation = operation
        super().__init__(message)


class GitCommandError(GitError):
    """A mutating git command exited nonzero or wrote to stderr.

    Attributes:
        command: The full argument vector that was run.
        returncode: Exit status of the process.
        stderr: Concatenated stderr lines.
    """

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        command: Sequence[str] | None = None,
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        self.command = list(command) if command is not None else None
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message, operation=operation)


class VersionGateError(GitSignsError):
    """Base exception for misuse of the version gate."""

    pass


class VersionNotSetError(VersionGateError):
    """A version-gated decision was requested before detection finished."""

    def __init__(
        self,
        message: str = "git version has not been detected yet",
    ) -> None:
        super().__init__(message)


class VersionAlreadySetError(VersionGateError):
    """The version gate was written a second time."""

    def __init__(self, message: str = "git version is already set") -> None:
        super().__init__(message)
