from __future__ import annotations


class GitSignsError(Exception):
    """Base exception class for all gitsigns-specific errors.

    This is the root of the gitsigns exception hierarchy. Every failure the
    core surfaces to an awaiting caller inherits from this class, so editor
    integrations can catch one type at their boundary while letting system
    exceptions propagate naturally.

    Attributes:
        message: Human-readable error message describing what went wrong.

    Example:
        ```python
        try:
            record = await client.run_blame(path, toplevel, lines, lnum)
        except GitSignsError as e:
            logger.error("blame_failed", error=e.message)
        ```
    """

    def __init__(self, message: str) -> None:
        """Initialize the GitSignsError.

        Args:
            message: Human-readable error message.
        """
        self.message = message
        super().__init__(message)
