"""Exceptions for git output that does not match its line protocol."""

from __future__ import annotations

from gitsigns.exceptions.base import GitSignsError


class ParseError(GitSignsError):
    """Output did not match the expected line protocol.

    Attributes:
        message: Human-readable error message.
        raw: The offending raw text, kept for diagnosis.
    """

    def __init__(self, message: str, raw: str | None = None) -> None:
        """Initialize the ParseError.

        Args:
            message: Human-readable error message.
            raw: The offending raw text.
        """
        self.raw = raw
        if raw is not None:
            message = f"{message}: {raw!r}"
        super().__init__(message)


class HunkParseError(ParseError):
    """A ``@@`` line is not a valid unified-diff hunk header."""

    pass


class BlameParseError(ParseError):
    """Blame porcelain output is missing or has a malformed header."""

    pass


class VersionParseError(ParseError):
    """A version string is not of the form ``major.minor.patch``."""

    pass


class RepoInfoParseError(ParseError):
    """``rev-parse`` did not produce the three expected lines."""

    pass
