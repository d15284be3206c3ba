"""Data models for the process runner.

Frozen dataclasses with slots for the result of one process execution and
for individual streamed lines.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

__all__ = [
    "CommandResult",
    "StreamLine",
    "StreamName",
]

StreamName = Literal["stdout", "stderr"]


@dataclass(frozen=True, slots=True)
class StreamLine:
    """A single line from streaming command output.

    Attributes:
        content: The line content without trailing newline.
        stream: Which output stream this line came from.
        timestamp_ms: Milliseconds since command start when line was received.
    """

    content: str
    stream: StreamName
    timestamp_ms: int


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Result of executing a single command to completion.

    Attributes:
        command: The argument vector that was executed.
        returncode: Exit code from the command (0 = success).
        stdout_lines: Lines written to stdout, in order.
        stderr_lines: Lines written to stderr, in order.
        duration_ms: Execution time in milliseconds.
    """

    command: tuple[str, ...]
    returncode: int
    stdout_lines: tuple[str, ...] = ()
    stderr_lines: tuple[str, ...] = ()
    duration_ms: int = 0

    @property
    def success(self) -> bool:
        """True if the process exited with status 0."""
        return self.returncode == 0

    @property
    def stdout(self) -> str:
        return "\n".join(self.stdout_lines)

    @property
    def stderr(self) -> str:
        return "\n".join(self.stderr_lines)
