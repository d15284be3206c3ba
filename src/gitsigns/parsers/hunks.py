"""Unified diff hunk parser."""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import Enum

from gitsigns.exceptions import HunkParseError
from gitsigns.models import Hunk, HunkRange

__all__ = ["HunkParser", "parse_diff", "parse_hunk_header"]

_HUNK_HEADER = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")


class _State(Enum):
    AWAITING_HEADER = "awaiting-header"
    IN_HUNK = "in-hunk"


def parse_hunk_header(line: str) -> Hunk:
    """Create an empty hunk from an ``@@ -a,b +c,d @@`` header.

    Omitted lengths default to 1.

    Raises:
        HunkParseError: If the line is not a well-formed hunk header.
    """
    match = _HUNK_HEADER.match(line)
    if match is None:
        raise HunkParseError("Malformed hunk header", raw=line)
    old_start, old_len, new_start, new_len = match.groups()
    return Hunk(
        removed=HunkRange(int(old_start), int(old_len) if old_len else 1),
        added=HunkRange(int(new_start), int(new_len) if new_len else 1),
        head=line,
    )


class HunkParser:
    """Collect hunks from ``git diff`` output.

    Every line after a header belongs to that hunk until the next header.
    Anything before the first header (diff preamble, raw status lines) is
    dropped.
    """

    def __init__(self) -> None:
        self._state = _State.AWAITING_HEADER
        self._hunks: list[Hunk] = []

    def feed(self, line: str) -> None:
        if line.startswith("@@"):
            self._hunks.append(parse_hunk_header(line))
            self._state = _State.IN_HUNK
        elif self._state is _State.IN_HUNK:
            self._hunks[-1].lines.append(line)

    def finish(self) -> list[Hunk]:
        return self._hunks


def parse_diff(lines: Iterable[str]) -> list[Hunk]:
    """Parse complete diff output into hunks."""
    parser = HunkParser()
    for line in lines:
        parser.feed(line)
    return parser.finish()
