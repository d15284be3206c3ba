"""Parser for ``git blame --line-porcelain`` output.

Each record starts with a positional header ``<sha> <orig> <final> [<n>]``,
followed by ``key value...`` lines and terminated by the blamed source line,
which git prefixes with a tab.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any

from gitsigns.constants import ABBREV_SHA_LENGTH
from gitsigns.exceptions import BlameParseError
from gitsigns.models import BlameRecord

__all__ = ["BlameParser", "parse_blame", "parse_blame_header"]


class _State(Enum):
    AWAITING_HEADER = "awaiting-header"
    AWAITING_FIELD = "awaiting-field"


def _to_int(key: str) -> Callable[[str], int]:
    def convert(value: str) -> int:
        try:
            return int(value)
        except ValueError:
            raise BlameParseError(f"Non-numeric {key}", raw=value) from None

    return convert


#: Porcelain keys (dashes already normalized) with a dedicated record field.
_FIELDS: dict[str, Callable[[str], Any]] = {
    "author": str,
    "author_mail": str,
    "author_time": _to_int("author-time"),
    "author_tz": str,
    "committer": str,
    "committer_mail": str,
    "committer_time": _to_int("committer-time"),
    "committer_tz": str,
    "summary": str,
    "previous": str,
    "filename": str,
    "boundary": lambda _value: True,
}


def parse_blame_header(line: str) -> dict[str, Any]:
    """Split a porcelain header line into its positional fields.

    Raises:
        BlameParseError: If fields are missing or line numbers are not numeric.
    """
    parts = line.split(" ")
    if len(parts) < 3 or not parts[0]:
        raise BlameParseError("Malformed blame header", raw=line)
    sha, orig, final = parts[0], parts[1], parts[2]
    try:
        orig_lnum, final_lnum = int(orig), int(final)
    except ValueError:
        raise BlameParseError("Malformed blame header", raw=line) from None
    return {
        "sha": sha,
        "abbrev_sha": sha[:ABBREV_SHA_LENGTH],
        "orig_lnum": orig_lnum,
        "final_lnum": final_lnum,
    }


class BlameParser:
    """Build :class:`BlameRecord` objects from porcelain lines."""

    def __init__(self) -> None:
        self._state = _State.AWAITING_HEADER
        self._records: list[BlameRecord] = []
        self._fields: dict[str, Any] = {}
        self._extra: dict[str, str] = {}

    def _flush(self) -> None:
        if self._fields:
            self._records.append(BlameRecord(**self._fields, extra=self._extra))
        self._fields = {}
        self._extra = {}

    def feed(self, line: str) -> None:
        if self._state is _State.AWAITING_HEADER:
            self._fields = parse_blame_header(line)
            self._state = _State.AWAITING_FIELD
            return

        if line.startswith("\t"):
            # Blamed source text ends the record
            self._flush()
            self._state = _State.AWAITING_HEADER
            return

        key, _, value = line.partition(" ")
        key = key.replace("-", "_")
        convert = _FIELDS.get(key)
        if convert is None:
            self._extra[key] = value
        else:
            self._fields[key] = convert(value)

    def finish(self) -> list[BlameRecord]:
        """Return all records.

        Raises:
            BlameParseError: If the output contained no record at all.
        """
        self._flush()
        if not self._records:
            raise BlameParseError("No blame output")
        return self._records


def parse_blame(lines: Iterable[str]) -> BlameRecord:
    """Parse porcelain output for a single line into one record."""
    parser = BlameParser()
    for line in lines:
        parser.feed(line)
    return parser.finish()[0]
