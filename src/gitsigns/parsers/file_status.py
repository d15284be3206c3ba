"""Parser for ``git ls-files --stage --others --exclude-standard <file>``."""

from __future__ import annotations

from collections.abc import Iterable

from gitsigns.exceptions import ParseError
from gitsigns.models import FileStatus

__all__ = ["FileStatusParser", "parse_file_status"]


class FileStatusParser:
    """Fold ls-files lines for one file into a :class:`FileStatus`.

    Tracked entries look like ``<mode> <object> <stage>\\t<path>``; untracked
    entries are a bare path. A conflicted file yields one line per stage.
    """

    def __init__(self) -> None:
        self._relpath: str | None = None
        self._object_name: str | None = None
        self._mode_bits: str | None = None
        self._has_conflict = False

    def feed(self, line: str) -> None:
        if "\t" not in line:
            self._relpath = line
            return

        meta, _, relpath = line.partition("\t")
        self._relpath = relpath
        attrs = meta.split()
        if len(attrs) != 3 or not attrs[2].isdigit():
            raise ParseError("Malformed ls-files stage entry", raw=line)
        mode_bits, object_name, stage = attrs
        if int(stage) <= 1:
            self._mode_bits = mode_bits
            self._object_name = object_name
        else:
            self._has_conflict = True

    def finish(self) -> FileStatus:
        return FileStatus(
            relpath=self._relpath,
            object_name=self._object_name,
            mode_bits=self._mode_bits,
            has_conflict=self._has_conflict,
        )


def parse_file_status(lines: Iterable[str]) -> FileStatus:
    parser = FileStatusParser()
    for line in lines:
        parser.feed(line)
    return parser.finish()
