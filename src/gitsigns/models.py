"""Typed results produced by the line protocol parsers.

Frozen dataclasses with ``to_dict()`` for handing results to an editor host
over a serialization boundary. :class:`Hunk` is the exception: it is filled
in line by line while a diff streams in.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Literal

from gitsigns.constants import NOT_COMMITTED_SHA

__all__ = [
    "BlameRecord",
    "FileStatus",
    "Hunk",
    "HunkRange",
    "HunkSummary",
    "HunkType",
    "RepoInfo",
    "ToolVersion",
]

HunkType = Literal["add", "delete", "change"]


# =============================================================================
# Version
# =============================================================================


@dataclass(frozen=True, slots=True, order=True)
class ToolVersion:
    """A ``major.minor.patch`` version triple.

    Ordering compares major, then minor, then patch numerically.
    """

    major: int
    minor: int
    patch: int

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.major, self.minor, self.patch)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


# =============================================================================
# Diff hunks
# =============================================================================


@dataclass(frozen=True, slots=True)
class HunkRange:
    """Start line and line count of one side of a hunk."""

    start: int
    count: int


@dataclass(slots=True)
class Hunk:
    """A contiguous change region from ``git diff --unified=0``.

    Attributes:
        removed: Range on the old (index) side.
        added: Range on the new (working copy) side.
        head: The raw ``@@ ... @@`` header line.
        lines: Content lines in order, each starting with its ``+``/``-``
            marker.
    """

    removed: HunkRange
    added: HunkRange
    head: str = ""
    lines: list[str] = field(default_factory=list)

    @property
    def type(self) -> HunkType:
        if self.removed.count > 0 and self.added.count > 0:
            return "change"
        if self.removed.count > 0:
            return "delete"
        return "add"

    @property
    def start(self) -> int:
        """First line of the hunk in the working copy."""
        return self.added.start

    @property
    def vend(self) -> int:
        """Last line of the hunk in the working copy.

        A pure deletion occupies no lines, so it ends where it starts.
        """
        if self.added.count == 0:
            return self.added.start
        return self.added.start + self.added.count - 1

    def to_dict(self) -> dict[str, object]:
        data = asdict(self)
        data["type"] = self.type
        return data


@dataclass(frozen=True, slots=True)
class HunkSummary:
    """Line counts across a set of hunks, for a status line."""

    added: int = 0
    changed: int = 0
    removed: int = 0

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


# =============================================================================
# Blame
# =============================================================================


@dataclass(frozen=True, slots=True)
class BlameRecord:
    """One ``git blame --line-porcelain`` record.

    The first four fields come from the positional header line and are
    always present; the rest are optional porcelain ``key value`` fields.

    Attributes:
        sha: Full commit sha.
        abbrev_sha: First eight characters of ``sha``.
        orig_lnum: Line number in the original file.
        final_lnum: Line number in the final file.
        previous: ``<sha> <filename>`` of the previous version, if any.
        boundary: True if the commit is a boundary commit.
        extra: Porcelain fields without a dedicated attribute.
    """

    sha: str
    abbrev_sha: str
    orig_lnum: int
    final_lnum: int
    author: str | None = None
    author_mail: str | None = None
    author_time: int | None = None
    author_tz: str | None = None
    committer: str | None = None
    committer_mail: str | None = None
    committer_time: int | None = None
    committer_tz: str | None = None
    summary: str | None = None
    previous: str | None = None
    filename: str | None = None
    boundary: bool = False
    extra: dict[str, str] = field(default_factory=dict)

    @property
    def is_uncommitted(self) -> bool:
        """True for lines that only exist in the working copy."""
        return self.sha == NOT_COMMITTED_SHA

    def to_dict(self) -> dict[str, object]:
        return asdict(self)


# =============================================================================
# Repository and index metadata
# =============================================================================


@dataclass(frozen=True, slots=True)
class RepoInfo:
    """Location and branch of the repository containing a path.

    Attributes:
        toplevel: Absolute path of the working tree root.
        gitdir: Absolute path of the repository metadata directory.
        abbrev_head: Current branch name, ``"(rebasing)"`` during a
            rebase, or ``""`` when HEAD is detached.
    """

    toplevel: Path
    gitdir: Path
    abbrev_head: str

    def to_dict(self) -> dict[str, object]:
        return {
            "toplevel": str(self.toplevel),
            "gitdir": str(self.gitdir),
            "abbrev_head": self.abbrev_head,
        }


@dataclass(frozen=True, slots=True)
class FileStatus:
    """Index status of a single file from ``git ls-files --stage --others``.

    Attributes:
        relpath: Path relative to the working tree root, or None when git
            reported nothing (ignored file, or file outside the repo).
        object_name: Blob id in the index (None when untracked or conflicted).
        mode_bits: File mode in the index, e.g. ``"100644"``.
        has_conflict: True when the index holds merge-conflict stages.
    """

    relpath: str | None = None
    object_name: str | None = None
    mode_bits: str | None = None
    has_conflict: bool = False

    @property
    def tracked(self) -> bool:
        return self.object_name is not None or self.has_conflict

    def to_dict(self) -> dict[str, object]:
        return asdict(self)
