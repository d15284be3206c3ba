"""Constants shared by the runner, parsers, and git facade."""

from __future__ import annotations

from typing import Final, Literal

#: Default executable invoked for every git operation.
DEFAULT_GIT_EXECUTABLE: Final[str] = "git"

#: Arguments placed before every git subcommand.
GIT_BASE_ARGS: Final[tuple[str, ...]] = ("--no-pager",)

DiffAlgorithm = Literal["myers", "minimal", "patience", "histogram"]

DEFAULT_DIFF_ALGORITHM: Final[DiffAlgorithm] = "myers"

#: Suffix appended to the staged-file path for the working copy written by run_diff.
DIFF_BUFFER_SUFFIX: Final[str] = "_buf"

#: Value of ``rev-parse --abbrev-ref HEAD`` when HEAD is not a symbolic ref.
DETACHED_HEAD: Final[str] = "HEAD"

#: Branch sentinel reported while a rebase is in progress.
REBASING_HEAD: Final[str] = "(rebasing)"

#: Branch sentinel reported when the branch is unknown (detached HEAD).
UNKNOWN_HEAD: Final[str] = ""

#: Paths under the git dir whose presence means a rebase is in progress.
REBASE_MARKERS: Final[tuple[str, ...]] = ("rebase-merge", "rebase-apply")

#: First version of git supporting ``rev-parse --absolute-git-dir``.
ABSOLUTE_GIT_DIR_VERSION: Final[tuple[int, int, int]] = (2, 13, 0)

#: Number of leading sha characters shown in blame output.
ABBREV_SHA_LENGTH: Final[int] = 8

#: Sha git blame reports for lines that are not committed yet.
NOT_COMMITTED_SHA: Final[str] = "0" * 40

#: Index stage of a normal (non-conflicted) entry.
STAGE_NORMAL: Final[int] = 0

#: StreamReader buffer limit. Lines are split by the runner, so a line
#: longer than this is still delivered whole.
STREAM_BUFFER_LIMIT: Final[int] = 2**20

#: Bytes requested from a pipe per read.
STREAM_READ_CHUNK: Final[int] = 2**16

#: Codec error handler keeping undecodable bytes round-trippable.
ENCODING_ERRORS: Final[str] = "surrogateescape"

#: Tab width used to measure popup lines when the window sets none.
DEFAULT_TABSTOP: Final[int] = 8
