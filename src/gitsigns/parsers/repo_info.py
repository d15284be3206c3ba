"""Parser for ``git rev-parse --show-toplevel --git-dir --abbrev-ref HEAD``."""

from __future__ import annotations

from pathlib import Path

from gitsigns.constants import (
    DETACHED_HEAD,
    REBASE_MARKERS,
    REBASING_HEAD,
    UNKNOWN_HEAD,
)
from gitsigns.exceptions import RepoInfoParseError
from gitsigns.models import RepoInfo

__all__ = ["RepoInfoParser", "process_abbrev_head"]

_EXPECTED_LINES = 3


def process_abbrev_head(gitdir: Path | None, head: str, debug_mode: bool = False) -> str:
    """Turn the raw ``--abbrev-ref HEAD`` value into a displayable branch.

    A detached HEAD is reported as ``"(rebasing)"`` while a rebase is in
    progress, as an empty string otherwise, or unchanged in debug mode.
    """
    if gitdir is None or head != DETACHED_HEAD:
        return head
    if any((gitdir / marker).exists() for marker in REBASE_MARKERS):
        return REBASING_HEAD
    if debug_mode:
        return head
    return UNKNOWN_HEAD


class RepoInfoParser:
    """Collect the three fixed-order ``rev-parse`` lines.

    Args:
        cwd: Directory rev-parse ran in; relative git dirs resolve against it.
        absolute_git_dir: True when ``--absolute-git-dir`` was used, so the
            second line is already absolute.
        debug_mode: Passed through to :func:`process_abbrev_head`.
    """

    def __init__(
        self,
        cwd: Path,
        *,
        absolute_git_dir: bool = True,
        debug_mode: bool = False,
    ) -> None:
        self._cwd = cwd
        self._absolute_git_dir = absolute_git_dir
        self._debug_mode = debug_mode
        self._lines: list[str] = []

    def feed(self, line: str) -> None:
        self._lines.append(line)

    def finish(self) -> RepoInfo:
        """Build the RepoInfo.

        Raises:
            RepoInfoParseError: If rev-parse did not print exactly three lines.
        """
        if len(self._lines) != _EXPECTED_LINES:
            raise RepoInfoParseError(
                f"Expected {_EXPECTED_LINES} lines from rev-parse, "
                f"got {len(self._lines)}",
                raw="\n".join(self._lines),
            )
        toplevel, gitdir_line, head = self._lines
        gitdir = Path(gitdir_line)
        if not self._absolute_git_dir:
            gitdir = (self._cwd / gitdir).resolve()
        return RepoInfo(
            toplevel=Path(toplevel),
            gitdir=gitdir,
            abbrev_head=process_abbrev_head(gitdir, head, self._debug_mode),
        )
