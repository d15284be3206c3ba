"""Tests for the rev-parse repository info parser."""

from __future__ import annotations

from pathlib import Path

import pytest

from gitsigns.exceptions import RepoInfoParseError
from gitsigns.parsers.repo_info import RepoInfoParser, process_abbrev_head


def _parse(lines: list[str], cwd: Path, **kwargs: bool):
    parser = RepoInfoParser(cwd, **kwargs)
    for line in lines:
        parser.feed(line)
    return parser.finish()


class TestProcessAbbrevHead:
    def test_branch_passes_through(self, tmp_path: Path) -> None:
        assert process_abbrev_head(tmp_path, "main") == "main"

    @pytest.mark.parametrize("marker", ["rebase-merge", "rebase-apply"])
    def test_rebase_in_progress(self, tmp_path: Path, marker: str) -> None:
        (tmp_path / marker).mkdir()
        assert process_abbrev_head(tmp_path, "HEAD") == "(rebasing)"

    def test_detached_head_is_unknown(self, tmp_path: Path) -> None:
        assert process_abbrev_head(tmp_path, "HEAD") == ""

    def test_detached_head_in_debug_mode(self, tmp_path: Path) -> None:
        assert process_abbrev_head(tmp_path, "HEAD", debug_mode=True) == "HEAD"

    def test_no_gitdir(self) -> None:
        assert process_abbrev_head(None, "HEAD") == "HEAD"


class TestRepoInfoParser:
    def test_absolute_git_dir(self, tmp_path: Path) -> None:
        info = _parse(
            [str(tmp_path), str(tmp_path / ".git"), "feature/x"], tmp_path / "src"
        )
        assert info.toplevel == tmp_path
        assert info.gitdir == tmp_path / ".git"
        assert info.abbrev_head == "feature/x"

    def test_relative_git_dir_resolved_against_cwd(self, tmp_path: Path) -> None:
        (tmp_path / ".git").mkdir()
        (tmp_path / "src").mkdir()
        info = _parse(
            [str(tmp_path), "../.git", "main"],
            tmp_path / "src",
            absolute_git_dir=False,
        )
        assert info.gitdir == (tmp_path / ".git").resolve()

    def test_rebase_sentinel_reported(self, tmp_path: Path) -> None:
        gitdir = tmp_path / ".git"
        (gitdir / "rebase-merge").mkdir(parents=True)
        info = _parse([str(tmp_path), str(gitdir), "HEAD"], tmp_path)
        assert info.abbrev_head == "(rebasing)"

    @pytest.mark.parametrize("count", [0, 2, 4])
    def test_wrong_line_count(self, tmp_path: Path, count: int) -> None:
        with pytest.raises(RepoInfoParseError):
            _parse(["x"] * count, tmp_path)
