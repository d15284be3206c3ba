"""Line protocol parsers turning git output into typed results."""

from __future__ import annotations

from gitsigns.parsers.base import LineParser
from gitsigns.parsers.blame import BlameParser, parse_blame, parse_blame_header
from gitsigns.parsers.file_status import FileStatusParser, parse_file_status
from gitsigns.parsers.hunks import HunkParser, parse_diff, parse_hunk_header
from gitsigns.parsers.repo_info import RepoInfoParser, process_abbrev_head
from gitsigns.parsers.version import parse_version, parse_version_output

__all__ = [
    "BlameParser",
    "FileStatusParser",
    "HunkParser",
    "LineParser",
    "RepoInfoParser",
    "parse_blame",
    "parse_blame_header",
    "parse_diff",
    "parse_file_status",
    "parse_hunk_header",
    "parse_version",
    "parse_version_output",
    "process_abbrev_head",
]
