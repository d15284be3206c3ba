"""Version string parsing for ``git --version``."""

from __future__ import annotations

import re

from gitsigns.exceptions import VersionParseError
from gitsigns.models import ToolVersion

__all__ = ["parse_version", "parse_version_output"]

_VERSION = re.compile(r"^(\d+)\.(\d+)\.(\d+)$")
_VERSION_PREFIX = re.compile(r"^\d+\.\d+\.\d+")
_BANNER = "git version"


def parse_version(version: str) -> ToolVersion:
    """Parse a strict ``major.minor.patch`` string.

    Raises:
        VersionParseError: If the string is not three dot-separated integers.
    """
    match = _VERSION.match(version)
    if match is None:
        raise VersionParseError("Invalid git version", raw=version)
    major, minor, patch = (int(part) for part in match.groups())
    return ToolVersion(major, minor, patch)


def parse_version_output(line: str) -> ToolVersion:
    """Parse the banner printed by ``git --version``.

    Vendor suffixes such as ``2.39.3 (Apple Git-145)`` or
    ``2.42.0.windows.2`` are ignored.

    Raises:
        VersionParseError: If the banner or the version token is malformed.
    """
    if not line.startswith(_BANNER):
        raise VersionParseError("Unexpected git --version output", raw=line)
    parts = line.split()
    if len(parts) < 3:
        raise VersionParseError("Missing version in git --version output", raw=line)
    match = _VERSION_PREFIX.match(parts[2])
    if match is None:
        raise VersionParseError("Invalid git version", raw=parts[2])
    return parse_version(match.group(0))
