"""Command-line interface for inspecting git-signs data."""

from __future__ import annotations

from gitsigns.cli.context import ExitCode, async_command

__all__ = ["ExitCode", "async_command"]
