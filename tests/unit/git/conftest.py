"""Shared fixtures for git client tests."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any
from unittest.mock import AsyncMock

import pytest

from gitsigns.config import GitSignsConfig
from gitsigns.git import GitClient, VersionGate
from gitsigns.models import ToolVersion
from gitsigns.runners.command import CommandRunner
from gitsigns.runners.models import CommandResult


def make_result(
    *,
    command: Sequence[str] = ("git",),
    returncode: int = 0,
    stdout_lines: Sequence[str] = (),
    stderr_lines: Sequence[str] = (),
    duration_ms: int = 5,
) -> CommandResult:
    """Create a CommandResult with convenient defaults."""
    return CommandResult(
        command=tuple(command),
        returncode=returncode,
        stdout_lines=tuple(stdout_lines),
        stderr_lines=tuple(stderr_lines),
        duration_ms=duration_ms,
    )


def replay(result: CommandResult) -> Callable[..., Any]:
    """Build a ``run`` side effect that feeds ``result`` through the callbacks."""

    async def run(command: Sequence[str], **kwargs: Any) -> CommandResult:
        on_stdout = kwargs.get("on_stdout")
        on_stderr = kwargs.get("on_stderr")
        for line in result.stdout_lines:
            if on_stdout is not None:
                on_stdout(line)
        for line in result.stderr_lines:
            if on_stderr is not None:
                on_stderr(line)
        on_exit = kwargs.get("on_exit")
        if on_exit is not None:
            on_exit(result)
        return result

    return run


def respond(runner: AsyncMock, **result_kwargs: Any) -> CommandResult:
    """Make the next ``runner.run`` call replay the given output."""
    result = make_result(**result_kwargs)
    runner.run.side_effect = replay(result)
    return result


@pytest.fixture
def mock_runner() -> AsyncMock:
    """Create a mock CommandRunner that succeeds with no output by default."""
    runner = AsyncMock(spec=CommandRunner)
    runner.run.side_effect = replay(make_result())
    return runner


@pytest.fixture
def git_config(clean_env: None) -> GitSignsConfig:
    return GitSignsConfig(git_executable="git", diff_algorithm="myers")


@pytest.fixture
def git_client(mock_runner: AsyncMock, git_config: GitSignsConfig) -> GitClient:
    """Create a GitClient with a mocked runner and a detected version."""
    return GitClient(
        mock_runner,
        version_gate=VersionGate(ToolVersion(2, 30, 1)),
        config=git_config,
    )


def called_argv(runner: AsyncMock, call_index: int = -1) -> list[str]:
    """Return the argv passed to ``runner.run`` on the given call."""
    return list(runner.run.call_args_list[call_index].args[0])
