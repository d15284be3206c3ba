from __future__ import annotations

import sys
from unittest.mock import AsyncMock, MagicMock

import pytest


def python_command(source: str) -> list[str]:
    """Build an argv running ``source`` with the current interpreter."""
    return [sys.executable, "-c", source]


def make_reader(*chunks: bytes) -> AsyncMock:
    """Create a mock StreamReader whose read yields ``chunks`` then EOF."""
    reader = AsyncMock()
    reader.read = AsyncMock(side_effect=[*chunks, b""])
    return reader


@pytest.fixture
def mock_process() -> MagicMock:
    """Create a mock subprocess with empty output and exit status 0."""
    process = MagicMock()
    process.returncode = 0
    process.pid = 12345
    process.stdin = None
    process.stdout = make_reader()
    process.stderr = make_reader()
    process.wait = AsyncMock(return_value=0)
    return process
