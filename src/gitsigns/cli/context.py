"""CLI context and utilities bridging click to the async git client."""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Callable
from enum import IntEnum
from typing import Any, TypeVar

from gitsigns.logging import bind_context, clear_context

__all__ = ["ExitCode", "async_command"]


class ExitCode(IntEnum):
    """Exit codes for the gitsigns CLI."""

    SUCCESS = 0
    FAILURE = 1


F = TypeVar("F", bound=Callable[..., Any])


def async_command(f: F) -> F:
    """Decorator to run async click commands with asyncio.run().

    The command name is bound to the log context for the duration of the
    command, and all bound context is cleared when it returns.
    """

    @functools.wraps(f)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        bind_context(command=f.__name__)
        try:
            return asyncio.run(f(*args, **kwargs))
        finally:
            clear_context()

    return wrapper  # type: ignore[return-value]
