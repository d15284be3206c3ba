"""Base protocol for line protocol parsers."""

from __future__ import annotations

from typing import Protocol, TypeVar

__all__ = ["LineParser"]

T_co = TypeVar("T_co", covariant=True)


class LineParser(Protocol[T_co]):
    """Protocol for reducers over git's line-oriented output.

    A parser instance holds the state of exactly one invocation: create a
    new one per command, ``feed`` it every stdout line in order, then call
    ``finish`` once to obtain the typed result.
    """

    def feed(self, line: str) -> None:
        """Consume one output line (without its trailing newline)."""
        ...

    def finish(self) -> T_co:
        """Finalize the accumulated state into the parser's result."""
        ...
