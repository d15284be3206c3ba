"""Command runner for async subprocess execution with line streaming.

This module provides the CommandRunner class for executing external commands
and delivering their stdout/stderr line by line, in arrival order, to
callbacks or to an ``async for`` loop.
"""

from __future__ import annotations

import asyncio
import contextlib
import os
import time
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from gitsigns.constants import (
    ENCODING_ERRORS,
    STREAM_BUFFER_LIMIT,
    STREAM_READ_CHUNK,
)
from gitsigns.exceptions import CommandNotFoundError, WorkingDirectoryError
from gitsigns.logging import get_logger
from gitsigns.runners.models import CommandResult, StreamLine, StreamName

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable, Sequence

__all__ = ["CommandRunner", "ExitCallback", "LineCallback"]

logger = get_logger(__name__)

LineCallback = Callable[[str], None]
ExitCallback = Callable[[CommandResult], None]

# Queue item marking the end of one output stream
_EOF = None


def _decode(line_bytes: bytes) -> str:
    return line_bytes.decode("utf-8", errors=ENCODING_ERRORS)


class _Execution:
    """One spawned process and the output collected from it so far."""

    def __init__(
        self,
        command: tuple[str, ...],
        process: asyncio.subprocess.Process,
        input_lines: Iterable[str] | None,
        start_time: float,
    ) -> None:
        self.command = command
        self.process = process
        self.input_lines = input_lines
        self.start_time = start_time
        self.stdout_lines: list[str] = []
        self.stderr_lines: list[str] = []
        self.returncode: int | None = None
        self.duration_ms = 0

    def _elapsed_ms(self) -> int:
        return int((time.monotonic() - self.start_time) * 1000)

    async def _pump(
        self,
        reader: asyncio.StreamReader | None,
        stream_name: StreamName,
        queue: asyncio.Queue[StreamLine | None],
    ) -> None:
        """Read one pipe to EOF, splitting it into lines on the shared queue.

        The pipe is read in fixed-size chunks, not with ``readline``, so a
        line of any length is delivered whole and the pipe keeps draining.
        A final line without a newline is delivered at EOF.
        """
        try:
            if reader is None:
                return
            pending = bytearray()
            while True:
                chunk = await reader.read(STREAM_READ_CHUNK)
                if not chunk:
                    break
                first, newline, rest = chunk.partition(b"\n")
                pending += first
                if not newline:
                    continue
                *complete, tail = rest.split(b"\n")
                await self._emit(queue, stream_name, bytes(pending))
                for line_bytes in complete:
                    await self._emit(queue, stream_name, line_bytes)
                pending = bytearray(tail)
            if pending:
                await self._emit(queue, stream_name, bytes(pending))
        finally:
            await queue.put(_EOF)

    async def _emit(
        self,
        queue: asyncio.Queue[StreamLine | None],
        stream_name: StreamName,
        line_bytes: bytes,
    ) -> None:
        await queue.put(
            StreamLine(
                content=_decode(line_bytes),
                stream=stream_name,
                timestamp_ms=self._elapsed_ms(),
            )
        )

    async def _feed(self, writer: asyncio.StreamWriter, lines: Iterable[str]) -> None:
        """Write each input line plus a newline, then close stdin."""
        try:
            for line in lines:
                writer.write(line.encode("utf-8", errors=ENCODING_ERRORS) + b"\n")
                await writer.drain()
        except (BrokenPipeError, ConnectionResetError):
            # The process exited without consuming all of its input
            logger.debug("command_stdin_closed_early", command=self.command[:2])
        finally:
            writer.close()
            with contextlib.suppress(BrokenPipeError, ConnectionResetError):
                await writer.wait_closed()

    async def lines(self) -> AsyncIterator[StreamLine]:
        """Yield output lines of both streams in arrival order.

        The process is always waited for, even if the consumer stops early.
        """
        queue: asyncio.Queue[StreamLine | None] = asyncio.Queue()
        tasks = [
            asyncio.create_task(self._pump(self.process.stdout, "stdout", queue)),
            asyncio.create_task(self._pump(self.process.stderr, "stderr", queue)),
        ]
        if self.input_lines is not None and self.process.stdin is not None:
            tasks.append(
                asyncio.create_task(self._feed(self.process.stdin, self.input_lines))
            )

        open_streams = 2
        try:
            while open_streams:
                item = await queue.get()
                if item is _EOF:
                    open_streams -= 1
                    continue
                if item.stream == "stdout":
                    self.stdout_lines.append(item.content)
                else:
                    self.stderr_lines.append(item.content)
                yield item
        finally:
            outcomes = await asyncio.gather(*tasks, return_exceptions=True)
            self.returncode = await self.process.wait()
            self.duration_ms = self._elapsed_ms()

        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome

    def result(self) -> CommandResult:
        if self.returncode is None:
            raise RuntimeError("Process output has not been fully consumed")
        return CommandResult(
            command=self.command,
            returncode=self.returncode,
            stdout_lines=tuple(self.stdout_lines),
            stderr_lines=tuple(self.stderr_lines),
            duration_ms=self.duration_ms,
        )


class CommandRunner:
    """Spawn external commands and deliver their output line by line.

    stdout and stderr lines reach their callbacks in the order they were
    read; the exit callback fires after the last of them. Input lines, when
    given, are written to stdin with a trailing newline each.

    A runner holds no per-process state, so one instance can drive many
    concurrent commands. Processes are never killed or retried: once
    started, a command runs until it exits.

    Args:
        cwd: Default working directory; None means the current directory.
        env: Variables layered over ``os.environ`` for every command.

    Example:
        ```python
        runner = CommandRunner(cwd=Path("/project"))
        result = await runner.run(
            ["git", "--version"],
            on_stdout=lambda line: print(line),
        )
        ```
    """

    def __init__(
        self,
        cwd: Path | None = None,
        env: dict[str, str] | None = None,
    ) -> None:
        self._cwd = cwd
        self._extra_env = env or {}

    @property
    def cwd(self) -> Path | None:
        """Default working directory, if one was given."""
        return self._cwd

    def _environment(self, overrides: dict[str, str] | None) -> dict[str, str]:
        """Parent environment, then runner-level, then per-command variables."""
        return {**os.environ, **self._extra_env, **(overrides or {})}

    async def _start(
        self,
        command: Sequence[str],
        cwd: Path | None,
        input_lines: Iterable[str] | None,
        env: dict[str, str] | None,
    ) -> _Execution:
        """Spawn the process.

        Raises:
            WorkingDirectoryError: If the working directory does not exist.
            CommandNotFoundError: If the executable cannot be launched.
        """
        if not command:
            raise ValueError("Command sequence cannot be empty")

        effective_cwd = cwd if cwd is not None else self._cwd
        if effective_cwd is not None and not effective_cwd.is_dir():
            raise WorkingDirectoryError(
                f"Working directory does not exist: {effective_cwd}",
                path=effective_cwd,
            )
        argv = tuple(str(arg) for arg in command)

        logger.debug(
            "command_started",
            command=list(argv),
            cwd=str(effective_cwd) if effective_cwd else None,
        )
        start_time = time.monotonic()
        try:
            process = await asyncio.create_subprocess_exec(
                *argv,
                stdin=(
                    asyncio.subprocess.PIPE
                    if input_lines is not None
                    else asyncio.subprocess.DEVNULL
                ),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=effective_cwd,
                env=self._environment(env),
                limit=STREAM_BUFFER_LIMIT,
            )
        except FileNotFoundError as e:
            raise CommandNotFoundError(
                f"Command not found: {argv[0]}", executable=argv[0]
            ) from e
        except PermissionError as e:
            raise CommandNotFoundError(
                f"Permission denied: {argv[0]}", executable=argv[0]
            ) from e

        return _Execution(argv, process, input_lines, start_time)

    async def run(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        input_lines: Iterable[str] | None = None,
        on_stdout: LineCallback | None = None,
        on_stderr: LineCallback | None = None,
        on_exit: ExitCallback | None = None,
        env: dict[str, str] | None = None,
    ) -> CommandResult:
        """Execute a command, delivering output lines as they arrive.

        Args:
            command: Command and arguments as a sequence (no shell expansion).
            cwd: Override working directory for this command.
            input_lines: Lines written to stdin, each followed by a newline.
                Stdin is closed once they are written. If None, stdin is
                connected to the null device.
            on_stdout: Called with each stdout line (newline stripped).
            on_stderr: Called with each stderr line (newline stripped).
            on_exit: Called once with the result, after the last line callback.
            env: Additional environment variables for this command.

        Returns:
            CommandResult with returncode, collected lines, and duration_ms.
            A nonzero exit status is reported here, not raised.

        Raises:
            WorkingDirectoryError: If working directory does not exist.
            CommandNotFoundError: If the executable cannot be launched.
        """
        execution = await self._start(command, cwd, input_lines, env)

        async with contextlib.aclosing(execution.lines()) as lines:
            async for line in lines:
                callback = on_stdout if line.stream == "stdout" else on_stderr
                if callback is not None:
                    callback(line.content)

        result = execution.result()
        logger.debug(
            "command_finished",
            command=list(result.command[:3]),
            returncode=result.returncode,
            duration_ms=result.duration_ms,
        )
        if on_exit is not None:
            on_exit(result)
        return result

    async def stream(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        input_lines: Iterable[str] | None = None,
        env: dict[str, str] | None = None,
    ) -> AsyncIterator[StreamLine]:
        """Stream command output line by line.

        Args:
            command: Command and arguments as a sequence (no shell expansion).
            cwd: Override working directory for this command.
            input_lines: Lines written to stdin, each followed by a newline.
            env: Additional environment variables for this command.

        Yields:
            StreamLine objects containing content, stream type, and timestamp.

        Raises:
            WorkingDirectoryError: If working directory does not exist.
            CommandNotFoundError: If the executable cannot be launched.
        """
        execution = await self._start(command, cwd, input_lines, env)
        async with contextlib.aclosing(execution.lines()) as lines:
            async for line in lines:
                yield line
