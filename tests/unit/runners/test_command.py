"""Tests for CommandRunner."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from gitsigns.exceptions import CommandNotFoundError, WorkingDirectoryError
from gitsigns.runners.command import CommandRunner
from gitsigns.runners.models import CommandResult, StreamLine

from .conftest import make_reader, python_command


class TestRunCallbacks:
    """Line and exit callbacks of CommandRunner.run()."""

    @pytest.mark.asyncio
    async def test_lines_delivered_in_order_before_exit(self) -> None:
        events: list[tuple[str, object]] = []
        runner = CommandRunner()

        result = await runner.run(
            python_command("for i in range(5): print(f'line {i}')"),
            on_stdout=lambda line: events.append(("line", line)),
            on_exit=lambda res: events.append(("exit", res.returncode)),
        )

        assert events == [
            ("line", "line 0"),
            ("line", "line 1"),
            ("line", "line 2"),
            ("line", "line 3"),
            ("line", "line 4"),
            ("exit", 0),
        ]
        assert result.stdout_lines == tuple(f"line {i}" for i in range(5))
        assert result.success is True

    @pytest.mark.asyncio
    async def test_stderr_routed_to_stderr_callback(self) -> None:
        out: list[str] = []
        err: list[str] = []
        runner = CommandRunner()

        result = await runner.run(
            python_command(
                "import sys; print('out'); sys.stdout.flush(); "
                "print('warn', file=sys.stderr)"
            ),
            on_stdout=out.append,
            on_stderr=err.append,
        )

        assert out == ["out"]
        assert err == ["warn"]
        assert result.stderr == "warn"

    @pytest.mark.asyncio
    async def test_output_without_callback_is_still_collected(self) -> None:
        runner = CommandRunner()
        result = await runner.run(python_command("print('hello')"))
        assert result.stdout == "hello"

    @pytest.mark.asyncio
    async def test_input_lines_written_with_newlines(self) -> None:
        runner = CommandRunner()
        received: list[str] = []

        await runner.run(
            python_command(
                "import sys; data = sys.stdin.read(); "
                "print(repr(data))"
            ),
            input_lines=["alpha", "beta"],
            on_stdout=received.append,
        )

        assert received == [repr("alpha\nbeta\n")]

    @pytest.mark.asyncio
    async def test_stdin_closed_when_no_input(self) -> None:
        runner = CommandRunner()
        result = await runner.run(
            python_command("import sys; print(len(sys.stdin.read()))")
        )
        assert result.stdout == "0"

    @pytest.mark.asyncio
    async def test_nonzero_exit_is_reported_not_raised(self) -> None:
        exits: list[CommandResult] = []
        runner = CommandRunner()

        result = await runner.run(
            python_command("import sys; sys.exit(3)"), on_exit=exits.append
        )

        assert result.returncode == 3
        assert result.success is False
        assert exits == [result]

    @pytest.mark.asyncio
    async def test_missing_executable_raises_without_callbacks(self) -> None:
        calls: list[str] = []
        runner = CommandRunner()

        with pytest.raises(CommandNotFoundError) as exc_info:
            await runner.run(
                ["definitely-not-a-real-binary-xyz", "--version"],
                on_stdout=calls.append,
                on_stderr=calls.append,
                on_exit=lambda _res: calls.append("exit"),
            )

        assert exc_info.value.executable == "definitely-not-a-real-binary-xyz"
        assert calls == []

    @pytest.mark.asyncio
    async def test_permission_error_is_launch_failure(self) -> None:
        with patch(
            "asyncio.create_subprocess_exec",
            AsyncMock(side_effect=PermissionError("denied")),
        ):
            runner = CommandRunner()
            with pytest.raises(CommandNotFoundError):
                await runner.run(["./not-executable"])

    @pytest.mark.asyncio
    async def test_working_directory_validation(self) -> None:
        runner = CommandRunner(cwd=Path("/nonexistent/path/xyz"))

        with pytest.raises(WorkingDirectoryError) as exc_info:
            await runner.run(["echo", "test"])

        assert "/nonexistent/path/xyz" in str(exc_info.value.path)

    @pytest.mark.asyncio
    async def test_cwd_override(self, temp_dir: Path) -> None:
        runner = CommandRunner()
        result = await runner.run(
            python_command("import os; print(os.getcwd())"), cwd=temp_dir
        )
        assert Path(result.stdout).resolve() == temp_dir.resolve()

    @pytest.mark.asyncio
    async def test_environment_merge(self, mock_process: MagicMock) -> None:
        captured_env = None

        async def capture_env(*args, **kwargs):
            nonlocal captured_env
            captured_env = kwargs.get("env")
            return mock_process

        with patch(
            "asyncio.create_subprocess_exec", AsyncMock(side_effect=capture_env)
        ):
            runner = CommandRunner(env={"CUSTOM_VAR": "custom_value"})
            await runner.run(["echo", "test"], env={"OTHER": "1"})

        assert captured_env is not None
        assert captured_env["CUSTOM_VAR"] == "custom_value"
        assert captured_env["OTHER"] == "1"
        assert "PATH" in captured_env

    @pytest.mark.asyncio
    async def test_empty_command_rejected(self) -> None:
        runner = CommandRunner()
        with pytest.raises(ValueError):
            await runner.run([])

    @pytest.mark.asyncio
    async def test_undecodable_bytes_survive_round_trip(
        self, mock_process: MagicMock
    ) -> None:
        mock_process.stdout = make_reader(b"caf\xe9\n")

        with patch(
            "asyncio.create_subprocess_exec", AsyncMock(return_value=mock_process)
        ):
            runner = CommandRunner()
            result = await runner.run(["show"])

        line = result.stdout_lines[0]
        assert line.encode("utf-8", errors="surrogateescape") == b"caf\xe9"

    @pytest.mark.asyncio
    async def test_concurrent_runs_are_independent(self) -> None:
        runner = CommandRunner()

        results = await asyncio.gather(
            *(runner.run(python_command(f"print({i})")) for i in range(4))
        )

        assert [r.stdout for r in results] == ["0", "1", "2", "3"]


class TestStream:
    """Tests for CommandRunner.stream()."""

    @pytest.mark.asyncio
    async def test_stream_output_lines(self, mock_process: MagicMock) -> None:
        mock_process.stdout = make_reader(b"line 1\n", b"line 2\n")

        with patch(
            "asyncio.create_subprocess_exec", AsyncMock(return_value=mock_process)
        ):
            runner = CommandRunner()
            lines = [line async for line in runner.stream(["echo", "test"])]

        assert [line.content for line in lines] == ["line 1", "line 2"]
        assert all(isinstance(line, StreamLine) for line in lines)
        assert all(line.stream == "stdout" for line in lines)
        assert all(line.timestamp_ms >= 0 for line in lines)
        mock_process.wait.assert_awaited()

    @pytest.mark.asyncio
    async def test_stream_captures_stderr(self, mock_process: MagicMock) -> None:
        mock_process.stderr = make_reader(b"fatal: oops\n")

        with patch(
            "asyncio.create_subprocess_exec", AsyncMock(return_value=mock_process)
        ):
            runner = CommandRunner()
            lines = [line async for line in runner.stream(["git", "status"])]

        assert len(lines) == 1
        assert (lines[0].content, lines[0].stream) == ("fatal: oops", "stderr")

    @pytest.mark.asyncio
    async def test_process_waited_when_consumer_stops_early(self) -> None:
        runner = CommandRunner()
        stream = runner.stream(python_command("for i in range(3): print(i)"))

        first = await stream.__anext__()
        await stream.aclose()

        assert first.content == "0"


class TestLineSplitting:
    """Splitting raw pipe output into lines."""

    @pytest.mark.asyncio
    async def test_line_longer_than_buffer_limit_then_bulk_output(self) -> None:
        runner = CommandRunner()
        source = (
            "import sys; w = sys.stdout.write; "
            "w('x' * (2**20 + 10) + '\\n'); "
            "w(('y' * 100 + '\\n') * 60000)"
        )

        result = await asyncio.wait_for(runner.run(python_command(source)), 60)

        assert result.returncode == 0
        assert len(result.stdout_lines) == 60001
        assert result.stdout_lines[0] == "x" * (2**20 + 10)
        assert result.stdout_lines[-1] == "y" * 100

    @pytest.mark.asyncio
    async def test_both_pipes_drain_under_heavy_output(self) -> None:
        runner = CommandRunner()
        source = (
            "import sys; "
            "sys.stderr.write('e' * (3 * 2**20) + '\\n'); "
            "sys.stdout.write('o\\n' * 500000)"
        )

        result = await asyncio.wait_for(runner.run(python_command(source)), 60)

        assert result.stderr_lines == ("e" * (3 * 2**20),)
        assert len(result.stdout_lines) == 500000

    @pytest.mark.asyncio
    async def test_lines_reassembled_across_chunks(
        self, mock_process: MagicMock
    ) -> None:
        mock_process.stdout = make_reader(b"fir", b"st\nsec", b"ond\n\nthi", b"rd")

        with patch(
            "asyncio.create_subprocess_exec", AsyncMock(return_value=mock_process)
        ):
            runner = CommandRunner()
            result = await runner.run(["show"])

        assert result.stdout_lines == ("first", "second", "", "third")

    @pytest.mark.asyncio
    async def test_carriage_returns_are_kept(self, mock_process: MagicMock) -> None:
        mock_process.stdout = make_reader(b"one\r\ntwo\x0cthree\n")

        with patch(
            "asyncio.create_subprocess_exec", AsyncMock(return_value=mock_process)
        ):
            runner = CommandRunner()
            result = await runner.run(["show"])

        assert result.stdout_lines == ("one\r", "two\x0cthree")
