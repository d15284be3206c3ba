"""Async client for the git operations behind editor git signs.

Wraps ``git`` commands using :class:`~gitsigns.runners.command.CommandRunner`
and feeds their stdout, line by line, into the matching parser from
:mod:`gitsigns.parsers`. Every operation is a single awaitable returning a
typed result.

Read-only operations log stderr and only fail when git cannot be launched
or its output does not parse. Operations that change the index fail with
:class:`~gitsigns.exceptions.GitCommandError` on a nonzero exit *or* on any
stderr output.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

from gitsigns.config import GitSignsConfig
from gitsigns.constants import (
    ABSOLUTE_GIT_DIR_VERSION,
    DIFF_BUFFER_SUFFIX,
    ENCODING_ERRORS,
    GIT_BASE_ARGS,
    STAGE_NORMAL,
    DiffAlgorithm,
)
from gitsigns.exceptions import GitCommandError, VersionParseError
from gitsigns.git.hunks import create_patch
from gitsigns.git.version import VersionGate
from gitsigns.logging import get_logger
from gitsigns.parsers import (
    BlameParser,
    FileStatusParser,
    HunkParser,
    RepoInfoParser,
    parse_version,
    parse_version_output,
)
from gitsigns.runners.command import CommandRunner

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from gitsigns.models import BlameRecord, FileStatus, Hunk, RepoInfo, ToolVersion
    from gitsigns.parsers import LineParser
    from gitsigns.runners.command import LineCallback
    from gitsigns.runners.models import CommandResult

__all__ = ["GitClient"]

logger = get_logger(__name__)

T = TypeVar("T")


def _write_lines(path: Path, lines: Iterable[str]) -> None:
    """Write lines with a single ``\\n`` each, without newline translation."""
    with open(path, "wb") as f:
        for line in lines:
            f.write(line.encode("utf-8", errors=ENCODING_ERRORS))
            f.write(b"\n")


class GitClient:
    """Async wrapper around the ``git`` CLI for git-signs operations.

    Uses :class:`CommandRunner` for subprocess execution. Supports
    dependency injection of the runner and version gate for testing.

    Args:
        runner: Optional pre-configured CommandRunner. Created if not provided.
        version_gate: Gate consulted for version-dependent flags. A fresh,
            unset gate is created if not provided; call :meth:`detect_version`
            before any gated operation.
        config: Settings (executable, diff algorithm, debug mode).

    Example:
        ```python
        client = GitClient()
        await client.detect_version()
        info = await client.get_repo_info(Path("/project/src"))
        hunks = await client.run_diff(staged_path, buffer_lines)
        ```
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        *,
        version_gate: VersionGate | None = None,
        config: GitSignsConfig | None = None,
    ) -> None:
        self._runner = runner or CommandRunner()
        self._version_gate = version_gate or VersionGate()
        self._config = config or GitSignsConfig()

    @property
    def version_gate(self) -> VersionGate:
        return self._version_gate

    @property
    def config(self) -> GitSignsConfig:
        return self._config

    # =====================================================================
    # Internal helpers
    # =====================================================================

    def _argv(self, args: Sequence[str]) -> list[str]:
        return [self._config.git_executable, *GIT_BASE_ARGS, *args]

    async def _run_read(
        self,
        operation: str,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        input_lines: Iterable[str] | None = None,
        on_stdout: LineCallback | None = None,
    ) -> CommandResult:
        """Run an informational git command.

        Stderr lines are logged as diagnostics; a nonzero exit is logged and
        left for the caller's parser to judge.
        """
        log = logger.bind(operation=operation)

        def on_stderr(line: str) -> None:
            log.debug("git_stderr", line=line)

        result = await self._runner.run(
            self._argv(args),
            cwd=cwd,
            input_lines=input_lines,
            on_stdout=on_stdout,
            on_stderr=on_stderr,
        )
        if not result.success:
            log.debug("git_nonzero_exit", returncode=result.returncode)
        return result

    async def _run_parsed(
        self,
        operation: str,
        args: Sequence[str],
        parser: LineParser[T],
        *,
        cwd: Path | None = None,
        input_lines: Iterable[str] | None = None,
    ) -> T:
        """Run an informational git command and reduce its stdout with ``parser``."""
        await self._run_read(
            operation,
            args,
            cwd=cwd,
            input_lines=input_lines,
            on_stdout=parser.feed,
        )
        return parser.finish()

    async def _run_mutation(
        self,
        operation: str,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        input_lines: Iterable[str] | None = None,
    ) -> CommandResult:
        """Run a git command that changes repository state.

        Raises:
            GitCommandError: If git exits nonzero or writes anything to stderr.
        """
        argv = self._argv(args)
        errors: list[str] = []
        result = await self._runner.run(
            argv,
            cwd=cwd,
            input_lines=input_lines,
            on_stderr=errors.append,
        )
        if errors or not result.success:
            stderr = "\n".join(errors)
            detail = stderr or f"exit status {result.returncode}"
            logger.warning(
                "git_mutation_failed",
                operation=operation,
                returncode=result.returncode,
                stderr=stderr,
            )
            raise GitCommandError(
                f"git {operation} failed: {detail}",
                operation=operation,
                command=argv,
                returncode=result.returncode,
                stderr=stderr,
            )
        logger.debug("git_mutation_completed", operation=operation)
        return result

    # =====================================================================
    # Version detection
    # =====================================================================

    async def get_version(self) -> ToolVersion:
        """Run ``git --version`` and parse the banner.

        Raises:
            VersionParseError: If the output is missing or malformed.
        """
        lines: list[str] = []
        await self._run_read("get_version", ["--version"], on_stdout=lines.append)
        if not lines:
            raise VersionParseError("No output from git --version")
        return parse_version_output(lines[0])

    async def detect_version(self, setting: str | None = None) -> ToolVersion:
        """Initialize the version gate; await this once at startup.

        Args:
            setting: ``"auto"`` to ask git, or an explicit ``X.Y.Z``.
                Defaults to the configured ``git_version``.

        Returns:
            The version stored in the gate.
        """
        setting = setting or self._config.git_version
        if setting == "auto":
            version = await self.get_version()
        else:
            version = parse_version(setting)
        self._version_gate.set(version)
        logger.info("git_version_detected", version=str(version), source=setting)
        return version

    # =====================================================================
    # Read operations
    # =====================================================================

    async def get_repo_info(self, path: Path) -> RepoInfo | None:
        """Locate the repository containing ``path``.

        Returns:
            :class:`RepoInfo`, or None when ``path`` is not inside a work tree.

        Raises:
            VersionNotSetError: If :meth:`detect_version` has not run.
            RepoInfoParseError: If rev-parse output is incomplete.
        """
        absolute_git_dir = self._version_gate.meets_minimum(*ABSOLUTE_GIT_DIR_VERSION)
        parser = RepoInfoParser(
            path,
            absolute_git_dir=absolute_git_dir,
            debug_mode=self._config.debug_mode,
        )
        lines: list[str] = []

        def on_stdout(line: str) -> None:
            lines.append(line)
            parser.feed(line)

        result = await self._run_read(
            "get_repo_info",
            [
                "rev-parse",
                "--show-toplevel",
                "--absolute-git-dir" if absolute_git_dir else "--git-dir",
                "--abbrev-ref",
                "HEAD",
            ],
            cwd=path,
            on_stdout=on_stdout,
        )
        if not lines and not result.success:
            logger.debug("not_a_repository", path=str(path))
            return None
        return parser.finish()

    async def file_info(self, file: Path | str, toplevel: Path) -> FileStatus:
        """Look up the index entry (or untracked status) of ``file``."""
        return await self._run_parsed(
            "file_info",
            ["ls-files", "--stage", "--others", "--exclude-standard", str(file)],
            FileStatusParser(),
            cwd=toplevel,
        )

    async def get_staged(
        self,
        toplevel: Path,
        relpath: str,
        stage: int,
        output: Path,
    ) -> None:
        """Write the index content of ``relpath`` at ``stage`` to ``output``.

        Bytes are preserved; every line is terminated with ``\\n``.
        """
        with open(output, "wb") as f:

            def on_stdout(line: str) -> None:
                f.write(line.encode("utf-8", errors=ENCODING_ERRORS))
                f.write(b"\n")

            await self._run_read(
                "get_staged",
                ["show", f":{stage}:{relpath}"],
                cwd=toplevel,
                on_stdout=on_stdout,
            )

    async def get_staged_text(
        self,
        toplevel: Path,
        relpath: str,
        stage: int = STAGE_NORMAL,
    ) -> list[str]:
        """Return the index content of ``relpath`` at ``stage`` as lines."""
        lines: list[str] = []
        await self._run_read(
            "get_staged_text",
            ["show", f":{stage}:{relpath}"],
            cwd=toplevel,
            on_stdout=lines.append,
        )
        return lines

    async def run_blame(
        self,
        file: Path | str,
        toplevel: Path,
        lines: Sequence[str],
        lnum: int,
    ) -> BlameRecord:
        """Blame one line of the buffer contents ``lines``.

        The buffer is sent on stdin (``--contents -``), so unsaved edits are
        attributed to the not-yet-committed pseudo commit.

        Raises:
            BlameParseError: If git printed no porcelain record.
        """
        records = await self._run_parsed(
            "run_blame",
            [
                "blame",
                "--contents",
                "-",
                "-L",
                f"{lnum},+1",
                "--line-porcelain",
                str(file),
            ],
            BlameParser(),
            cwd=toplevel,
            input_lines=lines,
        )
        return records[0]

    async def run_diff(
        self,
        staged: Path,
        text: Sequence[str],
        diff_algo: DiffAlgorithm | None = None,
        *,
        cwd: Path | None = None,
    ) -> list[Hunk]:
        """Diff the staged file against the buffer text.

        The text is written next to ``staged`` (same name plus ``_buf``),
        so concurrent diffs of different files never share a file. That
        file is removed on every exit path.

        Args:
            staged: File holding the index version (see :meth:`get_staged`).
            text: Current buffer lines.
            diff_algo: Overrides the configured diff algorithm.
            cwd: Directory git runs in; defaults to the staged file's parent.

        Raises:
            HunkParseError: If git printed a malformed hunk header.
        """
        algo = diff_algo or self._config.diff_algorithm
        buffile = staged.with_name(staged.name + DIFF_BUFFER_SUFFIX)
        try:
            _write_lines(buffile, text)
            return await self._run_parsed(
                "run_diff",
                [
                    # Silence "LF will be replaced by CRLF" warnings
                    "-c",
                    "core.safecrlf=false",
                    "diff",
                    "--color=never",
                    f"--diff-algorithm={algo}",
                    "--patch-with-raw",
                    "--unified=0",
                    str(staged),
                    str(buffile),
                ],
                HunkParser(),
                cwd=cwd if cwd is not None else staged.parent,
            )
        finally:
            buffile.unlink(missing_ok=True)
            logger.debug("diff_tempfile_removed", path=str(buffile))

    async def command(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        input_lines: Iterable[str] | None = None,
    ) -> list[str]:
        """Run an arbitrary git command and return its stdout lines."""
        lines: list[str] = []
        await self._run_read(
            "command",
            args,
            cwd=cwd,
            input_lines=input_lines,
            on_stdout=lines.append,
        )
        return lines

    # =====================================================================
    # Index mutations
    # =====================================================================

    async def stage_lines(self, toplevel: Path, lines: Sequence[str]) -> None:
        """Apply a zero-context patch to the index.

        Raises:
            GitCommandError: If git rejects the patch.
        """
        await self._run_mutation(
            "stage_lines",
            ["apply", "--cached", "--unidiff-zero", "-"],
            cwd=toplevel,
            input_lines=lines,
        )

    async def stage_hunk(
        self,
        toplevel: Path,
        relpath: str,
        hunk: Hunk,
        mode_bits: str,
        invert: bool = False,
    ) -> None:
        """Stage (or, with ``invert``, unstage) a single hunk.

        Raises:
            GitCommandError: If git rejects the patch.
        """
        await self.stage_lines(toplevel, create_patch(relpath, hunk, mode_bits, invert))

    async def add_file(self, toplevel: Path, file: Path | str) -> None:
        """Record ``file`` in the index with ``git add --intent-to-add``.

        Raises:
            GitCommandError: If git reports an error.
        """
        await self._run_mutation(
            "add_file",
            ["add", "--intent-to-add", str(file)],
            cwd=toplevel,
        )

    async def update_index(
        self,
        toplevel: Path,
        mode_bits: str,
        object_name: str,
        file: str,
    ) -> None:
        """Point the index entry for ``file`` at an existing blob.

        Raises:
            GitCommandError: If git reports an error.
        """
        cacheinfo = ",".join([mode_bits, object_name, file])
        await self._run_mutation(
            "update_index",
            ["update-index", "--add", "--cacheinfo", cacheinfo],
            cwd=toplevel,
        )
