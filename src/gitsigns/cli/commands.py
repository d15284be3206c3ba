"""Diagnostic commands exercising the git client from a shell."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, NoReturn

import click
from rich.table import Table

from gitsigns.cli.console import console, err_console
from gitsigns.cli.context import ExitCode, async_command
from gitsigns.config import GitSignsConfig
from gitsigns.constants import ENCODING_ERRORS
from gitsigns.exceptions import GitSignsError
from gitsigns.git import GitClient, get_summary
from gitsigns.logging import bind_context
from gitsigns.popup import format_blame

if TYPE_CHECKING:
    from gitsigns.models import RepoInfo

__all__ = ["blame", "diff", "info", "status", "version"]


async def _client(ctx: click.Context) -> GitClient:
    config: GitSignsConfig = ctx.obj["config"]
    client = GitClient(config=config)
    await client.detect_version()
    return client


def _fail(error: GitSignsError) -> NoReturn:
    err_console.print(f"[red]Error:[/red] {error.message}", highlight=False)
    raise SystemExit(ExitCode.FAILURE)


def _read_lines(path: Path) -> list[str]:
    """Split a file on newline bytes only, the way git and the runner do."""
    pieces = path.read_bytes().split(b"\n")
    if pieces[-1] == b"":
        pieces.pop()
    return [piece.decode("utf-8", errors=ENCODING_ERRORS) for piece in pieces]


async def _repository(client: GitClient, file: Path) -> RepoInfo:
    """Find the repository of FILE and bind it to the log context."""
    repo = await client.get_repo_info(file.parent)
    if repo is None:
        err_console.print(f"Not inside a git repository: {file}")
        raise SystemExit(ExitCode.FAILURE)
    bind_context(toplevel=str(repo.toplevel), path=str(file))
    return repo


@click.command()
@click.pass_context
@async_command
async def version(ctx: click.Context) -> None:
    """Print the detected git version."""
    try:
        client = await _client(ctx)
    except GitSignsError as e:
        _fail(e)
    console.print(str(client.version_gate.version))


@click.command()
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output JSON.")
@click.pass_context
@async_command
async def info(ctx: click.Context, path: Path, as_json: bool) -> None:
    """Show the repository containing PATH."""
    try:
        client = await _client(ctx)
        repo = await client.get_repo_info(path.resolve())
    except GitSignsError as e:
        _fail(e)
    if repo is None:
        err_console.print(f"Not a git repository: {path}")
        raise SystemExit(ExitCode.FAILURE)
    if as_json:
        click.echo(json.dumps(repo.to_dict()))
        return
    table = Table(show_header=False)
    table.add_row("toplevel", str(repo.toplevel))
    table.add_row("gitdir", str(repo.gitdir))
    table.add_row("head", repo.abbrev_head or "(detached)")
    console.print(table)


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
@async_command
async def status(ctx: click.Context, file: Path) -> None:
    """Show the index entry of FILE."""
    file = file.resolve()
    try:
        client = await _client(ctx)
        repo = await _repository(client, file)
        entry = await client.file_info(file, repo.toplevel)
    except GitSignsError as e:
        _fail(e)
    click.echo(json.dumps(entry.to_dict()))


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("lnum", type=click.IntRange(min=1))
@click.pass_context
@async_command
async def blame(ctx: click.Context, file: Path, lnum: int) -> None:
    """Blame line LNUM of FILE as shown in the popup."""
    file = file.resolve()
    try:
        client = await _client(ctx)
        repo = await _repository(client, file)
        record = await client.run_blame(file, repo.toplevel, _read_lines(file), lnum)
    except GitSignsError as e:
        _fail(e)
    for line in format_blame(record):
        console.print(line, highlight=False, markup=False)


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
@async_command
async def diff(ctx: click.Context, file: Path) -> None:
    """List the hunks between the index and FILE."""
    file = file.resolve()
    try:
        client = await _client(ctx)
        repo = await _repository(client, file)
        entry = await client.file_info(file, repo.toplevel)
        if entry.relpath is None or not entry.tracked:
            err_console.print(f"File is not tracked: {file}")
            raise SystemExit(ExitCode.FAILURE)
        with tempfile.TemporaryDirectory(prefix="gitsigns-") as tmpdir:
            staged = Path(tmpdir) / file.name
            await client.get_staged(repo.toplevel, entry.relpath, 0, staged)
            hunks = await client.run_diff(staged, _read_lines(file))
    except GitSignsError as e:
        _fail(e)

    for hunk in hunks:
        console.print(hunk.head, style="cyan", highlight=False, markup=False)
        for line in hunk.lines:
            style = "green" if line.startswith("+") else "red"
            console.print(line, style=style, highlight=False, markup=False)
    summary = get_summary(hunks)
    console.print(
        f"+{summary.added} ~{summary.changed} -{summary.removed}", highlight=False
    )
