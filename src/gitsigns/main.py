"""CLI entry point for gitsigns.

This module defines the click-based command-line interface, a diagnostic
surface over the same async client an editor integration uses.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from gitsigns import __version__
from gitsigns.cli.commands import blame, diff, info, status, version
from gitsigns.cli.context import ExitCode
from gitsigns.config import load_config
from gitsigns.exceptions import ConfigError
from gitsigns.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="gitsigns")
@click.option(
    "-c",
    "--config",
    "config_file",
    type=click.Path(exists=False, path_type=Path),
    default=None,
    help="Path to config file (overrides project/user config).",
)
@click.option(
    "-v",
    "--verbose",
    count=True,
    help="Increase verbosity (-v for INFO, -vv for DEBUG).",
)
@click.pass_context
def cli(ctx: click.Context, config_file: Path | None, verbose: int) -> None:
    """gitsigns - git blame, diff hunks, and index status for editors."""
    ctx.ensure_object(dict)

    try:
        ctx.obj["config"] = load_config(config_file)
    except ConfigError as e:
        error_parts = [f"Error: {e.message}"]
        if e.field:
            error_parts.append(f"  Field: {e.field}")
        if e.value is not None:
            error_parts.append(f"  Value: {e.value}")
        click.echo("\n".join(error_parts), err=True)
        ctx.exit(ExitCode.FAILURE)

    if verbose > 0:
        configure_logging(level=logging.INFO if verbose == 1 else logging.DEBUG)
    else:
        configure_logging()


cli.add_command(version)
cli.add_command(info)
cli.add_command(status)
cli.add_command(blame)
cli.add_command(diff)

if __name__ == "__main__":
    cli()
