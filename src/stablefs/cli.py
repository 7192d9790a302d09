"""CLI entry point for stablefs."""

import json

import click
from loguru import logger

from .config import CopyConfig
from .csvmap import csv_to_rows
from .errors import FileUtilsError
from .listing import list_files, walk_files
from .transfer import copy_file, move_file

log = logger.bind(op="cli")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def main(ctx: click.Context, verbose: bool) -> None:
    """List, copy, move and decode files with a stable-size guard."""
    config_kwargs: dict[str, str] = {}
    if verbose:
        config_kwargs["log_level"] = "DEBUG"
    config = CopyConfig(**config_kwargs)  # type: ignore[arg-type]
    config.setup_logging()
    ctx.obj = config


@main.command("ls")
@click.argument("path", type=click.Path())
@click.option("--prefix", default="", help="Keep names starting with this.")
@click.option("--suffix", default="", help="Keep names ending with this.")
@click.option("-r", "--recursive", is_flag=True, help="Walk the whole subtree.")
def ls_cmd(path: str, prefix: str, suffix: str, recursive: bool) -> None:
    """List entries of PATH filtered by prefix and suffix."""
    try:
        if recursive:
            names = walk_files(path, prefix, suffix)
        else:
            names = list_files(path, prefix, suffix)
    except OSError as e:
        raise click.ClickException(str(e))
    for name in names:
        click.echo(name)


@main.command("cp")
@click.argument("src", type=click.Path())
@click.argument("dst", type=click.Path())
@click.option("--attempts", type=int, default=None, help="Stability samples (3-20).")
@click.option("--settle-ms", type=int, default=None, help="Delay between samples (100-1000).")
@click.pass_obj
def cp_cmd(
    config: CopyConfig,
    src: str,
    dst: str,
    attempts: int | None,
    settle_ms: int | None,
) -> None:
    """Copy SRC to DST once SRC has stopped growing."""
    overrides: dict[str, int] = {}
    if attempts is not None:
        overrides["stable_attempts"] = attempts
    if settle_ms is not None:
        overrides["stable_settle_ms"] = settle_ms
    if overrides:
        config = CopyConfig(**{**config.model_dump(), **overrides})

    try:
        copy_file(src, dst, config=config)
    except (FileUtilsError, OSError) as e:
        raise click.ClickException(str(e))


@main.command("mv")
@click.argument("src", type=click.Path())
@click.argument("dst", type=click.Path())
def mv_cmd(src: str, dst: str) -> None:
    """Rename SRC to DST (same filesystem only)."""
    try:
        move_file(src, dst)
    except OSError as e:
        raise click.ClickException(str(e))


@main.command("csv")
@click.argument("path", type=click.Path())
@click.option("-d", "--delimiter", default=",", help="Field separator.")
def csv_cmd(path: str, delimiter: str) -> None:
    """Print the rows of PATH as JSON objects keyed by the header."""
    try:
        rows = csv_to_rows(path, delimiter)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--delimiter")
    except (FileUtilsError, OSError) as e:
        raise click.ClickException(str(e))
    click.echo(json.dumps(rows, indent=2, ensure_ascii=False))
