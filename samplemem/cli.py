"""Typer CLI entrypoint."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click
import typer

from samplemem.core.config import Settings, load_settings
from samplemem.core.errors import InvalidParameterError, SamplememError, ShortReadError
from samplemem.core.model import MAX_TARGET_VALUE, ProgressStatus, ScanConfig
from samplemem.core.params import parse_uint
from samplemem.core.sampler import Sampler

PROGRAM_NAME = "samplemem"
USAGE = f"Usage: {PROGRAM_NAME} <block_device> <block_size> <value_to_check> <n_samples>"

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_BAD_BLOCKS = 2

LOGGER = logging.getLogger(__name__)

app = typer.Typer(
    help="Check that a block device is filled with one byte value by sampling evenly spaced blocks",
    add_completion=False,
)


class EchoReporter:
    """Streams scan events to stdout/stderr as they happen."""

    def __init__(self, *, show_progress: bool = True) -> None:
        self.show_progress = show_progress

    def bad_block(self, index: int) -> None:
        typer.echo(str(index))

    def skipped(self, error: ShortReadError) -> None:
        typer.echo(f"Couldn't read block {error.index}!", err=True)

    def progress(self, status: ProgressStatus) -> None:
        if not self.show_progress:
            return
        try:
            typer.echo(f"{status.line()}\r", err=True, nl=False)
        except (OSError, ValueError) as exc:
            LOGGER.debug("Could not write progress line: %s", exc)

    def warning(self, message: str) -> None:
        typer.echo(f"Warning: {message}", err=True)


def _usage_error(message: str | None = None) -> typer.Exit:
    typer.echo(USAGE, err=True)
    if message:
        typer.echo(message, err=True)
    return typer.Exit(code=EXIT_ERROR)


def _configure_logging(settings: Settings, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def main(
    ctx: typer.Context,
    block_device: str | None = typer.Argument(None, help="Block device or image to check"),
    block_size: str | None = typer.Argument(None, help="Block size in bytes"),
    value_to_check: str | None = typer.Argument(None, help="Expected byte value (0-255)"),
    n_samples: str | None = typer.Argument(None, help="Number of blocks to sample"),
    config: Path | None = typer.Option(None, "--config", help="Settings file (YAML)"),
    progress: bool = typer.Option(True, "--progress/--no-progress", help="Show the progress line"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    """Sample N_SAMPLES blocks of BLOCK_DEVICE and report those not filled with VALUE_TO_CHECK.

    Numbers accept 0x (hex) and leading-0 (octal) prefixes. Exits 0 when no bad
    blocks are found, 2 when some are, and 1 on any error.
    """
    if ctx.args or None in (block_device, block_size, value_to_check, n_samples):
        raise _usage_error()

    try:
        settings = load_settings(config)
    except SamplememError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=EXIT_ERROR) from None
    _configure_logging(settings, verbose)

    try:
        scan_config = ScanConfig(
            block_size=parse_uint(block_size, "block_size", sys.maxsize),
            target_value=parse_uint(value_to_check, "value_to_check", MAX_TARGET_VALUE),
            sample_count=parse_uint(n_samples, "n_samples", sys.maxsize),
        )
    except InvalidParameterError as exc:
        raise _usage_error(str(exc)) from None

    show_progress = progress and settings.progress.enabled
    sampler = Sampler(
        reporter=EchoReporter(show_progress=show_progress),
        initial_countdown=settings.progress.initial_countdown,
        interval_s=settings.progress.interval_s,
    )
    try:
        result = sampler.scan(block_device, scan_config)
    except SamplememError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=EXIT_ERROR) from None

    if result.bad_block_count == 0:
        typer.echo("\nNo bad blocks found.")
        raise typer.Exit(code=EXIT_OK)
    typer.echo(f"\nFound {result.bad_block_count} bad blocks!")
    raise typer.Exit(code=EXIT_BAD_BLOCKS)


def run() -> None:
    try:
        code = app(standalone_mode=False)
    except click.UsageError as exc:
        typer.echo(USAGE, err=True)
        typer.echo(exc.format_message(), err=True)
        sys.exit(EXIT_ERROR)
    except click.ClickException as exc:
        exc.show()
        sys.exit(EXIT_ERROR)
    except click.Abort:
        typer.echo("Aborted!", err=True)
        sys.exit(EXIT_ERROR)
    sys.exit(code or EXIT_OK)


if __name__ == "__main__":
    run()
