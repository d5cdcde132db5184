#!/usr/bin/env python3
"""Command line interface for fastqpair using Typer."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from pydantic import ValidationError
from rich.console import Console

from fastqpair.core.constants import DEFAULT_DUPLICATE_POLICY, DEFAULT_METHOD, DUPLICATE_POLICIES, PAIRING_METHODS
from fastqpair.core.exceptions import PairingError
from fastqpair.core.logging_config import (
    add_file_handler,
    get_log_path,
    get_logger,
    remove_file_handler,
    setup_logging,
)
from fastqpair.version import __version__

app = typer.Typer(
    name="fastqpair",
    help="Pair mate 1 and mate 2 FASTQ files by read identifier and collect singletons.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()
logger = get_logger("cli")


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold green]fastqpair[/bold green] version {__version__}")
        raise typer.Exit()


def _check_choice(value: str, choices: tuple[str, ...], option: str) -> str:
    if value not in choices:
        raise typer.BadParameter(f"{value!r} is not one of {', '.join(choices)}", param_hint=option)
    return value


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", callback=version_callback, is_eager=True, help="Show version and exit."),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-V", help="Enable verbose output (DEBUG level)."),
    ] = False,
) -> None:
    """fastqpair - Pair two FASTQ files and write singletons separately."""
    log_level = "DEBUG" if verbose else "INFO"
    setup_logging(level=log_level)  # type: ignore


@app.command()
def pair(
    read1: Annotated[Path, typer.Option("-r1", "--read1", help="Path to mate 1 FASTQ file (R1), optionally gzipped.")],
    read2: Annotated[Path, typer.Option("-r2", "--read2", help="Path to mate 2 FASTQ file (R2), optionally gzipped.")],
    method: Annotated[
        str,
        typer.Option(
            "-m",
            "--method",
            help="Pairing method: 'store' (index R1 in memory), 'seek' (index R1 offsets), "
            "'iter' (read both files together).",
        ),
    ] = DEFAULT_METHOD,
    output_dir: Annotated[
        Optional[Path],
        typer.Option("-o", "--output-dir", help="Output directory. Defaults to the directory of R1."),
    ] = None,
    gzip: Annotated[bool, typer.Option("--gzip", help="Compress the output files.")] = False,
    duplicates: Annotated[
        str,
        typer.Option("--duplicates", help="Repeated identifiers: 'overwrite', 'keep-first' or 'error'."),
    ] = DEFAULT_DUPLICATE_POLICY,
    strict: Annotated[bool, typer.Option("--strict", help="Fail on a truncated record instead of ignoring it.")] = False,
    force: Annotated[bool, typer.Option("-f", "--force", help="Overwrite existing output files.")] = False,
    tmpdir: Annotated[
        Optional[Path], typer.Option("--tmpdir", help="Directory for decompressed copies of gzipped inputs.")
    ] = None,
    log_file: Annotated[bool, typer.Option("--log/--no-log", help="Write a log file to the output directory.")] = True,
) -> None:
    """Pair R1 and R2 records and write R1_paired, R2_paired and Singletons FASTQ files."""
    from fastqpair.models.models import PairingConfig
    from fastqpair.pipeline import run_pairing

    _check_choice(method, PAIRING_METHODS, "--method")
    _check_choice(duplicates, DUPLICATE_POLICIES, "--duplicates")

    try:
        config = PairingConfig(
            read1=read1,
            read2=read2,
            method=method,  # type: ignore
            output_dir=output_dir,
            gzip=gzip,
            duplicate_policy=duplicates,  # type: ignore
            strict=strict,
            force=force,
            tmpdir=tmpdir,
        )
    except ValidationError as e:
        for error in e.errors():
            console.print(f"[red]Error:[/red] {error['msg'].removeprefix('Value error, ')}")
        raise typer.Exit(1) from None

    if log_file and config.output_dir is not None:
        log_path = get_log_path(config.output_dir)
        add_file_handler(log_path)
        logger.info(f"Logging to {log_path}")

    logger.info(f"Starting pairing of {read1} and {read2}")
    try:
        output = run_pairing(config)
    except (PairingError, OSError) as e:
        logger.error(f"Pairing failed: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    finally:
        remove_file_handler()

    stats = output.stats
    console.print()
    console.print("[bold]Pairing Summary:[/bold]")
    console.print(f"  Method: {method}")
    if stats is not None:
        console.print(f"  [green]Pairs:[/green] {stats.pairs}")
        console.print(f"  [yellow]Singletons:[/yellow] {stats.singletons_read1} (R1), {stats.singletons_read2} (R2)")
        if stats.duplicates:
            console.print(f"  [red]Duplicate identifiers:[/red] {stats.duplicates}")
    console.print(f"  [blue]R1 paired:[/blue] {output.paired1_path}")
    console.print(f"  [blue]R2 paired:[/blue] {output.paired2_path}")
    console.print(f"  [blue]Singletons:[/blue] {output.singleton_path or 'none'}")
    logger.info("Pairing complete!")


def main_cli() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main_cli()
