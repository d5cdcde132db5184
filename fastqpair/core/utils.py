#!/usr/bin/env python3
"""Small filesystem and environment helpers shared across fastqpair."""

import shutil
from pathlib import Path

from fastqpair.core.constants import GZIP_SUFFIX


def is_tool(name: str) -> bool:
    """Check if a command-line tool is available in PATH.

    Args:
        name: Name of the tool to check.

    Returns:
        True if the tool is available, False otherwise.
    """
    return shutil.which(name) is not None


def check_output_directory(outdir: str) -> str:
    """Check if outdir exists, otherwise create it.

    Args:
        outdir: Path to the output directory.

    Returns:
        The output directory path as a string.
    """
    outdir_path = Path(outdir)
    if outdir_path.is_dir():
        return outdir
    else:
        outdir_path.mkdir(parents=True, exist_ok=True)
        return outdir


def is_gzipped(path: Path | str) -> bool:
    """True if the file name carries the gzip extension."""
    return str(path).endswith(GZIP_SUFFIX)


def gzipped_path(path: Path) -> Path:
    """Path of ``path`` after in-place gzip compression."""
    return path.with_name(path.name + GZIP_SUFFIX)
