#!/usr/bin/env python3
"""gzip handling for FASTQ inputs and outputs through external tools."""

import subprocess
from pathlib import Path
from typing import Literal

from fastqpair.core.constants import GZIP_SUFFIX
from fastqpair.core.exceptions import CompressionError
from fastqpair.core.logging_config import get_logger, log_subprocess_stderr
from fastqpair.core.utils import is_gzipped, is_tool

logger = get_logger(__name__)

GzipTool = Literal["gzip", "pigz"]


def get_gziptool() -> GzipTool:
    """Prefer parallel gzip (pigz) and fall back to gzip."""
    if is_tool("pigz"):
        return "pigz"
    if is_tool("gzip"):
        return "gzip"
    raise CompressionError('Cannot find program "gzip" or "pigz". Install one of them and add to the path.')


def decompress_fastq(filename: Path, outdir: Path, program: GzipTool, num_threads: int = 1) -> Path:
    """Unzip a fastq.gz file into ``outdir`` using pigz or gunzip.

    The compressed input is left untouched. Paths without the gzip
    extension are returned as they are.

    Returns:
        Path of the uncompressed FASTQ file.
    """
    if not is_gzipped(filename):
        return filename

    outfilename = outdir / filename.name.removesuffix(GZIP_SUFFIX)
    if program == "pigz":
        command = ["unpigz", "-p", str(num_threads), "-c", str(filename)]
    else:
        command = ["gunzip", "-c", str(filename)]

    logger.info(f"Decompressing {filename} to {outfilename}")
    try:
        with outfilename.open("wb") as g:
            result = subprocess.run(command, stdout=g, stderr=subprocess.PIPE, check=True)
    except subprocess.CalledProcessError as e:
        log_subprocess_stderr(e.stderr, program)
        raise CompressionError(f"Failed to decompress {filename} with {command[0]}") from e
    log_subprocess_stderr(result.stderr, program)
    return outfilename


def toggle_gzip(filename: Path, program: GzipTool, num_threads: int = 1) -> Path:
    """Compress a file in place, or decompress it in place if it is already gzipped.

    Returns:
        The path of the file after the operation.
    """
    if is_gzipped(filename):
        command = ["unpigz" if program == "pigz" else "gunzip", str(filename)]
        new_path = filename.with_name(filename.name.removesuffix(GZIP_SUFFIX))
    else:
        command = [program, str(filename)]
        new_path = filename.with_name(filename.name + GZIP_SUFFIX)
    if program == "pigz":
        command[1:1] = ["-p", str(num_threads)]

    try:
        result = subprocess.run(command, capture_output=True, check=True)
    except subprocess.CalledProcessError as e:
        log_subprocess_stderr(e.stderr, program)
        raise CompressionError(f"{command[0]} failed on {filename}") from e
    log_subprocess_stderr(result.stderr, program)
    return new_path
