#!/usr/bin/env python3
"""
Pipeline orchestration for fastqpair.

Pipeline Flow:
    R1/R2 FASTQ(.gz) -> decompress -> pairing strategy -> R1_paired, R2_paired, Singletons -> gzip

External Dependencies:
    - gzip/pigz: Only needed for gzipped inputs or when compressed output is requested
"""

import datetime
import shutil
import tempfile
from dataclasses import replace
from pathlib import Path

from fastqpair.core.compression import decompress_fastq, get_gziptool, toggle_gzip
from fastqpair.core.constants import DEFAULT_DUPLICATE_POLICY, DEFAULT_METHOD, DuplicatePolicy, PairingMethod
from fastqpair.core.logging_config import get_logger
from fastqpair.core.sink import OutputSink
from fastqpair.core.utils import is_gzipped
from fastqpair.models.models import OutputPaths, PairingConfig, PairingOutput
from fastqpair.pairing import get_strategy

logger = get_logger(__name__)


def pair_fastqs(
    read1: Path,
    read2: Path,
    output_paths: OutputPaths,
    method: PairingMethod = DEFAULT_METHOD,
    duplicate_policy: DuplicatePolicy = DEFAULT_DUPLICATE_POLICY,
    strict: bool = False,
) -> PairingOutput:
    """Pair two uncompressed FASTQ files and write R1/R2 and singleton files.

    Args:
        read1: Mate 1 FASTQ file. Must be seekable for the "seek" method.
        read2: Mate 2 FASTQ file.
        output_paths: Destinations of the paired and singleton records.
        method: "store", "seek" or "iter".
        duplicate_policy: Handling of repeated identifiers within one input.
        strict: Fail on a truncated final record instead of ignoring it.

    Returns:
        PairingOutput with the written paths; singleton_path is None when
        every record found its mate.
    """
    strategy = get_strategy(method, duplicate_policy, strict)
    logger.info(f"Pairing {read1} and {read2} using method '{method}'")

    with read1.open("rb") as r1, read2.open("rb") as r2, OutputSink(output_paths) as sink:
        strategy.pair(r1, r2, sink)
        output = sink.finalize()

    stats = sink.stats
    logger.info(
        f"Wrote {stats.pairs} pairs, {stats.singletons_read1} mate 1 and "
        f"{stats.singletons_read2} mate 2 singletons"
    )
    return output


def generate_random_dir(tmpdir: Path) -> Path:
    """Generate a directory for storing temporary files, using a timestamp."""
    tmpdir.mkdir(parents=True, exist_ok=True)
    prefix = f"r{datetime.datetime.now().strftime('%y%m%d_%H%M%S')}_"
    return Path(tempfile.mkdtemp(prefix=prefix, dir=str(tmpdir)))


def run_pairing(config: PairingConfig) -> PairingOutput:
    """Run a complete pairing: unzip inputs, pair, and optionally gzip the outputs.

    Decompressed copies of gzipped inputs are written to a scratch directory
    under ``config.tmpdir`` (or the output directory) and removed afterwards,
    also when pairing fails.

    Args:
        config: Validated PairingConfig.

    Returns:
        PairingOutput pointing at the final (possibly gzipped) files.
    """
    assert config.output_paths is not None
    needs_gzip = config.gzip or is_gzipped(config.read1) or is_gzipped(config.read2)
    gziptool = get_gziptool() if needs_gzip else "gzip"

    scratch: Path | None = None
    read1, read2 = config.read1, config.read2
    try:
        if is_gzipped(read1) or is_gzipped(read2):
            scratch = generate_random_dir(config.tmpdir or config.output_paths.paired1.parent)
            # Separate folders so identically named inputs cannot collide
            (scratch / "read1").mkdir()
            (scratch / "read2").mkdir()
            read1 = decompress_fastq(read1, scratch / "read1", gziptool)
            read2 = decompress_fastq(read2, scratch / "read2", gziptool)

        output = pair_fastqs(
            read1,
            read2,
            config.output_paths,
            method=config.method,
            duplicate_policy=config.duplicate_policy,
            strict=config.strict,
        )
    finally:
        if scratch is not None:
            shutil.rmtree(scratch, ignore_errors=True)

    if config.gzip:
        logger.info(f"Compressing output files with {gziptool}")
        output = replace(
            output,
            paired1_path=toggle_gzip(output.paired1_path, gziptool),
            paired2_path=toggle_gzip(output.paired2_path, gziptool),
            singleton_path=toggle_gzip(output.singleton_path, gziptool) if output.singleton_path else None,
        )

    return output
