#!/usr/bin/env python3
"""Output sink owning the paired and singleton FASTQ files of one run."""

from pathlib import Path
from typing import BinaryIO

from fastqpair.core.constants import Mate, PairKey
from fastqpair.core.logging_config import get_logger
from fastqpair.core.read_fastq_records import PartialRecord, ReadStatus, format_record, parse_read
from fastqpair.models.models import OutputPaths, PairingOutput, PairingStats

logger = get_logger(__name__)


def delete_empty_fastq(file_path: Path) -> Path | None:
    """Delete a FASTQ file that holds no record.

    Args:
        file_path: Closed, fully flushed FASTQ file.

    Returns:
        The path if at least one record could be read, otherwise None after
        the file has been removed.
    """
    with file_path.open("rb") as f:
        result = parse_read(f)
    if result.status is ReadStatus.EOF:
        file_path.unlink()
        logger.debug(f"Removed empty singleton file {file_path}")
        return None
    return file_path


class OutputSink:
    """Buffered writers for paired-1, paired-2 and singleton records.

    Use as a context manager. Leaving the block closes the files; call
    :meth:`finalize` on success to get the output paths and drop an empty
    singleton file. Files already written are left in place on error.
    """

    def __init__(self, paths: OutputPaths):
        self.paths = paths
        self.stats = PairingStats()
        self._paired1: BinaryIO | None = None
        self._paired2: BinaryIO | None = None
        self._singletons: BinaryIO | None = None

    def open(self) -> "OutputSink":
        self._paired1 = self.paths.paired1.open("wb")
        self._paired2 = self.paths.paired2.open("wb")
        self._singletons = self.paths.singletons.open("wb")
        return self

    def __enter__(self) -> "OutputSink":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        for handle in (self._paired1, self._paired2, self._singletons):
            if handle is not None and not handle.closed:
                handle.close()

    def write_pair(self, key: PairKey, read1: PartialRecord, read2: PartialRecord) -> None:
        """Write both mates at the same position of the two paired files."""
        assert self._paired1 is not None and self._paired2 is not None, "sink is not open"
        self._paired1.write(format_record(key, 1, read1))
        self._paired2.write(format_record(key, 2, read2))
        self.stats.pairs += 1

    def write_singleton(self, key: PairKey, mate: Mate, record: PartialRecord) -> None:
        assert self._singletons is not None, "sink is not open"
        self._singletons.write(format_record(key, mate, record))
        if mate == 1:
            self.stats.singletons_read1 += 1
        else:
            self.stats.singletons_read2 += 1

    def finalize(self) -> PairingOutput:
        """Flush and close all outputs, then remove the singleton file if it is empty."""
        self.close()
        singleton_path = delete_empty_fastq(self.paths.singletons)
        return PairingOutput(
            paired1_path=self.paths.paired1,
            paired2_path=self.paths.paired2,
            singleton_path=singleton_path,
            stats=self.stats,
        )
