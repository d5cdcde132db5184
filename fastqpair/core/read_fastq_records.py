#!/usr/bin/env python3
"""Read and write four-line FASTQ records on binary file handles.

Records are kept as ``bytes`` so that pair keys compare byte for byte and so
that offsets reported by ``tell()`` can be handed back to ``seek()``.
"""

from collections.abc import Generator
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO

from fastqpair.core.constants import LINES_PER_RECORD, SEPARATOR_LINE, Mate, PairKey
from fastqpair.core.exceptions import TruncatedRecordError
from fastqpair.core.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class PartialRecord:
    """Sequence and quality of a record whose key is stored elsewhere."""

    sequence: bytes
    quality: bytes


@dataclass
class Record:
    """A single FASTQ record. Lines keep their terminators; the separator is dropped."""

    header: bytes
    sequence: bytes
    quality: bytes

    def partial(self) -> PartialRecord:
        return PartialRecord(self.sequence, self.quality)


class ReadStatus(Enum):
    COMPLETE = "complete"
    EOF = "eof"
    TRUNCATED = "truncated"


@dataclass
class ReadResult:
    """Outcome of reading one block: a record, clean end of stream, or a partial block."""

    status: ReadStatus
    record: Record | None = None
    header: bytes = b""
    lines_read: int = 0


def parse_read(infile: BinaryIO) -> ReadResult:
    """Read the next four lines of ``infile`` as one record.

    Args:
        infile: Binary file handle positioned at the start of a record.

    Returns:
        ReadResult tagged COMPLETE with the record, EOF if nothing was left,
        or TRUNCATED if the stream ended after the header but before the
        quality line.
    """
    header = infile.readline()
    if not header:
        return ReadResult(ReadStatus.EOF)
    lines = [header]
    for _ in range(LINES_PER_RECORD - 1):
        line = infile.readline()
        if not line:
            return ReadResult(ReadStatus.TRUNCATED, header=header, lines_read=len(lines))
        lines.append(line)
    record = Record(header, lines[1], lines[3])
    return ReadResult(ReadStatus.COMPLETE, record=record, header=header, lines_read=LINES_PER_RECORD)


def read_fastq(
    infile: BinaryIO, strict: bool = False, source: str | None = None
) -> Generator[Record, None, None]:
    """Read one fastq record at a time using a generator.

    A truncated final record ends the stream with a warning, or raises
    TruncatedRecordError when ``strict`` is set.

    Args:
        infile: Open binary file handle for reading FASTQ records.
        strict: Raise on a truncated record instead of stopping.
        source: Name of the input, used in messages.

    Yields:
        Each complete Record in file order.
    """
    while True:
        result = parse_read(infile)
        if result.status is ReadStatus.COMPLETE:
            yield result.record  # type: ignore[misc]
            continue
        if result.status is ReadStatus.TRUNCATED:
            check_truncated(result, strict, source)
        return


def check_truncated(result: ReadResult, strict: bool, source: str | None = None) -> None:
    """Raise for a truncated read in strict mode, otherwise log it as end of input."""
    if strict:
        raise TruncatedRecordError(result.header, result.lines_read, source)
    header = result.header.decode("utf-8", errors="replace").rstrip()
    logger.warning(
        f"Ignoring truncated record {header!r} at end of {source or 'input'} "
        f"({result.lines_read} of {LINES_PER_RECORD} lines present)"
    )


def format_record(key: PairKey, mate: Mate, partial: PartialRecord) -> bytes:
    """Render a record with its mate suffix regenerated from ``mate``."""
    return b"".join(
        [
            key,
            b".%d\n" % mate,
            partial.sequence.rstrip(b"\r\n"),
            b"\n",
            SEPARATOR_LINE,
            partial.quality.rstrip(b"\r\n"),
            b"\n",
        ]
    )
