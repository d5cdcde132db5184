#!/usr/bin/env python3
"""Low-memory pairing that indexes byte offsets of mate 1 records.

Only the pair key and the offset of each mate 1 record are kept in memory.
When a mate 2 record finds its partner, mate 1 is repositioned with ``seek``
and the record is read again, so mate 1 must be a seekable file.
"""

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import BinaryIO

from fastqpair.core.constants import METHOD_SEEK, Offset, PairKey
from fastqpair.core.exceptions import MalformedHeaderError, PairingError, ReseekError
from fastqpair.core.headers import parse_header
from fastqpair.core.logging_config import get_logger
from fastqpair.core.read_fastq_records import (
    PartialRecord,
    ReadStatus,
    Record,
    check_truncated,
    parse_read,
)
from fastqpair.pairing.base import IndexedPairingStrategy, Matched, Resolution, Unmatched, source_name

logger = get_logger(__name__)


@dataclass
class OffsetIndex:
    """Mate 1 handle together with the offset of every indexed record."""

    source: BinaryIO
    offsets: dict[PairKey, Offset] = field(default_factory=dict)
    rereads: int = 0

    def __len__(self) -> int:
        return len(self.offsets)


class OffsetIndexStrategy(IndexedPairingStrategy[OffsetIndex]):
    """Pair by offset index, re-reading mate 1 records on demand.

    Output is identical to the full index strategy; each paired or drained
    mate 1 record costs one extra seek and read.
    """

    method = METHOD_SEEK

    def index(self, source: BinaryIO) -> OffsetIndex:
        """Map the pair key of each mate 1 record to the offset where the record starts."""
        if not source.seekable():
            raise PairingError("The seek method needs a mate 1 input that supports random access.")

        name = source_name(source, "mate 1")
        index = OffsetIndex(source)
        position = source.tell()
        while True:
            result = parse_read(source)
            if result.status is ReadStatus.EOF:
                break
            if result.status is ReadStatus.TRUNCATED:
                check_truncated(result, self.strict, name)
                break
            self.insert(index.offsets, parse_header(result.header), position, 1)
            position = source.tell()
        return index

    def resolve(self, record: Record, index: OffsetIndex) -> Resolution:
        key = parse_header(record.header)
        offset = index.offsets.pop(key, None)
        if offset is None:
            return Unmatched(key, record.partial())
        return Matched(key, self.reread(index, key, offset), record.partial())

    def drain(self, index: OffsetIndex) -> Iterator[tuple[PairKey, PartialRecord]]:
        for key, offset in index.offsets.items():
            yield key, self.reread(index, key, offset)
        index.offsets.clear()
        logger.debug(f"Re-read {index.rereads} mate 1 records by offset")

    def reread(self, index: OffsetIndex, key: PairKey, offset: Offset) -> PartialRecord:
        """Read the mate 1 record stored at ``offset`` and check it still carries ``key``."""
        index.source.seek(offset)
        result = parse_read(index.source)
        if result.status is not ReadStatus.COMPLETE or result.record is None:
            raise ReseekError(offset, key, f"no complete record ({result.status.value})")
        try:
            found = parse_header(result.record.header)
        except MalformedHeaderError as e:
            raise ReseekError(offset, key, str(e)) from e
        if found != key:
            raise ReseekError(offset, key, f"found {found!r} instead; was the file modified?")
        index.rereads += 1
        return result.record.partial()
