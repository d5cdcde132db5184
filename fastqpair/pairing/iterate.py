#!/usr/bin/env python3
from typing import BinaryIO

from fastqpair.core.constants import METHOD_ITER, Mate, PairKey
from fastqpair.core.headers import parse_header
from fastqpair.core.logging_config import get_logger
from fastqpair.core.read_fastq_records import PartialRecord, ReadStatus, Record, check_truncated, parse_read
from fastqpair.core.sink import OutputSink
from fastqpair.pairing.base import PairingStrategy, source_name

logger = get_logger(__name__)

Pending = dict[PairKey, PartialRecord]


class InterleavedStrategy(PairingStrategy):
    """Pair two FASTQ files by reading both of them at the same time.

    Only records still waiting for their mate are kept, so memory stays small
    when the files are mostly in the same order. No random access is needed.
    Pairs are written as soon as the second mate is seen; leftovers are
    written as singletons, mate 1 first.
    """

    method = METHOD_ITER

    def pair(self, read1: BinaryIO, read2: BinaryIO, sink: OutputSink) -> None:
        self.duplicates = 0
        pending1: Pending = {}
        pending2: Pending = {}
        name1 = source_name(read1, "mate 1")
        name2 = source_name(read2, "mate 2")
        read1_finished, read2_finished = False, False
        peak = 0

        # Each flag is set only by its own stream running out
        while not (read1_finished and read2_finished):
            if not read1_finished:
                record = self.next_record(read1, name1)
                if record is None:
                    read1_finished = True
                else:
                    self.take(record, 1, pending1, pending2, sink)
            if not read2_finished:
                record = self.next_record(read2, name2)
                if record is None:
                    read2_finished = True
                else:
                    self.take(record, 2, pending2, pending1, sink)
            peak = max(peak, len(pending1) + len(pending2))

        logger.debug(f"At most {peak} records were waiting for their mate")

        for key, partial in pending1.items():
            sink.write_singleton(key, 1, partial)
        for key, partial in pending2.items():
            sink.write_singleton(key, 2, partial)
        pending1.clear()
        pending2.clear()

        self.report_duplicates(sink)

    def next_record(self, handle: BinaryIO, name: str) -> Record | None:
        result = parse_read(handle)
        if result.status is ReadStatus.COMPLETE:
            return result.record
        if result.status is ReadStatus.TRUNCATED:
            check_truncated(result, self.strict, name)
        return None

    def take(self, record: Record, mate: Mate, own: Pending, other: Pending, sink: OutputSink) -> None:
        """Pair ``record`` with a waiting mate, or leave it waiting in ``own``."""
        key = parse_header(record.header)
        partner = other.pop(key, None)
        if partner is None:
            self.insert(own, key, record.partial(), mate)
        elif mate == 1:
            sink.write_pair(key, record.partial(), partner)
        else:
            sink.write_pair(key, partner, record.partial())
