#!/usr/bin/env python3
from collections.abc import Iterator
from typing import BinaryIO

from fastqpair.core.constants import METHOD_STORE, PairKey
from fastqpair.core.headers import parse_header
from fastqpair.core.read_fastq_records import PartialRecord, Record, read_fastq
from fastqpair.pairing.base import IndexedPairingStrategy, Matched, Resolution, Unmatched, source_name

StoreIndex = dict[PairKey, PartialRecord]


class FullIndexStrategy(IndexedPairingStrategy[StoreIndex]):
    """Hold every mate 1 record in memory and stream mate 2 against it.

    Paired records are written in mate 2 order. Memory grows with the size of
    the mate 1 file.
    """

    method = METHOD_STORE

    def index(self, source: BinaryIO) -> StoreIndex:
        """Create a dict associating the pair key of each mate 1 record with its sequence and quality."""
        index: StoreIndex = {}
        for record in read_fastq(source, self.strict, source_name(source, "mate 1")):
            self.insert(index, parse_header(record.header), record.partial(), 1)
        return index

    def resolve(self, record: Record, index: StoreIndex) -> Resolution:
        key = parse_header(record.header)
        read1 = index.pop(key, None)
        if read1 is None:
            return Unmatched(key, record.partial())
        return Matched(key, read1, record.partial())

    def drain(self, index: StoreIndex) -> Iterator[tuple[PairKey, PartialRecord]]:
        yield from index.items()
        index.clear()
