#!/usr/bin/env python3
"""Common contract of the pairing strategies.

Every strategy reads mate 1 and mate 2 from binary handles and hands each
resolved record to an :class:`~fastqpair.core.sink.OutputSink`. Strategies
that build an index of mate 1 before streaming mate 2 derive from
:class:`IndexedPairingStrategy` and only provide ``index``, ``resolve`` and
``drain``.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, BinaryIO, ClassVar, Generic, TypeVar

from fastqpair.core.constants import DEFAULT_DUPLICATE_POLICY, DuplicatePolicy, Mate, PairingMethod, PairKey
from fastqpair.core.exceptions import DuplicateKeyError
from fastqpair.core.logging_config import get_logger
from fastqpair.core.read_fastq_records import PartialRecord, Record, read_fastq
from fastqpair.core.sink import OutputSink

logger = get_logger(__name__)

IndexT = TypeVar("IndexT")


@dataclass
class Matched:
    """A mate 2 record whose partner was found in the mate 1 index."""

    key: PairKey
    read1: PartialRecord
    read2: PartialRecord


@dataclass
class Unmatched:
    """A mate 2 record with no partner in the mate 1 index."""

    key: PairKey
    record: PartialRecord


Resolution = Matched | Unmatched


def source_name(handle: BinaryIO, default: str) -> str:
    """Best effort name of an input handle for log messages."""
    name = getattr(handle, "name", None)
    return str(name) if isinstance(name, str) else default


class PairingStrategy(ABC):
    """Pairs two FASTQ streams into an output sink.

    Args:
        duplicate_policy: What to do when a key repeats within one input:
            ``overwrite`` keeps the last record, ``keep-first`` keeps the
            first, ``error`` raises DuplicateKeyError.
        strict: Raise TruncatedRecordError on a partial final record
            instead of treating it as the end of the input.
    """

    method: ClassVar[PairingMethod]

    def __init__(self, duplicate_policy: DuplicatePolicy = DEFAULT_DUPLICATE_POLICY, strict: bool = False):
        self.duplicate_policy = duplicate_policy
        self.strict = strict
        self.duplicates = 0

    @abstractmethod
    def pair(self, read1: BinaryIO, read2: BinaryIO, sink: OutputSink) -> None:
        """Write every record of both inputs to ``sink``, as a pair or a singleton."""

    def insert(self, index: dict[PairKey, Any], key: PairKey, value: Any, mate: Mate) -> None:
        """Add ``key`` to ``index`` honouring the duplicate policy."""
        if key in index:
            self.duplicates += 1
            if self.duplicate_policy == "error":
                raise DuplicateKeyError(key, mate)
            logger.debug(f"Duplicate key {key!r} in mate {mate} ({self.duplicate_policy})")
            if self.duplicate_policy == "keep-first":
                return
        index[key] = value

    def report_duplicates(self, sink: OutputSink) -> None:
        sink.stats.duplicates += self.duplicates
        if self.duplicates:
            logger.warning(
                f"{self.duplicates} duplicate read identifier(s) resolved with policy '{self.duplicate_policy}'"
            )


class IndexedPairingStrategy(PairingStrategy, Generic[IndexT]):
    """Index mate 1, stream mate 2 against the index, then drain what is left."""

    @abstractmethod
    def index(self, source: BinaryIO) -> IndexT:
        """Build the mate 1 index from ``source``."""

    @abstractmethod
    def resolve(self, record: Record, index: IndexT) -> Resolution:
        """Look up a mate 2 record, consuming the mate 1 entry on a match."""

    @abstractmethod
    def drain(self, index: IndexT) -> Iterator[tuple[PairKey, PartialRecord]]:
        """Yield the mate 1 records left in the index and empty it."""

    def pair(self, read1: BinaryIO, read2: BinaryIO, sink: OutputSink) -> None:
        self.duplicates = 0
        index = self.index(read1)
        logger.info(f"Indexed {len(index)} mate 1 records using method '{self.method}'")  # type: ignore[arg-type]

        for record in read_fastq(read2, self.strict, source_name(read2, "mate 2")):
            resolution = self.resolve(record, index)
            if isinstance(resolution, Matched):
                sink.write_pair(resolution.key, resolution.read1, resolution.read2)
            else:
                sink.write_singleton(resolution.key, 2, resolution.record)

        for key, partial in self.drain(index):
            sink.write_singleton(key, 1, partial)

        self.report_duplicates(sink)
