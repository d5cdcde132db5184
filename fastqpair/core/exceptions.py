#!/usr/bin/env python3
"""Exceptions raised while pairing FASTQ files.

All pairing failures derive from :class:`PairingError`, which is a
``ValueError`` so callers that already guard against bad input keep working.
Failures of the underlying file handles are left as the built-in ``OSError``.
"""


class PairingError(ValueError):
    """Base class for errors that abort a pairing run."""


class MalformedHeaderError(PairingError):
    """A header has no identifier token, or the token is shorter than the mate suffix."""

    def __init__(self, header: bytes, reason: str):
        self.header = header
        self.reason = reason
        text = header.decode("utf-8", errors="replace").rstrip("\r\n")
        super().__init__(f"Malformed FASTQ header {text!r}: {reason}")


class TruncatedRecordError(PairingError):
    """A record ended before all four of its lines were read."""

    def __init__(self, header: bytes, lines_read: int, source: str | None = None):
        self.header = header
        self.lines_read = lines_read
        self.source = source
        text = header.decode("utf-8", errors="replace").rstrip("\r\n")
        where = f" in {source}" if source else ""
        super().__init__(f"Truncated FASTQ record{where}: {text!r} has only {lines_read} of 4 lines")


class ReseekError(PairingError):
    """A stored offset no longer points at the indexed record."""

    def __init__(self, offset: int, key: bytes, reason: str):
        self.offset = offset
        self.key = key
        super().__init__(f"Could not re-read record {key!r} at offset {offset}: {reason}")


class DuplicateKeyError(PairingError):
    """The same pair key occurred twice in one input under the 'error' duplicate policy."""

    def __init__(self, key: bytes, mate: int):
        self.key = key
        self.mate = mate
        super().__init__(f"Duplicate read identifier {key!r} in mate {mate} input")


class CompressionError(PairingError):
    """An external gzip tool is missing or failed."""
