"""Shared pytest fixtures for fastqpair tests."""

import shutil
import tempfile
from pathlib import Path

import pytest
from fastqpair.core.headers import parse_header
from fastqpair.core.read_fastq_records import read_fastq

READ_LENGTH = 12
BASES = "ACGT"


def make_record(read_id: int, mate: int, accession: str = "SRR3380692") -> bytes:
    """One record named like SRA dumps: @SRR3380692.<id>.<mate> <id> length=<n>.

    Sequence and quality depend on id and mate so tests can tell records apart.
    """
    seq = "".join(BASES[(read_id * 3 + mate + i) % 4] for i in range(READ_LENGTH))
    qual = chr(33 + (read_id % 40)) * (READ_LENGTH - 1) + chr(33 + mate)
    return f"@{accession}.{read_id}.{mate} {read_id} length={READ_LENGTH}\n{seq}\n+{accession}.{read_id}.{mate}\n{qual}\n".encode()


def make_fastq(read_ids: list[int], mate: int) -> bytes:
    return b"".join(make_record(read_id, mate) for read_id in read_ids)


def key_of(read_id: int, accession: str = "SRR3380692") -> bytes:
    return f"@{accession}.{read_id}".encode()


@pytest.fixture
def temp_output_dir():
    """Create a temporary directory for test outputs."""
    tmpdir = tempfile.mkdtemp()
    yield Path(tmpdir)
    shutil.rmtree(tmpdir)


@pytest.fixture
def write_fastq(temp_output_dir):
    """Write a FASTQ file of the given read ids and mate number into the temp directory."""

    def _write(name: str, read_ids: list[int], mate: int) -> Path:
        path = temp_output_dir / name
        path.write_bytes(make_fastq(read_ids, mate))
        return path

    return _write


@pytest.fixture
def overlapping_inputs(write_fastq):
    """R1 holds reads 1, 2, 3; R2 holds 3, 2, 4. Reads 2 and 3 pair, 1 and 4 are singletons."""
    r1 = write_fastq("ncbi_1.fastq", [1, 2, 3], 1)
    r2 = write_fastq("ncbi_2.fastq", [3, 2, 4], 2)
    return r1, r2


@pytest.fixture
def shuffled_inputs(write_fastq):
    """Both files hold the same reads in different orders."""
    r1 = write_fastq("ncbi_1_shuffled.fastq", [3, 2, 1, 4, 9], 1)
    r2 = write_fastq("ncbi_2_shuffled.fastq", [1, 9, 2, 4, 3], 2)
    return r1, r2


@pytest.fixture
def fastq_keys():
    """Return the pair keys of a FASTQ file in file order."""

    def _keys(path: Path) -> list[bytes]:
        with path.open("rb") as f:
            return [parse_header(record.header) for record in read_fastq(f, strict=True)]

    return _keys


@pytest.fixture
def fastq_headers():
    """Return the stripped header lines of a FASTQ file in file order."""

    def _headers(path: Path) -> list[bytes]:
        with path.open("rb") as f:
            return [record.header.rstrip() for record in read_fastq(f, strict=True)]

    return _headers
