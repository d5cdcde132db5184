"""Unit tests for the fastqpair.pairing strategies."""

import io
import random

import pytest
from conftest import key_of, make_fastq, make_record
from fastqpair.core.exceptions import (
    DuplicateKeyError,
    MalformedHeaderError,
    PairingError,
    ReseekError,
    TruncatedRecordError,
)
from fastqpair.core.read_fastq_records import parse_read
from fastqpair.core.sink import OutputSink
from fastqpair.models.models import OutputPaths
from fastqpair.pairing import (
    FullIndexStrategy,
    InterleavedStrategy,
    OffsetIndexStrategy,
    get_strategy,
)
from fastqpair.pipeline import pair_fastqs

METHODS = ["store", "seek", "iter"]


def expected_output(read_id: int, mate: int) -> bytes:
    """A conftest record as it appears after pairing: bare header, plain separator."""
    header, seq, _, qual = make_record(read_id, mate).splitlines()
    return header.split()[0] + b"\n" + seq + b"\n+\n" + qual + b"\n"


def run(method, r1, r2, outdir, **kwargs):
    outdir.mkdir(exist_ok=True)
    return pair_fastqs(r1, r2, OutputPaths.in_directory(outdir), method=method, **kwargs)


class TestOverlappingInputs:
    """R1 has reads {1, 2, 3}, R2 has {3, 2, 4}."""

    @pytest.mark.parametrize("method", ["store", "seek"])
    def test_index_methods(self, method, overlapping_inputs, temp_output_dir):
        r1, r2 = overlapping_inputs
        output = run(method, r1, r2, temp_output_dir / method)

        # Pairs follow R2 order; R2 singletons come before the drained R1 singletons
        assert output.paired1_path.read_bytes() == expected_output(3, 1) + expected_output(2, 1)
        assert output.paired2_path.read_bytes() == expected_output(3, 2) + expected_output(2, 2)
        assert output.singleton_path is not None
        assert output.singleton_path.read_bytes() == expected_output(4, 2) + expected_output(1, 1)
        assert output.stats.pairs == 2
        assert output.stats.singletons_read1 == 1
        assert output.stats.singletons_read2 == 1

    def test_interleaved(self, overlapping_inputs, temp_output_dir):
        r1, r2 = overlapping_inputs
        output = run("iter", r1, r2, temp_output_dir / "iter")

        # Read 2 meets its mate in the second round, read 3 in the third
        assert output.paired1_path.read_bytes() == expected_output(2, 1) + expected_output(3, 1)
        assert output.paired2_path.read_bytes() == expected_output(2, 2) + expected_output(3, 2)
        assert output.singleton_path.read_bytes() == expected_output(1, 1) + expected_output(4, 2)

    @pytest.mark.parametrize("method", METHODS)
    def test_key_sets(self, method, overlapping_inputs, temp_output_dir, fastq_keys):
        r1, r2 = overlapping_inputs
        output = run(method, r1, r2, temp_output_dir / method)

        assert sorted(fastq_keys(output.paired1_path)) == [key_of(2), key_of(3)]
        assert fastq_keys(output.paired1_path) == fastq_keys(output.paired2_path)
        assert sorted(fastq_keys(output.singleton_path)) == [key_of(1), key_of(4)]


class TestShuffledInputs:
    """Identical read sets in different orders."""

    @pytest.mark.parametrize("method", METHODS)
    def test_no_singleton_file(self, method, shuffled_inputs, temp_output_dir, fastq_keys):
        r1, r2 = shuffled_inputs
        outdir = temp_output_dir / method
        output = run(method, r1, r2, outdir)

        assert output.singleton_path is None
        assert not (outdir / "Singletons.fastq").exists()
        assert sorted(fastq_keys(output.paired1_path)) == sorted(key_of(i) for i in [1, 2, 3, 4, 9])
        assert fastq_keys(output.paired1_path) == fastq_keys(output.paired2_path)

    @pytest.mark.parametrize("method", ["store", "seek"])
    def test_pairs_in_r2_order(self, method, shuffled_inputs, temp_output_dir, fastq_headers):
        r1, r2 = shuffled_inputs
        output = run(method, r1, r2, temp_output_dir / method)

        assert fastq_headers(output.paired2_path) == [f"@SRR3380692.{i}.2".encode() for i in [1, 9, 2, 4, 3]]
        assert fastq_headers(output.paired1_path) == [f"@SRR3380692.{i}.1".encode() for i in [1, 9, 2, 4, 3]]


class TestMethodsAgree:
    """Properties shared by all methods."""

    @pytest.mark.parametrize("seed", [1, 7, 42])
    def test_store_and_seek_are_byte_identical(self, seed, write_fastq, temp_output_dir):
        rng = random.Random(seed)
        r1 = write_fastq("r1.fastq", rng.sample(range(200), 60), 1)
        r2 = write_fastq("r2.fastq", rng.sample(range(200), 60), 2)

        store = run("store", r1, r2, temp_output_dir / "store")
        seek = run("seek", r1, r2, temp_output_dir / "seek")

        assert store.paired1_path.read_bytes() == seek.paired1_path.read_bytes()
        assert store.paired2_path.read_bytes() == seek.paired2_path.read_bytes()
        assert (store.singleton_path is None) == (seek.singleton_path is None)
        if store.singleton_path is not None:
            assert store.singleton_path.read_bytes() == seek.singleton_path.read_bytes()

    @pytest.mark.parametrize("method", METHODS)
    @pytest.mark.parametrize("seed", [3, 11])
    def test_no_record_lost_or_duplicated(self, method, seed, write_fastq, temp_output_dir, fastq_keys):
        rng = random.Random(seed)
        ids1 = rng.sample(range(100), 40)
        ids2 = rng.sample(range(100), 40)
        r1 = write_fastq("r1.fastq", ids1, 1)
        r2 = write_fastq("r2.fastq", ids2, 2)

        output = run(method, r1, r2, temp_output_dir / method)

        paired1 = fastq_keys(output.paired1_path)
        paired2 = fastq_keys(output.paired2_path)
        singletons = fastq_keys(output.singleton_path) if output.singleton_path else []

        shared = {key_of(i) for i in set(ids1) & set(ids2)}
        assert paired1 == paired2
        assert set(paired1) == shared
        assert len(paired1) == len(shared)
        assert not set(singletons) & shared
        assert sorted(singletons) == sorted(key_of(i) for i in set(ids1) ^ set(ids2))

    def test_interleaved_finds_same_pairs(self, write_fastq, temp_output_dir, fastq_keys):
        rng = random.Random(5)
        r1 = write_fastq("r1.fastq", rng.sample(range(100), 50), 1)
        r2 = write_fastq("r2.fastq", rng.sample(range(100), 50), 2)

        store = run("store", r1, r2, temp_output_dir / "store")
        iterated = run("iter", r1, r2, temp_output_dir / "iter")

        assert sorted(store.paired1_path.read_bytes().splitlines()) == sorted(
            iterated.paired1_path.read_bytes().splitlines()
        )
        assert sorted(fastq_keys(store.singleton_path)) == sorted(fastq_keys(iterated.singleton_path))

    @pytest.mark.parametrize("method", METHODS)
    def test_rerun_gives_identical_output(self, method, overlapping_inputs, temp_output_dir):
        r1, r2 = overlapping_inputs
        first = run(method, r1, r2, temp_output_dir / "first")
        second = run(method, r1, r2, temp_output_dir / "second")

        assert first.paired1_path.read_bytes() == second.paired1_path.read_bytes()
        assert first.paired2_path.read_bytes() == second.paired2_path.read_bytes()
        assert first.singleton_path.read_bytes() == second.singleton_path.read_bytes()


class TestDuplicates:
    """R1 holds read 1 twice with different sequences; R2 holds reads 5 and 1."""

    DUPLICATE = b"@SRR3380692.1.1 dup\nGGGGGGGGGGGG\n+\n############\n"

    @pytest.fixture
    def duplicate_inputs(self, temp_output_dir):
        r1 = temp_output_dir / "dup_1.fastq"
        r1.write_bytes(make_record(1, 1) + self.DUPLICATE)
        r2 = temp_output_dir / "dup_2.fastq"
        r2.write_bytes(make_fastq([5, 1], 2))
        return r1, r2

    @pytest.mark.parametrize("method", METHODS)
    def test_overwrite_keeps_last(self, method, duplicate_inputs, temp_output_dir):
        r1, r2 = duplicate_inputs
        output = run(method, r1, r2, temp_output_dir / method)

        assert output.paired1_path.read_bytes() == b"@SRR3380692.1.1\nGGGGGGGGGGGG\n+\n############\n"
        assert output.singleton_path.read_bytes() == expected_output(5, 2)
        assert output.stats.duplicates == 1

    @pytest.mark.parametrize("method", METHODS)
    def test_keep_first(self, method, duplicate_inputs, temp_output_dir):
        r1, r2 = duplicate_inputs
        output = run(method, r1, r2, temp_output_dir / method, duplicate_policy="keep-first")

        assert output.paired1_path.read_bytes() == expected_output(1, 1)
        assert output.stats.duplicates == 1

    @pytest.mark.parametrize("method", METHODS)
    def test_error_policy(self, method, duplicate_inputs, temp_output_dir):
        r1, r2 = duplicate_inputs
        with pytest.raises(DuplicateKeyError, match="mate 1"):
            run(method, r1, r2, temp_output_dir / method, duplicate_policy="error")


class TestMalformedInput:
    """Malformed headers and truncated records."""

    @pytest.mark.parametrize("method", METHODS)
    def test_malformed_header_raises(self, method, write_fastq, temp_output_dir):
        r1 = write_fastq("r1.fastq", [1, 2], 1)
        r2 = temp_output_dir / "r2.fastq"
        r2.write_bytes(make_record(1, 2) + b"@\nACGT\n+\nIIII\n")

        with pytest.raises(MalformedHeaderError):
            run(method, r1, r2, temp_output_dir / method)

    @pytest.mark.parametrize("method", METHODS)
    def test_empty_key_pairs(self, method, temp_output_dir):
        """A two character identifier such as @1 gives an empty but valid key."""
        r1 = temp_output_dir / "r1.fastq"
        r1.write_bytes(b"@1 x\nAC\n+\nII\n")
        r2 = temp_output_dir / "r2.fastq"
        r2.write_bytes(b"@2 x\nGG\n+\nJJ\n")

        output = run(method, r1, r2, temp_output_dir / method)

        assert output.paired1_path.read_bytes() == b".1\nAC\n+\nII\n"
        assert output.paired2_path.read_bytes() == b".2\nGG\n+\nJJ\n"
        assert output.singleton_path is None

    @pytest.mark.parametrize("method", METHODS)
    def test_truncated_r1_is_dropped(self, method, temp_output_dir, fastq_keys):
        r1 = temp_output_dir / "r1.fastq"
        r1.write_bytes(make_fastq([1, 2], 1) + make_record(3, 1)[:30])
        r2 = temp_output_dir / "r2.fastq"
        r2.write_bytes(make_fastq([1, 2, 3], 2))

        output = run(method, r1, r2, temp_output_dir / method)

        assert sorted(fastq_keys(output.paired1_path)) == [key_of(1), key_of(2)]
        assert fastq_keys(output.singleton_path) == [key_of(3)]

    @pytest.mark.parametrize("method", METHODS)
    def test_truncated_r1_strict(self, method, temp_output_dir):
        r1 = temp_output_dir / "r1.fastq"
        r1.write_bytes(make_fastq([1, 2], 1) + make_record(3, 1)[:30])
        r2 = temp_output_dir / "r2.fastq"
        r2.write_bytes(make_fastq([1, 2, 3], 2))

        with pytest.raises(TruncatedRecordError):
            run(method, r1, r2, temp_output_dir / method, strict=True)


class NonSeekableBytes(io.BytesIO):
    def seekable(self):
        return False


class TestOffsetIndexStrategy:
    """Tests for offset bookkeeping of the seek method."""

    def test_index_offsets(self):
        data = make_fastq([3, 2, 1], 1)
        record_length = len(make_record(1, 1))
        index = OffsetIndexStrategy().index(io.BytesIO(data))

        assert index.offsets == {key_of(3): 0, key_of(2): record_length, key_of(1): 2 * record_length}
        assert len(index) == 3

    def test_requires_seekable_input(self):
        with pytest.raises(PairingError, match="random access"):
            OffsetIndexStrategy().index(NonSeekableBytes(make_fastq([1], 1)))

    def test_reseek_detects_changed_file(self):
        strategy = OffsetIndexStrategy()
        index = strategy.index(io.BytesIO(make_fastq([1, 2], 1)))
        index.source = io.BytesIO(make_fastq([7, 8], 1))
        record = parse_read(io.BytesIO(make_record(2, 2))).record

        with pytest.raises(ReseekError, match="was the file modified"):
            strategy.resolve(record, index)

    def test_reseek_past_end_of_file(self):
        strategy = OffsetIndexStrategy()
        index = strategy.index(io.BytesIO(make_fastq([1], 1)))
        index.offsets[key_of(1)] = 10_000

        with pytest.raises(ReseekError, match="eof"):
            list(strategy.drain(index))

    def test_drain_empties_index(self):
        strategy = OffsetIndexStrategy()
        index = strategy.index(io.BytesIO(make_fastq([4, 5], 1)))
        drained = list(strategy.drain(index))

        assert [key for key, _ in drained] == [key_of(4), key_of(5)]
        assert len(index) == 0
        assert index.rereads == 2


class TestFullIndexStrategy:
    """Tests for index/resolve/drain of the store method."""

    def test_resolve_consumes_entry(self):
        strategy = FullIndexStrategy()
        index = strategy.index(io.BytesIO(make_fastq([1, 2], 1)))
        record = parse_read(io.BytesIO(make_record(1, 2))).record

        first = strategy.resolve(record, index)
        second = strategy.resolve(record, index)

        assert first.key == key_of(1)
        assert hasattr(first, "read1")
        assert not hasattr(second, "read1")
        assert list(index) == [key_of(2)]


class TestInterleavedStrategy:
    """Each input stops only at its own end of file."""

    @pytest.mark.parametrize(("ids1", "ids2"), [([1, 2, 3, 4, 5, 6], [1]), ([1], [1, 2, 3, 4, 5, 6]), ([], [1, 2])])
    def test_uneven_lengths(self, ids1, ids2, temp_output_dir, fastq_keys):
        paths = OutputPaths.in_directory(temp_output_dir)
        with OutputSink(paths) as sink:
            InterleavedStrategy().pair(io.BytesIO(make_fastq(ids1, 1)), io.BytesIO(make_fastq(ids2, 2)), sink)
            output = sink.finalize()

        expected_singletons = sorted(key_of(i) for i in set(ids1) ^ set(ids2))
        assert sorted(fastq_keys(output.singleton_path)) == expected_singletons
        assert fastq_keys(output.paired1_path) == [key_of(i) for i in set(ids1) & set(ids2)]

    def test_pairs_written_as_soon_as_matched(self, temp_output_dir, fastq_keys):
        paths = OutputPaths.in_directory(temp_output_dir)
        with OutputSink(paths) as sink:
            InterleavedStrategy().pair(
                io.BytesIO(make_fastq([1, 2, 3], 1)), io.BytesIO(make_fastq([1, 2, 3], 2)), sink
            )
            output = sink.finalize()

        assert fastq_keys(output.paired2_path) == [key_of(1), key_of(2), key_of(3)]
        assert output.singleton_path is None


def test_get_strategy():
    assert isinstance(get_strategy("store"), FullIndexStrategy)
    assert isinstance(get_strategy("seek"), OffsetIndexStrategy)
    assert isinstance(get_strategy("iter", duplicate_policy="error", strict=True), InterleavedStrategy)
    with pytest.raises(ValueError, match="Unknown pairing method"):
        get_strategy("bogus")  # type: ignore[arg-type]
