"""Tests for seed derivation."""

from __future__ import annotations

import hashlib

import pytest

from qr_verdict.entropy.types import EntropyBuffer, Quality
from qr_verdict.exceptions import SeedDerivationError
from qr_verdict.seeds import SEED_WIDTH, SeedDeriver, choose_seed_count, derive_seeds, partition

# SHA-256 of 32 zero bytes.
_SHA256_32_ZEROS = bytes.fromhex("66687aadf862bd776c8fc18b8e9f8e20089714856ee233b3902a591d0d5f2925")


class TestPartition:
    """Slices must be contiguous, exhaustive and non-overlapping."""

    @pytest.mark.parametrize(
        ("length", "count"),
        [(0, 1), (1, 3), (32, 1), (100, 7), (1024, 32), (1000, 33), (5, 5)],
    )
    def test_exhaustive_and_non_overlapping(self, length: int, count: int) -> None:
        slices = partition(length, count)
        assert len(slices) == count
        assert slices[0][0] == 0
        assert slices[-1][1] == length
        for (_, stop), (start, _) in zip(slices, slices[1:]):
            assert stop == start
        assert sum(stop - start for start, stop in slices) == length

    def test_near_equal_sizes(self) -> None:
        sizes = [stop - start for start, stop in partition(100, 7)]
        assert max(sizes) - min(sizes) <= 1

    def test_index_formula(self) -> None:
        assert partition(10, 3) == [(0, 3), (3, 6), (6, 10)]

    def test_zero_count_rejected(self) -> None:
        with pytest.raises(SeedDerivationError):
            partition(10, 0)


class TestDeriveSeeds:
    """Tests for derive_seeds()."""

    def test_single_seed_from_long_buffer_is_sha256(self) -> None:
        data = bytes(range(64))
        assert derive_seeds(data, 1) == [hashlib.sha256(data).digest()]

    def test_single_seed_from_32_zero_bytes(self) -> None:
        assert derive_seeds(bytes(32), 1) == [_SHA256_32_ZEROS]

    def test_single_seed_is_not_truncation(self) -> None:
        data = bytes(range(40))
        assert derive_seeds(data, 1)[0] != data[:SEED_WIDTH]

    def test_short_buffer_is_zero_padded_when_shorter_than_width(self) -> None:
        seed = derive_seeds(b"\x01\x02\x03", 1)[0]
        assert seed == b"\x01\x02\x03" + bytes(SEED_WIDTH - 3)

    def test_short_buffer_fold_uses_every_byte(self) -> None:
        a = derive_seeds(b"\x10" * 31, 1)[0]
        b = derive_seeds(b"\x10" * 30 + b"\x11", 1)[0]
        assert a != b

    def test_empty_buffer_folds_to_zero_seed(self) -> None:
        assert derive_seeds(b"", 1) == [bytes(SEED_WIDTH)]

    def test_multiple_seeds_hash_slice_and_index(self) -> None:
        data = bytes(range(96))
        seeds = derive_seeds(data, 3)
        for index, (start, stop) in enumerate(partition(len(data), 3)):
            expected = hashlib.sha256(data[start:stop] + index.to_bytes(8, "little")).digest()
            assert seeds[index] == expected

    def test_identical_slices_give_distinct_seeds(self) -> None:
        seeds = derive_seeds(bytes(128), 4)
        assert len(set(seeds)) == 4

    @pytest.mark.parametrize("count", [1, 2, 5, 32])
    def test_deterministic(self, count: int) -> None:
        data = bytes(range(200))
        assert derive_seeds(data, count) == derive_seeds(data, count)

    @pytest.mark.parametrize(("length", "count"), [(3, 1), (32, 1), (100, 4), (2, 8)])
    def test_every_seed_has_fixed_width(self, length: int, count: int) -> None:
        seeds = derive_seeds(bytes(range(length)), count)
        assert len(seeds) == count
        assert all(len(seed) == SEED_WIDTH for seed in seeds)

    def test_distinct_inputs_give_distinct_seeds(self) -> None:
        assert derive_seeds(b"a" * 64, 1) != derive_seeds(b"b" * 64, 1)

    def test_zero_count_rejected(self) -> None:
        with pytest.raises(SeedDerivationError, match="seed_count"):
            derive_seeds(b"abc", 0)


class TestChooseSeedCount:
    """One seed per full 32 bytes, at least one, at most max_seeds."""

    @pytest.mark.parametrize(
        ("length", "max_seeds", "expected"),
        [(0, 32, 1), (31, 32, 1), (32, 32, 1), (64, 32, 2), (1024, 32, 32), (4096, 32, 32), (1024, 4, 4)],
    )
    def test_choose(self, length: int, max_seeds: int, expected: int) -> None:
        assert choose_seed_count(length, max_seeds) == expected


class TestSeedDeriver:
    """Tests for the SeedDeriver wrapper."""

    def test_accepts_entropy_buffer(self) -> None:
        buffer = EntropyBuffer(data=bytes(range(128)), quality=Quality.PHYSICAL, source="test")
        seeds = SeedDeriver(max_seeds=32).derive(buffer)
        assert seeds == derive_seeds(buffer.data, 4)

    def test_accepts_raw_bytes(self) -> None:
        assert SeedDeriver(max_seeds=2).derive(bytes(1024)) == derive_seeds(bytes(1024), 2)

    def test_invalid_max_seeds(self) -> None:
        with pytest.raises(SeedDerivationError):
            SeedDeriver(max_seeds=0)
