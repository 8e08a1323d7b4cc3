"""Seed derivation: raw entropy bytes -> fixed-width PRNG seeds.

Seeds are never raw copies of the entropy. A single seed is the SHA-256 of
the whole buffer (or an XOR fold when the buffer is shorter than a seed);
multiple seeds hash contiguous, non-overlapping slices together with the
slice index, so identical slice content at different positions still gives
distinct seeds.
"""

from __future__ import annotations

import hashlib
import logging

from qr_verdict.entropy.types import EntropyBuffer
from qr_verdict.exceptions import SeedDerivationError

logger = logging.getLogger("qr_verdict")

SEED_WIDTH = 32


def partition(length: int, count: int) -> list[tuple[int, int]]:
    """Split ``range(length)`` into *count* contiguous near-equal slices.

    Slice ``i`` covers ``[i * length // count, (i + 1) * length // count)``.
    Slices are exhaustive and non-overlapping; some may be empty when
    ``count > length``.

    Args:
        length: Number of bytes to partition.
        count: Number of slices (>= 1).

    Returns:
        List of ``(start, stop)`` pairs.
    """
    if count < 1:
        raise SeedDerivationError(f"Slice count must be >= 1, got {count}")
    return [(i * length // count, (i + 1) * length // count) for i in range(count)]


def _fold(data: bytes) -> bytes:
    seed = bytearray(SEED_WIDTH)
    for i, byte in enumerate(data):
        seed[i % SEED_WIDTH] ^= byte
    return bytes(seed)


def derive_seeds(data: bytes, seed_count: int) -> list[bytes]:
    """Derive *seed_count* deterministic ``SEED_WIDTH``-byte seeds from *data*.

    Args:
        data: Raw entropy bytes (any length).
        seed_count: Number of seeds to produce (>= 1).

    Returns:
        List of *seed_count* seeds, each exactly ``SEED_WIDTH`` bytes.

    Raises:
        SeedDerivationError: If *seed_count* is less than 1.
    """
    if seed_count < 1:
        raise SeedDerivationError(f"seed_count must be >= 1, got {seed_count}")

    if seed_count == 1:
        if len(data) < SEED_WIDTH:
            return [_fold(data)]
        return [hashlib.sha256(data).digest()]

    seeds = []
    for index, (start, stop) in enumerate(partition(len(data), seed_count)):
        digest = hashlib.sha256()
        digest.update(data[start:stop])
        digest.update(index.to_bytes(8, "little"))
        seeds.append(digest.digest())
    return seeds


def choose_seed_count(length: int, max_seeds: int) -> int:
    """One seed per full ``SEED_WIDTH`` bytes of entropy, between 1 and *max_seeds*."""
    if max_seeds < 1:
        raise SeedDerivationError(f"max_seeds must be >= 1, got {max_seeds}")
    return min(max_seeds, max(1, length // SEED_WIDTH))


class SeedDeriver:
    """Turns entropy buffers into the seed list for one sampling run.

    Args:
        max_seeds: Upper bound on the number of seeds (and therefore on the
            number of parallel sampling tasks).
    """

    def __init__(self, max_seeds: int = 32) -> None:
        if max_seeds < 1:
            raise SeedDerivationError(f"max_seeds must be >= 1, got {max_seeds}")
        self._max_seeds = max_seeds

    @property
    def max_seeds(self) -> int:
        return self._max_seeds

    def derive(self, buffer: EntropyBuffer | bytes) -> list[bytes]:
        """Derive seeds from an entropy buffer or raw bytes."""
        data = buffer.data if isinstance(buffer, EntropyBuffer) else bytes(buffer)
        count = choose_seed_count(len(data), self._max_seeds)
        logger.debug("Deriving %d seed(s) from %d entropy bytes", count, len(data))
        return derive_seeds(data, count)
