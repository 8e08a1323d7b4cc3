"""Parallel seeded bit sampling.

A fixed bit budget is split into per-seed tasks. Each task owns a numpy
``Generator`` (PCG64 seeded through ``SeedSequence``) built from its seed,
draws its share of bytes and counts set bits. Tasks run on a thread pool
and share nothing; the final tally is the sum of per-task tallies, so the
result does not depend on scheduling or on the number of workers.
"""

from __future__ import annotations

import functools
import logging
import operator
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

import numpy as np

from qr_verdict.bits import count_ones
from qr_verdict.exceptions import SamplingError
from qr_verdict.tally import Tally

logger = logging.getLogger("qr_verdict")

# Bytes drawn from a generator per call. Part of the output contract:
# changing it changes which bytes a given seed produces.
CHUNK_BYTES = 1 << 20


@dataclass(frozen=True, slots=True)
class SampleTask:
    """Work assigned to one sampling worker.

    Attributes:
        seed: PRNG seed owned by this task.
        byte_count: Number of bytes the task draws from its generator.
        bit_count: Number of bits the task contributes to the tally. Equal
            to ``8 * byte_count`` except for the task holding a trailing
            partial byte.
    """

    seed: bytes
    byte_count: int
    bit_count: int


def make_generator(seed: bytes) -> np.random.Generator:
    """Build the pinned PRNG for *seed*: PCG64 via ``SeedSequence``."""
    sequence = np.random.SeedSequence(int.from_bytes(seed, "little"))
    return np.random.Generator(np.random.PCG64(sequence))


def plan_tasks(seeds: Sequence[bytes], total_bits: int) -> list[SampleTask]:
    """Split *total_bits* across one task per seed.

    ``ceil(total_bits / 8)`` bytes are divided so that every task gets
    ``total_bytes // n`` bytes and the first ``total_bytes % n`` tasks get
    one more. When the budget is not a whole number of bytes, the last task
    with any bytes counts only the leading bits of its final byte.

    Args:
        seeds: One seed per task.
        total_bits: Total number of bits to generate.

    Returns:
        Tasks whose ``bit_count`` values sum to exactly *total_bits*.

    Raises:
        SamplingError: If *seeds* is empty or *total_bits* is negative.
    """
    if not seeds:
        raise SamplingError("At least one seed is required")
    if total_bits < 0:
        raise SamplingError(f"total_bits must be >= 0, got {total_bits}")

    n = len(seeds)
    total_bytes = -(-total_bits // 8)
    base, remainder = divmod(total_bytes, n)
    byte_counts = [base + 1 if i < remainder else base for i in range(n)]
    bit_counts = [count * 8 for count in byte_counts]

    surplus = total_bytes * 8 - total_bits
    if surplus:
        last = max(i for i, count in enumerate(byte_counts) if count > 0)
        bit_counts[last] -= surplus

    return [
        SampleTask(seed=seed, byte_count=byte_count, bit_count=bit_count)
        for seed, byte_count, bit_count in zip(seeds, byte_counts, bit_counts)
    ]


def run_task(task: SampleTask) -> Tally:
    """Draw the task's bytes from its own generator and count the bits."""
    rng = make_generator(task.seed)
    ones = 0
    remaining = task.byte_count
    chunk = b""
    while remaining > 0:
        size = min(CHUNK_BYTES, remaining)
        chunk = rng.bytes(size)
        remaining -= size
        ones += count_ones(chunk)

    partial = task.byte_count * 8 - task.bit_count
    if partial:
        # Only the most-significant bits of the final byte are in the budget.
        last = chunk[-1]
        ones -= count_ones(bytes([last & ((1 << partial) - 1)]))

    return Tally(ones=ones, zeros=task.bit_count - ones)


def reduce_tallies(tallies: Iterable[Tally]) -> Tally:
    """Sum tallies. Order does not matter."""
    return functools.reduce(operator.add, tallies, Tally.empty())


class ParallelSampler:
    """Fan-out/fan-in sampler over a thread pool.

    Args:
        max_workers: Pool size. ``None`` lets the executor choose. The
            result is identical for every pool size.
    """

    def __init__(self, max_workers: int | None = None) -> None:
        self._max_workers = max_workers

    def sample(self, seeds: Sequence[bytes], total_bits: int) -> Tally:
        """Generate exactly *total_bits* bits across *seeds* and tally them.

        Args:
            seeds: One seed per sampling task.
            total_bits: Total number of bits to generate.

        Returns:
            Tally with ``ones + zeros == total_bits``.
        """
        tasks = plan_tasks(seeds, total_bits)
        logger.debug(
            "Sampling %d bits across %d task(s), %d byte(s) per task (+1 for %d)",
            total_bits,
            len(tasks),
            tasks[-1].byte_count,
            sum(1 for t in tasks if t.byte_count > tasks[-1].byte_count),
        )
        with ThreadPoolExecutor(
            max_workers=self._max_workers,
            thread_name_prefix="qr-verdict-sampler",
        ) as pool:
            tally = reduce_tallies(pool.map(run_task, tasks))
        return tally
