"""Bit counting over byte buffers.

Counts set and clear bits with a 256-entry population-count lookup table
applied to a ``uint8`` view of the input, so arbitrarily large buffers are
counted without a Python-level loop.
"""

from __future__ import annotations


import numpy as np

from qr_verdict.tally import Tally

ByteLike = bytes | bytearray | memoryview | np.ndarray

_POPCOUNT: np.ndarray = np.array([bin(i).count("1") for i in range(256)], dtype=np.uint8)


def _as_uint8(data: ByteLike) -> np.ndarray:
    if isinstance(data, np.ndarray):
        return data.astype(np.uint8, copy=False).ravel()
    return np.frombuffer(data, dtype=np.uint8)


def count_ones(data: ByteLike) -> int:
    """Return the number of set bits in *data*."""
    values = _as_uint8(data)
    if values.size == 0:
        return 0
    return int(_POPCOUNT[values].sum(dtype=np.uint64))


def count_bits(data: ByteLike) -> Tally:
    """Count set and clear bits in *data*.

    Args:
        data: Bytes-like object or ``uint8`` array.

    Returns:
        Tally with ``ones + zeros == 8 * len(data)``.
    """
    values = _as_uint8(data)
    ones = count_ones(values)
    return Tally(ones=ones, zeros=values.size * 8 - ones)
