"""Bit tally type shared by the sampler and the decision engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Tally:
    """Count of set versus clear bits observed in a sampling run.

    Tallies combine with ``+``, which is associative and commutative, so
    per-task results can be reduced in any order.

    Attributes:
        ones: Number of set bits.
        zeros: Number of clear bits.
    """

    ones: int = 0
    zeros: int = 0

    def __post_init__(self) -> None:
        if self.ones < 0 or self.zeros < 0:
            raise ValueError(f"Tally counts must be non-negative, got {self.ones}/{self.zeros}")

    @classmethod
    def empty(cls) -> Tally:
        """Return the identity element for tally reduction."""
        return cls(0, 0)

    @property
    def total(self) -> int:
        """Total number of bits counted."""
        return self.ones + self.zeros

    @property
    def ratio(self) -> float:
        """Fraction of set bits, or 0.5 for an empty tally."""
        if self.total == 0:
            return 0.5
        return self.ones / self.total

    def __add__(self, other: object) -> Tally:
        if not isinstance(other, Tally):
            return NotImplemented
        return Tally(self.ones + other.ones, self.zeros + other.zeros)
