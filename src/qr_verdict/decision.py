"""Majority decision over a bit tally.

Each bit is a vote: set bits vote yes, clear bits vote no. The verdict is
the sign of ``ones - zeros``; an exact tie is a reachable outcome of its
own. The verdict also carries the z-score and two-sided p-value of the
margin under the fair-coin null hypothesis, so a caller can tell a
decisive margin from noise.
"""

from __future__ import annotations

import enum
import math
from dataclasses import dataclass

from scipy import stats

from qr_verdict.tally import Tally


class Outcome(enum.Enum):
    YES = "yes"
    NO = "no"
    TIE = "tie"


@dataclass(frozen=True, slots=True)
class Verdict:
    """Result of the majority vote.

    Attributes:
        outcome: ``YES``, ``NO`` or ``TIE``.
        margin: ``|ones - zeros|``.
        ones: Set bits (yes votes).
        zeros: Clear bits (no votes).
        z_score: ``(ones - zeros) / sqrt(ones + zeros)``; 0.0 for no votes.
        p_value: Two-sided probability of a margin at least this large from
            a fair coin; 1.0 for no votes.
    """

    outcome: Outcome
    margin: int
    ones: int
    zeros: int
    z_score: float
    p_value: float

    def summary(self) -> str:
        """Human-readable verdict, e.g. ``'yes by 1,234 votes'``."""
        if self.outcome is Outcome.TIE:
            return "tie"
        return f"{self.outcome.value} by {self.margin:,} votes"


def decide(ones: int, zeros: int) -> Verdict:
    """Turn vote counts into a verdict.

    Args:
        ones: Number of set bits.
        zeros: Number of clear bits.

    Returns:
        The verdict with margin and significance.

    Raises:
        ValueError: If either count is negative.
    """
    if ones < 0 or zeros < 0:
        raise ValueError(f"Vote counts must be non-negative, got ones={ones} zeros={zeros}")

    diff = ones - zeros
    if diff > 0:
        outcome = Outcome.YES
    elif diff < 0:
        outcome = Outcome.NO
    else:
        outcome = Outcome.TIE

    total = ones + zeros
    if total == 0:
        z_score, p_value = 0.0, 1.0
    else:
        # Binomial(total, 1/2): ones - zeros has mean 0 and variance total.
        z_score = diff / math.sqrt(total)
        p_value = float(2.0 * stats.norm.sf(abs(z_score)))

    return Verdict(
        outcome=outcome,
        margin=abs(diff),
        ones=ones,
        zeros=zeros,
        z_score=z_score,
        p_value=min(1.0, p_value),
    )


def decide_tally(tally: Tally) -> Verdict:
    """Convenience wrapper: :func:`decide` on a :class:`Tally`."""
    return decide(tally.ones, tally.zeros)
