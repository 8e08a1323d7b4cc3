"""Data types for the diagnostic logging subsystem."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class VerdictRecord:
    """Immutable record of one question answered by the oracle.

    Attributes:
        timestamp_ns: Wall-clock time of the answer (nanoseconds since epoch).
        entropy_fetch_ms: Time spent acquiring entropy (milliseconds).
        sampling_ms: Time spent deriving seeds and sampling bits (ms).
        total_ms: Total time for the whole question (ms).
        entropy_source_used: Name of the source that provided the bytes.
        entropy_quality: ``'physical'`` or ``'fallback'``.
        entropy_bytes: Number of entropy bytes consumed.
        seed_count: Number of seeds (and sampling tasks).
        total_bits: Bit budget sampled.
        ones: Yes votes.
        zeros: No votes.
        outcome: ``'yes'``, ``'no'`` or ``'tie'``.
        margin: ``|ones - zeros|``.
        z_score: Margin in standard deviations under a fair coin.
        p_value: Two-sided p-value of the margin.
        config_hash: 16-char SHA-256 prefix of the active config.
    """

    # Timing
    timestamp_ns: int
    entropy_fetch_ms: float
    sampling_ms: float
    total_ms: float

    # Entropy
    entropy_source_used: str
    entropy_quality: str
    entropy_bytes: int

    # Sampling
    seed_count: int
    total_bits: int
    ones: int
    zeros: int

    # Decision
    outcome: str
    margin: int
    z_score: float
    p_value: float

    # Config snapshot
    config_hash: str

    @property
    def is_fallback(self) -> bool:
        return self.entropy_quality == "fallback"
