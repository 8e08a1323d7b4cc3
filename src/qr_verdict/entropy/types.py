"""Data types for acquired entropy."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class Quality(enum.Enum):
    """Whether entropy came from a physical source or a pseudo-random fallback."""

    PHYSICAL = "physical"
    FALLBACK = "fallback"


@dataclass(frozen=True, slots=True)
class EntropyBuffer:
    """Immutable entropy bytes tagged with their origin.

    Attributes:
        data: Raw entropy bytes.
        quality: ``PHYSICAL`` for quantum or cached quantum bytes,
            ``FALLBACK`` for the local CSPRNG.
        source: Name of the entropy source that produced the bytes.
    """

    data: bytes
    quality: Quality
    source: str

    @property
    def is_physical(self) -> bool:
        return self.quality is Quality.PHYSICAL

    def __len__(self) -> int:
        return len(self.data)
