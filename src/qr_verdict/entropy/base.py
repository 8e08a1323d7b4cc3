"""Abstract base class for all entropy sources.

Every entropy source (remote quantum API, local hex cache, OS randomness or
a test double) implements this interface. Subclasses must implement the
abstract members ``name``, ``quality``, ``is_available``,
``get_random_bytes()`` and ``close()``; ``health_check()`` has a default.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from qr_verdict.entropy.types import Quality


class EntropySource(ABC):
    """Abstract base for all entropy sources.

    Implementations either return exactly the bytes they were asked for or
    raise :class:`~qr_verdict.exceptions.EntropyUnavailableError`, which the
    entropy chain treats as "try the next source".
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Source identifier (e.g., ``'anu'``, ``'system'``)."""

    @property
    @abstractmethod
    def quality(self) -> Quality:
        """Quality tag attached to bytes from this source."""

    @property
    @abstractmethod
    def is_available(self) -> bool:
        """Whether the source can currently provide entropy."""

    @property
    def persistable(self) -> bool:
        """Whether bytes from this source should be written to the cache.

        ``True`` for live physical sources. Sources that already read from
        durable storage override this to ``False``.
        """
        return self.quality is Quality.PHYSICAL

    @abstractmethod
    def get_random_bytes(self, n: int) -> bytes:
        """Return *n* random bytes.

        Args:
            n: Number of random bytes to generate.

        Returns:
            Entropy bytes; exactly *n* for live sources. The cache source may
            return fewer when the cached buffer is shorter than *n*.

        Raises:
            EntropyUnavailableError: If the source cannot provide bytes.
        """

    @abstractmethod
    def close(self) -> None:
        """Release resources (sessions, connections, file handles)."""

    def health_check(self) -> dict[str, Any]:
        """Return a status dictionary for this source.

        Returns:
            Dictionary with at least ``'source'``, ``'quality'`` and
            ``'healthy'`` keys.
        """
        return {"source": self.name, "quality": self.quality.value, "healthy": self.is_available}
