"""Ordered entropy fallback chain.

``EntropySourceChain`` holds an ordered tuple of sources and returns the
bytes of the first one that succeeds, tagged with that source's quality.
Only :class:`~qr_verdict.exceptions.EntropyUnavailableError` (including
cache misses) moves the chain to the next source; **all other exceptions
propagate unchanged**. Physical bytes from a live source are written to
the hex cache so a later offline run can replay them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from qr_verdict.entropy.types import EntropyBuffer
from qr_verdict.exceptions import EntropyExhaustedError, EntropyUnavailableError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from qr_verdict.codec import HexCache
    from qr_verdict.entropy.base import EntropySource

logger = logging.getLogger("qr_verdict")


class EntropySourceChain:
    """Tries each source in order; the first success wins.

    Args:
        sources: Sources in preference order.
        cache: Where to persist physical entropy, or ``None`` to disable
            persistence.
    """

    def __init__(self, sources: Iterable[EntropySource], cache: HexCache | None = None) -> None:
        self._sources: tuple[EntropySource, ...] = tuple(sources)
        self._cache = cache
        self._last_source_used: str | None = None
        self._last_failures: list[tuple[str, str]] = []

    @property
    def sources(self) -> tuple[EntropySource, ...]:
        return self._sources

    @property
    def name(self) -> str:
        """Compound name, e.g. ``'anu>qrandom>cache>system'``."""
        return ">".join(source.name for source in self._sources)

    @property
    def last_source_used(self) -> str | None:
        """Name of the source that provided bytes on the last call."""
        return self._last_source_used

    @property
    def last_failures(self) -> list[tuple[str, str]]:
        """``(source, reason)`` for every source skipped on the last call."""
        return list(self._last_failures)

    def acquire(self, n: int) -> EntropyBuffer:
        """Acquire *n* bytes from the first source that can provide them.

        Args:
            n: Number of entropy bytes wanted.

        Returns:
            Buffer tagged with the quality and name of the source used.

        Raises:
            EntropyExhaustedError: If every source failed.
        """
        failures: list[tuple[str, str]] = []
        self._last_failures = failures
        for source in self._sources:
            try:
                data = source.get_random_bytes(n)
            except EntropyUnavailableError as exc:
                failures.append((source.name, str(exc)))
                logger.warning("Entropy source %r unavailable: %s", source.name, exc)
                continue

            buffer = EntropyBuffer(data=data, quality=source.quality, source=source.name)
            self._last_source_used = source.name
            logger.info(
                "Acquired %d bytes from %r (%s)%s",
                len(data),
                source.name,
                buffer.quality.value,
                f" after {len(failures)} fallback(s)" if failures else "",
            )
            if buffer.is_physical and source.persistable:
                self._persist(buffer)
            return buffer

        raise EntropyExhaustedError(failures)

    def _persist(self, buffer: EntropyBuffer) -> None:
        if self._cache is None:
            return
        try:
            self._cache.write(buffer.data)
        except OSError:
            logger.warning("Failed to write entropy cache %s", self._cache.path, exc_info=True)

    def close(self) -> None:
        for source in self._sources:
            source.close()

    def health_check(self) -> dict[str, Any]:
        """Health of every source, in chain order."""
        return {
            "source": self.name,
            "healthy": any(source.is_available for source in self._sources),
            "sources": [source.health_check() for source in self._sources],
            "last_source_used": self._last_source_used,
        }

    def __enter__(self) -> EntropySourceChain:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
