"""Entropy source backed by the hex cache artifact.

Replays the physical bytes persisted by an earlier successful acquisition,
so a run without network access still gets ``Quality.PHYSICAL`` entropy.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from qr_verdict.codec import HexCache
from qr_verdict.entropy.base import EntropySource
from qr_verdict.entropy.registry import register_entropy_source
from qr_verdict.entropy.types import Quality

if TYPE_CHECKING:
    from qr_verdict.config import QRVerdictConfig

logger = logging.getLogger("qr_verdict")


@register_entropy_source("cache")
class CachedEntropySource(EntropySource):
    """Reads previously acquired physical entropy from ``config.cache_path``.

    Returns the first *n* cached bytes, or all of them (with a warning)
    when the cache holds fewer than *n*.

    Raises :class:`~qr_verdict.exceptions.CacheError` on a missing or
    corrupt cache, which the chain treats like any other unavailable source.
    """

    def __init__(self, config: QRVerdictConfig) -> None:
        self._cache = HexCache(config.cache_path)

    @property
    def name(self) -> str:
        return "cache"

    @property
    def quality(self) -> Quality:
        return Quality.PHYSICAL

    @property
    def persistable(self) -> bool:
        return False

    @property
    def is_available(self) -> bool:
        return self._cache.exists()

    def get_random_bytes(self, n: int) -> bytes:
        data = self._cache.read()
        if len(data) < n:
            logger.warning(
                "Cache %s holds %d bytes, fewer than the %d requested; using all of them",
                self._cache.path,
                len(data),
                n,
            )
            return data
        return data[:n]

    def close(self) -> None:
        """No-op."""

    def health_check(self) -> dict[str, Any]:
        health = super().health_check()
        health["path"] = str(self._cache.path)
        return health
