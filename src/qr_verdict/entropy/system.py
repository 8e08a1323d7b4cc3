"""System entropy source using ``os.urandom()``.

This is the last link of the default chain. It is cryptographically secure
and always available, but it is not a physical source: its bytes are
tagged ``Quality.FALLBACK``.
"""

from __future__ import annotations

import os

from qr_verdict.entropy.base import EntropySource
from qr_verdict.entropy.registry import register_entropy_source
from qr_verdict.entropy.types import Quality
from qr_verdict.exceptions import EntropyUnavailableError


@register_entropy_source("system")
class SystemEntropySource(EntropySource):
    """``os.urandom()`` wrapper: always available, never physical."""

    @property
    def name(self) -> str:
        return "system"

    @property
    def quality(self) -> Quality:
        return Quality.FALLBACK

    @property
    def is_available(self) -> bool:
        return True

    def get_random_bytes(self, n: int) -> bytes:
        """Return *n* bytes from the OS CSPRNG."""
        try:
            return os.urandom(n)
        except (OSError, NotImplementedError) as exc:
            raise EntropyUnavailableError(f"system: os.urandom failed: {exc}") from exc

    def close(self) -> None:
        """No-op."""
