"""qrandom.io quantum random bytes.

Two-step protocol: ``GET <qrandom_url>?bytes=N`` returns JSON whose
``binaryURL`` points at the raw payload, which a second ``GET`` downloads.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from qr_verdict.entropy.registry import register_entropy_source
from qr_verdict.entropy.remote import RemoteEntropySource

if TYPE_CHECKING:
    import requests

    from qr_verdict.config import QRVerdictConfig

logger = logging.getLogger("qr_verdict")


@register_entropy_source("qrandom")
class QRandomSource(RemoteEntropySource):
    """Quantum bytes from qrandom.io.

    Args:
        config: Configuration providing ``qrandom_url`` and the HTTP timeouts.
        session: Optional pre-built ``requests.Session``.
    """

    def __init__(self, config: QRVerdictConfig, session: requests.Session | None = None) -> None:
        super().__init__(config, session)
        self._url = config.qrandom_url

    @property
    def name(self) -> str:
        return "qrandom"

    def get_random_bytes(self, n: int) -> bytes:
        """Fetch exactly *n* bytes.

        Raises:
            EntropyUnavailableError: On transport errors, a response without
                ``binaryURL``, or a payload of the wrong length.
        """
        payload = self._get_json(self._url, bytes=n)
        binary_url = payload.get("binaryURL") if isinstance(payload, dict) else None
        if not isinstance(binary_url, str) or not binary_url:
            raise self._fail("response has no 'binaryURL'")

        data = self._get(binary_url).content
        if len(data) != n:
            raise self._fail(f"expected {n} bytes, got {len(data)}")
        logger.debug("qrandom: fetched %d bytes from %s", n, binary_url)
        return data
