"""Shared HTTP plumbing for remote quantum entropy APIs.

Each remote source owns one ``requests.Session`` and applies a
``(connect, read)`` timeout to every request. Every transport or protocol
problem is reported as :class:`~qr_verdict.exceptions.EntropyUnavailableError`
so the entropy chain can move on to the next source.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import requests

from qr_verdict.entropy.base import EntropySource
from qr_verdict.entropy.types import Quality
from qr_verdict.exceptions import EntropyUnavailableError

if TYPE_CHECKING:
    from qr_verdict.config import QRVerdictConfig

logger = logging.getLogger("qr_verdict")

USER_AGENT = "qr-verdict"


class RemoteEntropySource(EntropySource):
    """Base class for HTTP entropy providers.

    Args:
        config: Configuration providing the timeouts.
        session: Optional pre-built session (tests inject doubles here).
    """

    def __init__(self, config: QRVerdictConfig, session: requests.Session | None = None) -> None:
        self._timeout = (config.connect_timeout_s, config.read_timeout_s)
        if session is None:
            session = requests.Session()
            session.headers["User-Agent"] = USER_AGENT
        self._session = session
        self._closed = False
        self._last_error: str | None = None

    @property
    def quality(self) -> Quality:
        return Quality.PHYSICAL

    @property
    def is_available(self) -> bool:
        return not self._closed

    def _get(self, url: str, **params: Any) -> requests.Response:
        """GET *url* and return the response, raising on any failure."""
        if self._closed:
            raise EntropyUnavailableError(f"{self.name} source is closed")
        try:
            response = self._session.get(url, params=params or None, timeout=self._timeout)
            response.raise_for_status()
        except requests.Timeout as exc:
            raise self._fail(f"request to {url} timed out: {exc}") from exc
        except requests.RequestException as exc:
            raise self._fail(f"request to {url} failed: {exc}") from exc
        return response

    def _get_json(self, url: str, **params: Any) -> Any:
        response = self._get(url, **params)
        try:
            return response.json()
        except ValueError as exc:
            raise self._fail(f"malformed JSON from {url}: {exc}") from exc

    def _fail(self, reason: str) -> EntropyUnavailableError:
        self._last_error = reason
        return EntropyUnavailableError(f"{self.name}: {reason}")

    def close(self) -> None:
        """Close the HTTP session."""
        if self._closed:
            return
        self._closed = True
        self._session.close()

    def health_check(self) -> dict[str, Any]:
        health = super().health_check()
        health["last_error"] = self._last_error
        return health
