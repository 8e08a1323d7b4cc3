"""Shared pytest fixtures for qr-verdict tests.

Provides configuration objects pointing at a temporary cache path and a
fast sampling budget, plus a helper for mocked HTTP sessions.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest
import requests

from qr_verdict.config import QRVerdictConfig


@pytest.fixture
def cache_path(tmp_path: Any) -> Any:
    """Return a cache file location inside the per-test temp directory."""
    return tmp_path / "qrandom_bytes.hex"


@pytest.fixture
def config(cache_path: Any) -> QRVerdictConfig:
    """Return a config isolated from the environment with a small bit budget.

    No paging delay and no log output, so tests run fast and quietly.
    """
    return QRVerdictConfig(
        _env_file=None,
        cache_path=str(cache_path),
        anu_request_delay_s=0.0,
        total_bits=80_000,
        log_level="none",
    )


def _build_response(json_data: Any = None, content: bytes = b"", status: int = 200) -> MagicMock:
    response = MagicMock(spec=requests.Response)
    response.status_code = status
    response.content = content
    response.json.return_value = json_data
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Error")
    return response


@pytest.fixture
def make_response() -> Any:
    """Return a factory building mock ``requests.Response`` objects.

    Call as ``make_response(json_data=..., content=..., status=...)``.
    """
    return _build_response


@pytest.fixture
def mock_session() -> MagicMock:
    """Return a mock ``requests.Session``; configure ``get.side_effect`` per test."""
    return MagicMock(spec=requests.Session)
