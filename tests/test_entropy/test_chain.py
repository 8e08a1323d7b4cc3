"""Tests for EntropySourceChain."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from qr_verdict.codec import HexCache
from qr_verdict.config import QRVerdictConfig
from qr_verdict.entropy.base import EntropySource
from qr_verdict.entropy.cache import CachedEntropySource
from qr_verdict.entropy.chain import EntropySourceChain
from qr_verdict.entropy.system import SystemEntropySource
from qr_verdict.entropy.types import Quality
from qr_verdict.exceptions import EntropyExhaustedError, EntropyUnavailableError


class _FailSource(EntropySource):
    """Test double: always raises EntropyUnavailableError."""

    def __init__(self, name: str = "always_fail", quality: Quality = Quality.PHYSICAL) -> None:
        self._name = name
        self._quality = quality
        self.call_count = 0
        self.closed = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def quality(self) -> Quality:
        return self._quality

    @property
    def is_available(self) -> bool:
        return False

    def get_random_bytes(self, n: int) -> bytes:
        self.call_count += 1
        raise EntropyUnavailableError(f"{self._name}: connection refused")

    def close(self) -> None:
        self.closed = True


class _FixedSource(EntropySource):
    """Test double: returns a fixed byte pattern."""

    def __init__(self, pattern: int, quality: Quality = Quality.PHYSICAL) -> None:
        self._pattern = pattern
        self._quality = quality
        self.call_count = 0

    @property
    def name(self) -> str:
        return f"fixed_{self._pattern:#04x}"

    @property
    def quality(self) -> Quality:
        return self._quality

    @property
    def is_available(self) -> bool:
        return True

    def get_random_bytes(self, n: int) -> bytes:
        self.call_count += 1
        return bytes([self._pattern] * n)

    def close(self) -> None:
        pass


class _RuntimeErrorSource(_FixedSource):
    """Test double: raises RuntimeError (not EntropyUnavailableError)."""

    def get_random_bytes(self, n: int) -> bytes:
        raise RuntimeError("unexpected error")


class TestEntropySourceChain:
    """Tests for ordered fallthrough."""

    def test_first_success_short_circuits(self) -> None:
        first = _FixedSource(0xAA)
        second = _FixedSource(0xBB)
        chain = EntropySourceChain([first, second])

        buffer = chain.acquire(4)
        assert buffer.data == bytes([0xAA] * 4)
        assert buffer.source == first.name
        assert second.call_count == 0

    def test_primary_fails_secondary_used(self, tmp_path: Path) -> None:
        primary = _FailSource("anu")
        secondary = _FixedSource(0xBB)
        chain = EntropySourceChain([primary, secondary, SystemEntropySource()])

        buffer = chain.acquire(16)
        assert buffer.quality is Quality.PHYSICAL
        assert buffer.data == bytes([0xBB] * 16)
        assert chain.last_source_used == secondary.name
        assert chain.last_failures == [("anu", "anu: connection refused")]

    def test_strict_order(self) -> None:
        a, b = _FailSource("a"), _FailSource("b")
        c, d = _FixedSource(0x01), _FixedSource(0x02)
        chain = EntropySourceChain([a, b, c, d])
        chain.acquire(1)
        assert (a.call_count, b.call_count, c.call_count, d.call_count) == (1, 1, 1, 0)

    def test_falls_to_system_when_remote_and_cache_fail(
        self, config: QRVerdictConfig, cache_path: Path
    ) -> None:
        chain = EntropySourceChain(
            [_FailSource("anu"), _FailSource("qrandom"), CachedEntropySource(config), SystemEntropySource()],
            cache=HexCache(cache_path),
        )
        buffer = chain.acquire(64)
        assert buffer.quality is Quality.FALLBACK
        assert buffer.source == "system"
        assert len(buffer.data) == 64
        # Fallback bytes are never persisted.
        assert not cache_path.exists()

    def test_physical_bytes_are_persisted(self, cache_path: Path) -> None:
        chain = EntropySourceChain([_FixedSource(0xCD)], cache=HexCache(cache_path))
        chain.acquire(3)
        assert cache_path.read_text() == "cdcdcd"

    def test_cache_replay_used_offline(self, config: QRVerdictConfig, cache_path: Path) -> None:
        online = EntropySourceChain([_FixedSource(0x5A)], cache=HexCache(cache_path))
        online.acquire(8)

        offline = EntropySourceChain(
            [_FailSource("anu"), _FailSource("qrandom"), CachedEntropySource(config), SystemEntropySource()],
            cache=HexCache(cache_path),
        )
        buffer = offline.acquire(8)
        assert buffer.source == "cache"
        assert buffer.quality is Quality.PHYSICAL
        assert buffer.data == bytes([0x5A] * 8)

    def test_cached_bytes_are_not_rewritten(self, config: QRVerdictConfig, cache_path: Path) -> None:
        HexCache(cache_path).write(bytes(range(32)))
        cache = MagicMock(spec=HexCache)
        chain = EntropySourceChain([CachedEntropySource(config)], cache=cache)
        chain.acquire(16)
        cache.write.assert_not_called()

    def test_no_cache_configured(self) -> None:
        chain = EntropySourceChain([_FixedSource(0x11)], cache=None)
        assert chain.acquire(2).data == b"\x11\x11"

    def test_cache_write_failure_is_not_fatal(self, caplog: pytest.LogCaptureFixture) -> None:
        cache = MagicMock(spec=HexCache)
        cache.write.side_effect = PermissionError("read-only file system")
        chain = EntropySourceChain([_FixedSource(0x22)], cache=cache)
        with caplog.at_level("WARNING", logger="qr_verdict"):
            buffer = chain.acquire(2)
        assert buffer.data == b"\x22\x22"
        assert "Failed to write entropy cache" in caplog.text

    def test_fallthrough_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        chain = EntropySourceChain([_FailSource("anu"), _FixedSource(0x33)])
        with caplog.at_level("WARNING", logger="qr_verdict"):
            chain.acquire(1)
        assert "'anu' unavailable" in caplog.text

    def test_exhausted_when_all_fail(self) -> None:
        chain = EntropySourceChain([_FailSource("a"), _FailSource("b")])
        with pytest.raises(EntropyExhaustedError) as excinfo:
            chain.acquire(4)
        assert [name for name, _ in excinfo.value.failures] == ["a", "b"]
        assert "a: connection refused" in str(excinfo.value)

    def test_exhausted_with_no_sources(self) -> None:
        with pytest.raises(EntropyExhaustedError, match="no sources configured"):
            EntropySourceChain([]).acquire(4)

    def test_exhausted_when_fallback_fails(self) -> None:
        with patch("qr_verdict.entropy.system.os.urandom", side_effect=OSError("no urandom")):
            chain = EntropySourceChain([_FailSource("anu"), SystemEntropySource()])
            with pytest.raises(EntropyExhaustedError, match="no urandom"):
                chain.acquire(4)

    def test_does_not_catch_non_entropy_errors(self) -> None:
        fallback = _FixedSource(0xBB)
        chain = EntropySourceChain([_RuntimeErrorSource(0xAA), fallback])
        with pytest.raises(RuntimeError, match="unexpected error"):
            chain.acquire(4)
        assert fallback.call_count == 0

    def test_sources_and_name(self) -> None:
        a, b = _FailSource("a"), SystemEntropySource()
        chain = EntropySourceChain([a, b])
        assert chain.sources == (a, b)
        assert chain.name == "a>system"

    def test_health_check(self) -> None:
        chain = EntropySourceChain([_FailSource("a"), SystemEntropySource()])
        chain.acquire(1)
        health = chain.health_check()
        assert health["healthy"] is True
        assert [s["source"] for s in health["sources"]] == ["a", "system"]
        assert health["last_source_used"] == "system"

    def test_context_manager_closes_sources(self) -> None:
        a, b = _FailSource("a"), _FailSource("b")
        with EntropySourceChain([a, b]):
            pass
        assert a.closed and b.closed
