"""Tests for SystemEntropySource."""

from __future__ import annotations

from qr_verdict.entropy.system import SystemEntropySource
from qr_verdict.entropy.types import Quality


class TestSystemEntropySource:
    """Tests for the os.urandom() wrapper."""

    def test_name(self) -> None:
        assert SystemEntropySource().name == "system"

    def test_quality_is_fallback(self) -> None:
        source = SystemEntropySource()
        assert source.quality is Quality.FALLBACK
        assert source.persistable is False

    def test_is_always_available(self) -> None:
        assert SystemEntropySource().is_available is True

    def test_returns_correct_byte_count(self) -> None:
        source = SystemEntropySource()
        for n in (0, 1, 10, 1024, 20480):
            data = source.get_random_bytes(n)
            assert isinstance(data, bytes)
            assert len(data) == n

    def test_consecutive_calls_differ(self) -> None:
        source = SystemEntropySource()
        # Statistically near-impossible for 32 random bytes to repeat.
        assert source.get_random_bytes(32) != source.get_random_bytes(32)

    def test_close_is_noop(self) -> None:
        source = SystemEntropySource()
        source.close()
        assert len(source.get_random_bytes(8)) == 8

    def test_health_check(self) -> None:
        health = SystemEntropySource().health_check()
        assert health == {"source": "system", "quality": "fallback", "healthy": True}
