"""The oracle: the integration layer for qr-verdict.

Orchestrates the full pipeline for one question:
    entropy chain -> seed derivation -> parallel sampling -> majority decision.

The oracle never terminates the process. Fatal conditions surface as
:class:`~qr_verdict.exceptions.EntropyExhaustedError` for the caller (the
CLI) to report.
"""

from __future__ import annotations

import hashlib
import logging
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import qr_verdict.entropy  # noqa: F401  registers the built-in sources
from qr_verdict.codec import HexCache
from qr_verdict.config import QRVerdictConfig
from qr_verdict.decision import Verdict, decide_tally
from qr_verdict.entropy.chain import EntropySourceChain
from qr_verdict.entropy.registry import EntropySourceRegistry
from qr_verdict.entropy.types import EntropyBuffer, Quality
from qr_verdict.logging.logger import VerdictLogger
from qr_verdict.logging.types import VerdictRecord
from qr_verdict.sampler import ParallelSampler
from qr_verdict.seeds import SeedDeriver

if TYPE_CHECKING:
    from collections.abc import Sequence

    from qr_verdict.entropy.base import EntropySource
    from qr_verdict.tally import Tally

logger = logging.getLogger("qr_verdict")

OVERRIDE_SOURCE = "override"


def _config_hash(config: QRVerdictConfig) -> str:
    """First 16 hex characters of the SHA-256 of the config dump."""
    raw = config.model_dump_json().encode("utf-8")
    return hashlib.sha256(raw).hexdigest()[:16]


@dataclass(frozen=True, slots=True)
class OracleResult:
    """Everything produced while answering one question.

    Attributes:
        buffer: The entropy that seeded the run, with its quality tag.
        seed_count: Number of seeds derived (one sampling task each).
        tally: Combined bit counts.
        verdict: The decision.
        record: The diagnostic record that was logged.
    """

    buffer: EntropyBuffer
    seed_count: int
    tally: Tally
    verdict: Verdict
    record: VerdictRecord

    @property
    def quality(self) -> Quality:
        return self.buffer.quality


class VerdictOracle:
    """Answers yes/no questions from sampled entropy.

    Args:
        config: Oracle configuration. Defaults to environment-loaded config.
        sources: Entropy sources in preference order. When ``None``, they are
            built from ``config.entropy_chain`` via the registry.
        sampler: Sampler to use. Defaults to a :class:`ParallelSampler` with
            ``config.max_workers`` threads.
    """

    def __init__(
        self,
        config: QRVerdictConfig | None = None,
        sources: Sequence[EntropySource] | None = None,
        sampler: ParallelSampler | None = None,
    ) -> None:
        self._config = config if config is not None else QRVerdictConfig()
        if sources is None:
            sources = EntropySourceRegistry.build(self._config.entropy_chain, self._config)
        cache = HexCache(self._config.cache_path) if self._config.persist_cache else None
        self._chain = EntropySourceChain(sources, cache=cache)
        self._deriver = SeedDeriver(self._config.max_seeds)
        self._sampler = sampler if sampler is not None else ParallelSampler(self._config.max_workers)
        self._logger = VerdictLogger(self._config)
        self._config_hash = _config_hash(self._config)
        logger.debug("Oracle ready with entropy chain %s", self._chain.name)

    @property
    def config(self) -> QRVerdictConfig:
        return self._config

    @property
    def chain(self) -> EntropySourceChain:
        return self._chain

    @property
    def verdict_logger(self) -> VerdictLogger:
        return self._logger

    def acquire(self, override: bytes | None = None) -> EntropyBuffer:
        """Entropy for one question: the override if given, else the chain."""
        if override is not None:
            # Explicit user input bypasses the chain and is never cached.
            return EntropyBuffer(
                data=bytes(override),
                quality=Quality.PHYSICAL,
                source=OVERRIDE_SOURCE,
            )
        return self._chain.acquire(self._config.entropy_bytes)

    def ask(self, override: bytes | None = None) -> OracleResult:
        """Answer one question.

        Args:
            override: Explicit entropy bytes that replace the chain.

        Returns:
            The verdict together with the entropy and tally behind it.

        Raises:
            EntropyExhaustedError: If no entropy source could provide bytes.
        """
        t_start = time.perf_counter()
        buffer = self.acquire(override)
        t_fetched = time.perf_counter()

        seeds = self._deriver.derive(buffer)
        tally = self._sampler.sample(seeds, self._config.total_bits)
        verdict = decide_tally(tally)
        t_done = time.perf_counter()

        record = VerdictRecord(
            timestamp_ns=time.time_ns(),
            entropy_fetch_ms=(t_fetched - t_start) * 1000.0,
            sampling_ms=(t_done - t_fetched) * 1000.0,
            total_ms=(t_done - t_start) * 1000.0,
            entropy_source_used=buffer.source,
            entropy_quality=buffer.quality.value,
            entropy_bytes=len(buffer.data),
            seed_count=len(seeds),
            total_bits=self._config.total_bits,
            ones=tally.ones,
            zeros=tally.zeros,
            outcome=verdict.outcome.value,
            margin=verdict.margin,
            z_score=verdict.z_score,
            p_value=verdict.p_value,
            config_hash=self._config_hash,
        )
        self._logger.log_verdict(record)
        return OracleResult(
            buffer=buffer,
            seed_count=len(seeds),
            tally=tally,
            verdict=verdict,
            record=record,
        )

    def health_check(self) -> dict[str, Any]:
        return self._chain.health_check()

    def close(self) -> None:
        self._chain.close()

    def __enter__(self) -> VerdictOracle:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
