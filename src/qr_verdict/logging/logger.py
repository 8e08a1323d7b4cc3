"""Diagnostic logger for verdict events.

Uses the standard ``logging`` module with the ``"qr_verdict"`` logger.
Supports three verbosity levels and an in-memory diagnostic mode for
post-hoc analysis of many questions.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from qr_verdict.config import QRVerdictConfig
    from qr_verdict.logging.types import VerdictRecord

logger = logging.getLogger("qr_verdict")


class VerdictLogger:
    """Per-question diagnostic logger.

    Log levels:
        ``"none"``: No output. Records are still stored if
        ``diagnostic_mode=True``.

        ``"summary"``: One line per question with the verdict, tally,
        entropy source and timings.

        ``"full"``: JSON dump of every record field.
    """

    def __init__(self, config: QRVerdictConfig) -> None:
        self._log_level = config.log_level
        self._diagnostic_mode = config.diagnostic_mode
        self._records: list[VerdictRecord] = []

    def log_verdict(self, record: VerdictRecord) -> None:
        """Log a single answered question."""
        if self._diagnostic_mode:
            self._records.append(record)

        if self._log_level == "none":
            return

        if self._log_level == "summary":
            logger.info(
                "verdict=%s margin=%d ones=%d zeros=%d z=%.3f p=%.4g seeds=%d "
                "source=%s%s fetch=%.2fms sampling=%.2fms total=%.2fms",
                record.outcome,
                record.margin,
                record.ones,
                record.zeros,
                record.z_score,
                record.p_value,
                record.seed_count,
                record.entropy_source_used,
                " [FALLBACK]" if record.is_fallback else "",
                record.entropy_fetch_ms,
                record.sampling_ms,
                record.total_ms,
            )
        elif self._log_level == "full":
            logger.info("verdict_record: %s", json.dumps(asdict(record), default=str))

    def get_diagnostic_data(self) -> list[VerdictRecord]:
        """Return all stored records (empty unless ``diagnostic_mode=True``)."""
        return list(self._records)

    def get_summary_stats(self) -> dict[str, Any]:
        """Aggregate statistics over stored records, or ``{}`` if none."""
        if not self._records:
            return {}

        n = len(self._records)
        outcomes = [r.outcome for r in self._records]
        fallback_count = sum(1 for r in self._records if r.is_fallback)
        return {
            "total_questions": n,
            "yes_count": outcomes.count("yes"),
            "no_count": outcomes.count("no"),
            "tie_count": outcomes.count("tie"),
            "mean_margin": sum(r.margin for r in self._records) / n,
            "mean_fetch_ms": sum(r.entropy_fetch_ms for r in self._records) / n,
            "mean_sampling_ms": sum(r.sampling_ms for r in self._records) / n,
            "max_total_ms": max(r.total_ms for r in self._records),
            "fallback_count": fallback_count,
            "physical_rate": (n - fallback_count) / n,
        }
