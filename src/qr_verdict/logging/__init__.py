"""Diagnostic logging subsystem for qr-verdict.

Provides immutable per-question records and a configurable logger that
supports none/summary/full verbosity and in-memory diagnostic mode.
"""

from qr_verdict.logging.logger import VerdictLogger
from qr_verdict.logging.types import VerdictRecord

__all__ = [
    "VerdictLogger",
    "VerdictRecord",
]
