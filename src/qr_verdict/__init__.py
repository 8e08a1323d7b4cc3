"""qr-verdict: answer yes/no questions by majority vote over quantum-seeded bits.

Entropy is taken from an ordered chain of sources (remote quantum APIs, a
local cache of earlier quantum bytes, then the OS CSPRNG), hashed into PRNG
seeds, expanded into a fixed budget of random bits on a thread pool, and
the majority of set versus clear bits decides the answer. Every result
records whether it rests on physical or fallback entropy.
"""

from __future__ import annotations

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("qr-verdict")
except PackageNotFoundError:
    __version__ = "0.0.0"

from qr_verdict.config import QRVerdictConfig, load_config, resolve_config
from qr_verdict.decision import Outcome, Verdict, decide
from qr_verdict.entropy.types import EntropyBuffer, Quality
from qr_verdict.exceptions import (
    CacheError,
    ConfigValidationError,
    EntropyExhaustedError,
    EntropyUnavailableError,
    OverrideInputError,
    QRVerdictError,
    SamplingError,
    SeedDerivationError,
)
from qr_verdict.oracle import OracleResult, VerdictOracle
from qr_verdict.tally import Tally

__all__ = [
    "CacheError",
    "ConfigValidationError",
    "EntropyBuffer",
    "EntropyExhaustedError",
    "EntropyUnavailableError",
    "OracleResult",
    "Outcome",
    "OverrideInputError",
    "QRVerdictConfig",
    "QRVerdictError",
    "Quality",
    "SamplingError",
    "SeedDerivationError",
    "Tally",
    "Verdict",
    "VerdictOracle",
    "__version__",
    "decide",
    "load_config",
    "resolve_config",
]
