"""Exception hierarchy for qr-verdict.

All exceptions derive from QRVerdictError, enabling broad catch patterns
at the application boundary while allowing fine-grained handling internally.
"""

from __future__ import annotations


class QRVerdictError(Exception):
    """Base exception for all qr-verdict errors."""


class EntropyUnavailableError(QRVerdictError):
    """A single entropy source cannot provide bytes.

    Raised for network errors, non-success HTTP status, malformed
    responses, short reads and explicit provider-side failure flags.
    The entropy chain treats this as recoverable and moves on to the
    next source.
    """


class CacheError(EntropyUnavailableError):
    """The hex cache artifact is missing, empty or not valid hex."""


class EntropyExhaustedError(QRVerdictError):
    """Every entropy source in the chain failed, including the fallback.

    Since the local fallback is expected to always succeed, this indicates
    a broken environment rather than a data problem.

    Attributes:
        failures: ``(source_name, reason)`` pairs in chain order.
    """

    def __init__(self, failures: list[tuple[str, str]]) -> None:
        self.failures = failures
        detail = "; ".join(f"{name}: {reason}" for name, reason in failures)
        super().__init__(f"All entropy sources failed ({detail or 'no sources configured'})")


class OverrideInputError(QRVerdictError):
    """An explicit entropy override (inline hex or file) is malformed."""


class ConfigValidationError(QRVerdictError):
    """Configuration override validation failed.

    Raised when overrides name unknown fields or fail type validation.
    """


class SeedDerivationError(QRVerdictError):
    """Seeds cannot be derived from the given arguments."""


class SamplingError(QRVerdictError):
    """A sampling run cannot be planned from the given arguments."""
