"""Configuration system for qr-verdict.

Uses pydantic-settings for declarative, layered configuration:
init kwargs -> environment variables (QV_*) -> .env file -> field defaults.

Command-line overrides are applied via resolve_config() which creates a new
config instance without mutating the defaults.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from qr_verdict.exceptions import ConfigValidationError


class QRVerdictConfig(BaseSettings):
    """Configuration for qr-verdict.

    Resolution order: init kwargs -> env vars (QV_*) -> .env file -> defaults.

    The cache path lives here rather than in a module constant so that every
    component receives it explicitly (tests inject a temporary path).
    """

    model_config = SettingsConfigDict(
        env_prefix="QV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Entropy acquisition ---

    entropy_chain: list[str] = Field(
        default_factory=lambda: ["anu", "qrandom", "cache", "system"],
        description="Ordered entropy source names; the first success wins",
    )
    entropy_bytes: int = Field(
        default=1024,
        ge=1,
        description="Number of entropy bytes to acquire per question",
    )
    cache_path: str = Field(
        default="qrandom_bytes.hex",
        description="Hex cache artifact holding the last physical entropy",
    )
    persist_cache: bool = Field(
        default=True,
        description="Write physical entropy to the cache after acquisition",
    )

    # --- Remote providers ---

    anu_url: str = Field(
        default="https://qrng.anu.edu.au/API/jsonI.php",
        description="ANU quantum RNG JSON endpoint",
    )
    anu_max_request_bytes: int = Field(
        default=1024,
        ge=1,
        description="Largest byte count the ANU API serves per request",
    )
    anu_request_delay_s: float = Field(
        default=1.0,
        ge=0.0,
        description="Pause between paged ANU requests to avoid throttling",
    )
    qrandom_url: str = Field(
        default="https://qrandom.io/api/random/binary",
        description="qrandom.io binary endpoint (returns a binaryURL)",
    )
    connect_timeout_s: float = Field(
        default=5.0,
        gt=0.0,
        description="HTTP connect timeout per request in seconds",
    )
    read_timeout_s: float = Field(
        default=30.0,
        gt=0.0,
        description="HTTP read timeout per request in seconds",
    )

    # --- Sampling ---

    total_bits: int = Field(
        default=40_000_000,
        ge=0,
        description="Total number of bit votes generated per question",
    )
    max_seeds: int = Field(
        default=32,
        ge=1,
        description="Upper bound on independent PRNG seeds (and sampling tasks)",
    )
    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Thread pool size for sampling (None = executor default)",
    )

    # --- Logging ---

    log_level: str = Field(
        default="summary",
        description="Verdict logging verbosity: 'none', 'summary', 'full'",
    )
    diagnostic_mode: bool = Field(
        default=False,
        description="Store all verdict records in memory for analysis",
    )


_ALL_FIELDS: frozenset[str] = frozenset(QRVerdictConfig.model_fields.keys())


def load_config(**kwargs: Any) -> QRVerdictConfig:
    """Load configuration from the environment and ``.env`` file.

    Raises:
        ConfigValidationError: If an environment value fails validation.
    """
    try:
        return QRVerdictConfig(**kwargs)
    except ValidationError as exc:
        raise ConfigValidationError(f"Invalid configuration: {exc}") from exc


def resolve_config(
    defaults: QRVerdictConfig,
    overrides: dict[str, Any] | None,
) -> QRVerdictConfig:
    """Create a new config instance merging defaults with overrides.

    Keys whose value is ``None`` are skipped, so an argparse namespace can be
    passed through directly for options the user did not set.

    Args:
        defaults: The base configuration loaded from environment.
        overrides: Field name to value mapping.

    Returns:
        A new QRVerdictConfig with overrides applied, or *defaults* itself
        when there is nothing to override.

    Raises:
        ConfigValidationError: If a key is unknown or a value fails validation.
    """
    if not overrides:
        return defaults

    applied: dict[str, Any] = {}
    for key, value in overrides.items():
        if value is None:
            continue
        if key not in _ALL_FIELDS:
            raise ConfigValidationError(f"Unknown config field: {key!r}")
        applied[key] = value

    if not applied:
        return defaults

    # model_copy(update=...) skips validation; model_validate coerces types.
    merged = defaults.model_dump()
    merged.update(applied)
    try:
        return QRVerdictConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigValidationError(f"Invalid configuration: {exc}") from exc
