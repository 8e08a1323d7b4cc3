"""Hex encoding, the entropy cache artifact, and explicit override input.

The cache is a text file holding the hex encoding of the most recent
physical entropy buffer. Readers accept an optional ``0x`` prefix.
"""

from __future__ import annotations

import logging
import os
import string
from pathlib import Path

from qr_verdict.exceptions import CacheError, OverrideInputError

logger = logging.getLogger("qr_verdict")

_HEX_DIGITS = frozenset(string.hexdigits)


def encode_hex(data: bytes) -> str:
    """Return the lowercase hex encoding of *data* without a prefix."""
    return bytes(data).hex()


def decode_hex(text: str) -> bytes:
    """Decode a hex string, with or without a ``0x`` prefix.

    Surrounding whitespace is ignored. The empty string decodes to ``b""``.

    Raises:
        ValueError: On odd length or non-hex characters.
    """
    digits = text.strip()
    if digits[:2] in ("0x", "0X"):
        digits = digits[2:]
    if len(digits) % 2:
        raise ValueError(f"Hex string has odd length ({len(digits)} digits)")
    if not _HEX_DIGITS.issuperset(digits):
        raise ValueError("Hex string contains non-hex characters")
    return bytes.fromhex(digits)


class HexCache:
    """Named byte blob persisted as hex text.

    Args:
        path: Location of the cache artifact.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.is_file()

    def read(self) -> bytes:
        """Read and decode the cached bytes.

        Raises:
            CacheError: If the file is missing, unreadable, empty, or not
                valid hex.
        """
        try:
            text = self._path.read_text(encoding="ascii")
        except FileNotFoundError as exc:
            raise CacheError(f"Cache file {str(self._path)!r} does not exist") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise CacheError(f"Cache file {str(self._path)!r} is unreadable: {exc}") from exc

        try:
            data = decode_hex(text)
        except ValueError as exc:
            raise CacheError(f"Cache file {str(self._path)!r} is corrupt: {exc}") from exc
        if not data:
            raise CacheError(f"Cache file {str(self._path)!r} is empty")
        return data

    def write(self, data: bytes) -> None:
        """Hex-encode *data* into the cache file, replacing its contents."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(encode_hex(data), encoding="ascii")
        logger.debug("Wrote %d bytes to cache %s", len(data), self._path)


def load_override(value: str) -> bytes:
    """Resolve an explicit entropy override to bytes.

    *value* is either a path to an existing file or an inline hex string.
    File content that parses as hex (optionally ``0x``-prefixed) is decoded;
    any other file content is used literally as raw bytes. Inline values
    must be valid even-length hex.

    Args:
        value: File path or inline hex string.

    Returns:
        The override bytes (never empty).

    Raises:
        OverrideInputError: For an empty file, unreadable file, or an inline
            value that is empty or not valid hex.
    """
    path = Path(value)
    if value and path.is_file():
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise OverrideInputError(f"Cannot read entropy file {value!r}: {exc}") from exc
        if not raw.strip():
            raise OverrideInputError(f"Entropy file {value!r} is empty")
        try:
            decoded = decode_hex(raw.decode("ascii"))
        except (UnicodeDecodeError, ValueError):
            logger.info("Entropy file %r is not hex, using its %d raw bytes", value, len(raw))
            return raw
        if not decoded:
            raise OverrideInputError(f"Entropy file {value!r} holds an empty hex string")
        logger.info("Loaded %d hex-encoded bytes from %r", len(decoded), value)
        return decoded

    try:
        decoded = decode_hex(value)
    except ValueError as exc:
        raise OverrideInputError(
            f"Entropy override {value!r} is neither an existing file nor valid hex: {exc}"
        ) from exc
    if not decoded:
        raise OverrideInputError("Entropy override is empty")
    return decoded
