"""Entropy acquisition subsystem for qr-verdict.

Re-exports the ABC, registry, chain and all built-in sources::

    from qr_verdict.entropy import EntropySourceChain, EntropySourceRegistry
    from qr_verdict.entropy import AnuQrngSource, SystemEntropySource

Importing this package registers the built-in sources under the names
``anu``, ``qrandom``, ``cache`` and ``system``.
"""

from qr_verdict.entropy.anu import AnuQrngSource
from qr_verdict.entropy.base import EntropySource
from qr_verdict.entropy.cache import CachedEntropySource
from qr_verdict.entropy.chain import EntropySourceChain
from qr_verdict.entropy.qrandom import QRandomSource
from qr_verdict.entropy.registry import EntropySourceRegistry, register_entropy_source
from qr_verdict.entropy.system import SystemEntropySource
from qr_verdict.entropy.types import EntropyBuffer, Quality

__all__ = [
    "AnuQrngSource",
    "CachedEntropySource",
    "EntropyBuffer",
    "EntropySource",
    "EntropySourceChain",
    "EntropySourceRegistry",
    "QRandomSource",
    "Quality",
    "SystemEntropySource",
    "register_entropy_source",
]
