"""Name-to-class lookup for entropy sources.

``QV_ENTROPY_CHAIN`` names sources by string. Built-in sources claim their
name with ``@register_entropy_source`` when their module is imported; other
distributions can contribute sources under the ``qr_verdict.entropy_sources``
entry-point group, which is scanned once, on the first name the decorators
did not provide.
"""

from __future__ import annotations

import importlib.metadata
import inspect
import logging
from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from qr_verdict.config import QRVerdictConfig
    from qr_verdict.entropy.base import EntropySource

logger = logging.getLogger("qr_verdict")

_ENTRY_POINT_GROUP = "qr_verdict.entropy_sources"


def _accepts_config(source_cls: type) -> bool:
    """Whether *source_cls* takes a config as its first constructor argument."""
    try:
        params = list(inspect.signature(source_cls).parameters)
    except (ValueError, TypeError):
        return False
    return bool(params) and params[0] == "config"


class EntropySourceRegistry:
    """Maps chain names to :class:`EntropySource` subclasses.

    Decorator registrations always win over entry points with the same name.
    """

    _registry: ClassVar[dict[str, type[EntropySource]]] = {}
    _entry_points_loaded: ClassVar[bool] = False

    @classmethod
    def register(cls, name: str) -> Callable[[type[EntropySource]], type[EntropySource]]:
        """Class decorator claiming *name* for the decorated source."""

        def decorator(source_cls: type[EntropySource]) -> type[EntropySource]:
            cls._registry[name] = source_cls
            return source_cls

        return decorator

    @classmethod
    def _ensure_entry_points(cls) -> None:
        if not cls._entry_points_loaded:
            cls._load_entry_points()

    @classmethod
    def get(cls, name: str) -> type[EntropySource]:
        """Source class for *name*.

        Raises:
            KeyError: If neither a decorator nor an entry point provides it.
        """
        source_cls = cls._registry.get(name)
        if source_cls is None:
            cls._ensure_entry_points()
            source_cls = cls._registry.get(name)
        if source_cls is None:
            known = ", ".join(sorted(cls._registry)) or "(none)"
            raise KeyError(f"Unknown entropy source: {name!r}. Available: {known}")
        return source_cls

    @classmethod
    def list_available(cls) -> list[str]:
        cls._ensure_entry_points()
        return sorted(cls._registry)

    @classmethod
    def create(cls, name: str, config: QRVerdictConfig) -> EntropySource:
        """Instantiate the source registered as *name*.

        Network and cache sources read their settings from *config*; sources
        whose constructor does not start with a ``config`` parameter are
        built without arguments.
        """
        source_cls = cls.get(name)
        if _accepts_config(source_cls):
            return source_cls(config)  # type: ignore[call-arg]
        return source_cls()

    @classmethod
    def build(cls, names: Iterable[str], config: QRVerdictConfig) -> list[EntropySource]:
        """One instance per name, in chain order."""
        return [cls.create(name, config) for name in names]

    @classmethod
    def _load_entry_points(cls) -> None:
        cls._entry_points_loaded = True
        try:
            discovered = importlib.metadata.entry_points(group=_ENTRY_POINT_GROUP)
        except Exception:  # Intentional: broken metadata must not stop the built-ins
            logger.warning("Cannot read %s entry points", _ENTRY_POINT_GROUP, exc_info=True)
            return

        for ep in discovered:
            if ep.name in cls._registry:
                continue
            try:
                cls._registry[ep.name] = ep.load()
            except Exception:  # Intentional: skip the plugin, keep the rest
                logger.warning(
                    "Skipping entropy source plugin %r (%s)", ep.name, ep.value, exc_info=True
                )
            else:
                logger.debug("Entropy source %r provided by plugin %s", ep.name, ep.value)

    @classmethod
    def _reset(cls) -> None:
        """Forget every registration. Test-only."""
        cls._registry.clear()
        cls._entry_points_loaded = False


register_entropy_source = EntropySourceRegistry.register
