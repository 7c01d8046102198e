from __future__ import annotations

import abc
import logging
from typing import List, Optional

from ..exceptions import HostBindingError
from .model import Catalog, Context

logger = logging.getLogger(__name__)


class HostCapabilityProbe(abc.ABC):
    """Reports whether the host environment can remap keyboard and mouse input."""

    @abc.abstractmethod
    def supports_remapping(self) -> bool:
        """Return True when the host remapping engine is available."""


class HostMappingSink(abc.ABC):
    """Abstract host remapping engine.

    Implementations return None on success and raise HostBindingError when the
    host rejects a call. A transport with its own deadline should raise
    TimeoutError or HostBindingError when it expires.
    """

    @abc.abstractmethod
    def register_catalog(self, catalog: Catalog) -> None:
        """Hand the full mapping map to the host."""

    @abc.abstractmethod
    def set_active_context(self, context: Context) -> None:
        """Make ``context`` the one the host applies."""

    @abc.abstractmethod
    def release(self) -> None:
        """Drop the registered mapping."""


class StaticCapabilityProbe(HostCapabilityProbe):
    """Probe with a fixed answer, for hosts that have no detection API."""

    def __init__(self, supported: bool) -> None:
        self._supported = bool(supported)

    def supports_remapping(self) -> bool:
        return self._supported


class LoopbackHostSink(HostMappingSink):
    """In-process host that records what it was given.

    Used for headless runs and the CLI when no real host is attached. It
    enforces the host's ordering rule: a context can only be activated after a
    catalog has been registered.
    """

    def __init__(self) -> None:
        self.catalog: Optional[Catalog] = None
        self.active_context: Optional[Context] = None
        self.calls: List[str] = []

    def register_catalog(self, catalog: Catalog) -> None:
        self.calls.append("register_catalog")
        self.catalog = catalog
        logger.debug("Loopback host registered catalog %s", catalog.identifier)

    def set_active_context(self, context: Context) -> None:
        self.calls.append("set_active_context")
        if self.catalog is None:
            raise HostBindingError("set_active_context", "no catalog registered")
        if self.catalog.context(context.context_id) is None:
            raise HostBindingError("set_active_context", f"context {context.identifier} is not in the catalog")
        self.active_context = context
        logger.debug("Loopback host active context -> %s", context.name)

    def release(self) -> None:
        self.calls.append("release")
        self.catalog = None
        self.active_context = None


__all__ = [
    "HostCapabilityProbe",
    "HostMappingSink",
    "StaticCapabilityProbe",
    "LoopbackHostSink",
]
