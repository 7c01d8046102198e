from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, Optional

from ..exceptions import HostBindingError, UnsupportedHostError
from .host import HostCapabilityProbe, HostMappingSink
from .model import Context
from .registry import MappingRegistry

logger = logging.getLogger(__name__)


class ControllerState(Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


class ContextController:
    """Mediates between the UI layer and the host remapping engine.

    Owns the only mutable state of the input layer: whether the catalog is
    registered and which context is active. Every operation acknowledges with
    True; host failures are logged and leave the state as it was, and a host
    without remapping support turns every operation into a no-op.

    Usage:
        controller = ContextController(registry, probe, sink)
        controller.initialize()
        controller.activate("puzzle")
        controller.clear()
    """

    def __init__(
        self,
        registry: MappingRegistry,
        probe: HostCapabilityProbe,
        sink: HostMappingSink,
    ) -> None:
        self.registry = registry
        self._probe = probe
        self._sink = sink
        self._state = ControllerState.UNINITIALIZED
        self._active: Optional[Context] = None
        self._last_error: Optional[HostBindingError] = None
        # Serializes initialize/activate/clear; probe_capability stays lock-free.
        self._lock = threading.RLock()

    # ---------- Introspection ----------
    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def active_context(self) -> Optional[Context]:
        return self._active

    @property
    def last_error(self) -> Optional[HostBindingError]:
        """Most recent recovered host failure, kept for diagnostics only."""
        return self._last_error

    # ---------- Capability ----------
    def probe_capability(self) -> bool:
        try:
            return bool(self._probe.supports_remapping())
        except Exception:
            logger.warning("Capability probe failed; assuming no remapping support", exc_info=True)
            return False

    def require_capability(self) -> None:
        """Raise UnsupportedHostError when the host cannot remap input."""
        if not self.probe_capability():
            raise UnsupportedHostError("Host does not support input remapping")

    # ---------- Lifecycle ----------
    def initialize(self) -> bool:
        if not self.probe_capability():
            logger.debug("initialize: remapping unsupported; skipping")
            return True
        with self._lock:
            if self._state is ControllerState.READY:
                logger.debug("initialize: already ready")
                return True
            catalog = self.registry.full_mapping_map()
            if self._call_host("register_catalog", lambda: self._sink.register_catalog(catalog)):
                self._state = ControllerState.READY
                self._active = None
                logger.info("Registered input catalog %s with host", catalog.identifier)
        return True

    def activate(self, name: Optional[str]) -> bool:
        if not self.probe_capability():
            logger.debug("activate(%r): remapping unsupported; skipping", name)
            return True
        with self._lock:
            if self._state is not ControllerState.READY:
                logger.debug("activate(%r): not initialized; skipping", name)
                return True
            context = self.registry.resolve_context(name)
            if self._call_host("set_active_context", lambda: self._sink.set_active_context(context)):
                self._active = context
                logger.info("Active input context -> %s (%s)", context.name, context.identifier)
        return True

    def clear(self) -> bool:
        with self._lock:
            if self._state is ControllerState.UNINITIALIZED:
                logger.debug("clear: not initialized; skipping")
                return True
            # Teardown must finish even if the host refuses the release.
            self._call_host("release", self._sink.release)
            self._state = ControllerState.UNINITIALIZED
            self._active = None
            logger.info("Released input mapping")
        return True

    # ---------- Internals ----------
    def _call_host(self, operation: str, call: Callable[[], None]) -> bool:
        try:
            call()
        except HostBindingError as e:
            self._record_failure(e)
            return False
        except Exception as e:
            self._record_failure(HostBindingError(operation, f"{type(e).__name__}: {e}"), cause=e)
            return False
        return True

    def _record_failure(self, error: HostBindingError, cause: Optional[BaseException] = None) -> None:
        self._last_error = error
        logger.warning("Host rejected %s: %s", error.operation, error, exc_info=cause or error)


__all__ = ["ContextController", "ControllerState"]
