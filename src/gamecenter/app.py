from __future__ import annotations

import logging
from typing import Optional

from .config import InputSettings
from .input.channel import ControlChannel
from .input.controller import ContextController
from .input.definitions import load_definitions
from .input.host import HostCapabilityProbe, HostMappingSink, LoopbackHostSink, StaticCapabilityProbe
from .input.registry import CatalogBuilder, MappingRegistry

logger = logging.getLogger(__name__)


def create_registry(settings: Optional[InputSettings] = None) -> MappingRegistry:
    """Load the configured definitions and build the registry.

    Raises ValidationError for a malformed catalog; callers should let it abort
    startup.
    """
    settings = settings or InputSettings()
    defs = load_definitions(settings.catalog_path)
    if settings.fallback_context:
        defs = defs.model_copy(update={"fallback_context": settings.fallback_context.strip().lower()})
    registry = MappingRegistry(CatalogBuilder.from_definitions(defs))
    logger.info(
        "Input catalog %s ready with contexts %s",
        registry.catalog.identifier,
        ", ".join(c.name for c in registry.catalog.contexts),
    )
    return registry


def create_channel(
    settings: Optional[InputSettings] = None,
    probe: Optional[HostCapabilityProbe] = None,
    sink: Optional[HostMappingSink] = None,
) -> ControlChannel:
    """Wire registry, controller and channel for one UI session.

    Without an explicit probe the configured static answer is used; without an
    explicit sink an in-process loopback host is attached.
    """
    settings = settings or InputSettings()
    registry = create_registry(settings)
    probe = probe or StaticCapabilityProbe(settings.remapping_supported)
    sink = sink or LoopbackHostSink()
    return ControlChannel(ContextController(registry, probe, sink))


__all__ = ["create_registry", "create_channel"]
