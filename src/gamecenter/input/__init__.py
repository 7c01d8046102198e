"""
Input remapping layer for the Game Center app.

Exposes:
- Control / ControlSet: Physical keys and mouse buttons bound to an action.
- Action, Group, Context, Catalog: The immutable mapping catalog.
- CatalogBuilder / MappingRegistry: Validate the catalog and resolve contexts by name.
- HostCapabilityProbe / HostMappingSink: Contracts of the host remapping engine.
- ContextController: Registers the catalog with the host and switches contexts.
- ControlChannel: String-keyed request surface used by the UI layer.
"""
from .controls import Control, ControlKind, ControlSet, KeyCode, PointerButton
from .model import Action, Catalog, Context, Group, InputIdentifier, MouseSettings, RemapPolicy
from .registry import CatalogBuilder, MappingRegistry
from .host import HostCapabilityProbe, HostMappingSink, LoopbackHostSink, StaticCapabilityProbe
from .controller import ContextController, ControllerState
from .channel import ChannelResponse, ControlChannel

__all__ = [
    "Control",
    "ControlKind",
    "ControlSet",
    "KeyCode",
    "PointerButton",
    "Action",
    "Catalog",
    "Context",
    "Group",
    "InputIdentifier",
    "MouseSettings",
    "RemapPolicy",
    "CatalogBuilder",
    "MappingRegistry",
    "HostCapabilityProbe",
    "HostMappingSink",
    "LoopbackHostSink",
    "StaticCapabilityProbe",
    "ContextController",
    "ControllerState",
    "ChannelResponse",
    "ControlChannel",
]
