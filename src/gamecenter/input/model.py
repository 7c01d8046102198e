from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ..exceptions import ValidationError
from .controls import Control, ControlSet


class RemapPolicy(Enum):
    """Whether the host may let the user rebind an action."""

    REMAPPABLE = "remappable"
    FIXED = "fixed"

    @property
    def remappable(self) -> bool:
        return self is RemapPolicy.REMAPPABLE


@dataclass(frozen=True)
class InputIdentifier:
    """Namespaced identifier, unique per ``(version, unique_id)`` pair."""

    version: str
    unique_id: int

    def __str__(self) -> str:
        return f"{self.version}:{self.unique_id}"


@dataclass(frozen=True)
class MouseSettings:
    allow_sensitivity_adjustment: bool = True
    invert_mouse_movement: bool = False


@dataclass(frozen=True, eq=False)
class Action:
    """A logical input action bound to one or more physical controls.

    Actions compare by identity: the catalog shares one instance between every
    group that lists it.
    """

    action_id: int
    label: str
    controls: ControlSet
    policy: RemapPolicy = RemapPolicy.REMAPPABLE


@dataclass(frozen=True, eq=False)
class Group:
    group_id: int
    label: str
    actions: Tuple[Action, ...]
    policy: RemapPolicy = RemapPolicy.REMAPPABLE

    def action(self, action_id: int) -> Optional[Action]:
        for a in self.actions:
            if a.action_id == action_id:
                return a
        return None


@dataclass(frozen=True, eq=False)
class Context:
    """The groups relevant to one screen or mode of the application."""

    identifier: InputIdentifier
    name: str
    label: str
    groups: Tuple[Group, ...]
    aliases: Tuple[str, ...] = ()

    @property
    def context_id(self) -> int:
        return self.identifier.unique_id

    def group(self, group_id: int) -> Optional[Group]:
        for g in self.groups:
            if g.group_id == group_id:
                return g
        return None

    def iter_actions(self) -> Iterator[Action]:
        """Yield each action reachable from this context once, in group order."""
        seen = set()
        for g in self.groups:
            for a in g.actions:
                if a.action_id not in seen:
                    seen.add(a.action_id)
                    yield a


@dataclass(frozen=True, eq=False)
class Catalog:
    """The complete, validated, immutable mapping configuration.

    Instances come out of ``CatalogBuilder.build()``; the constructor itself
    does not validate. ``effective_policies`` holds the final remap policy of
    every action after reserved controls and group/catalog policies are
    applied.
    """

    identifier: InputIdentifier
    groups: Tuple[Group, ...]
    contexts: Tuple[Context, ...]
    mouse_settings: MouseSettings = field(default_factory=MouseSettings)
    default_policy: RemapPolicy = RemapPolicy.REMAPPABLE
    reserved_controls: Tuple[Control, ...] = ()
    actions: Mapping[int, Action] = field(default_factory=dict)
    effective_policies: Mapping[int, RemapPolicy] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "actions", MappingProxyType(dict(self.actions)))
        object.__setattr__(self, "effective_policies", MappingProxyType(dict(self.effective_policies)))

    # ---------- Lookup ----------
    def action(self, action_id: int) -> Optional[Action]:
        return self.actions.get(action_id)

    def group(self, group_id: int) -> Optional[Group]:
        for g in self.groups:
            if g.group_id == group_id:
                return g
        return None

    def context(self, context_id: int) -> Optional[Context]:
        for c in self.contexts:
            if c.context_id == context_id:
                return c
        return None

    # ---------- Remap policy ----------
    def effective_policy(self, action_id: int) -> RemapPolicy:
        if action_id not in self.effective_policies:
            raise KeyError(f"Unknown action id: {action_id}")
        return self.effective_policies[action_id]

    def is_remappable(self, action_id: int) -> bool:
        return self.effective_policy(action_id).remappable

    def remappable_actions(self) -> List[Action]:
        return [a for a in self.actions.values() if self.is_remappable(a.action_id)]

    def ensure_remappable(self, action_id: int) -> Action:
        """Return the action if a remap request may name it.

        Raises:
            ValidationError: if the action is unknown or its effective policy is fixed.
        """
        action = self.action(action_id)
        if action is None:
            raise ValidationError(f"Remap request names unknown action {action_id}")
        if not self.is_remappable(action_id):
            raise ValidationError(f"Action {action_id} ({action.label}) is not remappable")
        return action

    # ---------- Export ----------
    def as_dict(self) -> Dict[str, Any]:
        """Render the catalog as plain data (YAML/JSON friendly)."""

        def controls(cs: ControlSet) -> Dict[str, List[str]]:
            return {"keys": [c.name for c in cs.keys], "pointers": [c.name for c in cs.pointers]}

        return {
            "identifier": {"version": self.identifier.version, "id": self.identifier.unique_id},
            "default_policy": self.default_policy.value,
            "mouse": {
                "allow_sensitivity_adjustment": self.mouse_settings.allow_sensitivity_adjustment,
                "invert_mouse_movement": self.mouse_settings.invert_mouse_movement,
            },
            "reserved": [c.name for c in self.reserved_controls],
            "groups": [
                {
                    "id": g.group_id,
                    "label": g.label,
                    "policy": g.policy.value,
                    "actions": [
                        {
                            "id": a.action_id,
                            "label": a.label,
                            "policy": a.policy.value,
                            "remappable": self.is_remappable(a.action_id),
                            "controls": controls(a.controls),
                        }
                        for a in g.actions
                    ],
                }
                for g in self.groups
            ],
            "contexts": [
                {
                    "id": c.context_id,
                    "version": c.identifier.version,
                    "name": c.name,
                    "label": c.label,
                    "groups": [g.group_id for g in c.groups],
                }
                for c in self.contexts
            ],
        }


__all__ = [
    "RemapPolicy",
    "InputIdentifier",
    "MouseSettings",
    "Action",
    "Group",
    "Context",
    "Catalog",
]
