from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from ..exceptions import ValidationError
from .controls import Control, ControlSet
from .definitions import CatalogDef, load_definitions
from .model import (
    Action,
    Catalog,
    Context,
    Group,
    InputIdentifier,
    MouseSettings,
    RemapPolicy,
)

logger = logging.getLogger(__name__)

ControlLike = Union[Control, str]


@dataclass(frozen=True)
class _PendingAction:
    action_id: int
    label: str
    keys: Tuple[ControlLike, ...]
    pointers: Tuple[ControlLike, ...]
    policy: RemapPolicy


@dataclass(frozen=True)
class _PendingGroup:
    group_id: int
    label: str
    action_ids: Tuple[int, ...]
    policy: RemapPolicy


@dataclass(frozen=True)
class _PendingContext:
    context_id: int
    name: str
    label: str
    group_ids: Tuple[int, ...]
    aliases: Tuple[str, ...]


def _normalize_name(name: Optional[str]) -> str:
    if not isinstance(name, str):
        return ""
    return name.strip().lower()


class CatalogBuilder:
    """Collects catalog definitions and freezes them into a validated Catalog.

    Groups reference actions and contexts reference groups by id, so every
    place that lists an action ends up holding the very same Action instance.
    Nothing is checked until ``build()``, which reports every problem at once.

    Example usage:
        builder = CatalogBuilder(version="1.0.0")
        builder.add_action(5, "Select", keys=["ENTER", "SPACE"], pointers=["LEFT_CLICK"])
        builder.add_group(2, "Game actions", [5])
        builder.add_context(1, "menu", "Menu", [2])
        catalog = builder.build()
    """

    def __init__(
        self,
        version: str,
        *,
        catalog_id: int = 0,
        default_policy: RemapPolicy = RemapPolicy.REMAPPABLE,
        mouse_settings: Optional[MouseSettings] = None,
        fallback_context: str = "menu",
    ) -> None:
        self.version = version
        self.catalog_id = catalog_id
        self.default_policy = default_policy
        self.mouse_settings = mouse_settings or MouseSettings()
        self.fallback_context = _normalize_name(fallback_context)
        self._actions: List[_PendingAction] = []
        self._groups: List[_PendingGroup] = []
        self._contexts: List[_PendingContext] = []
        self._reserved: List[ControlLike] = []

    # ---------- Definition API ----------
    def add_action(
        self,
        action_id: int,
        label: str,
        keys: Iterable[ControlLike] = (),
        pointers: Iterable[ControlLike] = (),
        policy: RemapPolicy = RemapPolicy.REMAPPABLE,
    ) -> "CatalogBuilder":
        self._actions.append(_PendingAction(action_id, label, tuple(keys), tuple(pointers), policy))
        return self

    def add_group(
        self,
        group_id: int,
        label: str,
        action_ids: Iterable[int],
        policy: RemapPolicy = RemapPolicy.REMAPPABLE,
    ) -> "CatalogBuilder":
        self._groups.append(_PendingGroup(group_id, label, tuple(action_ids), policy))
        return self

    def add_context(
        self,
        context_id: int,
        name: str,
        label: str,
        group_ids: Iterable[int],
        aliases: Iterable[str] = (),
    ) -> "CatalogBuilder":
        self._contexts.append(
            _PendingContext(
                context_id,
                _normalize_name(name),
                label,
                tuple(group_ids),
                tuple(_normalize_name(a) for a in aliases if _normalize_name(a)),
            )
        )
        return self

    def reserve(self, *controls: ControlLike) -> "CatalogBuilder":
        self._reserved.extend(controls)
        return self

    @classmethod
    def from_definitions(cls, defs: CatalogDef) -> "CatalogBuilder":
        builder = cls(
            defs.version,
            catalog_id=defs.catalog_id,
            default_policy=defs.default_policy,
            mouse_settings=MouseSettings(
                allow_sensitivity_adjustment=defs.mouse.allow_sensitivity_adjustment,
                invert_mouse_movement=defs.mouse.invert_mouse_movement,
            ),
            fallback_context=defs.fallback_context,
        )
        builder.reserve(*defs.reserved)
        for a in defs.actions:
            builder.add_action(a.id, a.label, a.keys, a.pointers, a.policy)
        for g in defs.groups:
            builder.add_group(g.id, g.label, g.actions, g.policy)
        for c in defs.contexts:
            builder.add_context(c.id, c.name, c.label, c.groups, c.aliases)
        return builder

    # ---------- Validate and freeze ----------
    def build(self) -> Catalog:
        """Validate the collected definitions and return the frozen Catalog.

        Raises:
            ValidationError: listing every duplicate id, empty control set,
                empty group, dangling reference and naming conflict found.
        """
        problems: List[str] = []

        reserved = self._build_reserved(problems)
        actions, broken = self._build_actions(problems)
        groups = self._build_groups(actions, broken, problems)
        contexts = self._build_contexts(groups, problems)

        if problems:
            for p in problems:
                logger.error("Catalog problem: %s", p)
            raise ValidationError(f"Catalog {self.version} failed validation", problems)

        effective = effective_policies(self.default_policy, actions, groups.values(), reserved)
        catalog = Catalog(
            identifier=InputIdentifier(self.version, self.catalog_id),
            groups=tuple(groups.values()),
            contexts=tuple(contexts),
            mouse_settings=self.mouse_settings,
            default_policy=self.default_policy,
            reserved_controls=reserved,
            actions=actions,
            effective_policies=effective,
        )
        logger.debug(
            "Built catalog %s: %d actions, %d groups, %d contexts",
            catalog.identifier, len(actions), len(groups), len(contexts),
        )
        return catalog

    def _build_reserved(self, problems: List[str]) -> Tuple[Control, ...]:
        out: List[Control] = []
        for item in self._reserved:
            try:
                control = item if isinstance(item, Control) else Control.parse(item)
            except ValueError as e:
                problems.append(f"reserved control: {e}")
                continue
            if control not in out:
                out.append(control)
        return tuple(out)

    def _build_actions(self, problems: List[str]) -> Tuple[Dict[int, Action], set]:
        actions: Dict[int, Action] = {}
        broken = set()
        for pa in self._actions:
            if pa.action_id in actions or pa.action_id in broken:
                problems.append(f"duplicate action id {pa.action_id}")
                continue
            try:
                controls = ControlSet.of(pa.keys, pa.pointers)
            except ValueError as e:
                problems.append(f"action {pa.action_id} ({pa.label}): {e}")
                broken.add(pa.action_id)
                continue
            actions[pa.action_id] = Action(pa.action_id, pa.label, controls, pa.policy)
        return actions, broken

    def _build_groups(self, actions: Dict[int, Action], broken: set, problems: List[str]) -> Dict[int, Group]:
        groups: Dict[int, Group] = {}
        for pg in self._groups:
            if pg.group_id in groups:
                problems.append(f"duplicate group id {pg.group_id}")
                continue
            if not pg.action_ids:
                problems.append(f"group {pg.group_id} ({pg.label}) has no actions")
                continue
            if len(set(pg.action_ids)) != len(pg.action_ids):
                problems.append(f"group {pg.group_id} ({pg.label}) lists an action twice")
            missing = [i for i in pg.action_ids if i not in actions and i not in broken]
            if missing:
                problems.append(f"group {pg.group_id} ({pg.label}) references unknown actions {missing}")
            members = tuple(actions[i] for i in pg.action_ids if i in actions)
            groups[pg.group_id] = Group(pg.group_id, pg.label, members, pg.policy)
        return groups

    def _build_contexts(self, groups: Dict[int, Group], problems: List[str]) -> List[Context]:
        contexts: List[Context] = []
        seen_ids = set()
        names: Dict[str, int] = {}
        for pc in self._contexts:
            if pc.context_id in seen_ids:
                problems.append(f"duplicate context id {InputIdentifier(self.version, pc.context_id)}")
                continue
            seen_ids.add(pc.context_id)
            if not pc.name:
                problems.append(f"context {pc.context_id} has no name")
            for n in (pc.name,) + pc.aliases:
                if not n:
                    continue
                if n in names and names[n] != pc.context_id:
                    problems.append(f"context name {n!r} used by contexts {names[n]} and {pc.context_id}")
                names.setdefault(n, pc.context_id)
            missing = [i for i in pc.group_ids if i not in groups]
            if missing:
                problems.append(f"context {pc.context_id} ({pc.label}) references unknown groups {missing}")
            members = tuple(groups[i] for i in pc.group_ids if i in groups)
            contexts.append(
                Context(
                    identifier=InputIdentifier(self.version, pc.context_id),
                    name=pc.name,
                    label=pc.label,
                    groups=members,
                    aliases=pc.aliases,
                )
            )
        if self.fallback_context not in names:
            problems.append(f"fallback context {self.fallback_context!r} is not defined")
        return contexts


def effective_policies(
    default_policy: RemapPolicy,
    actions: Mapping[int, Action],
    groups: Iterable[Group],
    reserved: Sequence[Control],
) -> Dict[int, RemapPolicy]:
    """Final remap policy of every action.

    An action is fixed when the catalog default is fixed, its own flag is
    fixed, a group holding it is fixed, or one of its controls is reserved.
    """
    in_fixed_group = {
        a.action_id for g in groups if g.policy is RemapPolicy.FIXED for a in g.actions
    }
    effective: Dict[int, RemapPolicy] = {}
    for action_id, action in actions.items():
        policy = RemapPolicy.REMAPPABLE
        if default_policy is RemapPolicy.FIXED or action.policy is RemapPolicy.FIXED:
            policy = RemapPolicy.FIXED
        elif action_id in in_fixed_group:
            policy = RemapPolicy.FIXED
        else:
            hit = action.controls.find_any(reserved)
            if hit is not None:
                logger.debug("Action %s pinned by reserved control %s", action_id, hit)
                policy = RemapPolicy.FIXED
        effective[action_id] = policy
    return effective


def merged_reserved_controls(catalog: Catalog) -> Tuple[Control, ...]:
    """Explicit reserved controls followed by every control of a fixed-policy action."""
    out: List[Control] = list(catalog.reserved_controls)
    for action in catalog.actions.values():
        if action.policy is RemapPolicy.FIXED:
            for c in action.controls:
                if c not in out:
                    out.append(c)
    return tuple(out)


def full_map_of(catalog: Catalog) -> Catalog:
    """Catalog handed to the host: merged reserved list, policies recomputed against it."""
    reserved = merged_reserved_controls(catalog)
    return dataclasses.replace(
        catalog,
        reserved_controls=reserved,
        effective_policies=effective_policies(
            catalog.default_policy, catalog.actions, catalog.groups, reserved
        ),
    )


class MappingRegistry:
    """Builds the catalog once and answers context lookups.

    The UI layer may pass any string to ``resolve_context``; names it does
    not know resolve to the fallback (menu) context instead of failing.

    Example usage:
        registry = MappingRegistry.default()
        ctx = registry.resolve_context("puzzle")
        host.register_catalog(registry.full_mapping_map())
    """

    def __init__(self, builder: CatalogBuilder) -> None:
        self._builder = builder
        self._catalog: Optional[Catalog] = None
        catalog = self.build_catalog()
        self._by_name: Dict[str, Context] = {}
        for ctx in catalog.contexts:
            for n in (ctx.name,) + ctx.aliases:
                self._by_name[n] = ctx
        self._fallback = self._by_name[builder.fallback_context]
        self._full_map = full_map_of(catalog)

    @classmethod
    def from_definitions(cls, defs: CatalogDef) -> "MappingRegistry":
        return cls(CatalogBuilder.from_definitions(defs))

    @classmethod
    def from_path(cls, path: Optional[Union[str, Path]] = None) -> "MappingRegistry":
        return cls.from_definitions(load_definitions(path))

    @classmethod
    def default(cls) -> "MappingRegistry":
        """Registry for the catalog shipped with the application."""
        return cls.from_path(None)

    def build_catalog(self) -> Catalog:
        """Validate and freeze the definitions; later calls return the same Catalog."""
        if self._catalog is None:
            self._catalog = self._builder.build()
        return self._catalog

    @property
    def catalog(self) -> Catalog:
        return self.build_catalog()

    @property
    def fallback_context(self) -> Context:
        return self._fallback

    def resolve_context(self, name: Optional[str]) -> Context:
        ctx = self._by_name.get(_normalize_name(name))
        if ctx is None:
            logger.debug("Unknown context name %r; using %s", name, self._fallback.name)
            return self._fallback
        return ctx

    def full_mapping_map(self) -> Catalog:
        return self._full_map


__all__ = ["CatalogBuilder", "MappingRegistry", "effective_policies", "merged_reserved_controls", "full_map_of"]
