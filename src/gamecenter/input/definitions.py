from __future__ import annotations

import logging
from importlib.resources import files as resource_files
from pathlib import Path
from typing import List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from ..exceptions import ValidationError
from .controls import Control
from .model import RemapPolicy

logger = logging.getLogger(__name__)

DEFAULT_RESOURCE = "catalog.yaml"


def _check_control_names(names: List[str]) -> List[str]:
    for name in names:
        Control.parse(name)  # raises ValueError on unknown names
    return [n.strip().upper() for n in names]


class _Definition(BaseModel):
    model_config = ConfigDict(extra="forbid")


class ActionDef(_Definition):
    """Definition of one action as written in the catalog file."""

    id: int = Field(..., description="Catalog-wide unique action id")
    label: str = Field(..., description="Human readable label shown by the host")
    keys: List[str] = Field(default_factory=list, description="Key names, e.g. W or DPAD_UP")
    pointers: List[str] = Field(default_factory=list, description="Pointer buttons, e.g. LEFT_CLICK")
    policy: RemapPolicy = Field(RemapPolicy.REMAPPABLE, description="remappable or fixed")

    @field_validator("keys", "pointers")
    @classmethod
    def known_controls(cls, v: List[str]) -> List[str]:
        return _check_control_names(v)


class GroupDef(_Definition):
    id: int
    label: str
    actions: List[int] = Field(..., description="Action ids, in display order")
    policy: RemapPolicy = RemapPolicy.REMAPPABLE


class ContextDef(_Definition):
    id: int
    name: str = Field(..., description="Logical name the UI layer passes to setContext")
    label: str
    groups: List[int] = Field(..., description="Group ids active in this context")
    aliases: List[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        v = v.strip().lower()
        if not v:
            raise ValueError("context name must not be empty")
        return v

    @field_validator("aliases")
    @classmethod
    def normalize_aliases(cls, v: List[str]) -> List[str]:
        return [a.strip().lower() for a in v if a.strip()]


class MouseDef(_Definition):
    allow_sensitivity_adjustment: bool = True
    invert_mouse_movement: bool = False


class CatalogDef(_Definition):
    """Top level of a catalog definition file."""

    version: str = Field(..., description="Namespace version for every identifier")
    catalog_id: int = 0
    default_policy: RemapPolicy = RemapPolicy.REMAPPABLE
    fallback_context: str = "menu"
    mouse: MouseDef = Field(default_factory=MouseDef)
    reserved: List[str] = Field(default_factory=list, description="Controls that can never be reassigned")
    actions: List[ActionDef]
    groups: List[GroupDef]
    contexts: List[ContextDef]

    @field_validator("reserved")
    @classmethod
    def known_reserved(cls, v: List[str]) -> List[str]:
        return _check_control_names(v)


def _format_pydantic_errors(exc: PydanticValidationError) -> List[str]:
    problems = []
    for err in exc.errors():
        loc = "/".join(str(p) for p in err.get("loc", ())) or "<root>"
        problems.append(f"at {loc}: {err.get('msg')}")
    return problems


def parse_definitions(raw: object, source: str = "<memory>") -> CatalogDef:
    """Validate already-parsed YAML/JSON data into a CatalogDef.

    Raises:
        ValidationError: if the document does not match the definition schema.
    """
    if not isinstance(raw, dict):
        raise ValidationError(f"Catalog definitions in {source} must be a mapping")
    try:
        return CatalogDef.model_validate(raw)
    except PydanticValidationError as e:
        raise ValidationError(
            f"Catalog definitions in {source} are invalid", _format_pydantic_errors(e)
        ) from e


def load_definitions(path: Optional[Union[str, Path]] = None) -> CatalogDef:
    """Load catalog definitions from YAML.

    If path is None, loads the embedded default resource
    gamecenter/input/data/catalog.yaml.

    Raises:
        ValidationError: if the file is missing, is not YAML, or does not
            match the definition schema.
    """
    if path is None:
        text = resource_files("gamecenter.input").joinpath("data").joinpath(DEFAULT_RESOURCE).read_text(encoding="utf-8")
        source = f"<embedded {DEFAULT_RESOURCE}>"
        logger.debug("Loaded embedded catalog definitions")
    else:
        p = Path(path)
        if not p.exists():
            raise ValidationError(f"Catalog definitions not found: {p}")
        text = p.read_text(encoding="utf-8")
        source = str(p)
        logger.debug("Loaded catalog definitions from path: %s", p)

    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ValidationError(f"Catalog definitions in {source} are not valid YAML", [str(e)]) from e
    return parse_definitions(raw or {}, source)


__all__ = [
    "ActionDef",
    "GroupDef",
    "ContextDef",
    "MouseDef",
    "CatalogDef",
    "parse_definitions",
    "load_definitions",
]
