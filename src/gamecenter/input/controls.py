from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable, Optional, Tuple, Union


class KeyCode(IntEnum):
    """Keyboard keys the catalog can bind.

    Values are the host platform's key event codes, which is what the host
    remapping engine expects on the wire.
    """

    BACK = 4
    NUM_0 = 7
    NUM_1 = 8
    NUM_2 = 9
    NUM_3 = 10
    NUM_4 = 11
    NUM_5 = 12
    NUM_6 = 13
    NUM_7 = 14
    NUM_8 = 15
    NUM_9 = 16
    DPAD_UP = 19
    DPAD_DOWN = 20
    DPAD_LEFT = 21
    DPAD_RIGHT = 22
    A = 29
    C = 31
    D = 32
    H = 36
    P = 44
    R = 46
    S = 47
    W = 51
    Z = 54
    SHIFT_LEFT = 59
    SPACE = 62
    ENTER = 66
    DEL = 67
    ESCAPE = 111


class PointerButton(IntEnum):
    """Mouse buttons the catalog can bind."""

    LEFT_CLICK = 0
    RIGHT_CLICK = 1


class ControlKind(Enum):
    KEY = "key"
    POINTER = "pointer"


# Digits are spelled "1".."9" in definitions; the enum needs a letter prefix.
_KEY_ALIASES = {str(n): f"NUM_{n}" for n in range(10)}
_KEY_ALIASES.update({
    "UP": "DPAD_UP",
    "DOWN": "DPAD_DOWN",
    "LEFT": "DPAD_LEFT",
    "RIGHT": "DPAD_RIGHT",
    "ESC": "ESCAPE",
    "RETURN": "ENTER",
    "DELETE": "DEL",
    "SHIFT": "SHIFT_LEFT",
})
_POINTER_ALIASES = {
    "MOUSE_LEFT_CLICK": "LEFT_CLICK",
    "MOUSE_RIGHT_CLICK": "RIGHT_CLICK",
}


@dataclass(frozen=True)
class Control:
    """One physical input primitive: a key or a pointer button.

    Equality and hashing are by ``(kind, code)`` so two controls built from
    different spellings of the same key compare equal.
    """

    kind: ControlKind
    code: int

    @classmethod
    def key(cls, key: Union[KeyCode, int]) -> "Control":
        return cls(ControlKind.KEY, int(KeyCode(key)))

    @classmethod
    def pointer(cls, button: Union[PointerButton, int]) -> "Control":
        return cls(ControlKind.POINTER, int(PointerButton(button)))

    @classmethod
    def parse(cls, name: str) -> "Control":
        """Parse a control from its name, e.g. ``"w"``, ``"ENTER"`` or ``"LEFT_CLICK"``.

        Raises ValueError for names outside the known key and pointer spaces.
        """
        token = (name or "").strip().upper()
        if not token:
            raise ValueError("Empty control name")
        pointer = _POINTER_ALIASES.get(token, token)
        if pointer in PointerButton.__members__:
            return cls.pointer(PointerButton[pointer])
        key = _KEY_ALIASES.get(token, token)
        if key in KeyCode.__members__:
            return cls.key(KeyCode[key])
        raise ValueError(f"Unknown control name: {name!r}")

    @property
    def is_key(self) -> bool:
        return self.kind is ControlKind.KEY

    @property
    def is_pointer(self) -> bool:
        return self.kind is ControlKind.POINTER

    @property
    def name(self) -> str:
        if self.is_key:
            return KeyCode(self.code).name
        return PointerButton(self.code).name

    def __str__(self) -> str:
        return self.name


def _as_controls(items: Iterable[Union[Control, str]]) -> Tuple[Control, ...]:
    return tuple(c if isinstance(c, Control) else Control.parse(c) for c in items)


@dataclass(frozen=True)
class ControlSet:
    """Controls that each independently trigger one action.

    ``keys`` holds key controls and ``pointers`` holds pointer buttons; both
    keep their definition order. Construction fails with ValueError when the
    set is empty, a control sits in the wrong list, or a list repeats a
    control.
    """

    keys: Tuple[Control, ...] = ()
    pointers: Tuple[Control, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "keys", tuple(self.keys))
        object.__setattr__(self, "pointers", tuple(self.pointers))
        if not self.keys and not self.pointers:
            raise ValueError("ControlSet must contain at least one control")
        for c in self.keys:
            if not c.is_key:
                raise ValueError(f"{c} is not a key control")
        for c in self.pointers:
            if not c.is_pointer:
                raise ValueError(f"{c} is not a pointer control")
        for label, items in (("keys", self.keys), ("pointers", self.pointers)):
            if len(set(items)) != len(items):
                raise ValueError(f"ControlSet {label} contain duplicates: {[str(c) for c in items]}")

    @classmethod
    def of(
        cls,
        keys: Iterable[Union[Control, str]] = (),
        pointers: Iterable[Union[Control, str]] = (),
    ) -> "ControlSet":
        """Build a set from controls or control names."""
        return cls(keys=_as_controls(keys), pointers=_as_controls(pointers))

    def __iter__(self):
        yield from self.keys
        yield from self.pointers

    def __len__(self) -> int:
        return len(self.keys) + len(self.pointers)

    def __contains__(self, control: object) -> bool:
        return control in self.keys or control in self.pointers

    def find_any(self, controls: Iterable[Control]) -> Optional[Control]:
        """Return the first of ``controls`` present in this set, or None."""
        for c in controls:
            if c in self:
                return c
        return None


__all__ = ["KeyCode", "PointerButton", "ControlKind", "Control", "ControlSet"]
