import pytest

from gamecenter.input import Control, ControlKind, ControlSet, KeyCode, PointerButton


def test_control_equality_is_by_kind_and_code():
    assert Control.key(KeyCode.ENTER) == Control.parse("enter")
    assert Control.parse("RETURN") == Control.parse("ENTER")
    assert Control.parse("esc") == Control.key(KeyCode.ESCAPE)
    # Same numeric code, different kind
    assert Control(ControlKind.KEY, 0) != Control(ControlKind.POINTER, 0)
    assert hash(Control.parse("W")) == hash(Control.key(51))


def test_control_parse_pointer_and_digits():
    assert Control.parse("LEFT_CLICK") == Control.pointer(PointerButton.LEFT_CLICK)
    assert Control.parse("mouse_right_click").is_pointer
    assert Control.parse("1") == Control.key(KeyCode.NUM_1)
    assert str(Control.parse("0")) == "NUM_0"


def test_control_parse_rejects_unknown_names():
    with pytest.raises(ValueError):
        Control.parse("F13")
    with pytest.raises(ValueError):
        Control.parse("   ")


def test_control_set_requires_at_least_one_control():
    with pytest.raises(ValueError):
        ControlSet.of([], [])
    only_pointer = ControlSet.of([], ["LEFT_CLICK"])
    assert len(only_pointer) == 1


def test_control_set_keeps_order_and_membership():
    cs = ControlSet.of(["ENTER", "SPACE"], ["LEFT_CLICK"])
    assert [c.name for c in cs] == ["ENTER", "SPACE", "LEFT_CLICK"]
    assert Control.parse("space") in cs
    assert Control.parse("ESCAPE") not in cs
    assert cs.find_any([Control.parse("ESCAPE"), Control.parse("SPACE")]) == Control.parse("SPACE")


def test_control_set_rejects_misplaced_and_duplicate_controls():
    with pytest.raises(ValueError):
        ControlSet.of(["LEFT_CLICK"], [])
    with pytest.raises(ValueError):
        ControlSet.of([], ["ENTER"])
    with pytest.raises(ValueError):
        ControlSet.of(["W", "w"], [])
