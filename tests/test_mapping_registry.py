from gamecenter.input import Control, KeyCode, RemapPolicy


def test_default_catalog_ids_are_unique(registry):
    catalog = registry.catalog
    action_ids = [a.action_id for g in catalog.groups for a in g.actions]
    assert set(action_ids) == set(catalog.actions)

    group_ids = [g.group_id for g in catalog.groups]
    assert len(group_ids) == len(set(group_ids)) == 4

    context_ids = [c.identifier for c in catalog.contexts]
    assert len(context_ids) == len(set(context_ids)) == 4
    assert all(c.identifier.version == "1.0.0" for c in catalog.contexts)


def test_resolve_known_names(registry):
    assert registry.resolve_context("menu").context_id == 1
    assert registry.resolve_context("board").context_id == 2
    assert registry.resolve_context("puzzle").context_id == 3
    assert registry.resolve_context("action").context_id == 4
    # Case and whitespace are ignored, aliases resolve too
    assert registry.resolve_context("  Puzzle ").context_id == 3
    assert registry.resolve_context("tetris") is registry.resolve_context("action")


def test_unknown_names_fall_back_to_menu(registry):
    menu = registry.resolve_context("menu")
    assert registry.resolve_context("unknown-xyz") is menu
    assert registry.resolve_context("") is menu
    assert registry.resolve_context(None) is menu
    assert registry.fallback_context is menu


def test_puzzle_context_has_number_input(registry):
    puzzle = registry.resolve_context("puzzle")
    assert [g.group_id for g in puzzle.groups] == [1, 2, 3]
    numbers = puzzle.group(3)
    assert len(numbers.actions) == 10
    assert Control.key(KeyCode.DEL) in numbers.action(20).controls


def test_navigation_actions_are_shared_with_falling_blocks_group(registry):
    nav = registry.catalog.group(1)
    blocks = registry.catalog.group(4)
    for action_id in (2, 3, 4):
        assert nav.action(action_id) is blocks.action(action_id)


def test_back_and_escape_are_never_remappable(registry):
    catalog = registry.catalog
    assert catalog.action(6).policy is RemapPolicy.FIXED
    assert not catalog.is_remappable(6)
    assert catalog.is_remappable(5)
    assert catalog.reserved_controls == (Control.parse("ESCAPE"), Control.parse("BACK"))


def test_full_mapping_map_merges_reserved_controls():
    from gamecenter.input import CatalogBuilder, MappingRegistry

    b = CatalogBuilder(version="2.0.0")
    b.reserve("ESCAPE")
    b.add_action(6, "Back", keys=["ESCAPE", "BACK"], policy=RemapPolicy.FIXED)
    b.add_action(8, "Pause", keys=["P"], policy=RemapPolicy.FIXED)
    b.add_action(9, "Hint", keys=["H"])
    b.add_group(1, "All", [6, 8, 9])
    b.add_context(1, "menu", "Menu", [1])
    reg = MappingRegistry(b)

    full = reg.full_mapping_map()
    assert [c.name for c in full.reserved_controls] == ["ESCAPE", "BACK", "P"]
    # The catalog itself keeps only the explicit list
    assert [c.name for c in reg.catalog.reserved_controls] == ["ESCAPE"]
    assert full.groups == reg.catalog.groups
    assert full.identifier.version == "2.0.0"
    assert reg.full_mapping_map() is full


def test_full_mapping_map_pins_actions_sharing_a_fixed_control():
    from gamecenter.input import CatalogBuilder, MappingRegistry

    b = CatalogBuilder(version="2.0.0")
    b.add_action(1, "Confirm", keys=["SPACE"], policy=RemapPolicy.FIXED)
    b.add_action(2, "Rotate", keys=["SPACE", "ENTER"])
    b.add_action(3, "Hint", keys=["H"])
    b.add_group(1, "All", [1, 2, 3])
    b.add_context(1, "menu", "Menu", [1])
    reg = MappingRegistry(b)

    full = reg.full_mapping_map()
    assert Control.parse("SPACE") in full.reserved_controls
    assert not full.is_remappable(2)
    assert full.is_remappable(3)
    rotate = next(a for a in full.as_dict()["groups"][0]["actions"] if a["id"] == 2)
    assert rotate["remappable"] is False
    # The built catalog only honours the explicit reserved list
    assert reg.catalog.is_remappable(2)


def test_build_catalog_is_repeatable(registry):
    again = registry.build_catalog()
    assert again is registry.catalog
    assert again.action(5) is registry.catalog.action(5)
    assert registry.build_catalog() is again


def test_as_dict_reports_effective_policy(registry):
    data = registry.full_mapping_map().as_dict()
    assert data["identifier"] == {"version": "1.0.0", "id": 0}
    assert data["reserved"] == ["ESCAPE", "BACK"]
    assert data["mouse"]["allow_sensitivity_adjustment"] is True
    game_actions = next(g for g in data["groups"] if g["id"] == 2)
    back = next(a for a in game_actions["actions"] if a["id"] == 6)
    select = next(a for a in game_actions["actions"] if a["id"] == 5)
    assert back["remappable"] is False
    assert select["controls"] == {"keys": ["ENTER", "SPACE"], "pointers": ["LEFT_CLICK"]}
    assert [c["name"] for c in data["contexts"]] == ["menu", "board", "puzzle", "action"]
