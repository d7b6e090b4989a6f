"""Tests for catalog loaders."""

import pytest

from heroville.data.loaders import (
    get_available_consumables,
    get_available_weapons,
    get_consumable_by_id,
    get_healing_potions,
    get_max_stack,
    get_weapon_by_id,
    load_consumables,
    load_dungeon_configs,
    load_weapons,
)


class TestWeapons:
    """Tests for the weapon catalog."""

    def test_load_weapons(self):
        weapons = load_weapons()
        assert [w.id for w in weapons] == [
            "dagger", "shortsword", "longsword", "battleaxe", "greatsword",
        ]

    def test_weapon_fields(self):
        dagger = get_weapon_by_id("dagger")
        assert dagger.min_damage == 1
        assert dagger.max_damage == 3
        assert dagger.cost == {"monster_parts": 8}
        assert dagger.repair_cost == 2

    def test_unknown_weapon(self):
        assert get_weapon_by_id("wand") is None

    @pytest.mark.parametrize("level,count", [(0, 0), (1, 1), (3, 3), (5, 5)])
    def test_available_by_blacksmith_level(self, level, count):
        assert len(get_available_weapons(level)) == count


class TestConsumables:
    """Tests for the consumable catalog."""

    def test_health_potion(self):
        potion = get_consumable_by_id("health_potion")
        assert potion.effect_amount == 0.2
        assert potion.max_stack == 5
        assert potion.sale_price == 1
        assert potion.is_healing

    def test_healing_potions_in_order(self):
        assert [p.id for p in get_healing_potions()] == [c.id for c in load_consumables()]

    def test_available_by_apothecary_level(self):
        assert get_available_consumables(0) == []
        assert len(get_available_consumables(1)) == 1

    def test_max_stack_default(self):
        assert get_max_stack("health_potion") == 5
        assert get_max_stack("elixir", default=3) == 3


class TestDungeonConfigs:
    """Tests for the starting dungeons."""

    def test_five_dungeons_in_difficulty_order(self):
        configs = load_dungeon_configs()
        assert [c.id for c in configs] == ["cave", "forest", "crypt", "sewer", "mine"]
        assert [c.difficulty for c in configs] == [1, 2, 3, 4, 5]

    def test_all_start_undiscovered(self):
        assert not any(c.discovered for c in load_dungeon_configs())

    def test_cave_is_free(self):
        cave = load_dungeon_configs()[0]
        assert cave.discovery_cost == 0
        assert cave.variant.name == "Giant"

    def test_configs_are_fresh(self):
        """Each call returns new objects."""
        assert load_dungeon_configs()[0] is not load_dungeon_configs()[0]
