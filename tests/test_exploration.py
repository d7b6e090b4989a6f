"""Tests for exploration, healing and discovery."""

import random

import pytest

from heroville.core.constants import HeroStatus
from heroville.core.dungeon import Dungeon
from heroville.core.events import EventKind
from heroville.core.exploration import ExplorationSystem
from heroville.core.game_state import GameState
from heroville.core.monster import MonsterVariant


@pytest.fixture
def state():
    dungeons = [
        Dungeon(
            id="hall", name="Quiet Hall", length=3, encounter_rate=0.0,
            variant=MonsterVariant("Giant", True, 1.5, 1.3), discovered=True,
        ),
        Dungeon(
            id="den", name="Wolf Den", difficulty=2, length=6, encounter_rate=1.0,
            monster_type="Wolf", discovery_cost=20,
        ),
    ]
    return GameState(dungeons=dungeons, rng=random.Random(0))


@pytest.fixture
def exploration(state):
    return ExplorationSystem(state)


class TestAssign:
    """Tests for sending heroes out."""

    def test_assign_creates_record(self, state, exploration):
        hero = state.spawn_hero()
        dungeon = state.get_dungeon("hall")

        exploration.assign_hero_to_dungeon(hero, dungeon, 80)

        assert hero.status == HeroStatus.EXPLORING
        assert hero.dungeon_id == "hall"
        assert hero.dungeon_success_chance == 80
        assert dungeon.get_explorer_progress(hero.id).progress == 0


class TestProcessExploration:
    """Tests for the exploration phase."""

    def test_quiet_steps_then_boss(self, state, exploration):
        """Steps advance until the boss appears and combat starts."""
        hero = state.spawn_hero()
        dungeon = state.get_dungeon("hall")
        exploration.assign_hero_to_dungeon(hero, dungeon)

        exploration.process_exploration()
        exploration.process_exploration()
        assert hero.dungeon_progress == 2
        assert hero.in_combat is False

        exploration.process_exploration()
        assert hero.dungeon_progress == 3
        assert hero.in_combat is True
        assert dungeon.get_explorer_progress(hero.id).encountered_final_monster

    def test_heroes_in_combat_skipped(self, state, exploration):
        hero = state.spawn_hero()
        exploration.assign_hero_to_dungeon(hero, state.get_dungeon("den"))
        exploration.process_exploration()
        assert hero.in_combat is True

        assert exploration.process_exploration() == 0

    def test_pending_monster_resumes_combat(self, state, exploration):
        """A hero with a pending monster goes back into combat without moving."""
        hero = state.spawn_hero()
        dungeon = state.get_dungeon("den")
        exploration.assign_hero_to_dungeon(hero, dungeon)
        exploration.process_exploration()
        hero.set_combat(False)

        exploration.process_exploration()

        assert hero.in_combat is True
        assert dungeon.get_explorer_progress(hero.id).progress == 1

    def test_missing_dungeon_withdraws(self, state, exploration):
        """Heroes in an unknown dungeon return to town."""
        hero = state.spawn_hero()
        hero.set_status(HeroStatus.EXPLORING, "atlantis")

        exploration.process_exploration()

        assert hero.status == HeroStatus.IDLE
        assert hero.dungeon_id is None

    def test_missing_record_rebuilt_from_hero(self, state, exploration):
        """A lost explorer record resumes from the hero's own progress."""
        hero = state.spawn_hero()
        hero.set_status(HeroStatus.EXPLORING, "hall")
        hero.dungeon_progress = 2

        exploration.process_exploration()

        assert state.get_dungeon("hall").get_explorer_progress(hero.id).progress == 3
        assert hero.in_combat is True

    def test_defeated_boss_sends_hero_home(self, state, exploration):
        hero = state.spawn_hero()
        dungeon = state.get_dungeon("hall")
        exploration.assign_hero_to_dungeon(hero, dungeon)
        dungeon.get_explorer_progress(hero.id).final_monster_defeated = True

        exploration.process_exploration()

        assert hero.status == HeroStatus.IDLE
        assert dungeon.get_explorer_progress(hero.id) is None


class TestProcessHealing:
    """Tests for the healing phase."""

    def test_natural_healing(self, state, exploration):
        hero = state.spawn_hero()
        hero.health = 40
        hero.set_status(HeroStatus.HEALING)

        exploration.process_healing()

        assert hero.health == 41
        assert hero.status == HeroStatus.HEALING

    def test_part_healing_feeds_town(self, state, exploration):
        """One part heals five and goes to the town pool."""
        hero = state.spawn_hero()
        hero.health = 40
        hero.inventory.monster_parts = 2
        hero.set_status(HeroStatus.HEALING)

        exploration.process_healing()

        assert hero.health == 45
        assert hero.inventory.monster_parts == 1
        assert state.town.resources.monster_parts == 1

    def test_full_health_goes_idle(self, state, exploration):
        hero = state.spawn_hero()
        hero.health = hero.max_health - 1
        hero.set_status(HeroStatus.HEALING)

        exploration.process_healing()

        assert hero.status == HeroStatus.IDLE
        assert hero.is_full_health


class TestDiscoverDungeon:
    """Tests for dungeon discovery."""

    def test_discover_spends_gold(self, state, exploration):
        state.town.resources.gold = 25
        assert exploration.discover_dungeon("den") is True
        assert state.get_dungeon("den").discovered is True
        assert state.town.resources.gold == 5

    def test_not_enough_gold(self, state, exploration):
        state.town.resources.gold = 5
        assert exploration.discover_dungeon("den") is False
        assert state.get_dungeon("den").discovered is False
        assert state.town.resources.gold == 5

    def test_already_discovered(self, state, exploration):
        assert exploration.discover_dungeon("hall") is False

    def test_unknown_dungeon_warns(self, state, exploration):
        assert exploration.discover_dungeon("nowhere") is False
        assert state.events.drain_new()[-1].kind == EventKind.WARNING
