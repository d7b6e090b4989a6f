"""Tests for the tick orchestrator."""

import random
from unittest.mock import MagicMock

import pytest

from heroville.config import Settings
from heroville.core.constants import HeroStatus
from heroville.core.dungeon import Dungeon
from heroville.core.game_state import GameState, new_game
from heroville.core.monster import Monster, MonsterVariant
from heroville.game.engine import GameEngine
from heroville.game.hero_ai import HeroAI


def fixed_ai(chance=100):
    simulator = MagicMock()
    simulator.estimate_success_chance.return_value = chance
    simulator.base_seed = 7
    return HeroAI(simulator=simulator)


@pytest.fixture
def state():
    dungeon = Dungeon(
        id="hall", name="Quiet Hall", difficulty=1, length=5, encounter_rate=0.0,
        monster_type="Bat", variant=MonsterVariant("Giant", True, 1.5, 1.3), discovered=True,
    )
    return GameState(dungeons=[dungeon], rng=random.Random(0))


@pytest.fixture
def engine(state):
    return GameEngine(state, ai=fixed_ai())


class TestTick:
    """Tests for a single tick."""

    def test_tick_counter(self, engine):
        assert engine.tick_count == 0
        engine.tick()
        engine.tick()
        assert engine.tick_count == 2

    def test_events_stamped_with_tick(self, engine):
        """Events from a tick carry that tick's number."""
        engine.spawn_hero()
        engine.state.events.drain_new()

        events = engine.tick()

        assert events
        assert all(e.tick == 1 for e in events)

    def test_new_hero_shops_then_explores(self, engine, state):
        """A fresh hero shops on its first tick and heads out on the next."""
        hero = engine.spawn_hero()

        engine.tick()
        assert hero.status == HeroStatus.IDLE
        assert hero.has_shopped_for_upgrades is True

        engine.tick()
        assert hero.status == HeroStatus.EXPLORING
        assert hero.dungeon_id == "hall"
        assert hero.dungeon_success_chance == 100

    def test_healed_hero_decides_same_tick(self, engine):
        """Healing runs before decisions, and shopping after them."""
        hero = engine.spawn_hero()
        hero.health = hero.max_health - 1
        hero.set_status(HeroStatus.HEALING)

        engine.tick()

        assert hero.is_full_health
        assert hero.status == HeroStatus.IDLE
        assert hero.has_shopped_for_upgrades is True

    def test_combat_before_exploration(self, engine, state):
        """A hero winning its fight also takes a step in the same tick."""
        hero = engine.spawn_hero()
        dungeon = state.get_dungeon("hall")
        engine.exploration.assign_hero_to_dungeon(hero, dungeon)
        dungeon.get_explorer_progress(hero.id).current_monster = Monster(
            name="Bat", health=1, max_health=1, level=1,
        )
        hero.set_combat(True)

        engine.tick()

        assert hero.experience == 10
        assert dungeon.get_explorer_progress(hero.id).progress == 1


class TestExplorationScenario:
    """End-to-end walks through a quiet dungeon."""

    def test_quiet_dungeon_boss_on_fifth_step(self, engine, state):
        """Four quiet steps, then the boss at the end."""
        hero = engine.spawn_hero()
        dungeon = state.get_dungeon("hall")
        engine.exploration.assign_hero_to_dungeon(hero, dungeon)

        for step in range(1, 5):
            engine.tick()
            assert hero.dungeon_progress == step
            assert hero.in_combat is False

        engine.tick()
        record = dungeon.get_explorer_progress(hero.id)
        assert hero.dungeon_progress == 5
        assert hero.in_combat is True
        assert record.current_monster.name == "Giant Bat"

    def test_two_heroes_independent(self, engine, state):
        """Heroes in one dungeon keep separate progress."""
        dungeon = state.get_dungeon("hall")
        a = engine.spawn_hero()
        engine.exploration.assign_hero_to_dungeon(a, dungeon)
        engine.tick()
        engine.tick()
        b = engine.spawn_hero()
        engine.exploration.assign_hero_to_dungeon(b, dungeon)

        engine.tick()

        assert dungeon.get_explorer_progress(a.id).progress == 3
        assert dungeon.get_explorer_progress(b.id).progress == 1

    def test_run_collects_events(self, engine):
        engine.spawn_hero()
        engine.state.events.drain_new()
        events = engine.run(3)
        assert engine.tick_count == 3
        assert {e.tick for e in events} <= {1, 2, 3}


class TestPlayerActions:
    """Tests for actions between ticks."""

    def test_gather_and_upgrade_tent(self):
        engine = GameEngine(new_game(seed=1), ai=fixed_ai())
        for _ in range(5):
            engine.gather_materials()

        assert engine.upgrade_building("tent") is True
        assert len(engine.state.heroes) == 1

    def test_discover_free_cave(self):
        """The starting cave costs nothing to discover."""
        engine = GameEngine(new_game(seed=1), ai=fixed_ai())
        assert engine.discover_dungeon("cave") is True
        assert engine.state.get_dungeon("cave").discovered

    def test_estimate(self, state):
        engine = GameEngine(state, ai=fixed_ai())
        hero = engine.spawn_hero()
        chance = engine.estimate(hero.id, "hall", runs=20)
        assert 0 <= chance <= 100

    def test_estimate_missing(self, engine):
        assert engine.estimate("nobody", "hall") is None

    def test_from_settings(self, state):
        engine = GameEngine.from_settings(state, Settings(SIMULATION_RUNS=25, SUCCESS_THRESHOLD=60))
        assert engine.ai.simulator.runs == 25
        assert engine.ai.success_threshold == 60


class TestReproducibility:
    """Tests for seeded sessions."""

    @staticmethod
    def _play(seed, ticks=150):
        state = new_game(seed=seed)
        for dungeon in state.dungeons[:3]:
            dungeon.discovered = True
        state.spawn_hero()
        state.spawn_hero()
        engine = GameEngine.from_settings(state, Settings(SIMULATION_RUNS=50))
        engine.run(ticks)
        return [
            (
                h.name, h.level, h.experience, h.health, h.status, h.dungeon_id,
                h.dungeon_progress, h.dungeon_success_chance, h.inventory.gold,
            )
            for h in state.heroes
        ]

    def test_same_seed_same_outcome(self):
        """Two sessions with one seed play out identically, estimates included."""
        assert self._play(5) == self._play(5)

    def test_default_estimator_is_seeded(self):
        state = new_game(seed=5)
        engine = GameEngine(state)
        assert engine.ai.simulator.base_seed is not None
