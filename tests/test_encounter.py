"""Tests for live encounters and the combat phase."""

import random

import pytest

from heroville.combat.encounter import CombatSystem, Encounter, EncounterState
from heroville.core.constants import HeroStatus
from heroville.core.dungeon import Dungeon
from heroville.core.events import EventKind
from heroville.core.exploration import ExplorationSystem
from heroville.core.game_state import GameState
from heroville.core.hero import Weapon
from heroville.core.monster import Monster, MonsterVariant


GIANT = MonsterVariant("Giant", True, 1.5, 1.3)


@pytest.fixture
def state():
    """A session with one difficulty 2 dungeon."""
    dungeon = Dungeon(
        id="den", name="Wolf Den", difficulty=2, length=5,
        encounter_rate=0.0, monster_type="Wolf", variant=GIANT, discovered=True,
    )
    return GameState(dungeons=[dungeon], rng=random.Random(0))


@pytest.fixture
def dungeon(state):
    return state.dungeons[0]


@pytest.fixture
def combat(state):
    return CombatSystem(state)


def put_in_combat(state, hero, monster):
    """Place a hero mid-dungeon facing ``monster``."""
    dungeon = state.dungeons[0]
    ExplorationSystem(state).assign_hero_to_dungeon(hero, dungeon)
    progress = dungeon.get_explorer_progress(hero.id)
    progress.current_monster = monster
    if monster.is_variant:
        progress.progress = dungeon.length
        progress.encountered_final_monster = True
    hero.set_combat(True)
    return progress


def weak_monster(level=2):
    return Monster(name="Wolf", health=1, max_health=1, min_damage=1, max_damage=1, level=level)


def kinds(state):
    return [e.kind for e in state.events.drain_new()]


class TestEncounterStep:
    """Tests for the per-round state machine."""

    def test_first_round_engages(self, state, dungeon):
        """The opening round announces the fight and counts the round."""
        hero = state.spawn_hero()
        progress = put_in_combat(state, hero, Monster(
            name="Wolf", health=30, max_health=30, min_damage=1, max_damage=1, level=2,
        ))
        state.events.drain_new()

        encounter = Encounter(hero, dungeon, progress)
        encounter.step(state)

        assert encounter.state is EncounterState.ENGAGED
        assert progress.combat_round == 1
        assert kinds(state)[0] == EventKind.ENGAGE

    def test_later_rounds_do_not_reengage(self, state, dungeon):
        """Only the first round emits the engage event."""
        hero = state.spawn_hero()
        progress = put_in_combat(state, hero, Monster(
            name="Wolf", health=30, max_health=30, min_damage=1, max_damage=1, level=2,
        ))
        encounter = Encounter(hero, dungeon, progress)
        encounter.step(state)
        state.events.drain_new()

        encounter.step(state)

        assert EventKind.ENGAGE not in kinds(state)
        assert progress.combat_round == 2

    def test_hero_defeated_state(self, state, dungeon):
        """A lethal hit ends the encounter in defeat."""
        hero = state.spawn_hero()
        hero.health = 1
        progress = put_in_combat(state, hero, Monster(
            name="Wolf", health=30, max_health=30, min_damage=1, max_damage=1, level=2,
        ))

        encounter = Encounter(hero, dungeon, progress)
        encounter.step(state)

        assert encounter.state is EncounterState.HERO_DEFEATED
        assert encounter.is_over


class TestMonsterDefeat:
    """Tests for closing a won fight."""

    def test_regular_reward_and_apothecary_unlock(self, state, combat, dungeon):
        """First parts unlock the apothecary; the hero keeps exploring."""
        hero = state.spawn_hero()
        put_in_combat(state, hero, weak_monster())

        assert combat.process_combat_rounds() == 1

        assert hero.in_combat is False
        assert hero.status == HeroStatus.EXPLORING
        assert hero.experience == 20
        assert hero.inventory.monster_parts == 2
        assert hero.inventory.gold == 0
        assert "apothecary" in state.town.buildings
        assert dungeon.get_explorer_progress(hero.id).current_monster is None

        emitted = kinds(state)
        assert EventKind.MONSTER_DEFEATED in emitted
        assert EventKind.REWARD in emitted
        assert EventKind.BUILDING_UNLOCKED in emitted

    def test_level_two_unlocks_blacksmith(self, state, combat):
        """Crossing level 2 unlocks the blacksmith once."""
        hero = state.spawn_hero()
        hero.experience = 90
        put_in_combat(state, hero, weak_monster())

        combat.process_combat_rounds()

        assert hero.level == 2
        assert "blacksmith" in state.town.buildings
        assert EventKind.LEVEL_UP in kinds(state)

    def test_weapon_breaks(self, state, combat):
        """A weapon on its last point breaks after the win."""
        hero = state.spawn_hero()
        hero.equip(Weapon(
            id="dagger", name="Dagger", min_damage=1, max_damage=3,
            durability=1, max_durability=20, sale_price=3,
        ))
        put_in_combat(state, hero, weak_monster())

        combat.process_combat_rounds()

        assert hero.weapon is None
        assert EventKind.WEAPON_BREAK in kinds(state)

    def test_boss_victory(self, state, combat, dungeon):
        """Beating the boss completes the dungeon and brings the hero home."""
        hero = state.spawn_hero()
        boss = Monster(
            name="Giant Wolf", health=1, max_health=1, min_damage=1, max_damage=1,
            level=3, is_variant=True,
        )
        put_in_combat(state, hero, boss)

        combat.process_combat_rounds()

        assert dungeon.completed is True
        assert dungeon.get_explorer_progress(hero.id) is None
        assert hero.status == HeroStatus.IDLE
        assert hero.dungeon_id is None
        assert hero.inventory.gold == 4
        assert hero.experience == 40
        assert hero.inventory.monster_parts == 0
        assert EventKind.RETURN_TO_TOWN in kinds(state)

    def test_boss_victory_legacy_scheme(self, state, combat):
        """The legacy scheme pays 50 xp per difficulty and difficulty gold."""
        state.boss_reward_scheme = "legacy"
        hero = state.spawn_hero()
        boss = Monster(
            name="Giant Wolf", health=1, max_health=1, level=3, is_variant=True,
        )
        put_in_combat(state, hero, boss)

        combat.process_combat_rounds()

        assert hero.inventory.gold == 2
        assert hero.level == 2
        assert hero.experience == 0


class TestHeroDefeat:
    """Tests for losing a fight."""

    def test_defeat_resets_hero(self, state, combat, dungeon):
        """A fallen hero returns idle with nothing."""
        hero = state.spawn_hero()
        hero.health = 1
        hero.experience = 50
        hero.inventory.gold = 7
        put_in_combat(state, hero, Monster(
            name="Wolf", health=30, max_health=30, min_damage=1, max_damage=1, level=2,
        ))

        combat.process_combat_rounds()

        assert hero.status == HeroStatus.IDLE
        assert hero.health == 0
        assert hero.experience == 0
        assert hero.inventory.gold == 0
        assert dungeon.get_explorer_progress(hero.id) is None
        assert EventKind.HERO_DEFEATED in kinds(state)


class TestCombatGuard:
    """Tests for inconsistent combat flags."""

    def test_combat_without_monster_is_released(self, state, combat, dungeon):
        """A hero flagged in combat with nothing to fight leaves combat."""
        hero = state.spawn_hero()
        ExplorationSystem(state).assign_hero_to_dungeon(hero, dungeon)
        hero.set_combat(True)

        assert combat.process_combat_rounds() == 0
        assert hero.in_combat is False
        assert hero.status == HeroStatus.EXPLORING

    def test_one_round_per_tick(self, state, combat):
        """Each hero advances exactly one round per call."""
        a = state.spawn_hero()
        b = state.spawn_hero()
        tough = dict(name="Wolf", health=40, max_health=40, min_damage=1, max_damage=1, level=2)
        pa = put_in_combat(state, a, Monster(**tough))
        pb = put_in_combat(state, b, Monster(**tough))

        assert combat.process_combat_rounds() == 2
        assert pa.combat_round == 1
        assert pb.combat_round == 1
