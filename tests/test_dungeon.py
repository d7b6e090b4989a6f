"""Tests for per-explorer dungeon progress."""

import random

import pytest

from heroville.core.dungeon import Dungeon, ExplorerProgress
from heroville.core.monster import MonsterVariant


GIANT = MonsterVariant("Giant", True, 1.5, 1.3)


@pytest.fixture
def quiet_dungeon():
    """Five steps, no random encounters."""
    return Dungeon(
        id="hall",
        name="Quiet Hall",
        difficulty=1,
        length=5,
        encounter_rate=0.0,
        monster_type="Bat",
        variant=GIANT,
    )


@pytest.fixture
def busy_dungeon():
    """Every step has an encounter."""
    return Dungeon(
        id="den",
        name="Wolf Den",
        difficulty=2,
        length=4,
        encounter_rate=1.0,
        monster_type="Wolf",
        variant=GIANT,
    )


class TestExplorerBookkeeping:
    """Tests for adding, reading and removing explorers."""

    def test_add_explorer(self, quiet_dungeon):
        """A new explorer starts with a clean record."""
        record = quiet_dungeon.add_explorer("h1", 2)

        assert record.progress == 2
        assert record.current_monster is None
        assert record.encountered_final_monster is False
        assert record.final_monster_defeated is False
        assert quiet_dungeon.get_explorer_progress("h1") is record

    def test_add_existing_explorer_is_noop(self, quiet_dungeon):
        """Adding a hero twice keeps the first record untouched."""
        first = quiet_dungeon.add_explorer("h1", 3)
        second = quiet_dungeon.add_explorer("h1", 0)

        assert second is first
        assert first.progress == 3
        assert quiet_dungeon.explorer_count() == 1

    def test_remove_explorer(self, quiet_dungeon):
        """Removed explorers are gone entirely."""
        quiet_dungeon.add_explorer("h1")
        quiet_dungeon.remove_explorer("h1")
        assert quiet_dungeon.get_explorer_progress("h1") is None
        assert quiet_dungeon.explorer_count() == 0

    def test_missing_explorer(self, quiet_dungeon):
        """Unknown heroes report not-found."""
        assert quiet_dungeon.get_explorer_progress("ghost") is None
        assert quiet_dungeon.remove_explorer("ghost") is None

    def test_random_variant_when_unconfigured(self):
        """Dungeons without a configured variant get one at construction."""
        dungeon = Dungeon(id="x", name="X")
        assert dungeon.variant is not None


class TestAdvanceExplorer:
    """Tests for the dungeon step algorithm."""

    def test_unknown_hero_fails(self, quiet_dungeon):
        """Advancing an untracked hero reports failure."""
        result = quiet_dungeon.advance_explorer("ghost")
        assert result.success is False

    def test_no_encounter_steps_then_boss(self, quiet_dungeon):
        """With encounter rate 0, steps are quiet until the boss at the end."""
        quiet_dungeon.add_explorer("h1")
        rng = random.Random(1)

        for step in range(1, 5):
            result = quiet_dungeon.advance_explorer("h1", rng)
            assert result.success is True
            assert result.encounter is False
            assert quiet_dungeon.get_explorer_progress("h1").progress == step

        result = quiet_dungeon.advance_explorer("h1", rng)
        record = quiet_dungeon.get_explorer_progress("h1")

        assert result.encounter is True
        assert result.at_final_monster is True
        assert result.reached_end is True
        assert result.monster.is_variant is True
        assert result.monster.name == "Giant Bat"
        assert record.progress == 5
        assert record.encountered_final_monster is True

    def test_progress_never_exceeds_length(self, quiet_dungeon):
        """Extra calls never push progress past the length."""
        quiet_dungeon.add_explorer("h1")
        for _ in range(20):
            quiet_dungeon.advance_explorer("h1")
        assert quiet_dungeon.get_explorer_progress("h1").progress == quiet_dungeon.length

    def test_boss_repoll_is_idempotent(self, quiet_dungeon):
        """Polling again while the boss is pending changes nothing."""
        quiet_dungeon.add_explorer("h1", quiet_dungeon.length - 1)
        first = quiet_dungeon.advance_explorer("h1")
        boss = first.monster

        again = quiet_dungeon.advance_explorer("h1")
        record = quiet_dungeon.get_explorer_progress("h1")

        assert again.encounter is True
        assert again.monster is boss
        assert again.message == "Already at the end of the dungeon"
        assert record.progress == quiet_dungeon.length
        assert record.current_monster is boss

    def test_at_end_without_monster_spawns_boss(self, quiet_dungeon):
        """A hero placed at the end gets the boss on the next call."""
        quiet_dungeon.add_explorer("h1", quiet_dungeon.length)
        result = quiet_dungeon.advance_explorer("h1")
        assert result.monster.is_variant is True

    def test_regular_encounter(self, busy_dungeon):
        """Encounter rate 1 always spawns a regular monster before the end."""
        busy_dungeon.add_explorer("h1")
        result = busy_dungeon.advance_explorer("h1", random.Random(0))

        assert result.encounter is True
        assert result.at_final_monster is False
        assert result.monster.is_variant is False
        assert result.monster.name == "Wolf"
        assert result.monster.level == busy_dungeon.difficulty

    def test_only_bosses_after_end(self, busy_dungeon):
        """Once at the end, only the boss is produced."""
        busy_dungeon.add_explorer("h1", busy_dungeon.length)
        for _ in range(5):
            result = busy_dungeon.advance_explorer("h1")
            assert result.monster.is_variant is True

    def test_boss_level(self, quiet_dungeon):
        """Bosses fight at 1.5x dungeon difficulty."""
        assert quiet_dungeon.boss_level == 1.5
        assert quiet_dungeon.create_final_monster().level == 1.5


class TestCompleteEncounter:
    """Tests for closing encounters."""

    def test_regular_completion(self, busy_dungeon):
        """Completing a regular fight clears the monster only."""
        busy_dungeon.add_explorer("h1")
        busy_dungeon.advance_explorer("h1")
        record = busy_dungeon.get_explorer_progress("h1")
        record.combat_round = 3

        monster = busy_dungeon.complete_encounter("h1")

        assert monster is not None
        assert record.current_monster is None
        assert record.combat_round == 0
        assert record.final_monster_defeated is False

    def test_boss_completion_marks_defeated(self, quiet_dungeon):
        """Completing the boss fight sets the defeated flag."""
        quiet_dungeon.add_explorer("h1", quiet_dungeon.length)
        quiet_dungeon.advance_explorer("h1")

        quiet_dungeon.complete_encounter("h1")

        assert quiet_dungeon.get_explorer_progress("h1").final_monster_defeated is True

    def test_complete_dungeon(self, quiet_dungeon):
        """Completion is a flag; the dungeon stays explorable."""
        quiet_dungeon.complete_dungeon()
        assert quiet_dungeon.completed is True
        quiet_dungeon.add_explorer("h2")
        assert quiet_dungeon.advance_explorer("h2").success is True


class TestExplorerIndependence:
    """Two heroes in one dungeon never share state."""

    def test_two_heroes_independent(self, busy_dungeon):
        """Advancing one hero leaves the other's record untouched."""
        busy_dungeon.add_explorer("a")
        busy_dungeon.add_explorer("b")
        before = ExplorerProgress(
            progress=busy_dungeon.get_explorer_progress("b").progress
        )

        for _ in range(3):
            busy_dungeon.advance_explorer("a")
            busy_dungeon.complete_encounter("a")

        record_a = busy_dungeon.get_explorer_progress("a")
        record_b = busy_dungeon.get_explorer_progress("b")

        assert record_a is not record_b
        assert record_a.progress == 3
        assert record_b.progress == before.progress
        assert record_b.current_monster is None
