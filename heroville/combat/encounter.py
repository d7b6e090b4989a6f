"""Live combat for Heroville.

Every hero with a pending monster owns one encounter. ``Encounter`` is the
state machine for that fight and advances exactly one round per ``step()``;
``CombatSystem`` steps every active encounter once per tick and applies the
consequences (rewards, level-ups, unlocks, returning heroes to town).
"""

import logging
from enum import Enum
from typing import Optional, Sequence, TYPE_CHECKING

from ..core.constants import BLACKSMITH_UNLOCK_LEVEL
from ..core.events import EventKind
from .resolver import HEAL, RoundResult, resolve_round
from .rewards import Reward, compute_reward

if TYPE_CHECKING:
    from ..core.dungeon import Dungeon, ExplorerProgress
    from ..core.game_state import GameState
    from ..core.hero import Hero
    from ..data.models import ConsumableTemplate

logger = logging.getLogger(__name__)


class EncounterState(Enum):
    """Lifecycle of a single fight."""
    ENGAGED = "engaged"
    MONSTER_DEFEATED = "monster_defeated"
    HERO_DEFEATED = "hero_defeated"


class Encounter:
    """
    One hero fighting one monster inside a dungeon.

    The round counter lives on the hero's ExplorerProgress, so an encounter
    can be rebuilt each tick from persistent state and resume where it was.
    """

    def __init__(
        self,
        hero: "Hero",
        dungeon: "Dungeon",
        progress: "ExplorerProgress",
    ):
        self.hero = hero
        self.dungeon = dungeon
        self.progress = progress
        self.monster = progress.current_monster
        self.state = EncounterState.ENGAGED
        self.last_result: Optional[RoundResult] = None

    @property
    def round(self) -> int:
        return self.progress.combat_round

    @property
    def is_first_round(self) -> bool:
        return self.progress.combat_round == 0

    @property
    def is_over(self) -> bool:
        return self.state is not EncounterState.ENGAGED

    def step(self, state: "GameState", catalog: Optional[Sequence["ConsumableTemplate"]] = None) -> RoundResult:
        """Advance the fight by exactly one round, logging what happened."""
        hero, monster, events = self.hero, self.monster, state.events
        ids = {"hero_id": hero.id, "dungeon_id": self.dungeon.id}

        if self.is_first_round:
            events.emit(EventKind.ENGAGE, f"{hero.name} engages in combat with a {monster.name}!", **ids)
        self.progress.combat_round += 1

        result = resolve_round(hero, monster, state.rng, catalog)
        self.last_result = result

        if result.action == HEAL:
            events.emit(
                EventKind.POTION,
                f"{hero.name} uses a potion to heal for {result.healed} health!",
                **ids,
            )
        else:
            events.emit(
                EventKind.ROUND,
                f"Round {self.round}: {hero.name} hits the {monster.name} "
                f"for {result.damage_dealt} damage.",
                **ids,
            )

        if result.monster_defeated:
            self.state = EncounterState.MONSTER_DEFEATED
            return result

        events.emit(
            EventKind.ROUND,
            f"Round {self.round}: The {monster.name} hits {hero.name} "
            f"for {result.monster_damage} damage.",
            **ids,
        )
        if result.hero_defeated:
            self.state = EncounterState.HERO_DEFEATED
        return result


class CombatSystem:
    """Advances every active encounter one round per tick."""

    def __init__(self, state: "GameState"):
        self.state = state

    def process_combat_rounds(self) -> int:
        """
        Step the encounter of every hero flagged in combat.

        Returns:
            Number of encounters that were advanced.
        """
        advanced = 0
        for hero in self.state.heroes_in_combat():
            encounter = self._get_encounter(hero)
            if encounter is None:
                continue
            encounter.step(self.state)
            if encounter.state is EncounterState.MONSTER_DEFEATED:
                self.handle_monster_defeat(encounter)
            elif encounter.state is EncounterState.HERO_DEFEATED:
                self.handle_hero_defeat(encounter)
            advanced += 1
        return advanced

    def _get_encounter(self, hero: "Hero") -> Optional[Encounter]:
        dungeon = self.state.get_dungeon(hero.dungeon_id)
        progress = dungeon.get_explorer_progress(hero.id) if dungeon else None
        if progress is None or progress.current_monster is None:
            logger.warning(
                "Hero %s flagged in combat without a monster (dungeon=%s); releasing",
                hero.id,
                hero.dungeon_id,
            )
            hero.set_combat(False)
            return None
        return Encounter(hero, dungeon, progress)

    def handle_monster_defeat(self, encounter: Encounter) -> Reward:
        """Close a won fight: wear the weapon, pay out, level up and unlock."""
        state, hero, dungeon, monster = self.state, encounter.hero, encounter.dungeon, encounter.monster
        town, events = state.town, state.events
        ids = {"hero_id": hero.id, "dungeon_id": dungeon.id}

        hero.set_combat(False)
        dungeon.complete_encounter(hero.id)

        broken = hero.wear_weapon()
        if broken is not None:
            events.emit(EventKind.WEAPON_BREAK, f"{hero.name}'s {broken.name} breaks!", **ids)

        reward = compute_reward(monster, dungeon, state.boss_reward_scheme)
        if hero.award_loot(reward.gold, reward.monster_parts):
            town.unlock_apothecary()

        events.emit(EventKind.MONSTER_DEFEATED, f"{hero.name} defeats the {monster.name}!", **ids)
        events.emit(EventKind.REWARD, reward.summary(), **ids)

        previous_level = hero.level
        if hero.add_experience(reward.experience):
            events.emit(
                EventKind.LEVEL_UP,
                f"{hero.name} has leveled up to level {hero.level}!",
                hero_id=hero.id,
            )
            if previous_level < BLACKSMITH_UNLOCK_LEVEL <= hero.level:
                town.unlock_blacksmith()

        if reward.is_boss:
            dungeon.complete_dungeon()
            hero.reset_dungeon_progress("victory", dungeon)
            events.emit(
                EventKind.RETURN_TO_TOWN,
                f"{hero.name} has conquered {dungeon.name} and returns to town victorious!",
                **ids,
            )
        return reward

    def handle_hero_defeat(self, encounter: Encounter) -> None:
        """A fallen hero loses its carried loot and experience and returns to town."""
        hero, dungeon = encounter.hero, encounter.dungeon
        hero.reset_dungeon_progress("defeat", dungeon)
        self.state.events.emit(
            EventKind.HERO_DEFEATED,
            f"{hero.name} was defeated by the {encounter.monster.name} "
            f"and returns to town empty-handed.",
            hero_id=hero.id,
            dungeon_id=dungeon.id,
        )
