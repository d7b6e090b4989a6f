"""Exploration system for Heroville.

Moves exploring heroes through their dungeons, heals heroes resting in
town, assigns heroes to dungeons and handles dungeon discovery.
"""

import logging
from typing import Optional, TYPE_CHECKING

from .constants import (
    HeroStatus,
    MONSTER_PARTS_PER_HEAL_TICK,
    NATURAL_HEAL_PER_TICK,
)
from .events import EventKind

if TYPE_CHECKING:
    from .dungeon import Dungeon
    from .game_state import GameState
    from .hero import Hero

logger = logging.getLogger(__name__)

# Progress narration cadence, in dungeon steps
PROGRESS_REPORT_INTERVAL = 5


class ExplorationSystem:
    """Dungeon exploration, town healing, assignment and discovery."""

    def __init__(self, state: "GameState"):
        self.state = state

    # ------------------------------------------------------------------
    # Per-tick phases
    # ------------------------------------------------------------------

    def process_exploration(self) -> int:
        """
        Take one exploration step for every exploring hero not in combat.

        Returns:
            Number of heroes processed.
        """
        explorers = [
            h for h in self.state.heroes_with_status(HeroStatus.EXPLORING) if not h.in_combat
        ]
        for hero in explorers:
            self._explore(hero)
        return len(explorers)

    def _explore(self, hero: "Hero") -> None:
        state, events = self.state, self.state.events
        dungeon = state.get_dungeon(hero.dungeon_id)
        if dungeon is None:
            logger.warning(
                "Hero %s exploring missing dungeon %s; returning to town", hero.id, hero.dungeon_id
            )
            hero.reset_dungeon_progress("withdrawal")
            return
        ids = {"hero_id": hero.id, "dungeon_id": dungeon.id}

        progress = dungeon.get_explorer_progress(hero.id)
        if progress is None:
            progress = dungeon.add_explorer(hero.id, hero.dungeon_progress)

        if progress.current_monster is not None:
            hero.set_combat(True)
            if progress.encountered_final_monster:
                events.emit(
                    EventKind.EXPLORATION,
                    f"{hero.name} prepares to fight the final boss in {dungeon.name}!",
                    **ids,
                )
            else:
                events.emit(
                    EventKind.EXPLORATION,
                    f"{hero.name} faces a {progress.current_monster.name}!",
                    **ids,
                )
            return

        if progress.final_monster_defeated:
            hero.reset_dungeon_progress("victory", dungeon)
            events.emit(
                EventKind.RETURN_TO_TOWN,
                f"{hero.name} returns to town from {dungeon.name}.",
                **ids,
            )
            return

        result = dungeon.advance_explorer(hero.id, state.rng)
        hero.dungeon_progress = progress.progress

        if result.at_final_monster:
            hero.set_combat(True)
            events.emit(
                EventKind.EXPLORATION,
                f"{hero.name} has reached the end of {dungeon.name} "
                f"and encounters the final boss, the {result.monster.name}!",
                **ids,
            )
        elif result.encounter:
            hero.set_combat(True)
            events.emit(
                EventKind.EXPLORATION,
                f"{hero.name} encounters a {result.monster.name} in {dungeon.name}!",
                **ids,
            )
        elif progress.progress % PROGRESS_REPORT_INTERVAL == 0:
            events.emit(
                EventKind.EXPLORATION,
                f"{hero.name} advances through {dungeon.name} "
                f"({progress.progress}/{dungeon.length}).",
                **ids,
            )

    def process_healing(self) -> int:
        """
        Heal every resting hero by one step.

        A hero carrying monster parts spends one to heal quickly (the part
        goes to the town pool); otherwise it heals naturally.

        Returns:
            Number of heroes processed.
        """
        state, events = self.state, self.state.events
        healing = state.heroes_with_status(HeroStatus.HEALING)
        for hero in healing:
            if hero.inventory.monster_parts > 0:
                hero.spend_monster_parts_to_heal(MONSTER_PARTS_PER_HEAL_TICK, state.town)
                events.emit(
                    EventKind.HEALING,
                    f"{hero.name} spends 1 monster part to heal quickly.",
                    hero_id=hero.id,
                )
            else:
                hero.heal(NATURAL_HEAL_PER_TICK)

            if hero.is_full_health:
                hero.set_status(HeroStatus.IDLE)
                events.emit(
                    EventKind.HEALING,
                    f"{hero.name} has fully recovered and is ready for adventure!",
                    hero_id=hero.id,
                )
        return len(healing)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def assign_hero_to_dungeon(
        self,
        hero: "Hero",
        dungeon: "Dungeon",
        success_chance: Optional[int] = None,
    ) -> None:
        """Send a hero into a dungeon, reusing its progress record when present."""
        hero.set_status(HeroStatus.EXPLORING, dungeon.id)
        if dungeon.get_explorer_progress(hero.id) is None:
            dungeon.add_explorer(hero.id, 0)
        hero.dungeon_progress = 0
        hero.dungeon_success_chance = success_chance
        self.state.events.emit(
            EventKind.DUNGEON_ASSIGNED,
            f"{hero.name} is now exploring {dungeon.name}.",
            hero_id=hero.id,
            dungeon_id=dungeon.id,
        )

    def discover_dungeon(self, dungeon_id: str) -> bool:
        """
        Spend town gold to reveal a dungeon.

        Returns:
            True if the dungeon was discovered by this call.
        """
        state, events = self.state, self.state.events
        dungeon = state.require_dungeon(dungeon_id)
        if dungeon is None:
            return False

        if dungeon.discovered:
            events.emit(
                EventKind.DUNGEON_DISCOVERED,
                f"The {dungeon.name} has already been discovered.",
                dungeon_id=dungeon.id,
            )
            return False

        resources = state.town.resources
        if resources.gold < dungeon.discovery_cost:
            events.emit(
                EventKind.RESOURCES,
                f"Not enough gold to discover this location. Need {dungeon.discovery_cost} gold.",
                dungeon_id=dungeon.id,
            )
            return False

        resources.gold -= dungeon.discovery_cost
        dungeon.discovered = True
        events.emit(
            EventKind.DUNGEON_DISCOVERED,
            f"Your scouts have discovered the {dungeon.name}!",
            dungeon_id=dungeon.id,
        )
        return True
