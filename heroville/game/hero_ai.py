"""Decision logic for idle Heroville heroes.

Idle heroes heal when hurt, shop once per outing, then head for the hardest
dungeon they are likely to clear.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from heroville.combat.simulation import DungeonSimulator
from heroville.core.constants import HeroStatus, SUCCESS_THRESHOLD
from heroville.core.events import EventKind

if TYPE_CHECKING:
    from heroville.core.dungeon import Dungeon
    from heroville.core.exploration import ExplorationSystem
    from heroville.core.game_state import GameState
    from heroville.core.hero import Hero

logger = logging.getLogger(__name__)


@dataclass
class HeroDecision:
    """Next action for an idle hero."""

    action: str  # One of the HeroStatus values
    dungeon_id: Optional[str] = None
    success_chance: Optional[int] = None
    estimates: dict[str, int] = field(default_factory=dict)


class HeroAI:
    """AI controller shared by every hero in a session."""

    def __init__(
        self,
        simulator: Optional[DungeonSimulator] = None,
        success_threshold: int = SUCCESS_THRESHOLD,
    ):
        """
        Initialize hero AI.

        Args:
            simulator: Outcome estimator (a default 1000-run simulator if None).
            success_threshold: Minimum estimated clear chance, in percent,
                for a dungeon to count as safe.
        """
        self.simulator = simulator or DungeonSimulator()
        self.success_threshold = success_threshold

    def estimate_dungeons(self, hero: "Hero", state: "GameState") -> dict[str, int]:
        """Estimated clear chance for every discovered dungeon, in dungeon order."""
        return {
            dungeon.id: self.simulator.estimate_success_chance(hero, dungeon)
            for dungeon in state.discovered_dungeons()
        }

    def select_best_dungeon(
        self, state: "GameState", estimates: dict[str, int]
    ) -> Optional["Dungeon"]:
        """
        Hardest dungeon at or above the threshold; otherwise the highest
        nonzero estimate. Ties go to the first dungeon in order.
        """
        candidates = [d for d in state.discovered_dungeons() if d.id in estimates]

        best: Optional["Dungeon"] = None
        for dungeon in candidates:
            if estimates[dungeon.id] < self.success_threshold:
                continue
            if best is None or dungeon.difficulty > best.difficulty:
                best = dungeon
        if best is not None:
            return best

        best_chance = 0
        for dungeon in candidates:
            if estimates[dungeon.id] > best_chance:
                best, best_chance = dungeon, estimates[dungeon.id]
        return best

    def decide_next_action(self, hero: "Hero", state: "GameState") -> HeroDecision:
        """
        Decide what an idle hero does next. Does not mutate the hero.
        """
        if hero.health < hero.max_health:
            return HeroDecision(action=HeroStatus.HEALING)

        estimates = self.estimate_dungeons(hero, state)
        best = self.select_best_dungeon(state, estimates)
        chance = estimates[best.id] if best is not None else None
        dungeon_id = best.id if best is not None else None

        if not hero.has_shopped_for_upgrades:
            return HeroDecision(HeroStatus.SHOPPING, dungeon_id, chance, estimates)
        if best is not None:
            return HeroDecision(HeroStatus.EXPLORING, dungeon_id, chance, estimates)
        return HeroDecision(HeroStatus.IDLE, None, None, estimates)

    def apply_decision(
        self,
        hero: "Hero",
        decision: HeroDecision,
        state: "GameState",
        exploration: "ExplorationSystem",
    ) -> None:
        """Carry out a decision made by ``decide_next_action``."""
        if decision.action == HeroStatus.IDLE:
            return

        if decision.action == HeroStatus.EXPLORING:
            dungeon = state.get_dungeon(decision.dungeon_id)
            exploration.assign_hero_to_dungeon(hero, dungeon, decision.success_chance)
            message = f"{hero.name} decided to explore {dungeon.name}"
        elif decision.action == HeroStatus.SHOPPING:
            hero.set_status(HeroStatus.SHOPPING)
            hero.next_shopping_dungeon_id = decision.dungeon_id
            message = f"{hero.name} decided to go shopping"
        else:
            hero.set_status(decision.action)
            message = f"{hero.name} decided to rest and heal"

        state.events.emit(
            EventKind.DECISION, message, hero_id=hero.id, dungeon_id=decision.dungeon_id
        )

    def take_turn(
        self, hero: "Hero", state: "GameState", exploration: "ExplorationSystem"
    ) -> HeroDecision:
        """Decide and act for one idle hero."""
        decision = self.decide_next_action(hero, state)
        logger.debug("%s -> %s (%s)", hero.name, decision.action, decision.dungeon_id)
        self.apply_decision(hero, decision, state, exploration)
        return decision
