"""Tick orchestrator for Heroville.

``GameEngine.tick()`` is the whole simulation step. Phases run as batches in
a fixed order (combat, exploration, healing, idle decisions, shopping) and
each phase picks its heroes by status at the moment the phase starts.
"""

import logging
from typing import Optional

from heroville.combat.encounter import CombatSystem
from heroville.combat.simulation import DungeonSimulator
from heroville.core.constants import HeroStatus
from heroville.core.events import GameEvent
from heroville.core.exploration import ExplorationSystem
from heroville.core.game_state import GameState
from heroville.core.hero import Hero
from heroville.core.shopping import ShoppingSystem

from .hero_ai import HeroAI, HeroDecision

logger = logging.getLogger(__name__)


class GameEngine:
    """
    Drives one game session.

    Usage:
        engine = GameEngine(new_game(seed=1))
        engine.state.spawn_hero()
        events = engine.tick()
    """

    def __init__(self, state: GameState, ai: Optional[HeroAI] = None):
        self.state = state
        self.ai = ai or HeroAI(simulator=DungeonSimulator(seed=self._simulation_seed(state)))
        self.combat = CombatSystem(state)
        self.exploration = ExplorationSystem(state)
        self.shopping = ShoppingSystem(state)

    @classmethod
    def from_settings(cls, state: GameState, settings) -> "GameEngine":
        """Build an engine whose hero AI follows the configured estimator settings."""
        simulator = DungeonSimulator(
            runs=settings.SIMULATION_RUNS, seed=cls._simulation_seed(state)
        )
        ai = HeroAI(simulator=simulator, success_threshold=settings.SUCCESS_THRESHOLD)
        return cls(state, ai)

    @staticmethod
    def _simulation_seed(state: GameState) -> int:
        """Estimator seed drawn from the session rng."""
        return state.rng.randrange(2**31)

    @property
    def tick_count(self) -> int:
        return self.state.tick

    def tick(self) -> list[GameEvent]:
        """
        Advance the simulation by one tick.

        Returns:
            Events emitted during this tick, oldest first.
        """
        self.state.events.tick += 1

        self.combat.process_combat_rounds()
        self.exploration.process_exploration()
        self.exploration.process_healing()
        self.process_hero_decisions()
        self.shopping.process_shopping()

        events = self.state.events.drain_new()
        logger.debug("Tick %d: %d events", self.state.tick, len(events))
        return events

    def run(self, ticks: int) -> list[GameEvent]:
        """Run several ticks back to back, returning all their events."""
        events: list[GameEvent] = []
        for _ in range(ticks):
            events.extend(self.tick())
        return events

    def process_hero_decisions(self) -> dict[str, HeroDecision]:
        """Let every idle hero decide what to do next."""
        decisions = {}
        for hero in self.state.heroes_with_status(HeroStatus.IDLE):
            decisions[hero.id] = self.ai.take_turn(hero, self.state, self.exploration)
        return decisions

    # ------------------------------------------------------------------
    # Player actions
    # ------------------------------------------------------------------

    def gather_materials(self) -> int:
        return self.state.town.gather_materials()

    def upgrade_building(self, building_id: str) -> bool:
        return self.state.upgrade_building(building_id)

    def discover_dungeon(self, dungeon_id: str) -> bool:
        return self.exploration.discover_dungeon(dungeon_id)

    def craft_weapon(self, weapon_id: str) -> bool:
        return self.state.town.craft_weapon(weapon_id)

    def craft_potion(self, potion_id: str) -> bool:
        return self.state.town.craft_potion(potion_id)

    def spawn_hero(self, name: Optional[str] = None) -> Hero:
        return self.state.spawn_hero(name)

    def estimate(self, hero_id: str, dungeon_id: str, runs: Optional[int] = None) -> Optional[int]:
        """Clear-chance estimate for one hero and dungeon, or None if either is missing."""
        hero = self.state.require_hero(hero_id)
        dungeon = self.state.require_dungeon(dungeon_id)
        if hero is None or dungeon is None:
            return None
        simulator = self.ai.simulator
        if runs is not None:
            simulator = DungeonSimulator(runs=runs, seed=simulator.base_seed)
        return simulator.estimate_success_chance(hero, dungeon)
