"""Combat module for Heroville.

This module provides:
- Round-by-round combat resolution with the potion heuristic
- The per-encounter state machine advanced once per tick
- Encounter rewards
- Monte Carlo dungeon clear estimation
"""

from .resolver import RoundResult, fight_to_completion, hero_turn, monster_turn, resolve_round
from .rewards import Reward, compute_reward
from .encounter import CombatSystem, Encounter, EncounterState
from .simulation import DungeonSimulator, SimulationResult, estimate_success_chance

__all__ = [
    # Resolver
    "RoundResult",
    "fight_to_completion",
    "hero_turn",
    "monster_turn",
    "resolve_round",
    # Rewards
    "Reward",
    "compute_reward",
    # Live combat
    "CombatSystem",
    "Encounter",
    "EncounterState",
    # Simulation
    "DungeonSimulator",
    "SimulationResult",
    "estimate_success_chance",
]
