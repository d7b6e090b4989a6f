"""Core game entities and per-tick subsystems.

This module provides the live simulation state:
- Heroes, monsters and dungeons with per-hero progress
- The town with its buildings, resources and crafted stock
- Exploration, healing and shopping systems
- The narrative event log
- Save and load
"""

from .constants import HeroStatus
from .events import EventKind, EventLog, GameEvent
from .monster import (
    Monster,
    MonsterVariant,
    create_monster,
    create_variant_monster,
    get_random_variant,
    get_variants,
)
from .hero import Hero, Inventory, Weapon
from .dungeon import AdvanceResult, Dungeon, ExplorerProgress
from .town import Building, Resources, Town
from .game_state import GameState, new_game
from .exploration import ExplorationSystem
from .shopping import ShoppingSystem, ShoppingTrip
from .persistence import GameRecord, from_record, load_game, save_game, to_record

__all__ = [
    "HeroStatus",
    # Events
    "EventKind",
    "EventLog",
    "GameEvent",
    # Monsters
    "Monster",
    "MonsterVariant",
    "create_monster",
    "create_variant_monster",
    "get_random_variant",
    "get_variants",
    # Heroes
    "Hero",
    "Inventory",
    "Weapon",
    # Dungeons
    "AdvanceResult",
    "Dungeon",
    "ExplorerProgress",
    # Town
    "Building",
    "Resources",
    "Town",
    # State
    "GameState",
    "new_game",
    # Systems
    "ExplorationSystem",
    "ShoppingSystem",
    "ShoppingTrip",
    # Persistence
    "GameRecord",
    "from_record",
    "load_game",
    "save_game",
    "to_record",
]
