# Data Loaders
from .catalog_loader import (
    load_weapons,
    load_consumables,
    load_dungeon_configs,
    get_weapon_by_id,
    get_available_weapons,
    get_consumable_by_id,
    get_available_consumables,
    get_potions,
    get_healing_potions,
    get_max_stack,
)

__all__ = [
    "load_weapons",
    "load_consumables",
    "load_dungeon_configs",
    "get_weapon_by_id",
    "get_available_weapons",
    "get_consumable_by_id",
    "get_available_consumables",
    "get_potions",
    "get_healing_potions",
    "get_max_stack",
]
