"""Town catalog loader for Heroville.

Read-only tables of purchasable weapons and consumables, plus the starting
dungeon definitions, loaded once from the JSON files shipped with the package.
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Optional

from ..models.weapon import WeaponTemplate
from ..models.consumable import ConsumableTemplate
from ..models.dungeon import DungeonConfig


# Get the catalog directory path
CATALOG_DIR = Path(__file__).parent.parent / "catalog"
WEAPONS_FILE = CATALOG_DIR / "weapons.json"
CONSUMABLES_FILE = CATALOG_DIR / "consumables.json"
DUNGEONS_FILE = CATALOG_DIR / "dungeons.json"


def _read_json(path: Path) -> dict:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


@lru_cache(maxsize=1)
def load_weapons() -> tuple[WeaponTemplate, ...]:
    """Load all weapon templates from JSON file.

    Returns:
        Tuple of WeaponTemplate objects in catalog order.
    """
    data = _read_json(WEAPONS_FILE)
    return tuple(WeaponTemplate(**weapon) for weapon in data["weapons"])


@lru_cache(maxsize=1)
def load_consumables() -> tuple[ConsumableTemplate, ...]:
    """Load all consumable templates from JSON file.

    Returns:
        Tuple of ConsumableTemplate objects in catalog order.
    """
    data = _read_json(CONSUMABLES_FILE)
    return tuple(ConsumableTemplate(**item) for item in data["consumables"])


def load_dungeon_configs() -> list[DungeonConfig]:
    """Load the starting dungeon definitions.

    Not cached: callers build fresh dungeons from the configs for every new game.
    """
    data = _read_json(DUNGEONS_FILE)
    return [DungeonConfig(**dungeon) for dungeon in data["dungeons"]]


def get_weapon_by_id(weapon_id: str) -> Optional[WeaponTemplate]:
    """Get a weapon template by its ID.

    Args:
        weapon_id: The unique weapon identifier.

    Returns:
        WeaponTemplate if found, None otherwise.
    """
    for weapon in load_weapons():
        if weapon.id == weapon_id:
            return weapon
    return None


def get_available_weapons(blacksmith_level: int) -> list[WeaponTemplate]:
    """Get all weapons the blacksmith can offer at the given level."""
    return [w for w in load_weapons() if w.required_blacksmith_level <= blacksmith_level]


def get_consumable_by_id(consumable_id: str) -> Optional[ConsumableTemplate]:
    """Get a consumable template by its ID.

    Args:
        consumable_id: The unique consumable identifier.

    Returns:
        ConsumableTemplate if found, None otherwise.
    """
    for item in load_consumables():
        if item.id == consumable_id:
            return item
    return None


def get_available_consumables(apothecary_level: int) -> list[ConsumableTemplate]:
    """Get all consumables the apothecary can offer at the given level."""
    return [c for c in load_consumables() if c.required_apothecary_level <= apothecary_level]


def get_potions() -> list[ConsumableTemplate]:
    """Get all consumables of type potion, in catalog order."""
    return [c for c in load_consumables() if c.type == "potion"]


def get_healing_potions() -> list[ConsumableTemplate]:
    """Get all potions that restore health, in catalog order."""
    return [c for c in get_potions() if c.is_healing]


def get_max_stack(consumable_id: str, default: int = 5) -> int:
    """Most of one consumable kind a hero may carry."""
    item = get_consumable_by_id(consumable_id)
    return item.max_stack if item else default
