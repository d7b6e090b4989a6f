"""
Static catalog API routes.
"""

from fastapi import APIRouter, HTTPException
from typing import Optional, List, Dict, Any

from heroville.core.monster import get_variants
from heroville.data.loaders import (
    get_available_consumables,
    get_available_weapons,
    get_consumable_by_id,
    get_weapon_by_id,
    load_consumables,
    load_dungeon_configs,
    load_weapons,
)

router = APIRouter()


# === Weapons ===


@router.get("/weapons")
async def get_all_weapons(blacksmith_level: Optional[int] = None) -> List[Dict[str, Any]]:
    """Get all weapons, optionally only those a blacksmith level can forge."""
    if blacksmith_level is not None:
        weapons = get_available_weapons(blacksmith_level)
    else:
        weapons = load_weapons()
    return [w.model_dump() for w in weapons]


@router.get("/weapons/{weapon_id}")
async def get_weapon(weapon_id: str) -> Dict[str, Any]:
    """Get specific weapon by ID."""
    weapon = get_weapon_by_id(weapon_id)
    if weapon is None:
        raise HTTPException(status_code=404, detail="Weapon not found")
    return weapon.model_dump()


# === Consumables ===


@router.get("/consumables")
async def get_all_consumables(apothecary_level: Optional[int] = None) -> List[Dict[str, Any]]:
    """Get all consumables, optionally only those an apothecary level can brew."""
    if apothecary_level is not None:
        items = get_available_consumables(apothecary_level)
    else:
        items = load_consumables()
    return [c.model_dump() for c in items]


@router.get("/consumables/{consumable_id}")
async def get_consumable(consumable_id: str) -> Dict[str, Any]:
    """Get specific consumable by ID."""
    item = get_consumable_by_id(consumable_id)
    if item is None:
        raise HTTPException(status_code=404, detail="Consumable not found")
    return item.model_dump()


# === Dungeons and monsters ===


@router.get("/dungeons")
async def get_dungeons() -> List[Dict[str, Any]]:
    """Get the starting dungeon definitions."""
    return [d.model_dump() for d in load_dungeon_configs()]


@router.get("/variants")
async def get_monster_variants() -> List[Dict[str, Any]]:
    """Get the boss variant catalog."""
    return [v.to_dict() for v in get_variants()]
