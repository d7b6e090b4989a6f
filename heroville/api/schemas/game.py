"""
Game-related API schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict

from .common import EventSchema


# === Request Schemas ===


class CreateGameRequest(BaseModel):
    """Game creation request."""

    seed: Optional[int] = None
    heroes: int = Field(default=0, ge=0, le=20, description="Heroes to spawn at start")
    discover: List[str] = Field(default_factory=list, description="Dungeons revealed for free")


class TickRequest(BaseModel):
    """Tick request."""

    ticks: int = Field(default=1, ge=1, le=10000)


class CraftRequest(BaseModel):
    """Crafting request."""

    item_id: str


# === Response Schemas ===


class WeaponSchema(BaseModel):
    """Equipped weapon schema."""

    id: str
    name: str
    min_damage: int
    max_damage: int
    durability: int
    max_durability: int


class InventorySchema(BaseModel):
    """Hero inventory schema."""

    gold: int
    monster_parts: int
    potions: Dict[str, int]


class HeroSchema(BaseModel):
    """Hero schema."""

    id: str
    name: str
    health: int
    max_health: int
    damage_range: List[int]
    level: int
    experience: int
    status: str
    dungeon_id: Optional[str] = None
    in_combat: bool
    dungeon_progress: int
    dungeon_success_chance: Optional[int] = None
    has_shopped_for_upgrades: bool
    weapon: Optional[WeaponSchema] = None
    inventory: InventorySchema


class ExplorerSchema(BaseModel):
    """Per-hero dungeon progress schema."""

    hero_id: str
    progress: int
    encountered_final_monster: bool
    final_monster_defeated: bool
    current_monster: Optional[str] = None


class DungeonSchema(BaseModel):
    """Dungeon schema."""

    id: str
    name: str
    description: str
    discovered: bool
    discovery_cost: int
    difficulty: int
    length: int
    encounter_rate: float
    monster_type: str
    boss_name: str
    completed: bool
    explorers: List[ExplorerSchema]


class BuildingSchema(BaseModel):
    """Town building schema."""

    id: str
    name: str
    level: int
    description: str
    upgrade_cost: int


class TownSchema(BaseModel):
    """Town schema."""

    resources: Dict[str, int]
    buildings: List[BuildingSchema]
    weapon_stock: Dict[str, int]
    potion_stock: Dict[str, int]


class GameStateSchema(BaseModel):
    """Complete game state schema."""

    game_id: str
    tick: int
    heroes: List[HeroSchema]
    dungeons: List[DungeonSchema]
    town: TownSchema


class TickResponse(BaseModel):
    """Events produced by a batch of ticks."""

    game_id: str
    tick: int
    events: List[EventSchema]


class EstimateResponse(BaseModel):
    """Dungeon clear estimate."""

    hero_id: str
    dungeon_id: str
    success_chance: int
    runs: int
