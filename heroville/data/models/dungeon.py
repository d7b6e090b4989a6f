"""Dungeon configuration model for Heroville."""

from typing import Optional

from pydantic import BaseModel, Field


class VariantConfig(BaseModel):
    """Named boss variant: multiplier pair plus naming rule."""
    name: str
    is_prefix: bool = True
    health_multiplier: float = Field(..., gt=0)
    damage_multiplier: float = Field(..., gt=0)


class DungeonConfig(BaseModel):
    """Starting definition of a dungeon."""
    id: str
    name: str
    description: str = ""
    discovered: bool = False
    discovery_cost: int = Field(default=0, ge=0)
    difficulty: int = Field(default=1, ge=1)
    length: int = Field(default=10, ge=1)
    encounter_rate: float = Field(default=0.3, ge=0.0, le=1.0)
    monster_type: str = "Goblin"
    variant: Optional[VariantConfig] = None
