"""Consumable template model for Heroville."""

from enum import StrEnum

from pydantic import BaseModel, Field


class EffectKind(StrEnum):
    """What a consumable does when used."""
    HEALING = "healing"


class ConsumableTemplate(BaseModel):
    """Purchasable consumable as listed in the town catalog."""
    id: str = Field(..., description="Unique identifier (lowercase, underscores)")
    name: str = Field(..., description="Display name")
    description: str = Field(default="")
    type: str = Field(default="potion")
    effect: EffectKind = EffectKind.HEALING
    effect_amount: float = Field(..., gt=0, description="Fraction of max health for healing potions")
    cost: dict[str, int] = Field(default_factory=dict, description="Town crafting cost by resource")
    sale_price: int = Field(..., ge=0)
    max_stack: int = Field(default=5, ge=1, description="Most a hero may carry of this kind")
    required_apothecary_level: int = Field(default=1, ge=0)

    model_config = {"use_enum_values": True}

    @property
    def is_healing(self) -> bool:
        return self.effect == EffectKind.HEALING
