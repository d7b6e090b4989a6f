"""Weapon template model for Heroville."""

from pydantic import BaseModel, Field


class WeaponTemplate(BaseModel):
    """Purchasable weapon as listed in the town catalog."""
    id: str = Field(..., description="Unique identifier (lowercase, underscores)")
    name: str = Field(..., description="Display name")
    description: str = Field(default="")
    min_damage: int = Field(..., ge=0, description="Minimum damage bonus")
    max_damage: int = Field(..., ge=0, description="Maximum damage bonus")
    cost: dict[str, int] = Field(default_factory=dict, description="Town crafting cost by resource")
    sale_price: int = Field(..., ge=0, description="Gold a hero pays the town")
    max_durability: int = Field(..., ge=1, description="Encounters before the weapon breaks")
    required_blacksmith_level: int = Field(default=1, ge=0)

    @property
    def average_damage(self) -> float:
        return (self.min_damage + self.max_damage) / 2

    @property
    def repair_cost(self) -> int:
        """Repairs cost half the sale price, rounded up."""
        return -(-self.sale_price // 2)
