# Data Models
from .weapon import WeaponTemplate
from .consumable import ConsumableTemplate, EffectKind
from .dungeon import DungeonConfig, VariantConfig

__all__ = [
    "WeaponTemplate",
    "ConsumableTemplate",
    "EffectKind",
    "DungeonConfig",
    "VariantConfig",
]
