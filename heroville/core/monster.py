"""Monsters and the monster factory for Heroville.

Monster stat blocks are a pure function of a difficulty number; bosses are
built from a base monster boosted by a named variant.
"""

import math
import random
from dataclasses import dataclass, replace
from typing import Optional, Union

from .constants import DEFAULT_MONSTER_TYPE

Number = Union[int, float]


@dataclass(frozen=True)
class MonsterVariant:
    """Named boss variant: multiplier pair plus naming rule."""

    name: str
    is_prefix: bool
    health_multiplier: float
    damage_multiplier: float

    def apply_name(self, base_name: str) -> str:
        if self.is_prefix:
            return f"{self.name} {base_name}"
        return f"{base_name} {self.name}"

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "is_prefix": self.is_prefix,
            "health_multiplier": self.health_multiplier,
            "damage_multiplier": self.damage_multiplier,
        }


VARIANTS: tuple[MonsterVariant, ...] = (
    MonsterVariant("Giant", True, 1.5, 1.3),
    MonsterVariant("Fierce", True, 1.2, 1.5),
    MonsterVariant("Ancient", True, 2.0, 1.8),
    MonsterVariant("Elder", True, 1.8, 1.6),
    MonsterVariant("Alpha", False, 1.7, 1.7),
    MonsterVariant("King", False, 2.0, 1.9),
    MonsterVariant("Queen", False, 1.8, 2.0),
    MonsterVariant("Matriarch", False, 2.2, 1.7),
)


@dataclass
class Monster:
    """A monster in a single encounter."""

    name: str
    health: int
    max_health: int
    min_damage: int = 1
    max_damage: int = 1
    level: Number = 1
    is_variant: bool = False

    def calculate_damage(self, rng: Optional[random.Random] = None) -> int:
        """Uniform damage roll in [min_damage, max_damage]."""
        rng = rng or random
        return rng.randint(self.min_damage, self.max_damage)

    def take_damage(self, amount: int) -> bool:
        """Apply damage, floored at zero. Returns whether the monster is still alive."""
        self.health = max(0, self.health - amount)
        return self.health > 0

    def is_defeated(self) -> bool:
        return self.health <= 0

    def clone(self) -> "Monster":
        return replace(self)


def get_variants() -> tuple[MonsterVariant, ...]:
    """The fixed catalog of boss variants."""
    return VARIANTS


def get_random_variant(rng: Optional[random.Random] = None) -> MonsterVariant:
    """Uniform pick from the variant catalog."""
    rng = rng or random
    return rng.choice(VARIANTS)


def _base_stats(level: Number) -> tuple[Number, int, int]:
    min_damage = 1 + math.floor(level / 2)
    return 2 + level * 5, min_damage, min_damage + 1 + math.floor(level / 3)


def create_monster(monster_type: str = DEFAULT_MONSTER_TYPE, level: Number = 1) -> Monster:
    """
    Create a basic monster whose stats scale with level.

    health = 2 + 5 * level, min damage = 1 + level // 2,
    max damage = min damage + 1 + level // 3.

    Args:
        monster_type: Display name of the monster.
        level: Difficulty number; bosses use fractional levels.

    Returns:
        A fresh, non-variant Monster.
    """
    raw_health, min_damage, max_damage = _base_stats(level)
    health = math.floor(raw_health)
    return Monster(
        name=monster_type,
        health=health,
        max_health=health,
        min_damage=min_damage,
        max_damage=max_damage,
        level=level,
        is_variant=False,
    )


def create_variant_monster(
    monster_type: str,
    level: Number,
    variant: MonsterVariant,
) -> Monster:
    """
    Create a boss: a base monster with the variant's multipliers applied.

    Multiplied health and damage bounds are floored to integers. Health is
    multiplied before flooring so fractional boss levels keep their share.
    """
    raw_health, min_damage, max_damage = _base_stats(level)
    health = math.floor(raw_health * variant.health_multiplier)
    return Monster(
        name=variant.apply_name(monster_type),
        health=health,
        max_health=health,
        min_damage=math.floor(min_damage * variant.damage_multiplier),
        max_damage=math.floor(max_damage * variant.damage_multiplier),
        level=level,
        is_variant=True,
    )
