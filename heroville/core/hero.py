"""Hero entity for Heroville.

A hero owns its stats, inventory and equipment plus the status fields that
make up its state machine (idle, healing, shopping, exploring; ``in_combat``
is an orthogonal flag only valid while exploring).
"""

import copy
import random
import uuid
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from .constants import (
    HeroStatus,
    HERO_BASE_HEALTH,
    HERO_BASE_MIN_DAMAGE,
    HERO_BASE_MAX_DAMAGE,
    HERO_FIRST_NAMES,
    HERO_LAST_NAMES,
    HEAL_PER_MONSTER_PART,
    LEVEL_UP_HEALTH_BONUS,
    xp_to_next_level,
)

if TYPE_CHECKING:
    from heroville.data.models import WeaponTemplate
    from .dungeon import Dungeon
    from .town import Town


@dataclass
class Weapon:
    """An equipped weapon instance with its own durability."""

    id: str
    name: str
    min_damage: int
    max_damage: int
    durability: int
    max_durability: int
    sale_price: int = 0

    @classmethod
    def from_template(cls, template: "WeaponTemplate") -> "Weapon":
        """New weapon instance at full durability."""
        return cls(
            id=template.id,
            name=template.name,
            min_damage=template.min_damage,
            max_damage=template.max_damage,
            durability=template.max_durability,
            max_durability=template.max_durability,
            sale_price=template.sale_price,
        )

    @property
    def average_damage(self) -> float:
        return (self.min_damage + self.max_damage) / 2

    @property
    def repair_cost(self) -> int:
        return -(-self.sale_price // 2)


@dataclass
class Inventory:
    """Hero-carried resources."""

    gold: int = 0
    monster_parts: int = 0
    potions: dict[str, int] = field(default_factory=dict)

    def potion_count(self, kind: str) -> int:
        return self.potions.get(kind, 0)


def generate_hero_id() -> str:
    return f"hero_{uuid.uuid4().hex[:12]}"


def generate_hero_name(rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    return f"{rng.choice(HERO_FIRST_NAMES)} {rng.choice(HERO_LAST_NAMES)}"


@dataclass
class Hero:
    """
    An autonomous adventurer.

    Invariants: ``0 <= health <= max_health``; ``in_combat`` implies status is
    exploring; ``dungeon_id`` is set iff status is exploring.
    """

    name: str
    id: str = field(default_factory=generate_hero_id)
    health: int = HERO_BASE_HEALTH
    max_health: int = HERO_BASE_HEALTH
    min_damage: int = HERO_BASE_MIN_DAMAGE
    max_damage: int = HERO_BASE_MAX_DAMAGE
    level: int = 1
    experience: int = 0
    weapon: Optional[Weapon] = None
    inventory: Inventory = field(default_factory=Inventory)

    # State machine
    status: str = HeroStatus.IDLE
    dungeon_id: Optional[str] = None
    in_combat: bool = False
    dungeon_progress: int = 0
    dungeon_success_chance: Optional[int] = None
    has_shopped_for_upgrades: bool = False
    next_shopping_dungeon_id: Optional[str] = None

    @classmethod
    def spawn(cls, name: Optional[str] = None, rng: Optional[random.Random] = None) -> "Hero":
        """Create a fresh level 1 hero, naming it randomly when no name is given."""
        return cls(name=name or generate_hero_name(rng))

    # ------------------------------------------------------------------
    # Combat stats
    # ------------------------------------------------------------------

    @property
    def damage_range(self) -> tuple[int, int]:
        """Attack roll bounds, combining weapon and base damage when armed."""
        if self.weapon:
            return (
                self.weapon.min_damage + self.min_damage - 1,
                self.weapon.max_damage + self.max_damage - 1,
            )
        return (self.min_damage, self.max_damage)

    def calculate_damage(self, rng: Optional[random.Random] = None) -> int:
        rng = rng or random
        low, high = self.damage_range
        return rng.randint(low, high)

    def take_damage(self, amount: int) -> int:
        """Apply damage, floored at zero. Returns remaining health."""
        self.health = max(0, self.health - amount)
        return self.health

    def heal(self, amount: int) -> int:
        """Restore health up to max. Returns the amount actually healed."""
        before = self.health
        self.health = min(self.max_health, self.health + amount)
        return self.health - before

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    @property
    def is_full_health(self) -> bool:
        return self.health >= self.max_health

    # ------------------------------------------------------------------
    # Progression
    # ------------------------------------------------------------------

    def add_experience(self, amount: int) -> int:
        """
        Add experience and process level-ups.

        Each level costs ``100 * level`` experience; leftover experience carries
        over. A level-up raises max health, fully heals and re-enables shopping.

        Returns:
            Number of levels gained.
        """
        self.experience += amount
        gained = 0
        while self.experience >= xp_to_next_level(self.level):
            self.experience -= xp_to_next_level(self.level)
            self.level += 1
            self.max_health += LEVEL_UP_HEALTH_BONUS
            self.health = self.max_health
            self.has_shopped_for_upgrades = False
            gained += 1
        return gained

    # ------------------------------------------------------------------
    # Equipment and inventory
    # ------------------------------------------------------------------

    def equip(self, weapon: Weapon) -> Optional[Weapon]:
        """Equip a weapon, returning whatever was held before."""
        previous, self.weapon = self.weapon, weapon
        return previous

    def wear_weapon(self) -> Optional[Weapon]:
        """
        Spend one point of durability after a completed encounter.

        Returns:
            The weapon if it broke and was unequipped, otherwise None.
        """
        if self.weapon is None:
            return None
        self.weapon.durability = max(0, self.weapon.durability - 1)
        if self.weapon.durability <= 0:
            broken, self.weapon = self.weapon, None
            return broken
        return None

    def potion_count(self, kind: str) -> int:
        return self.inventory.potion_count(kind)

    def add_potion(self, kind: str, count: int = 1) -> None:
        self.inventory.potions[kind] = self.inventory.potions.get(kind, 0) + count

    def consume_potion(self, kind: str) -> bool:
        held = self.inventory.potions.get(kind, 0)
        if held <= 0:
            return False
        self.inventory.potions[kind] = held - 1
        return True

    def award_loot(self, gold: int, monster_parts: int) -> bool:
        """
        Add gold and monster parts.

        Returns:
            True if these were the first monster parts the hero holds.
        """
        first_parts = monster_parts > 0 and self.inventory.monster_parts == 0
        self.inventory.gold += gold
        self.inventory.monster_parts += monster_parts
        return first_parts

    def spend_monster_parts_to_heal(self, parts: int, town: Optional["Town"] = None) -> int:
        """
        Trade monster parts for quick healing; spent parts go to the town pool.

        Returns:
            Number of parts actually spent.
        """
        spent = min(max(parts, 0), self.inventory.monster_parts)
        if spent == 0:
            return 0
        self.inventory.monster_parts -= spent
        if town is not None:
            town.resources.monster_parts += spent
        self.heal(spent * HEAL_PER_MONSTER_PART)
        return spent

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def set_status(self, status: str, dungeon_id: Optional[str] = None) -> None:
        if status != HeroStatus.EXPLORING:
            self.in_combat = False
        else:
            self.has_shopped_for_upgrades = False
        self.status = status
        self.dungeon_id = dungeon_id if status == HeroStatus.EXPLORING else None

    def set_combat(self, in_combat: bool) -> None:
        self.in_combat = in_combat and self.status == HeroStatus.EXPLORING

    def reset_dungeon_progress(
        self,
        reason: str = "unspecified",
        dungeon: Optional["Dungeon"] = None,
    ) -> Optional[str]:
        """
        Return the hero to town after leaving a dungeon.

        On ``"defeat"`` the hero also loses gold, monster parts and experience.
        The hero's explorer entry is removed from ``dungeon`` when given.

        Returns:
            ID of the dungeon the hero was in, if any.
        """
        previous_dungeon_id = self.dungeon_id
        if dungeon is not None:
            dungeon.remove_explorer(self.id)

        self.status = HeroStatus.IDLE
        self.dungeon_id = None
        self.in_combat = False
        self.dungeon_progress = 0
        self.dungeon_success_chance = None

        if reason == "defeat":
            self.inventory.gold = 0
            self.inventory.monster_parts = 0
            self.experience = 0

        return previous_dungeon_id

    def clone(self) -> "Hero":
        """Deep copy for simulation; mutations never reach the original."""
        return copy.deepcopy(self)

