"""Town aggregate for Heroville.

Holds the global resource pools, building levels and the crafted stock of
weapons and potions that heroes buy from. Buildings gate content: the
blacksmith level decides which weapons can be forged, the apothecary level
which potions can be brewed.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Optional

from heroville.data.loaders import get_consumable_by_id, get_weapon_by_id

from .constants import BUILDING_DEFINITIONS, STARTING_BUILDINGS, calculate_tent_cost
from .events import EventKind, EventLog

logger = logging.getLogger(__name__)


@dataclass
class Resources:
    """Town-wide resource pools."""

    materials: int = 0
    monster_parts: int = 0
    gold: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "materials": self.materials,
            "monster_parts": self.monster_parts,
            "gold": self.gold,
        }


@dataclass
class Building:
    """A town building and its current level."""

    id: str
    name: str
    level: int = 0
    description: str = ""
    base_cost: int = 0
    cost_multiplier: Optional[float] = None

    @classmethod
    def from_definition(cls, building_id: str, level: int = 0) -> "Building":
        definition = BUILDING_DEFINITIONS[building_id]
        return cls(
            id=building_id,
            name=definition["name"],
            level=level,
            description=definition.get("description", ""),
            base_cost=definition["base_cost"],
            cost_multiplier=definition.get("cost_multiplier"),
        )

    def upgrade_cost(self) -> int:
        """Materials needed for the next level."""
        if self.id == "tent":
            return calculate_tent_cost(self.base_cost, self.level)
        if self.cost_multiplier:
            return math.floor(self.base_cost * self.cost_multiplier ** self.level)
        return self.base_cost


@dataclass
class Town:
    """Shared town state; mutated only from within a tick or a player action."""

    events: EventLog = field(default_factory=EventLog, repr=False)
    resources: Resources = field(default_factory=Resources)
    buildings: dict[str, Building] = field(default_factory=dict)
    weapon_stock: dict[str, int] = field(default_factory=dict)
    potion_stock: dict[str, int] = field(default_factory=dict)

    @classmethod
    def new(cls, events: Optional[EventLog] = None) -> "Town":
        town = cls(events=events or EventLog())
        for building_id in STARTING_BUILDINGS:
            town.buildings[building_id] = Building.from_definition(building_id)
        return town

    # ------------------------------------------------------------------
    # Buildings
    # ------------------------------------------------------------------

    def get_building(self, building_id: str) -> Optional[Building]:
        return self.buildings.get(building_id)

    def building_level(self, building_id: str) -> int:
        building = self.buildings.get(building_id)
        return building.level if building else 0

    def has_building(self, building_id: str, min_level: int = 1) -> bool:
        return self.building_level(building_id) >= min_level

    def upgrade_building(self, building_id: str) -> bool:
        """
        Spend materials to raise a building one level.

        Returns:
            True if upgraded; False if the building is missing or unaffordable.
        """
        building = self.buildings.get(building_id)
        if building is None:
            logger.warning("Upgrade requested for unknown building %s", building_id)
            self.events.warn(f"Error: Building {building_id} not found")
            return False

        cost = building.upgrade_cost()
        if self.resources.materials < cost:
            self.events.emit(
                EventKind.RESOURCES,
                f"Not enough materials to upgrade {building.name}. Need {cost} materials.",
            )
            return False

        self.resources.materials -= cost
        building.level += 1
        self.events.emit(
            EventKind.BUILDING_UPGRADED,
            f"Upgraded {building.name} to level {building.level}",
        )
        return True

    def _unlock(self, building_id: str) -> bool:
        if building_id in self.buildings:
            return False
        building = Building.from_definition(building_id)
        self.buildings[building_id] = building
        self.events.emit(
            EventKind.BUILDING_UNLOCKED,
            f"The {building.name} is now available for construction!",
        )
        return True

    def unlock_apothecary(self) -> bool:
        """One-shot unlock triggered by the first monster part a hero gains."""
        return self._unlock("apothecary")

    def unlock_blacksmith(self) -> bool:
        """One-shot unlock triggered by the first hero reaching level 2."""
        return self._unlock("blacksmith")

    # ------------------------------------------------------------------
    # Resources and crafting
    # ------------------------------------------------------------------

    def gather_materials(self, amount: int = 1) -> int:
        self.resources.materials += amount
        self.events.emit(EventKind.RESOURCES, f"You gathered {amount} material")
        return self.resources.materials

    def _pay_monster_parts(self, cost: dict[str, int], item_name: str) -> bool:
        parts = cost.get("monster_parts", 0)
        if self.resources.monster_parts < parts:
            self.events.emit(
                EventKind.RESOURCES,
                f"Not enough monster parts to craft {item_name}. Need {parts}.",
            )
            return False
        self.resources.monster_parts -= parts
        return True

    def craft_weapon(self, weapon_id: str) -> bool:
        """Forge one weapon into town stock, gated by blacksmith level."""
        template = get_weapon_by_id(weapon_id)
        if template is None:
            logger.warning("Unknown weapon %s", weapon_id)
            self.events.warn(f"Error: Weapon {weapon_id} not found")
            return False
        if self.building_level("blacksmith") < max(1, template.required_blacksmith_level):
            self.events.emit(
                EventKind.RESOURCES,
                f"The Blacksmith must reach level {template.required_blacksmith_level} "
                f"to forge a {template.name}.",
            )
            return False
        if not self._pay_monster_parts(template.cost, template.name):
            return False
        self.weapon_stock[weapon_id] = self.weapon_stock.get(weapon_id, 0) + 1
        self.events.emit(EventKind.CRAFT, f"The Blacksmith forged a {template.name}.")
        return True

    def craft_potion(self, potion_id: str) -> bool:
        """Brew one potion into town stock, gated by apothecary level."""
        template = get_consumable_by_id(potion_id)
        if template is None:
            logger.warning("Unknown consumable %s", potion_id)
            self.events.warn(f"Error: Consumable {potion_id} not found")
            return False
        if self.building_level("apothecary") < max(1, template.required_apothecary_level):
            self.events.emit(
                EventKind.RESOURCES,
                f"The Apothecary must reach level {template.required_apothecary_level} "
                f"to brew a {template.name}.",
            )
            return False
        if not self._pay_monster_parts(template.cost, template.name):
            return False
        self.potion_stock[potion_id] = self.potion_stock.get(potion_id, 0) + 1
        self.events.emit(EventKind.CRAFT, f"The Apothecary brewed a {template.name}.")
        return True

    def in_stock(self, stock: dict[str, int], item_id: str) -> bool:
        return stock.get(item_id, 0) > 0

    def take_from_stock(self, stock: dict[str, int], item_id: str) -> bool:
        if stock.get(item_id, 0) <= 0:
            return False
        stock[item_id] -= 1
        return True
