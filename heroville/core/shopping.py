"""Shopping system for Heroville.

Heroes in the shopping status buy from the town's crafted stock: a better
weapon, a repair sized for their next dungeon, then potions. Every purchase
moves gold from the hero to the town and one item out of town stock. The
whole visit completes within the shopping phase of a single tick.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

from heroville.data.loaders import get_available_weapons, get_potions

from .constants import HeroStatus
from .events import EventKind
from .hero import Weapon

if TYPE_CHECKING:
    from heroville.data.models import WeaponTemplate
    from .game_state import GameState
    from .hero import Hero

logger = logging.getLogger(__name__)


@dataclass
class ShoppingTrip:
    """Everything one hero bought during a visit."""

    hero_id: str
    weapon_id: Optional[str] = None
    repaired_points: int = 0
    potions: dict[str, int] = field(default_factory=dict)
    gold_spent: int = 0

    @property
    def bought_anything(self) -> bool:
        return bool(self.weapon_id or self.repaired_points or self.potions)


def is_weapon_better(candidate: "WeaponTemplate", current: Optional[Weapon]) -> bool:
    """Compare by average damage; anything beats no weapon."""
    if current is None:
        return True
    return candidate.average_damage > current.average_damage


class ShoppingSystem:
    """Resolves shopping visits for every hero with the shopping status."""

    def __init__(self, state: "GameState"):
        self.state = state

    def process_shopping(self) -> list[ShoppingTrip]:
        trips = []
        for hero in self.state.heroes_with_status(HeroStatus.SHOPPING):
            trips.append(self.shop(hero))
        return trips

    def shop(self, hero: "Hero") -> ShoppingTrip:
        """Run one full shopping visit and send the hero back to idle."""
        trip = ShoppingTrip(hero_id=hero.id)

        if self.state.town.has_building("blacksmith"):
            self.buy_weapon(hero, trip)
            self.repair_weapon(hero, trip)
        self.buy_potions(hero, trip)

        hero.set_status(HeroStatus.IDLE)
        hero.has_shopped_for_upgrades = True
        hero.next_shopping_dungeon_id = None

        if trip.bought_anything:
            message = f"{hero.name} finished shopping and is now idle."
        else:
            message = f"{hero.name} couldn't find anything to buy and is now idle."
        self.state.events.emit(EventKind.PURCHASE, message, hero_id=hero.id)
        return trip

    def _charge(self, hero: "Hero", amount: int, trip: ShoppingTrip) -> None:
        hero.inventory.gold -= amount
        self.state.town.resources.gold += amount
        trip.gold_spent += amount

    def buy_weapon(self, hero: "Hero", trip: ShoppingTrip) -> bool:
        """Buy the best affordable in-stock weapon if it beats the equipped one."""
        town = self.state.town
        best: Optional["WeaponTemplate"] = None
        for template in get_available_weapons(town.building_level("blacksmith")):
            if not town.in_stock(town.weapon_stock, template.id):
                continue
            if hero.inventory.gold < template.sale_price:
                continue
            if best is None or template.average_damage > best.average_damage:
                best = template

        if best is None or not is_weapon_better(best, hero.weapon):
            return False

        town.take_from_stock(town.weapon_stock, best.id)
        self._charge(hero, best.sale_price, trip)
        hero.equip(Weapon.from_template(best))
        trip.weapon_id = best.id
        self.state.events.emit(
            EventKind.PURCHASE,
            f"{hero.name} bought a {best.name} for {best.sale_price} gold.",
            hero_id=hero.id,
        )
        return True

    def repair_weapon(self, hero: "Hero", trip: ShoppingTrip) -> bool:
        """
        Top up durability to cover the hinted dungeon's length.

        Costs half the weapon's sale price (rounded up) and never exceeds
        max durability.
        """
        weapon = hero.weapon
        dungeon = self.state.get_dungeon(hero.next_shopping_dungeon_id)
        if weapon is None or dungeon is None:
            return False

        desired = dungeon.length
        cost = weapon.repair_cost
        if weapon.durability >= desired or hero.inventory.gold < cost:
            return False

        points = min(desired - weapon.durability, weapon.max_durability - weapon.durability)
        if points <= 0:
            return False

        self._charge(hero, cost, trip)
        weapon.durability += points
        trip.repaired_points += points
        self.state.events.emit(
            EventKind.REPAIR,
            f"{hero.name} repaired their {weapon.name} for {cost} gold.",
            hero_id=hero.id,
        )
        return True

    def buy_potions(self, hero: "Hero", trip: ShoppingTrip) -> int:
        """
        Buy potions one at a time until nothing more can be bought.

        Returns:
            Number of potions bought.
        """
        town = self.state.town
        bought = 0
        buying = True
        while buying:
            buying = False
            for potion in get_potions():
                if hero.potion_count(potion.id) >= potion.max_stack:
                    continue
                if not town.in_stock(town.potion_stock, potion.id):
                    continue
                if hero.inventory.gold < potion.sale_price:
                    continue

                town.take_from_stock(town.potion_stock, potion.id)
                self._charge(hero, potion.sale_price, trip)
                hero.add_potion(potion.id)
                trip.potions[potion.id] = trip.potions.get(potion.id, 0) + 1
                self.state.events.emit(
                    EventKind.PURCHASE,
                    f"{hero.name} bought a {potion.name} for {potion.sale_price} gold.",
                    hero_id=hero.id,
                )
                bought += 1
                buying = True
                break
        return bought
