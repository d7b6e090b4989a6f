"""Combat Resolver for Heroville.

Pure hero-vs-monster round resolution. Live combat advances one round per
tick through ``Encounter``; the outcome estimator runs the same rounds to
completion through ``fight_to_completion``.
"""

import math
import random
from dataclasses import dataclass
from typing import Optional, Sequence, TYPE_CHECKING

from ..data.loaders import get_healing_potions

if TYPE_CHECKING:
    from ..core.hero import Hero
    from ..core.monster import Monster
    from ..data.models import ConsumableTemplate


ATTACK = "attack"
HEAL = "heal"


@dataclass
class RoundResult:
    """What happened in one combat round."""

    action: str  # ATTACK or HEAL
    damage_dealt: int = 0
    healed: int = 0
    potion_id: Optional[str] = None
    monster_damage: int = 0
    monster_defeated: bool = False
    hero_defeated: bool = False

    @property
    def is_over(self) -> bool:
        return self.monster_defeated or self.hero_defeated


def _pick_healing_potion(
    hero: "Hero", catalog: Sequence["ConsumableTemplate"]
) -> Optional["ConsumableTemplate"]:
    for potion in catalog:
        if hero.potion_count(potion.id) > 0:
            return potion
    return None


def hero_turn(
    hero: "Hero",
    monster: "Monster",
    rng: Optional[random.Random] = None,
    catalog: Optional[Sequence["ConsumableTemplate"]] = None,
) -> RoundResult:
    """
    Hero acts: drink a healing potion when the monster's best hit could be
    lethal, otherwise attack.

    Args:
        hero: Acting hero; health and potions are mutated.
        monster: Target monster; health is mutated on attack.
        rng: Random source for the damage roll.
        catalog: Healing potions in preference order (defaults to the town catalog).

    Returns:
        RoundResult with the hero's half of the round filled in.
    """
    if catalog is None:
        catalog = get_healing_potions()

    if monster.max_damage >= hero.health:
        potion = _pick_healing_potion(hero, catalog)
        if potion is not None:
            heal_amount = math.floor(hero.max_health * potion.effect_amount)
            hero.consume_potion(potion.id)
            healed = hero.heal(heal_amount)
            return RoundResult(action=HEAL, healed=healed, potion_id=potion.id)

    damage = hero.calculate_damage(rng)
    monster.take_damage(damage)
    return RoundResult(
        action=ATTACK,
        damage_dealt=damage,
        monster_defeated=monster.is_defeated(),
    )


def monster_turn(
    hero: "Hero",
    monster: "Monster",
    result: RoundResult,
    rng: Optional[random.Random] = None,
) -> RoundResult:
    """Monster counter-attacks; fills in the second half of ``result``."""
    damage = monster.calculate_damage(rng)
    hero.take_damage(damage)
    result.monster_damage = damage
    result.hero_defeated = not hero.is_alive
    return result


def resolve_round(
    hero: "Hero",
    monster: "Monster",
    rng: Optional[random.Random] = None,
    catalog: Optional[Sequence["ConsumableTemplate"]] = None,
) -> RoundResult:
    """
    Resolve one full round. A defeated monster does not counter-attack.
    """
    result = hero_turn(hero, monster, rng, catalog)
    if result.monster_defeated:
        return result
    return monster_turn(hero, monster, result, rng)


def fight_to_completion(
    hero: "Hero",
    monster: "Monster",
    rng: Optional[random.Random] = None,
    catalog: Optional[Sequence["ConsumableTemplate"]] = None,
) -> bool:
    """
    Run rounds until one side falls.

    The weapon wears once when the hero wins, matching live combat.

    Returns:
        True if the hero survived.
    """
    if catalog is None:
        catalog = get_healing_potions()

    while hero.is_alive and not monster.is_defeated():
        resolve_round(hero, monster, rng, catalog)

    if hero.is_alive:
        hero.wear_weapon()
        return True
    return False
