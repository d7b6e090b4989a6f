"""Encounter rewards for Heroville."""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..core.constants import (
    BOSS_REWARD_SCHEMES,
    DEFAULT_BOSS_REWARD_SCHEME,
    REGULAR_XP_PER_DIFFICULTY,
)

if TYPE_CHECKING:
    from ..core.dungeon import Dungeon
    from ..core.monster import Monster

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reward:
    """Loot and experience for a won encounter."""

    experience: int
    gold: int
    monster_parts: int
    is_boss: bool = False

    def summary(self) -> str:
        return (
            f"Gained: {self.experience} experience, {self.gold} gold, "
            f"and {self.monster_parts} monster parts."
        )


def boss_reward_rates(scheme: str) -> tuple[int, int]:
    """(xp per difficulty, gold exponent) for a boss reward scheme."""
    rates = BOSS_REWARD_SCHEMES.get(scheme)
    if rates is None:
        logger.warning(
            "Unknown boss reward scheme %r, using %r", scheme, DEFAULT_BOSS_REWARD_SCHEME
        )
        rates = BOSS_REWARD_SCHEMES[DEFAULT_BOSS_REWARD_SCHEME]
    return rates


def compute_reward(
    monster: "Monster",
    dungeon: "Dungeon",
    scheme: str = DEFAULT_BOSS_REWARD_SCHEME,
) -> Reward:
    """
    Compute the reward for defeating ``monster`` in ``dungeon``.

    Bosses pay experience and gold per the reward scheme and no parts.
    Regular monsters pay ``10 x difficulty`` experience and parts equal to
    their level.
    """
    difficulty = dungeon.difficulty
    if monster.is_variant:
        xp_rate, gold_exponent = boss_reward_rates(scheme)
        return Reward(
            experience=xp_rate * difficulty,
            gold=difficulty ** gold_exponent,
            monster_parts=0,
            is_boss=True,
        )
    return Reward(
        experience=REGULAR_XP_PER_DIFFICULTY * difficulty,
        gold=0,
        monster_parts=int(monster.level),
    )
