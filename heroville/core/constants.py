"""Heroville Game Constants."""

from typing import Final

# =============================================================================
# HEROES
# =============================================================================
HERO_BASE_HEALTH: Final[int] = 50
HERO_BASE_MIN_DAMAGE: Final[int] = 1
HERO_BASE_MAX_DAMAGE: Final[int] = 1

# Experience needed for the next level is XP_PER_LEVEL * current level
XP_PER_LEVEL: Final[int] = 100
LEVEL_UP_HEALTH_BONUS: Final[int] = 5

# Level whose first attainment unlocks the blacksmith
BLACKSMITH_UNLOCK_LEVEL: Final[int] = 2

HERO_FIRST_NAMES: Final[tuple[str, ...]] = (
    "Brave", "Mighty", "Swift", "Wise", "Noble", "Bold", "Valiant",
)
HERO_LAST_NAMES: Final[tuple[str, ...]] = (
    "Warrior", "Knight", "Guardian", "Protector", "Defender", "Champion", "Sentinel",
)


class HeroStatus:
    IDLE = "idle"
    HEALING = "healing"
    SHOPPING = "shopping"
    EXPLORING = "exploring"


# =============================================================================
# HEALING
# =============================================================================
NATURAL_HEAL_PER_TICK: Final[int] = 1
HEAL_PER_MONSTER_PART: Final[int] = 5
MONSTER_PARTS_PER_HEAL_TICK: Final[int] = 1

HEALTH_POTION_ID: Final[str] = "health_potion"

# =============================================================================
# DUNGEONS
# =============================================================================
DEFAULT_DUNGEON_LENGTH: Final[int] = 10
DEFAULT_ENCOUNTER_RATE: Final[float] = 0.3
DEFAULT_MONSTER_TYPE: Final[str] = "Goblin"

# Final boss level is dungeon difficulty * this multiplier
BOSS_DIFFICULTY_MULTIPLIER: Final[float] = 1.5

# =============================================================================
# REWARDS
# =============================================================================
REGULAR_XP_PER_DIFFICULTY: Final[int] = 10

# Boss reward schemes: (xp per difficulty, gold exponent on difficulty)
BOSS_REWARD_SCHEMES: Final[dict[str, tuple[int, int]]] = {
    "current": (20, 2),  # 20 x difficulty xp, difficulty^2 gold
    "legacy": (50, 1),   # 50 x difficulty xp, difficulty gold
}
DEFAULT_BOSS_REWARD_SCHEME: Final[str] = "current"

# =============================================================================
# DECISIONS
# =============================================================================
DEFAULT_SIMULATION_RUNS: Final[int] = 1000
SUCCESS_THRESHOLD: Final[int] = 50

# =============================================================================
# TOWN
# =============================================================================
TENT_COST_BASE: Final[int] = 10  # Tent upgrade cost grows by powers of this

BUILDING_DEFINITIONS: Final[dict[str, dict]] = {
    "tent": {
        "name": "Tent",
        "description": "A simple shelter for heroes to rest in.",
        "base_cost": 5,
    },
    "apothecary": {
        "name": "Apothecary",
        "description": "A place to craft potions and remedies.",
        "base_cost": 10,
    },
    "blacksmith": {
        "name": "Blacksmith",
        "description": "A forge where weapons can be crafted and repaired.",
        "base_cost": 15,
    },
}
STARTING_BUILDINGS: Final[tuple[str, ...]] = ("tent",)

# =============================================================================
# EVENT LOG
# =============================================================================
LOG_MAX_ENTRIES: Final[int] = 100


def xp_to_next_level(level: int) -> int:
    """Experience needed to advance from ``level`` to ``level + 1``."""
    return XP_PER_LEVEL * level


def calculate_tent_cost(base_cost: int, level: int) -> int:
    """Tent upgrades scale by powers of ten (5, 50, 500, ...)."""
    return int(base_cost * TENT_COST_BASE ** level)
