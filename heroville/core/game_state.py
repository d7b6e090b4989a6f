"""
Game state container for Heroville.

One ``GameState`` per game session. Every subsystem receives it explicitly
instead of reaching for a module-level game object.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from heroville.data.loaders import load_dungeon_configs
from heroville.data.models import DungeonConfig

from .constants import DEFAULT_BOSS_REWARD_SCHEME, LOG_MAX_ENTRIES
from .dungeon import Dungeon
from .events import EventKind, EventLog
from .hero import Hero
from .monster import MonsterVariant, get_random_variant
from .town import Town

logger = logging.getLogger(__name__)


def dungeon_from_config(config: DungeonConfig, rng: Optional[random.Random] = None) -> Dungeon:
    """Build a live dungeon from its catalog definition."""
    if config.variant is not None:
        variant = MonsterVariant(
            name=config.variant.name,
            is_prefix=config.variant.is_prefix,
            health_multiplier=config.variant.health_multiplier,
            damage_multiplier=config.variant.damage_multiplier,
        )
    else:
        variant = get_random_variant(rng)
    return Dungeon(
        id=config.id,
        name=config.name,
        description=config.description,
        discovered=config.discovered,
        discovery_cost=config.discovery_cost,
        difficulty=config.difficulty,
        length=config.length,
        encounter_rate=config.encounter_rate,
        monster_type=config.monster_type,
        variant=variant,
    )


@dataclass
class GameState:
    """
    Complete state of a game session.

    Attributes:
        heroes: Heroes in spawn order.
        dungeons: Dungeons in catalog order; decision tie-breaks follow it.
        town: Resources, buildings and crafted stock.
        events: Narrative event sink shared with the town.
        rng: Random source for every roll in the session.
        boss_reward_scheme: Key into ``BOSS_REWARD_SCHEMES``.
    """

    heroes: list[Hero] = field(default_factory=list)
    dungeons: list[Dungeon] = field(default_factory=list)
    town: Optional[Town] = None
    events: EventLog = field(default_factory=EventLog)
    rng: random.Random = field(default_factory=random.Random)
    boss_reward_scheme: str = DEFAULT_BOSS_REWARD_SCHEME

    def __post_init__(self):
        if self.town is None:
            self.town = Town.new(self.events)
        else:
            self.town.events = self.events

    @property
    def tick(self) -> int:
        return self.events.tick

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_hero(self, hero_id: str) -> Optional[Hero]:
        for hero in self.heroes:
            if hero.id == hero_id:
                return hero
        return None

    def get_dungeon(self, dungeon_id: Optional[str]) -> Optional[Dungeon]:
        if dungeon_id is None:
            return None
        for dungeon in self.dungeons:
            if dungeon.id == dungeon_id:
                return dungeon
        return None

    def require_hero(self, hero_id: str) -> Optional[Hero]:
        """Look up a hero, reporting a warning when it does not exist."""
        hero = self.get_hero(hero_id)
        if hero is None:
            logger.warning("Hero %s not found", hero_id)
            self.events.warn(f"Error: Hero {hero_id} not found", hero_id=hero_id)
        return hero

    def require_dungeon(self, dungeon_id: str) -> Optional[Dungeon]:
        """Look up a dungeon, reporting a warning when it does not exist."""
        dungeon = self.get_dungeon(dungeon_id)
        if dungeon is None:
            logger.warning("Dungeon %s not found", dungeon_id)
            self.events.warn(f"Error: Dungeon {dungeon_id} not found", dungeon_id=dungeon_id)
        return dungeon

    def discovered_dungeons(self) -> list[Dungeon]:
        return [d for d in self.dungeons if d.discovered]

    def heroes_with_status(self, status: str) -> list[Hero]:
        """Snapshot of heroes currently in ``status``."""
        return [h for h in self.heroes if h.status == status]

    def heroes_in_combat(self) -> list[Hero]:
        return [h for h in self.heroes if h.in_combat]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def spawn_hero(self, name: Optional[str] = None) -> Hero:
        hero = Hero.spawn(name, self.rng)
        self.heroes.append(hero)
        self.events.emit(
            EventKind.HERO_SPAWNED,
            f"A new hero has appeared: {hero.name}!",
            hero_id=hero.id,
        )
        return hero

    def upgrade_building(self, building_id: str) -> bool:
        """Upgrade a town building; every tent upgrade brings a new hero."""
        upgraded = self.town.upgrade_building(building_id)
        if upgraded and building_id == "tent":
            self.spawn_hero()
        return upgraded



def new_game(
    seed: Optional[int] = None,
    boss_reward_scheme: str = DEFAULT_BOSS_REWARD_SCHEME,
    log_max_entries: int = LOG_MAX_ENTRIES,
) -> GameState:
    """
    Start a fresh session: tent only, no heroes, all catalog dungeons undiscovered.
    """
    rng = random.Random(seed)
    state = GameState(
        events=EventLog(log_max_entries),
        rng=rng,
        boss_reward_scheme=boss_reward_scheme,
    )
    state.dungeons = [dungeon_from_config(c, rng) for c in load_dungeon_configs()]
    logger.debug("New game with %d dungeons (seed=%s)", len(state.dungeons), seed)
    return state
