"""Save and load for Heroville.

Live state is converted to plain pydantic records (and JSON on disk) and
back. Loading rebuilds every dungeon's explorer map and re-spawns any boss
fight that was in progress at save time.
"""

import json
import logging
import random
from pathlib import Path
from typing import Any, Optional, Union

from pydantic import BaseModel, Field

from heroville.data.models import VariantConfig

from .constants import DEFAULT_BOSS_REWARD_SCHEME, HEALTH_POTION_ID, HeroStatus
from .dungeon import Dungeon, ExplorerProgress
from .events import EventLog
from .game_state import GameState
from .hero import Hero, Inventory, Weapon
from .monster import MonsterVariant, get_random_variant
from .town import Building, Resources, Town

logger = logging.getLogger(__name__)

SAVE_FORMAT_VERSION = 1


# =============================================================================
# Records
# =============================================================================

class WeaponRecord(BaseModel):
    id: str
    name: str
    min_damage: int
    max_damage: int
    durability: int = Field(..., ge=0)
    max_durability: int = Field(..., ge=1)
    sale_price: int = 0


class InventoryRecord(BaseModel):
    gold: int = Field(default=0, ge=0)
    monster_parts: int = Field(default=0, ge=0)
    potions: dict[str, int] = Field(default_factory=dict)


class HeroRecord(BaseModel):
    """Every field of a hero."""
    id: str
    name: str
    health: int = Field(..., ge=0)
    max_health: int = Field(..., ge=1)
    min_damage: int
    max_damage: int
    level: int = Field(default=1, ge=1)
    experience: int = Field(default=0, ge=0)
    weapon: Optional[WeaponRecord] = None
    inventory: InventoryRecord = Field(default_factory=InventoryRecord)
    status: str = HeroStatus.IDLE
    dungeon_id: Optional[str] = None
    in_combat: bool = False
    dungeon_progress: int = 0
    dungeon_success_chance: Optional[int] = None
    has_shopped_for_upgrades: bool = False
    next_shopping_dungeon_id: Optional[str] = None


class ExplorerRecord(BaseModel):
    hero_id: str
    progress: int = Field(default=0, ge=0)
    encountered_final_monster: bool = False
    final_monster_defeated: bool = False


class DungeonRecord(BaseModel):
    id: str
    name: str
    description: str = ""
    discovered: bool = False
    discovery_cost: int = 0
    difficulty: int = 1
    length: int = 10
    encounter_rate: float = 0.3
    monster_type: str = "Goblin"
    variant: Optional[VariantConfig] = None
    completed: bool = False
    explorers: list[ExplorerRecord] = Field(default_factory=list)


class BuildingRecord(BaseModel):
    id: str
    name: str
    level: int = 0
    description: str = ""
    base_cost: int = 0
    cost_multiplier: Optional[float] = None


class TownRecord(BaseModel):
    materials: int = 0
    monster_parts: int = 0
    gold: int = 0
    buildings: list[BuildingRecord] = Field(default_factory=list)
    weapon_stock: dict[str, int] = Field(default_factory=dict)
    potion_stock: dict[str, int] = Field(default_factory=dict)


class GameRecord(BaseModel):
    """A complete saved game."""
    version: int = SAVE_FORMAT_VERSION
    tick: int = 0
    boss_reward_scheme: str = DEFAULT_BOSS_REWARD_SCHEME
    heroes: list[HeroRecord] = Field(default_factory=list)
    dungeons: list[DungeonRecord] = Field(default_factory=list)
    town: TownRecord = Field(default_factory=TownRecord)


# =============================================================================
# Legacy migration
# =============================================================================

def migrate_legacy_potions(hero_data: dict[str, Any]) -> dict[str, Any]:
    """
    Older saves stored potions as a single count of health potions.

    Returns a copy of ``hero_data`` with ``inventory.potions`` as a mapping.
    """
    inventory = hero_data.get("inventory")
    if not isinstance(inventory, dict):
        return hero_data
    potions = inventory.get("potions")
    if isinstance(potions, dict) or potions is None:
        return hero_data

    migrated = dict(hero_data)
    migrated["inventory"] = {**inventory, "potions": {HEALTH_POTION_ID: int(potions)} if potions else {}}
    logger.info("Migrated legacy potion count for hero %s", hero_data.get("id"))
    return migrated


def parse_record(data: dict[str, Any]) -> GameRecord:
    """Validate raw save data, migrating legacy hero records first."""
    if not isinstance(data, dict):
        raise ValueError("save data must be a JSON object")
    data = dict(data)
    data["heroes"] = [migrate_legacy_potions(h) for h in data.get("heroes", [])]
    return GameRecord.model_validate(data)


# =============================================================================
# Live state -> record
# =============================================================================

def _hero_to_record(hero: Hero) -> HeroRecord:
    weapon = None
    if hero.weapon is not None:
        w = hero.weapon
        weapon = WeaponRecord(
            id=w.id,
            name=w.name,
            min_damage=w.min_damage,
            max_damage=w.max_damage,
            durability=w.durability,
            max_durability=w.max_durability,
            sale_price=w.sale_price,
        )
    return HeroRecord(
        id=hero.id,
        name=hero.name,
        health=hero.health,
        max_health=hero.max_health,
        min_damage=hero.min_damage,
        max_damage=hero.max_damage,
        level=hero.level,
        experience=hero.experience,
        weapon=weapon,
        inventory=InventoryRecord(
            gold=hero.inventory.gold,
            monster_parts=hero.inventory.monster_parts,
            potions=dict(hero.inventory.potions),
        ),
        status=hero.status,
        dungeon_id=hero.dungeon_id,
        in_combat=hero.in_combat,
        dungeon_progress=hero.dungeon_progress,
        dungeon_success_chance=hero.dungeon_success_chance,
        has_shopped_for_upgrades=hero.has_shopped_for_upgrades,
        next_shopping_dungeon_id=hero.next_shopping_dungeon_id,
    )


def _dungeon_to_record(dungeon: Dungeon) -> DungeonRecord:
    variant = None
    if dungeon.variant is not None:
        variant = VariantConfig(**dungeon.variant.to_dict())
    return DungeonRecord(
        id=dungeon.id,
        name=dungeon.name,
        description=dungeon.description,
        discovered=dungeon.discovered,
        discovery_cost=dungeon.discovery_cost,
        difficulty=dungeon.difficulty,
        length=dungeon.length,
        encounter_rate=dungeon.encounter_rate,
        monster_type=dungeon.monster_type,
        variant=variant,
        completed=dungeon.completed,
        explorers=[
            ExplorerRecord(
                hero_id=hero_id,
                progress=p.progress,
                encountered_final_monster=p.encountered_final_monster,
                final_monster_defeated=p.final_monster_defeated,
            )
            for hero_id, p in dungeon.explorers.items()
        ],
    )


def _town_to_record(town: Town) -> TownRecord:
    return TownRecord(
        materials=town.resources.materials,
        monster_parts=town.resources.monster_parts,
        gold=town.resources.gold,
        buildings=[
            BuildingRecord(
                id=b.id,
                name=b.name,
                level=b.level,
                description=b.description,
                base_cost=b.base_cost,
                cost_multiplier=b.cost_multiplier,
            )
            for b in town.buildings.values()
        ],
        weapon_stock=dict(town.weapon_stock),
        potion_stock=dict(town.potion_stock),
    )


def to_record(state: GameState) -> GameRecord:
    """Snapshot a live game into a record."""
    return GameRecord(
        tick=state.tick,
        boss_reward_scheme=state.boss_reward_scheme,
        heroes=[_hero_to_record(h) for h in state.heroes],
        dungeons=[_dungeon_to_record(d) for d in state.dungeons],
        town=_town_to_record(state.town),
    )


# =============================================================================
# Record -> live state
# =============================================================================

def _hero_from_record(record: HeroRecord) -> Hero:
    weapon = Weapon(**record.weapon.model_dump()) if record.weapon else None
    hero = Hero(
        name=record.name,
        id=record.id,
        health=min(record.health, record.max_health),
        max_health=record.max_health,
        min_damage=record.min_damage,
        max_damage=record.max_damage,
        level=record.level,
        experience=record.experience,
        weapon=weapon,
        inventory=Inventory(
            gold=record.inventory.gold,
            monster_parts=record.inventory.monster_parts,
            potions=dict(record.inventory.potions),
        ),
        status=record.status,
        dungeon_id=record.dungeon_id if record.status == HeroStatus.EXPLORING else None,
        in_combat=record.in_combat and record.status == HeroStatus.EXPLORING,
        dungeon_progress=record.dungeon_progress,
        dungeon_success_chance=record.dungeon_success_chance,
        has_shopped_for_upgrades=record.has_shopped_for_upgrades,
        next_shopping_dungeon_id=record.next_shopping_dungeon_id,
    )
    return hero


def _dungeon_from_record(record: DungeonRecord, rng: random.Random) -> Dungeon:
    if record.variant is not None:
        variant = MonsterVariant(**record.variant.model_dump())
    else:
        variant = get_random_variant(rng)
    dungeon = Dungeon(
        id=record.id,
        name=record.name,
        description=record.description,
        discovered=record.discovered,
        discovery_cost=record.discovery_cost,
        difficulty=record.difficulty,
        length=record.length,
        encounter_rate=record.encounter_rate,
        monster_type=record.monster_type,
        variant=variant,
        completed=record.completed,
    )
    for explorer in record.explorers:
        progress = ExplorerProgress(
            progress=min(explorer.progress, dungeon.length),
            encountered_final_monster=explorer.encountered_final_monster,
            final_monster_defeated=explorer.final_monster_defeated,
        )
        if progress.encountered_final_monster and not progress.final_monster_defeated:
            progress.current_monster = dungeon.create_final_monster()
        dungeon.explorers[explorer.hero_id] = progress
    return dungeon


def _town_from_record(record: TownRecord, events: EventLog) -> Town:
    return Town(
        events=events,
        resources=Resources(
            materials=record.materials,
            monster_parts=record.monster_parts,
            gold=record.gold,
        ),
        buildings={b.id: Building(**b.model_dump()) for b in record.buildings},
        weapon_stock=dict(record.weapon_stock),
        potion_stock=dict(record.potion_stock),
    )


def from_record(record: GameRecord, seed: Optional[int] = None) -> GameState:
    """Rebuild a live game from a record."""
    rng = random.Random(seed)
    events = EventLog()
    events.tick = record.tick
    state = GameState(
        heroes=[_hero_from_record(h) for h in record.heroes],
        dungeons=[_dungeon_from_record(d, rng) for d in record.dungeons],
        town=_town_from_record(record.town, events),
        events=events,
        rng=rng,
        boss_reward_scheme=record.boss_reward_scheme,
    )

    for hero in state.heroes:
        if not hero.in_combat:
            continue
        dungeon = state.get_dungeon(hero.dungeon_id)
        progress = dungeon.get_explorer_progress(hero.id) if dungeon else None
        if progress is None or progress.current_monster is None:
            logger.warning("Hero %s saved in combat with no pending monster; releasing", hero.id)
            hero.set_combat(False)

    return state


# =============================================================================
# Files
# =============================================================================

def save_game(state: GameState, path: Union[str, Path]) -> bool:
    """
    Write a game to ``path`` as JSON.

    Returns:
        True on success; failures are logged.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(to_record(state).model_dump_json(indent=2), encoding="utf-8")
    except OSError as e:
        logger.error("Failed to save game to %s: %s", path, e)
        return False
    logger.info("Game saved to %s (tick %d)", path, state.tick)
    return True


def load_game(path: Union[str, Path], seed: Optional[int] = None) -> Optional[GameState]:
    """
    Load a game written by ``save_game``.

    Returns:
        The rebuilt GameState, or None if the file is missing or invalid.
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        record = parse_record(data)
    except (OSError, ValueError) as e:
        logger.error("Failed to load game from %s: %s", path, e)
        return None
    return from_record(record, seed)
