"""
Game session service.
"""

import asyncio
import logging
import uuid
from pathlib import Path
from typing import Dict, Optional, List, Any

from heroville.config import settings
from heroville.core.events import GameEvent
from heroville.core.game_state import new_game
from heroville.core.hero import Hero
from heroville.core.dungeon import Dungeon
from heroville.core.town import Town
from heroville.core.persistence import GameRecord, from_record, parse_record, to_record
from heroville.game.driver import TickDriver
from heroville.game.engine import GameEngine

from ..schemas.common import ActionResponse, EventSchema
from ..schemas.game import (
    BuildingSchema,
    CreateGameRequest,
    DungeonSchema,
    EstimateResponse,
    ExplorerSchema,
    GameStateSchema,
    HeroSchema,
    InventorySchema,
    TickResponse,
    TownSchema,
    WeaponSchema,
)

logger = logging.getLogger(__name__)


# === Conversions ===


def event_to_schema(event: GameEvent) -> EventSchema:
    return EventSchema(**event.to_dict())


def hero_to_schema(hero: Hero) -> HeroSchema:
    weapon = None
    if hero.weapon is not None:
        weapon = WeaponSchema(
            id=hero.weapon.id,
            name=hero.weapon.name,
            min_damage=hero.weapon.min_damage,
            max_damage=hero.weapon.max_damage,
            durability=hero.weapon.durability,
            max_durability=hero.weapon.max_durability,
        )
    return HeroSchema(
        id=hero.id,
        name=hero.name,
        health=hero.health,
        max_health=hero.max_health,
        damage_range=list(hero.damage_range),
        level=hero.level,
        experience=hero.experience,
        status=hero.status,
        dungeon_id=hero.dungeon_id,
        in_combat=hero.in_combat,
        dungeon_progress=hero.dungeon_progress,
        dungeon_success_chance=hero.dungeon_success_chance,
        has_shopped_for_upgrades=hero.has_shopped_for_upgrades,
        weapon=weapon,
        inventory=InventorySchema(
            gold=hero.inventory.gold,
            monster_parts=hero.inventory.monster_parts,
            potions=dict(hero.inventory.potions),
        ),
    )


def dungeon_to_schema(dungeon: Dungeon) -> DungeonSchema:
    return DungeonSchema(
        id=dungeon.id,
        name=dungeon.name,
        description=dungeon.description,
        discovered=dungeon.discovered,
        discovery_cost=dungeon.discovery_cost,
        difficulty=dungeon.difficulty,
        length=dungeon.length,
        encounter_rate=dungeon.encounter_rate,
        monster_type=dungeon.monster_type,
        boss_name=dungeon.variant.apply_name(dungeon.monster_type),
        completed=dungeon.completed,
        explorers=[
            ExplorerSchema(
                hero_id=hero_id,
                progress=p.progress,
                encountered_final_monster=p.encountered_final_monster,
                final_monster_defeated=p.final_monster_defeated,
                current_monster=p.current_monster.name if p.current_monster else None,
            )
            for hero_id, p in dungeon.explorers.items()
        ],
    )


def town_to_schema(town: Town) -> TownSchema:
    return TownSchema(
        resources=town.resources.to_dict(),
        buildings=[
            BuildingSchema(
                id=b.id,
                name=b.name,
                level=b.level,
                description=b.description,
                upgrade_cost=b.upgrade_cost(),
            )
            for b in town.buildings.values()
        ],
        weapon_stock=dict(town.weapon_stock),
        potion_stock=dict(town.potion_stock),
    )


class GameService:
    """Game session management service."""

    def __init__(self, max_sessions: int = settings.MAX_SESSIONS):
        self._engines: Dict[str, GameEngine] = {}
        self._drivers: Dict[str, TickDriver] = {}
        self._tasks: Dict[str, asyncio.Task] = {}
        self.max_sessions = max_sessions

    # === Sessions ===

    def _register(self, engine: GameEngine) -> str:
        game_id = str(uuid.uuid4())
        while len(self._engines) >= self.max_sessions:
            oldest = next(iter(self._engines))
            logger.info("Session limit reached; dropping game %s", oldest)
            self.delete_game(oldest)
        self._engines[game_id] = engine
        return game_id

    def _new_engine(self, state) -> GameEngine:
        return GameEngine.from_settings(state, settings)

    def get_engine(self, game_id: str) -> Optional[GameEngine]:
        """Get raw engine object."""
        return self._engines.get(game_id)

    def _require_engine(self, game_id: str) -> GameEngine:
        engine = self._engines.get(game_id)
        if engine is None:
            raise ValueError("Game not found")
        return engine

    def create_game(self, request: CreateGameRequest) -> GameStateSchema:
        """Create a new game."""
        state = new_game(
            seed=request.seed,
            boss_reward_scheme=settings.BOSS_REWARD_SCHEME,
            log_max_entries=settings.LOG_MAX_ENTRIES,
        )
        for dungeon_id in request.discover:
            dungeon = state.get_dungeon(dungeon_id)
            if dungeon is None:
                raise ValueError(f"Unknown dungeon: {dungeon_id}")
            dungeon.discovered = True
        for _ in range(request.heroes):
            state.spawn_hero()
        state.events.drain_new()

        game_id = self._register(self._new_engine(state))
        return self._to_schema(game_id)

    def get_game(self, game_id: str) -> Optional[GameStateSchema]:
        """Get game state."""
        if game_id not in self._engines:
            return None
        return self._to_schema(game_id)

    def delete_game(self, game_id: str) -> None:
        """Delete game."""
        self.stop_driver(game_id)
        self._engines.pop(game_id, None)

    def _to_schema(self, game_id: str) -> GameStateSchema:
        state = self._engines[game_id].state
        return GameStateSchema(
            game_id=game_id,
            tick=state.tick,
            heroes=[hero_to_schema(h) for h in state.heroes],
            dungeons=[dungeon_to_schema(d) for d in state.dungeons],
            town=town_to_schema(state.town),
        )

    # === Simulation ===

    def tick(self, game_id: str, ticks: int = 1) -> TickResponse:
        """Advance a game by ``ticks`` ticks."""
        engine = self._require_engine(game_id)
        events = engine.run(ticks)
        return TickResponse(
            game_id=game_id,
            tick=engine.tick_count,
            events=[event_to_schema(e) for e in events],
        )

    def get_logs(self, game_id: str, limit: Optional[int] = None) -> Optional[List[EventSchema]]:
        """Newest-first event log."""
        engine = self.get_engine(game_id)
        if engine is None:
            return None
        return [event_to_schema(e) for e in engine.state.events.recent(limit)]

    def get_hero(self, game_id: str, hero_id: str) -> Optional[HeroSchema]:
        """Get hero state."""
        engine = self.get_engine(game_id)
        hero = engine.state.get_hero(hero_id) if engine else None
        return hero_to_schema(hero) if hero else None

    def estimate(
        self, game_id: str, hero_id: str, dungeon_id: str, runs: int
    ) -> EstimateResponse:
        """Estimate a hero's chance of clearing a dungeon."""
        engine = self._require_engine(game_id)
        if engine.state.get_hero(hero_id) is None:
            raise ValueError("Hero not found")
        if engine.state.get_dungeon(dungeon_id) is None:
            raise ValueError("Dungeon not found")
        chance = engine.estimate(hero_id, dungeon_id, runs=runs)
        return EstimateResponse(
            hero_id=hero_id, dungeon_id=dungeon_id, success_chance=chance, runs=runs
        )

    # === Save / load ===

    def export_record(self, game_id: str) -> GameRecord:
        """Snapshot a game as a save record."""
        return to_record(self._require_engine(game_id).state)

    def import_record(self, data: Dict[str, Any]) -> GameStateSchema:
        """Start a new session from a save record."""
        state = from_record(parse_record(data))
        game_id = self._register(self._new_engine(state))
        return self._to_schema(game_id)

    # === Town actions ===

    def _action(self, engine: GameEngine, success: bool) -> ActionResponse:
        events = [event_to_schema(e) for e in engine.state.events.drain_new()]
        return ActionResponse(
            success=success,
            message=events[-1].message if events else None,
            events=events,
        )

    def gather_materials(self, game_id: str) -> ActionResponse:
        engine = self._require_engine(game_id)
        engine.gather_materials()
        return self._action(engine, True)

    def upgrade_building(self, game_id: str, building_id: str) -> ActionResponse:
        engine = self._require_engine(game_id)
        return self._action(engine, engine.upgrade_building(building_id))

    def discover_dungeon(self, game_id: str, dungeon_id: str) -> ActionResponse:
        engine = self._require_engine(game_id)
        return self._action(engine, engine.discover_dungeon(dungeon_id))

    def craft_weapon(self, game_id: str, weapon_id: str) -> ActionResponse:
        engine = self._require_engine(game_id)
        return self._action(engine, engine.craft_weapon(weapon_id))

    def craft_potion(self, game_id: str, potion_id: str) -> ActionResponse:
        engine = self._require_engine(game_id)
        return self._action(engine, engine.craft_potion(potion_id))

    # === Background ticking ===

    def start_driver(self, game_id: str) -> bool:
        """Tick a game in the background at the configured cadence."""
        engine = self._require_engine(game_id)
        if game_id in self._tasks:
            return False
        save_path = Path(settings.SAVE_PATH) / f"{game_id}.json" if settings.SAVE_PATH else None
        driver = TickDriver(
            engine,
            interval=settings.TICK_INTERVAL,
            autosave_interval=settings.AUTOSAVE_INTERVAL,
            save_path=save_path,
        )
        self._drivers[game_id] = driver
        self._tasks[game_id] = asyncio.get_running_loop().create_task(driver.run())
        return True

    def stop_driver(self, game_id: str) -> bool:
        driver = self._drivers.pop(game_id, None)
        task = self._tasks.pop(game_id, None)
        if driver is None:
            return False
        driver.stop()
        if task is not None:
            task.cancel()
        return True
