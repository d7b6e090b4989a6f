"""
Game session API routes.
"""

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, HTTPException, Depends, Query
from pydantic import ValidationError

from heroville.core.persistence import GameRecord

from ..schemas.common import BaseResponse, EventSchema
from ..schemas.game import (
    CreateGameRequest,
    EstimateResponse,
    GameStateSchema,
    HeroSchema,
    TickRequest,
    TickResponse,
)
from ..services.game_service import GameService
from ..dependencies import get_game_service

router = APIRouter()


@router.post("/create", response_model=GameStateSchema)
async def create_game(
    request: CreateGameRequest,
    service: GameService = Depends(get_game_service),
):
    """Create a new game."""
    try:
        return service.create_game(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/load", response_model=GameStateSchema)
async def load_game(
    record: Dict[str, Any] = Body(...),
    service: GameService = Depends(get_game_service),
):
    """Start a new game from a save record."""
    try:
        return service.import_record(record)
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/{game_id}", response_model=GameStateSchema)
async def get_game(
    game_id: str,
    service: GameService = Depends(get_game_service),
):
    """Get game state."""
    game = service.get_game(game_id)
    if not game:
        raise HTTPException(status_code=404, detail="Game not found")
    return game


@router.delete("/{game_id}", response_model=BaseResponse)
async def delete_game(
    game_id: str,
    service: GameService = Depends(get_game_service),
):
    """Delete game."""
    if service.get_engine(game_id) is None:
        raise HTTPException(status_code=404, detail="Game not found")
    service.delete_game(game_id)
    return BaseResponse(message="Game deleted")


@router.post("/{game_id}/tick", response_model=TickResponse)
async def tick_game(
    game_id: str,
    request: TickRequest,
    service: GameService = Depends(get_game_service),
):
    """Advance the simulation."""
    try:
        return service.tick(game_id, request.ticks)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{game_id}/logs", response_model=List[EventSchema])
async def get_logs(
    game_id: str,
    limit: Optional[int] = Query(default=None, ge=1),
    service: GameService = Depends(get_game_service),
):
    """Get the event log, newest first."""
    logs = service.get_logs(game_id, limit)
    if logs is None:
        raise HTTPException(status_code=404, detail="Game not found")
    return logs


@router.get("/{game_id}/heroes/{hero_id}", response_model=HeroSchema)
async def get_hero(
    game_id: str,
    hero_id: str,
    service: GameService = Depends(get_game_service),
):
    """Get hero state."""
    hero = service.get_hero(game_id, hero_id)
    if not hero:
        raise HTTPException(status_code=404, detail="Hero not found")
    return hero


@router.get("/{game_id}/heroes/{hero_id}/estimate/{dungeon_id}", response_model=EstimateResponse)
async def estimate_success(
    game_id: str,
    hero_id: str,
    dungeon_id: str,
    runs: int = Query(default=200, ge=1, le=10000),
    service: GameService = Depends(get_game_service),
):
    """Estimate the hero's chance of clearing a dungeon."""
    try:
        return service.estimate(game_id, hero_id, dungeon_id, runs)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("/{game_id}/save", response_model=GameRecord)
async def save_game(
    game_id: str,
    service: GameService = Depends(get_game_service),
):
    """Export the game as a save record."""
    try:
        return service.export_record(game_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{game_id}/start", response_model=BaseResponse)
async def start_game(
    game_id: str,
    service: GameService = Depends(get_game_service),
):
    """Tick the game in the background."""
    try:
        started = service.start_driver(game_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return BaseResponse(message="Game started" if started else "Game already running")


@router.post("/{game_id}/stop", response_model=BaseResponse)
async def stop_game(
    game_id: str,
    service: GameService = Depends(get_game_service),
):
    """Stop background ticking."""
    if service.get_engine(game_id) is None:
        raise HTTPException(status_code=404, detail="Game not found")
    stopped = service.stop_driver(game_id)
    return BaseResponse(message="Game stopped" if stopped else "Game was not running")
