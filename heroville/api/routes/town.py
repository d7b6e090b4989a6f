"""
Town action API routes.
"""

from fastapi import APIRouter, HTTPException, Depends

from ..schemas.common import ActionResponse
from ..schemas.game import CraftRequest
from ..services.game_service import GameService
from ..dependencies import get_game_service

router = APIRouter()


@router.post("/{game_id}/gather", response_model=ActionResponse)
async def gather_materials(
    game_id: str,
    service: GameService = Depends(get_game_service),
):
    """Gather one material."""
    try:
        return service.gather_materials(game_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{game_id}/buildings/{building_id}/upgrade", response_model=ActionResponse)
async def upgrade_building(
    game_id: str,
    building_id: str,
    service: GameService = Depends(get_game_service),
):
    """Upgrade a building. Upgrading the tent brings a new hero."""
    try:
        return service.upgrade_building(game_id, building_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{game_id}/dungeons/{dungeon_id}/discover", response_model=ActionResponse)
async def discover_dungeon(
    game_id: str,
    dungeon_id: str,
    service: GameService = Depends(get_game_service),
):
    """Spend gold to discover a dungeon."""
    try:
        return service.discover_dungeon(game_id, dungeon_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{game_id}/craft/weapon", response_model=ActionResponse)
async def craft_weapon(
    game_id: str,
    request: CraftRequest,
    service: GameService = Depends(get_game_service),
):
    """Forge a weapon into town stock."""
    try:
        return service.craft_weapon(game_id, request.item_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{game_id}/craft/potion", response_model=ActionResponse)
async def craft_potion(
    game_id: str,
    request: CraftRequest,
    service: GameService = Depends(get_game_service),
):
    """Brew a potion into town stock."""
    try:
        return service.craft_potion(game_id, request.item_id)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
