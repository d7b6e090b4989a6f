"""
Common API schemas.
"""

from pydantic import BaseModel
from typing import Optional, List
from enum import Enum


class ResponseStatus(str, Enum):
    """Response status enum."""

    SUCCESS = "success"
    ERROR = "error"


class EventSchema(BaseModel):
    """Narrative event schema."""

    tick: int
    kind: str
    message: str
    hero_id: Optional[str] = None
    dungeon_id: Optional[str] = None


class BaseResponse(BaseModel):
    """Base response model."""

    status: ResponseStatus = ResponseStatus.SUCCESS
    message: Optional[str] = None


class ActionResponse(BaseResponse):
    """Result of a player action, with the events it produced."""

    success: bool
    events: List[EventSchema] = []
