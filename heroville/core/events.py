"""Event log sink for Heroville.

Subsystems emit human-readable narrative events (combat, rewards, level-ups,
town activity) into a bounded log. Storage and display are left to whoever
reads the log; diagnostics go through the standard ``logging`` module instead.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Iterator

from .constants import LOG_MAX_ENTRIES


class EventKind(Enum):
    """Narrative event categories."""

    ENGAGE = "engage"
    POTION = "potion"
    ROUND = "round"
    MONSTER_DEFEATED = "monster_defeated"
    REWARD = "reward"
    LEVEL_UP = "level_up"
    WEAPON_BREAK = "weapon_break"
    RETURN_TO_TOWN = "return_to_town"
    HERO_DEFEATED = "hero_defeated"
    DUNGEON_DISCOVERED = "dungeon_discovered"
    DUNGEON_ASSIGNED = "dungeon_assigned"
    EXPLORATION = "exploration"
    BUILDING_UNLOCKED = "building_unlocked"
    BUILDING_UPGRADED = "building_upgraded"
    CRAFT = "craft"
    PURCHASE = "purchase"
    REPAIR = "repair"
    HEALING = "healing"
    DECISION = "decision"
    HERO_SPAWNED = "hero_spawned"
    RESOURCES = "resources"
    WARNING = "warning"


@dataclass(frozen=True)
class GameEvent:
    """A single narrative log entry."""

    tick: int
    kind: EventKind
    message: str
    hero_id: Optional[str] = None
    dungeon_id: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "tick": self.tick,
            "kind": self.kind.value,
            "message": self.message,
            "hero_id": self.hero_id,
            "dungeon_id": self.dungeon_id,
        }


class EventLog:
    """
    Bounded narrative log, newest entry first.

    ``tick`` is stamped onto each event by whoever owns the clock (the engine
    advances it once per tick). Events emitted since the last ``drain_new()``
    are kept separately so the engine can return exactly one tick's events.
    """

    def __init__(self, max_entries: int = LOG_MAX_ENTRIES):
        self.max_entries = max_entries
        self.tick = 0
        self._entries: deque[GameEvent] = deque(maxlen=max_entries)
        self._pending: list[GameEvent] = []

    def emit(
        self,
        kind: EventKind,
        message: str,
        hero_id: Optional[str] = None,
        dungeon_id: Optional[str] = None,
    ) -> GameEvent:
        event = GameEvent(
            tick=self.tick,
            kind=kind,
            message=message,
            hero_id=hero_id,
            dungeon_id=dungeon_id,
        )
        self._entries.appendleft(event)
        self._pending.append(event)
        return event

    def warn(self, message: str, **kwargs) -> GameEvent:
        return self.emit(EventKind.WARNING, message, **kwargs)

    def drain_new(self) -> list[GameEvent]:
        """Return events emitted since the previous drain, oldest first."""
        events, self._pending = self._pending, []
        return events

    def recent(self, limit: Optional[int] = None) -> list[GameEvent]:
        """Newest-first view of the log."""
        entries = list(self._entries)
        return entries[:limit] if limit is not None else entries

    def messages(self) -> list[str]:
        return [e.message for e in self._entries]

    def clear(self) -> None:
        self._entries.clear()
        self._pending.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[GameEvent]:
        return iter(self._entries)
