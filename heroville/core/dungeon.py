"""Dungeon entity for Heroville.

A dungeon is shared by every hero exploring it. Each hero gets its own
``ExplorerProgress`` record keyed by hero ID, and every operation reads and
writes only the record of the hero it was called for, so heroes can be
processed in any order within a tick.
"""

import logging
import random
from dataclasses import dataclass, field
from typing import Optional

from .constants import (
    BOSS_DIFFICULTY_MULTIPLIER,
    DEFAULT_DUNGEON_LENGTH,
    DEFAULT_ENCOUNTER_RATE,
    DEFAULT_MONSTER_TYPE,
)
from .monster import (
    Monster,
    MonsterVariant,
    create_monster,
    create_variant_monster,
    get_random_variant,
)

logger = logging.getLogger(__name__)


@dataclass
class ExplorerProgress:
    """One hero's position and encounter state inside a dungeon."""

    progress: int = 0
    encountered_final_monster: bool = False
    current_monster: Optional[Monster] = None
    final_monster_defeated: bool = False
    combat_round: int = 0  # Only meaningful while an encounter is live

    @property
    def in_encounter(self) -> bool:
        return self.current_monster is not None


@dataclass
class AdvanceResult:
    """Outcome of a single ``advance_explorer`` step."""

    success: bool
    message: str
    reached_end: bool = False
    at_final_monster: bool = False
    encounter: bool = False
    monster: Optional[Monster] = None


@dataclass
class Dungeon:
    """
    A linear dungeon ending in a variant boss.

    ``explorers`` maps hero ID to that hero's progress. A hero appears at most
    once; entries are created on assignment and removed when the hero leaves.
    """

    id: str
    name: str
    description: str = ""
    discovered: bool = False
    discovery_cost: int = 0
    difficulty: int = 1
    length: int = DEFAULT_DUNGEON_LENGTH
    encounter_rate: float = DEFAULT_ENCOUNTER_RATE
    monster_type: str = DEFAULT_MONSTER_TYPE
    variant: Optional[MonsterVariant] = None
    completed: bool = False
    explorers: dict[str, ExplorerProgress] = field(default_factory=dict)

    def __post_init__(self):
        if self.variant is None:
            self.variant = get_random_variant()

    # ------------------------------------------------------------------
    # Explorer bookkeeping
    # ------------------------------------------------------------------

    def add_explorer(self, hero_id: str, progress: int = 0) -> ExplorerProgress:
        """
        Start tracking a hero at ``progress``.

        Callers check ``get_explorer_progress`` first; an existing record is
        left untouched and returned as-is.
        """
        existing = self.explorers.get(hero_id)
        if existing is not None:
            logger.debug("Hero %s already exploring %s", hero_id, self.id)
            return existing
        record = ExplorerProgress(progress=max(0, min(progress, self.length)))
        self.explorers[hero_id] = record
        return record

    def get_explorer_progress(self, hero_id: str) -> Optional[ExplorerProgress]:
        return self.explorers.get(hero_id)

    def remove_explorer(self, hero_id: str) -> Optional[ExplorerProgress]:
        return self.explorers.pop(hero_id, None)

    def explorer_count(self) -> int:
        return len(self.explorers)

    # ------------------------------------------------------------------
    # Monsters
    # ------------------------------------------------------------------

    @property
    def boss_level(self) -> float:
        return self.difficulty * BOSS_DIFFICULTY_MULTIPLIER

    def create_dungeon_monster(self) -> Monster:
        """Regular monster at the dungeon's difficulty."""
        return create_monster(self.monster_type, self.difficulty)

    def create_final_monster(self) -> Monster:
        """The boss: dungeon monster type at 1.5x difficulty, boosted by the variant."""
        return create_variant_monster(self.monster_type, self.boss_level, self.variant)

    def _encounter_final_monster(self, explorer: ExplorerProgress) -> AdvanceResult:
        explorer.current_monster = self.create_final_monster()
        explorer.encountered_final_monster = True
        return AdvanceResult(
            success=True,
            reached_end=True,
            at_final_monster=True,
            encounter=True,
            monster=explorer.current_monster,
            message=f"Final monster encountered: {explorer.current_monster.name}",
        )

    # ------------------------------------------------------------------
    # Progression
    # ------------------------------------------------------------------

    def advance_explorer(
        self, hero_id: str, rng: Optional[random.Random] = None
    ) -> AdvanceResult:
        """
        Take one step through the dungeon for a hero.

        Progress never passes ``length``. Reaching ``length`` spawns the boss;
        calling again while the boss is pending changes nothing.

        Args:
            hero_id: The exploring hero.
            rng: Random source for the encounter roll.

        Returns:
            AdvanceResult describing what happened.
        """
        rng = rng or random
        explorer = self.explorers.get(hero_id)
        if explorer is None:
            return AdvanceResult(success=False, message="Hero not found in this dungeon")

        if explorer.progress >= self.length:
            if explorer.current_monster is None:
                return self._encounter_final_monster(explorer)
            return AdvanceResult(
                success=True,
                reached_end=True,
                at_final_monster=True,
                encounter=True,
                monster=explorer.current_monster,
                message="Already at the end of the dungeon",
            )

        explorer.progress += 1

        if explorer.progress >= self.length:
            return self._encounter_final_monster(explorer)

        if rng.random() < self.encounter_rate:
            explorer.current_monster = self.create_dungeon_monster()
            return AdvanceResult(
                success=True,
                encounter=True,
                monster=explorer.current_monster,
                message=f"Encountered a {explorer.current_monster.name}",
            )

        explorer.current_monster = None
        return AdvanceResult(success=True, message="Advanced without encounter")

    def complete_encounter(self, hero_id: str) -> Optional[Monster]:
        """
        Close out a won encounter for a hero.

        Returns:
            The defeated monster, or None when nothing was pending.
        """
        explorer = self.explorers.get(hero_id)
        if explorer is None:
            return None
        monster = explorer.current_monster
        if monster is not None and monster.is_variant:
            explorer.final_monster_defeated = True
        explorer.current_monster = None
        explorer.combat_round = 0
        return monster

    def complete_dungeon(self) -> None:
        self.completed = True
