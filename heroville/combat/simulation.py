"""Monte Carlo Dungeon Simulation for Heroville.

Estimates how likely a hero is to clear a dungeon by running many
independent trial runs with the live combat rules.
"""

import logging
import random
import statistics
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, TYPE_CHECKING

from ..core.constants import DEFAULT_SIMULATION_RUNS
from ..data.loaders import get_healing_potions
from .resolver import fight_to_completion

if TYPE_CHECKING:
    from ..core.dungeon import Dungeon
    from ..core.hero import Hero
    from ..data.models import ConsumableTemplate

logger = logging.getLogger(__name__)


@dataclass
class SimulationResult:
    """
    Result of a Monte Carlo dungeon simulation.
    """

    success_chance: int  # Rounded percentage, 0 to 100
    success_rate: float  # 0.0 to 1.0
    successes: int
    runs: int

    # Regular encounters fought per trial
    avg_encounters: float

    # Confidence interval (95%) on success_rate
    confidence: Tuple[float, float] = (0.0, 1.0)


class DungeonSimulator:
    """
    Monte Carlo dungeon-clear estimator.

    Each trial clones the hero at full health, walks every step of the
    dungeon rolling for regular encounters, then fights the boss. Weapon wear
    and potion use happen on the clone and are discarded after the trial.

    Usage:
        simulator = DungeonSimulator(runs=1000, seed=7)
        chance = simulator.estimate_success_chance(hero, dungeon)
    """

    def __init__(self, runs: int = DEFAULT_SIMULATION_RUNS, seed: Optional[int] = None):
        """
        Initialize simulator.

        Args:
            runs: Trials per estimate.
            seed: Base seed for reproducibility (per-trial seeds are derived).
        """
        self.runs = runs
        self.base_seed = seed
        self.rng = random.Random(seed)

    def simulate(
        self,
        hero: "Hero",
        dungeon: "Dungeon",
        catalog: Optional[Sequence["ConsumableTemplate"]] = None,
    ) -> SimulationResult:
        """
        Run ``runs`` independent trials of ``hero`` against ``dungeon``.

        Returns:
            SimulationResult with the estimate and its statistics.
        """
        if catalog is None:
            catalog = get_healing_potions()

        successes = 0
        encounters = []
        for i in range(self.runs):
            rng = random.Random(self._get_trial_seed(i))
            survived, fought = self._run_trial(hero, dungeon, rng, catalog)
            encounters.append(fought)
            if survived:
                successes += 1

        result = self._analyze_results(successes, encounters)
        logger.debug(
            "%s vs %s: %d%% over %d runs",
            hero.name, dungeon.id, result.success_chance, result.runs,
        )
        return result

    def estimate_success_chance(self, hero: "Hero", dungeon: "Dungeon") -> int:
        """Estimated clear chance as an integer percentage."""
        return self.simulate(hero, dungeon).success_chance

    def _run_trial(
        self,
        hero: "Hero",
        dungeon: "Dungeon",
        rng: random.Random,
        catalog: Sequence["ConsumableTemplate"],
    ) -> Tuple[bool, int]:
        """One trial run. Returns (cleared, regular encounters fought)."""
        sim_hero = hero.clone()
        sim_hero.health = sim_hero.max_health

        fought = 0
        for _ in range(dungeon.length):
            if rng.random() < dungeon.encounter_rate:
                fought += 1
                monster = dungeon.create_dungeon_monster()
                if not fight_to_completion(sim_hero, monster, rng, catalog):
                    return False, fought

        boss = dungeon.create_final_monster()
        return fight_to_completion(sim_hero, boss, rng, catalog), fought

    def _get_trial_seed(self, trial: int) -> int:
        """Get deterministic seed for a trial."""
        if self.base_seed is not None:
            return self.base_seed + trial
        return self.rng.randint(0, 2**31)

    def _analyze_results(self, successes: int, encounters: list[int]) -> SimulationResult:
        runs = self.runs
        success_rate = successes / runs if runs > 0 else 0.0
        return SimulationResult(
            success_chance=round(100 * success_rate),
            success_rate=success_rate,
            successes=successes,
            runs=runs,
            avg_encounters=statistics.mean(encounters) if encounters else 0.0,
            confidence=self._calculate_confidence_interval(successes, runs),
        )

    def _calculate_confidence_interval(
        self, successes: int, n: int, confidence: float = 0.95
    ) -> Tuple[float, float]:
        """Calculate Wilson score confidence interval."""
        if n == 0:
            return (0.0, 1.0)

        z = 1.96  # 95% confidence
        p = successes / n

        denominator = 1 + z * z / n
        center = (p + z * z / (2 * n)) / denominator

        spread = z * ((p * (1 - p) / n + z * z / (4 * n * n)) ** 0.5) / denominator

        lower = max(0.0, center - spread)
        upper = min(1.0, center + spread)

        return (lower, upper)


def estimate_success_chance(
    hero: "Hero",
    dungeon: "Dungeon",
    runs: int = DEFAULT_SIMULATION_RUNS,
    seed: Optional[int] = None,
) -> int:
    """
    Quick estimate helper returning the clear chance in percent.
    """
    return DungeonSimulator(runs=runs, seed=seed).estimate_success_chance(hero, dungeon)
