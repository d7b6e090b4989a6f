"""Fixed-cadence tick driver for Heroville.

Converts elapsed wall-clock time into whole engine ticks. Time left over
after the last whole tick is carried into the next call, so slow frames
catch up instead of losing ticks.
"""

import asyncio
import logging
import math
from pathlib import Path
from typing import Optional, Union

from heroville.core.persistence import save_game

from .engine import GameEngine

logger = logging.getLogger(__name__)


class TickDriver:
    """
    Schedules ``GameEngine.tick()`` at a fixed interval.

    Ticks and autosaves run synchronously on the event loop, so a slow tick
    delays other coroutines on that loop until it returns.

    Usage:
        driver = TickDriver(engine, interval=1.0)
        task = asyncio.create_task(driver.run())
        ...
        driver.stop()
    """

    def __init__(
        self,
        engine: GameEngine,
        interval: float = 1.0,
        autosave_interval: Optional[float] = None,
        save_path: Optional[Union[str, Path]] = None,
    ):
        """
        Initialize driver.

        Args:
            engine: Engine to tick.
            interval: Seconds per tick.
            autosave_interval: Seconds between autosaves (disabled if None).
            save_path: Autosave destination (disabled if None).
        """
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.engine = engine
        self.interval = interval
        self.autosave_interval = autosave_interval
        self.save_path = save_path
        self.accumulated = 0.0
        self.since_save = 0.0
        self.running = False

    def advance(self, elapsed: float) -> int:
        """
        Account for ``elapsed`` seconds and run every tick now due.

        Returns:
            Number of ticks run.
        """
        self.accumulated += max(0.0, elapsed)
        ticks = math.floor(self.accumulated / self.interval)
        for _ in range(ticks):
            self.engine.tick()
        self.accumulated -= ticks * self.interval

        self.since_save += max(0.0, elapsed)
        if self._autosave_due():
            self.save()
        return ticks

    def _autosave_due(self) -> bool:
        return (
            self.save_path is not None
            and self.autosave_interval is not None
            and self.since_save >= self.autosave_interval
        )

    def save(self) -> bool:
        self.since_save = 0.0
        if self.save_path is None:
            return False
        return save_game(self.engine.state, self.save_path)

    async def run(self) -> None:
        """Tick until ``stop()`` is called."""
        loop = asyncio.get_running_loop()
        self.running = True
        last = loop.time()
        logger.info("Tick driver started (interval=%.2fs)", self.interval)
        while self.running:
            try:
                await asyncio.sleep(self.interval)
            except asyncio.CancelledError:
                self.running = False
                logger.info("Tick driver cancelled at tick %d", self.engine.tick_count)
                raise
            if not self.running:
                break
            now = loop.time()
            self.advance(now - last)
            last = now
        logger.info("Tick driver stopped at tick %d", self.engine.tick_count)

    def stop(self) -> None:
        self.running = False
