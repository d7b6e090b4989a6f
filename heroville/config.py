"""
Heroville configuration settings.
"""

from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Simulation and service settings."""

    # Server
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"

    # CORS
    CORS_ORIGINS: List[str] = ["*"]

    # Tick loop
    TICK_INTERVAL: float = 1.0  # seconds per tick
    AUTOSAVE_INTERVAL: float = 60.0
    SAVE_PATH: Optional[str] = None  # Autosave directory, one file per game

    # Hero decisions
    SIMULATION_RUNS: int = 1000
    SUCCESS_THRESHOLD: int = 50

    # Rewards
    BOSS_REWARD_SCHEME: str = "current"  # "current" or "legacy"

    # Event log
    LOG_MAX_ENTRIES: int = 100

    # Sessions
    MAX_SESSIONS: int = 100

    class Config:
        env_file = ".env"
        env_prefix = "HEROVILLE_"


settings = Settings()
