"""Centralized application configuration.

All settings are read from environment variables (prefix DAMAS_) or a .env.damas file.
Every setting has a default, so the app starts without any configuration.
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

from src.core.shared_types import Difficulty


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="DAMAS_", env_file=".env.damas", env_file_encoding="utf-8",
    )

    # Rooms
    room_code_length: int = 6
    match_start_delay: float = 0.5

    # Computer opponent
    ai_think_delay: float = 0.3
    easy_depth: int = 2
    medium_depth: int = 4
    hard_depth: int = 6
    easy_random_probability: float = 0.3

    # Room store
    room_store: Literal["memory", "sql"] = "memory"
    database_url: str = "sqlite:///:memory:"

    log_level: str = "INFO"

    @property
    def search_depths(self) -> dict[Difficulty, int]:
        """Depth budget of the AI search per difficulty tier."""
        return {
            Difficulty.EASY: self.easy_depth,
            Difficulty.MEDIUM: self.medium_depth,
            Difficulty.HARD: self.hard_depth,
        }
