"""
Configuration settings using Pydantic Settings.
"""

from pathlib import Path
from pydantic import model_validator
from pydantic_settings import BaseSettings
from functools import lru_cache

BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    DATABASE_PATH: str = "database/lifeline.db"

    BIRTHDATE_STORE_KEY: str = "birthdate"
    NOTES_STORE_KEY: str = "events"

    DEFAULT_GRANULARITY: str = "years"
    YEARS_SPAN: int = 100
    SUGGESTED_AGE_YEARS: int = 30

    MARKER_PITCH: int = 80
    INTERACTION_COOLDOWN_SECONDS: float = 0.5
    SCROLL_SETTLE_SECONDS: float = 0.05
    PINCH_STEP_RATIO: float = 2.0

    DEBUG: bool = False

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore"
    }

    @model_validator(mode="after")
    def resolve_relative_paths(self):
        db_path = Path(self.DATABASE_PATH)
        if not db_path.is_absolute():
            self.DATABASE_PATH = str((BASE_DIR / db_path).resolve())

        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    :return: Cached Settings instance
    :rtype: Settings
    """
    return Settings()


settings = get_settings()
