"""Application configuration.

Uses Pydantic BaseSettings for declarative environment variable binding.
A `.env` file is looked up next to the package and in the working directory.
"""
import os
import logging
from typing import Optional
from pathlib import Path
from dotenv import load_dotenv

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

__all__ = ["settings", "Settings", "ENV_FILE_PATH", "ENV_FILE_LOADED"]

# Resolved .env path used at startup
ENV_FILE_PATH: Optional[Path] = None
ENV_FILE_LOADED: bool = False

STORE_BACKENDS = {"memory", "sqlite", "redis"}


def _find_env_file() -> Optional[Path]:
    """Find .env file from multiple possible locations."""
    global ENV_FILE_PATH, ENV_FILE_LOADED
    current_file = Path(__file__).resolve()
    possible_paths = [
        current_file.parent.parent.parent / '.env',
        Path.cwd() / '.env',
    ]

    for env_path in possible_paths:
        if env_path.exists():
            ENV_FILE_PATH = env_path
            ENV_FILE_LOADED = True
            logger.info(f"Found .env at: {env_path}")
            return env_path

    logger.debug("No .env file found - using environment variables and defaults")
    return None


_env_path = _find_env_file()
if _env_path:
    load_dotenv(dotenv_path=_env_path, override=False)


class Settings(BaseSettings):
    """Library settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Application settings ---
    LOG_LEVEL: str = "INFO"
    DATA_DIR: str = "data"
    DEFAULT_LANGUAGE: str = "zh"

    # --- Storage ---
    GAME_STORE_BACKEND: str = "memory"  # memory | sqlite | redis
    REDIS_URL: str = ""
    SQLITE_PATH: Optional[str] = None  # Computed in validator if not set
    HISTORY_LIMIT: int = 20
    EXPORT_FORMAT_VERSION: str = "1.0.0"

    # --- Game rules ---
    POLICE_VOTE_WEIGHT: float = 1.5

    @model_validator(mode="after")
    def _normalize(self) -> "Settings":
        """Fill computed paths and normalize enumerated values."""
        self.GAME_STORE_BACKEND = self.GAME_STORE_BACKEND.lower().strip()
        if self.GAME_STORE_BACKEND not in STORE_BACKENDS:
            logger.warning("Unknown GAME_STORE_BACKEND=%s, using memory", self.GAME_STORE_BACKEND)
            self.GAME_STORE_BACKEND = "memory"
        if not self.SQLITE_PATH:
            self.SQLITE_PATH = os.path.join(self.DATA_DIR, "werewolf_games.db")
        if self.HISTORY_LIMIT < 1:
            raise ValueError("HISTORY_LIMIT must be at least 1")
        return self


settings = Settings()
