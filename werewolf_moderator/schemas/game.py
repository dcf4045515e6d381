"""Game schemas."""
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator

from .base import UTCZBaseModel, utc_now
from .enums import GameMode, RoleType


class GameRules(BaseModel):
    """House rules snapshot stored in the game config."""
    witch_first_night_self_save: bool = False
    guard_consecutive_protection: bool = False
    guard_self_protection: bool = True
    same_guard_same_save: bool = True
    first_night_guard: bool = True


class CreateGameParams(BaseModel):
    """Request schema for starting a new game."""
    mode: GameMode = GameMode.CLASSIC_9
    player_count: Optional[int] = Field(None, ge=1)  # Implied by preset unless custom
    custom_roles: Optional[list[RoleType]] = None
    player_names: Optional[list[str]] = None
    language: Optional[str] = None  # Falls back to settings.DEFAULT_LANGUAGE
    rules: Optional[GameRules] = None

    @model_validator(mode="after")
    def _check_custom_roles(self) -> "CreateGameParams":
        if self.mode == GameMode.CUSTOM:
            if not self.custom_roles:
                raise ValueError("custom mode requires custom_roles")
            if self.player_count is not None and self.player_count != len(self.custom_roles):
                raise ValueError("player_count must match the number of custom roles")
        return self


class ExportEnvelope(UTCZBaseModel):
    """Top-level shape of an exported game blob."""
    version: str
    exported_at: datetime = Field(default_factory=utc_now)
    game_state: dict[str, Any]
