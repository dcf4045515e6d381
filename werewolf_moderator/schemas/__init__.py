"""Enums and pydantic schemas."""
from .enums import (
    RoleType, Camp, Team, GameMode, DeathReason, GamePhase, NightStep,
    DayStep, ActionType, SeerResult, WinReason,
)
from .game import GameRules, CreateGameParams, ExportEnvelope

__all__ = [
    "RoleType",
    "Camp",
    "Team",
    "GameMode",
    "DeathReason",
    "GamePhase",
    "NightStep",
    "DayStep",
    "ActionType",
    "SeerResult",
    "WinReason",
    "GameRules",
    "CreateGameParams",
    "ExportEnvelope",
]
