from .roles import (
    Ability, Role, ROLES, PRESET_CONFIGS, PresetConfig,
    get_role, resolve_board, create_game_config, shuffle_roles,
)
from .game import (
    AbilityUsage, Player, ActionRecord, VoteRecord, NightPhaseState,
    DayPhaseState, GameConfig, GameState,
)

__all__ = [
    "Ability",
    "Role",
    "ROLES",
    "PRESET_CONFIGS",
    "PresetConfig",
    "get_role",
    "resolve_board",
    "create_game_config",
    "shuffle_roles",
    "AbilityUsage",
    "Player",
    "ActionRecord",
    "VoteRecord",
    "NightPhaseState",
    "DayPhaseState",
    "GameConfig",
    "GameState",
]
