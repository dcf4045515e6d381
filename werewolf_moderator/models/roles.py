"""Role registry and preset boards.

Roles are immutable catalog entries created once at import time. Player
records reference these shared instances; nothing mutates them.
"""
import random
from dataclasses import dataclass, field
from typing import Optional

from werewolf_moderator.core.exceptions import InvalidConfigError, UnknownRoleError
from werewolf_moderator.schemas.enums import Camp, GameMode, RoleType, Team


@dataclass(frozen=True)
class Ability:
    """A role ability with its usage limit and phase eligibility."""
    id: str
    usage_limit: Optional[int] = None  # None = unlimited
    can_use_at_night: bool = False
    can_use_at_day: bool = False


@dataclass(frozen=True)
class Role:
    """Immutable role definition."""
    type: RoleType
    camp: Camp
    team: Team
    abilities: tuple[Ability, ...] = ()

    def has_ability(self, ability_id: str) -> bool:
        return any(a.id == ability_id for a in self.abilities)

    def get_ability(self, ability_id: str) -> Optional[Ability]:
        for ability in self.abilities:
            if ability.id == ability_id:
                return ability
        return None


_KILL = Ability("kill", can_use_at_night=True)

ROLES: dict[RoleType, Role] = {
    RoleType.WEREWOLF: Role(RoleType.WEREWOLF, Camp.WEREWOLF, Team.WEREWOLF, (_KILL,)),
    RoleType.WOLF_KING: Role(
        RoleType.WOLF_KING, Camp.WEREWOLF, Team.WEREWOLF,
        (_KILL, Ability("shoot", usage_limit=1, can_use_at_day=True)),
    ),
    RoleType.WHITE_WOLF: Role(
        RoleType.WHITE_WOLF, Camp.WEREWOLF, Team.WEREWOLF,
        (_KILL, Ability("bomb", usage_limit=1, can_use_at_day=True)),
    ),
    RoleType.SEER: Role(
        RoleType.SEER, Camp.GODS, Team.GOOD,
        (Ability("check", can_use_at_night=True),),
    ),
    RoleType.WITCH: Role(
        RoleType.WITCH, Camp.GODS, Team.GOOD,
        (
            Ability("antidote", usage_limit=1, can_use_at_night=True),
            Ability("poison", usage_limit=1, can_use_at_night=True),
        ),
    ),
    RoleType.HUNTER: Role(
        RoleType.HUNTER, Camp.GODS, Team.GOOD,
        (Ability("shoot", usage_limit=1, can_use_at_day=True),),
    ),
    RoleType.GUARD: Role(
        RoleType.GUARD, Camp.GODS, Team.GOOD,
        (Ability("guard", can_use_at_night=True),),
    ),
    RoleType.KNIGHT: Role(
        RoleType.KNIGHT, Camp.GODS, Team.GOOD,
        (Ability("duel", usage_limit=1, can_use_at_day=True),),
    ),
    RoleType.VILLAGER: Role(RoleType.VILLAGER, Camp.VILLAGER, Team.GOOD),
}

# Roles that start the game able to shoot on death
SHOOTER_ROLES = {RoleType.HUNTER, RoleType.WOLF_KING}


def get_role(role_type: RoleType | str) -> Role:
    """Look up a role; an unknown type is a programming error."""
    try:
        return ROLES[RoleType(role_type)]
    except (KeyError, ValueError):
        raise UnknownRoleError(role_type) from None


@dataclass(frozen=True)
class PresetConfig:
    """Preset board definition."""
    mode: GameMode
    player_count: int
    roles: tuple[RoleType, ...] = field(default_factory=tuple)


PRESET_CONFIGS: dict[GameMode, PresetConfig] = {
    GameMode.CLASSIC_9: PresetConfig(
        GameMode.CLASSIC_9, 9,
        (
            RoleType.WEREWOLF, RoleType.WEREWOLF, RoleType.WEREWOLF,
            RoleType.VILLAGER, RoleType.VILLAGER, RoleType.VILLAGER,
            RoleType.SEER, RoleType.WITCH, RoleType.HUNTER,
        ),
    ),
    GameMode.CLASSIC_10: PresetConfig(
        GameMode.CLASSIC_10, 10,
        (
            RoleType.WEREWOLF, RoleType.WEREWOLF, RoleType.WEREWOLF,
            RoleType.VILLAGER, RoleType.VILLAGER, RoleType.VILLAGER, RoleType.VILLAGER,
            RoleType.SEER, RoleType.WITCH, RoleType.HUNTER,
        ),
    ),
    GameMode.WOLF_KING_GUARD_12: PresetConfig(
        GameMode.WOLF_KING_GUARD_12, 12,
        (
            RoleType.WOLF_KING, RoleType.WEREWOLF, RoleType.WEREWOLF, RoleType.WEREWOLF,
            RoleType.VILLAGER, RoleType.VILLAGER, RoleType.VILLAGER, RoleType.VILLAGER,
            RoleType.SEER, RoleType.WITCH, RoleType.HUNTER, RoleType.GUARD,
        ),
    ),
    GameMode.WHITE_WOLF_KNIGHT_12: PresetConfig(
        GameMode.WHITE_WOLF_KNIGHT_12, 12,
        (
            RoleType.WHITE_WOLF, RoleType.WEREWOLF, RoleType.WEREWOLF, RoleType.WEREWOLF,
            RoleType.VILLAGER, RoleType.VILLAGER, RoleType.VILLAGER, RoleType.VILLAGER,
            RoleType.SEER, RoleType.WITCH, RoleType.HUNTER, RoleType.KNIGHT,
        ),
    ),
}


def resolve_board(mode: GameMode, custom_roles: Optional[list[RoleType]] = None) -> PresetConfig:
    """Return the preset for a mode, or build one from a custom role list."""
    if mode == GameMode.CUSTOM:
        if not custom_roles:
            raise InvalidConfigError("Custom mode requires a role list", config_key="custom_roles")
        return PresetConfig(GameMode.CUSTOM, len(custom_roles), tuple(RoleType(r) for r in custom_roles))

    preset = PRESET_CONFIGS.get(mode)
    if preset is None:
        raise InvalidConfigError(f"Unknown game mode: {mode}", config_key="mode")
    return preset


def shuffle_roles(roles: list[Role], rng: Optional[random.Random] = None) -> list[Role]:
    """Fisher-Yates shuffle returning a new list."""
    rng = rng or random.Random()
    shuffled = list(roles)
    for i in range(len(shuffled) - 1, 0, -1):
        j = rng.randint(0, i)
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def create_game_config(
    mode: GameMode,
    custom_roles: Optional[list[RoleType]] = None,
    rules=None,
):
    """Build a GameConfig for a preset or custom board."""
    from werewolf_moderator.models.game import GameConfig
    from werewolf_moderator.schemas.game import GameRules

    board = resolve_board(mode, custom_roles)
    return GameConfig(
        mode=board.mode,
        player_count=board.player_count,
        roles=[get_role(r) for r in board.roles],
        rules=rules or GameRules(),
    )
