"""Base utilities for action handlers."""
from typing import Optional

from werewolf_moderator.core.exceptions import InvalidTargetError, PlayerDeadError
from werewolf_moderator.i18n import t
from werewolf_moderator.models.game import GameState, Player
from werewolf_moderator.schemas.enums import ActionType, RoleType


def validate_target(
    game: GameState,
    target_id: int,
    action_type: ActionType,
    actor_seat: int,
    allow_abstain: bool = False,
    allow_self: bool = True,
) -> None:
    """
    Validate action target legality.

    Args:
        game: Current game state
        target_id: Target seat number
        action_type: Type of action being performed
        actor_seat: Seat number of the actor (0 for team/system)
        allow_abstain: Whether 0 (abstain/skip) is allowed
        allow_self: Whether the actor may target their own seat

    Raises:
        InvalidTargetError: Target is 0 when not allowed, missing, or self
        PlayerDeadError: Target is dead
    """
    lang = game.language

    if target_id == 0:
        if allow_abstain:
            return
        raise InvalidTargetError(t("validation.invalid_target_zero", language=lang), target_id)

    target_player = game.get_player(target_id)
    if not target_player:
        raise InvalidTargetError(
            t("validation.player_not_exist", language=lang, target=target_id), target_id
        )

    if not target_player.is_alive:
        raise PlayerDeadError(
            target_id, t("validation.player_dead", language=lang, target=target_id)
        )

    if not allow_self and target_id == actor_seat:
        action_name = t(f"actions.{action_type.value}", language=lang)
        raise InvalidTargetError(
            t("validation.cannot_self_target", language=lang, action=action_name), target_id
        )


def find_alive_role(game: GameState, role_type: RoleType) -> Optional[Player]:
    """First living holder of a role."""
    for player in game.get_players_by_role(role_type):
        if player.is_alive:
            return player
    return None


def game_over_result(game: GameState) -> Optional[dict]:
    """Failure result when the game has already ended, else None."""
    if game.game_ended:
        return ActionResult.fail(t("errors.game_ended", language=game.language)).to_dict()
    return None


class ActionResult:
    """Standardized action result."""

    def __init__(self, success: bool, message: str, **extra):
        self.success = success
        self.message = message
        self.extra = extra

    def to_dict(self) -> dict:
        result = {"success": self.success, "message": self.message}
        result.update(self.extra)
        return result

    @classmethod
    def ok(cls, message: str, **extra) -> "ActionResult":
        return cls(True, message, **extra)

    @classmethod
    def fail(cls, message: str) -> "ActionResult":
        return cls(False, message)
