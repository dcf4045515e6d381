"""Death-shoot handlers for the hunter and the wolf king."""
import logging

from werewolf_moderator.core.exceptions import GameException
from werewolf_moderator.i18n import t
from werewolf_moderator.models.game import GameState, Player
from werewolf_moderator.schemas.enums import ActionType, DeathReason, RoleType
from werewolf_moderator.services.win_condition import check_game_end
from .base import ActionResult, game_over_result, validate_target

logger = logging.getLogger(__name__)


def can_shoot(player: Player) -> bool:
    """Whether a player is currently able to take someone with them."""
    if player.role.type == RoleType.HUNTER:
        return player.can_shoot and not player.has_shot and player.death_reason != DeathReason.POISON
    if player.role.type == RoleType.WOLF_KING:
        return not player.has_shot
    return False


def handle_shoot_action(game: GameState, shooter_id: int, target_id: int) -> dict:
    """
    Handle a death shoot. Target 0 passes.

    Returns a result whose `can_shoot` field tells whether the shot player
    may shoot in turn.
    """
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language

    shooter = game.get_player(shooter_id)
    if shooter is not None and shooter.is_alive:
        return ActionResult.fail(t("action_result.shooter_alive", language=lang, actor=shooter_id)).to_dict()
    if shooter is None or not can_shoot(shooter):
        return ActionResult.fail(t("action_result.cannot_shoot", language=lang, actor=shooter_id)).to_dict()

    if target_id == 0:
        return ActionResult.ok(t("action_result.shoot_skipped", language=lang, actor=shooter_id)).to_dict()

    try:
        validate_target(game, target_id, ActionType.SHOOT, shooter_id, allow_self=False)
    except GameException as e:
        return ActionResult.fail(e.message).to_dict()

    target = game.get_player(target_id)
    shooter.has_shot = True
    shooter.has_used_ability.mark_used("shoot")
    target.mark_dead(DeathReason.SHOOT, game.round, game.phase)
    game.add_action(
        shooter_id, ActionType.SHOOT, target_id,
        description=t("records.shoot", language=lang, actor=shooter_id, target=target_id),
    )
    logger.info("Seat %d shot seat %d", shooter_id, target_id, extra={"game_id": game.id})
    check_game_end(game)

    return ActionResult.ok(
        t("action_result.shoot_success", language=lang, actor=shooter_id, target=target_id),
        can_shoot=can_shoot(target),
    ).to_dict()
