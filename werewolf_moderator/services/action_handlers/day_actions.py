"""Day phase action handlers."""
import logging
from typing import Optional

from werewolf_moderator.core.exceptions import GameException
from werewolf_moderator.i18n import t
from werewolf_moderator.models.game import GameState, VoteRecord
from werewolf_moderator.schemas.enums import ActionType, DayStep, DeathReason, GamePhase, Team
from werewolf_moderator.services.vote_tally import execution_target, format_tally, tally
from werewolf_moderator.services.win_condition import check_game_end
from .base import ActionResult, game_over_result, validate_target
from .shoot_actions import can_shoot

logger = logging.getLogger(__name__)


def handle_vote_action(game: GameState, voter_id: int, target_id: int) -> dict:
    """Handle a day vote. Target 0 abstains."""
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language
    day = game.day_state
    if game.phase != GamePhase.DAY:
        return ActionResult.fail(t("action_result.vote_wrong_phase", language=lang)).to_dict()

    voter = game.get_player(voter_id)
    if voter is None:
        return ActionResult.fail(t("validation.player_not_exist", language=lang, target=voter_id)).to_dict()
    if not voter.is_alive:
        return ActionResult.fail(t("validation.voter_dead", language=lang, voter=voter_id)).to_dict()

    if any(v.voter == voter_id for v in day.votes):
        return ActionResult.fail(t("action_result.already_voted", language=lang, voter=voter_id)).to_dict()

    try:
        validate_target(game, target_id, ActionType.VOTE, voter_id, allow_abstain=True, allow_self=False)
    except GameException as e:
        return ActionResult.fail(e.message).to_dict()

    vote = VoteRecord(
        round=game.round,
        voter=voter_id,
        target=target_id,
        is_police_vote=day.police_chief == voter_id,
    )
    day.votes.append(vote)
    game.add_action(voter_id, ActionType.VOTE, target_id, step=DayStep.VOTE.value)
    return ActionResult.ok(t("action_result.vote_recorded", language=lang)).to_dict()


def handle_complete_voting(game: GameState) -> dict:
    """Tally the day's votes and record the summary."""
    lang = game.language
    result = tally(game.day_state.votes)
    summary = format_tally(result, lang)
    game.add_action(
        0, ActionType.VOTE, 0, step=DayStep.VOTE.value,
        description=t("system.vote_result", language=lang, summary=summary),
    )
    return ActionResult.ok(
        summary,
        vote_count=dict(result.vote_count),
        winners=list(result.winners),
        is_tie=result.is_tie,
        abstain_count=result.abstain_count,
        execution_target=execution_target(result),
    ).to_dict()


def handle_execute_action(game: GameState, target_id: int) -> dict:
    """Execute the voted-out seat."""
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language

    try:
        validate_target(game, target_id, ActionType.VOTE, 0)
    except GameException as e:
        return ActionResult.fail(e.message).to_dict()

    target = game.get_player(target_id)
    target.mark_dead(DeathReason.VOTE, game.round, GamePhase.DAY)
    game.add_action(
        0, ActionType.VOTE, target_id, step=DayStep.EXECUTION.value,
        description=t("records.execute", language=lang, target=target_id),
    )
    logger.info("Seat %d executed", target_id, extra={"game_id": game.id})
    check_game_end(game)
    return ActionResult.ok(
        t("action_result.execute_success", language=lang, target=target_id),
        can_shoot=can_shoot(target),
    ).to_dict()


def handle_bomb_action(game: GameState, bomber_id: int, target_id: Optional[int] = None) -> dict:
    """
    Handle a wolf bomb.

    The bomber always dies. A role with the `bomb` ability may take one
    other living seat along.
    """
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language

    bomber = game.get_player(bomber_id)
    if bomber is None or bomber.team != Team.WEREWOLF:
        return ActionResult.fail(t("action_result.not_werewolf", language=lang, actor=bomber_id)).to_dict()
    if not bomber.is_alive:
        return ActionResult.fail(t("validation.player_dead", language=lang, target=bomber_id)).to_dict()

    takes_target = bool(target_id) and target_id != bomber_id
    if takes_target:
        if not bomber.role.has_ability("bomb"):
            return ActionResult.fail(t("action_result.bomb_no_target", language=lang, actor=bomber_id)).to_dict()
        try:
            validate_target(game, target_id, ActionType.BOMB, bomber_id, allow_self=False)
        except GameException as e:
            return ActionResult.fail(e.message).to_dict()

    bomber.mark_dead(DeathReason.BOMB, game.round, game.phase)
    bomber.has_used_ability.mark_used("bomb")
    if takes_target:
        game.get_player(target_id).mark_dead(DeathReason.BOMB, game.round, game.phase)
        description = t("records.bomb_with_target", language=lang, actor=bomber_id, target=target_id)
    else:
        description = t("records.bomb", language=lang, actor=bomber_id)
    game.explosion_count += 1
    game.add_action(
        bomber_id, ActionType.BOMB, target_id if takes_target else bomber_id,
        description=description,
    )
    check_game_end(game)
    return ActionResult.ok(description).to_dict()


def handle_self_destruct_action(game: GameState, wolf_id: int) -> dict:
    """Handle a wolf self-destruct during an eligible day step."""
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language

    wolf = game.get_player(wolf_id)
    if wolf is None or wolf.team != Team.WEREWOLF:
        return ActionResult.fail(t("action_result.not_werewolf", language=lang, actor=wolf_id)).to_dict()
    if not wolf.is_alive:
        return ActionResult.fail(t("validation.player_dead", language=lang, target=wolf_id)).to_dict()
    if not game.day_state.allow_self_destruct:
        return ActionResult.fail(t("action_result.self_destruct_not_allowed", language=lang)).to_dict()

    wolf.mark_dead(DeathReason.BOMB, game.round, GamePhase.DAY)
    game.self_destruct_count += 1
    description = t("records.self_destruct", language=lang, actor=wolf_id)
    game.add_action(wolf_id, ActionType.SELF_DESTRUCT, description=description)
    logger.info("Seat %d self-destructed", wolf_id, extra={"game_id": game.id})
    check_game_end(game)
    return ActionResult.ok(description).to_dict()


def handle_duel_action(game: GameState, knight_id: int, target_id: int) -> dict:
    """Knight duel: a wolf target dies, otherwise the knight dies."""
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language

    knight = game.get_player(knight_id)
    if knight is None or not knight.role.has_ability("duel"):
        return ActionResult.fail(t("action_result.not_knight", language=lang, actor=knight_id)).to_dict()
    if not knight.is_alive:
        return ActionResult.fail(t("validation.player_dead", language=lang, target=knight_id)).to_dict()
    if knight.has_used_ability.duel:
        return ActionResult.fail(t("action_result.duel_used", language=lang)).to_dict()

    try:
        validate_target(game, target_id, ActionType.DUEL, knight_id, allow_self=False)
    except GameException as e:
        return ActionResult.fail(e.message).to_dict()

    target = game.get_player(target_id)
    success = target.team == Team.WEREWOLF
    loser = target if success else knight
    loser.mark_dead(DeathReason.DUEL, game.round, GamePhase.DAY)
    knight.has_used_ability.mark_used("duel")

    key = "records.duel_success" if success else "records.duel_failed"
    description = t(key, language=lang, actor=knight_id, target=target_id)
    game.add_action(
        knight_id, ActionType.DUEL, target_id,
        result="success" if success else "failed",
        description=description,
    )
    check_game_end(game)
    return ActionResult.ok(description, duel_success=success).to_dict()
