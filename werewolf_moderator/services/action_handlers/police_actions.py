"""Police chief election handlers."""
import logging
from datetime import datetime
from typing import Optional

from werewolf_moderator.core.exceptions import GameException
from werewolf_moderator.i18n import t
from werewolf_moderator.models.game import GameState, VoteRecord
from werewolf_moderator.schemas.enums import ActionType, DayStep
from werewolf_moderator.services.vote_tally import format_tally, tally
from .base import ActionResult, game_over_result, validate_target

logger = logging.getLogger(__name__)


def handle_add_candidate(game: GameState, seat: int) -> dict:
    """Register a candidate. Adding twice is a no-op."""
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language
    day = game.day_state

    try:
        validate_target(game, seat, ActionType.POLICE_ELECT, seat)
    except GameException as e:
        return ActionResult.fail(e.message).to_dict()

    if seat in day.police_withdrawn:
        return ActionResult.fail(t("police.withdrawn_cannot_rejoin", language=lang, seat=seat)).to_dict()

    if seat not in day.police_candidates:
        day.police_candidates.append(seat)
        game.touch()
    return ActionResult.ok(t("police.candidate_added", language=lang, seat=seat)).to_dict()


def handle_remove_candidate(game: GameState, seat: int) -> dict:
    """Remove a candidate before speeches. Removing a non-candidate is a no-op."""
    ended = game_over_result(game)
    if ended:
        return ended
    day = game.day_state
    if seat in day.police_candidates:
        day.police_candidates.remove(seat)
        game.touch()
    return ActionResult.ok(t("police.candidate_removed", language=game.language, seat=seat)).to_dict()


def handle_withdraw(game: GameState, seat: int) -> dict:
    """A candidate leaves the race for good."""
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language
    day = game.day_state

    if seat not in day.police_candidates:
        return ActionResult.fail(t("police.not_candidate", language=lang, seat=seat)).to_dict()

    day.police_candidates.remove(seat)
    day.police_withdrawn.append(seat)
    game.add_action(
        seat, ActionType.POLICE_WITHDRAW,
        description=t("police.withdrawn", language=lang, seat=seat),
    )
    return ActionResult.ok(t("police.withdrawn", language=lang, seat=seat)).to_dict()


def speech_order(candidates: list[int], minute: int) -> list[int]:
    """
    Speaking order for the candidates.

    The start seat is picked by the minute of the clock. An odd start seat
    goes up the table, an even one goes down.
    """
    if not candidates:
        return []
    start = candidates[minute % len(candidates)]
    ordered = sorted(candidates, reverse=start % 2 == 0)
    index = ordered.index(start)
    return ordered[index:] + ordered[:index]


def handle_generate_speech_order(game: GameState, now: Optional[datetime] = None) -> dict:
    ended = game_over_result(game)
    if ended:
        return ended
    day = game.day_state
    now = now or datetime.now()
    day.police_speech_order = speech_order(day.police_candidates, now.minute)
    day.police_speech_index = 0
    game.touch()
    return ActionResult.ok(
        t("police.speech_order", language=game.language,
          order=", ".join(str(s) for s in day.police_speech_order)),
        order=list(day.police_speech_order),
    ).to_dict()


def handle_advance_speech(game: GameState) -> dict:
    """Move to the next speaker; `speaker` is None once everyone has spoken."""
    ended = game_over_result(game)
    if ended:
        return ended
    day = game.day_state
    if day.police_speech_index < len(day.police_speech_order):
        day.police_speech_index += 1
        game.touch()
    index = day.police_speech_index
    speaker = day.police_speech_order[index] if index < len(day.police_speech_order) else None
    return ActionResult.ok(
        t("police.speech_advanced", language=game.language), speaker=speaker
    ).to_dict()


def _voter_error(game: GameState, voter_id: int) -> Optional[str]:
    lang = game.language
    day = game.day_state
    voter = game.get_player(voter_id)
    if voter is None:
        return t("validation.player_not_exist", language=lang, target=voter_id)
    if not voter.is_alive:
        return t("validation.voter_dead", language=lang, voter=voter_id)
    if voter_id in day.police_candidates or voter_id in day.police_withdrawn:
        return t("police.voter_ineligible", language=lang, seat=voter_id)
    if any(v.voter == voter_id for v in day.police_votes) or voter_id in day.police_abstentions:
        return t("action_result.already_voted", language=lang, voter=voter_id)
    return None


def handle_police_vote(game: GameState, voter_id: int, target_id: int) -> dict:
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language
    day = game.day_state

    error = _voter_error(game, voter_id)
    if error:
        return ActionResult.fail(error).to_dict()
    if target_id not in day.police_candidates:
        return ActionResult.fail(t("police.not_candidate", language=lang, seat=target_id)).to_dict()

    day.police_votes.append(VoteRecord(
        round=game.round,
        voter=voter_id,
        target=target_id,
        is_police_vote=day.police_chief == voter_id,
    ))
    game.add_action(voter_id, ActionType.POLICE_ELECT, target_id, step=DayStep.POLICE_VOTE.value)
    return ActionResult.ok(t("action_result.vote_recorded", language=lang)).to_dict()


def handle_police_abstain(game: GameState, voter_id: int) -> dict:
    """Record an abstention. Abstaining twice is a no-op."""
    ended = game_over_result(game)
    if ended:
        return ended
    day = game.day_state
    if voter_id in day.police_abstentions:
        return ActionResult.ok(t("police.abstained", language=game.language, seat=voter_id)).to_dict()

    error = _voter_error(game, voter_id)
    if error:
        return ActionResult.fail(error).to_dict()

    day.police_abstentions.append(voter_id)
    game.add_action(voter_id, ActionType.POLICE_ABSTAIN, step=DayStep.POLICE_VOTE.value)
    return ActionResult.ok(t("police.abstained", language=game.language, seat=voter_id)).to_dict()


def start_tie_breaker(game: GameState, tied: list[int]) -> None:
    """Restart the election among the tied seats only."""
    day = game.day_state
    day.police_candidates = list(tied)
    day.police_votes = []
    day.police_abstentions = []
    day.police_tie_breaker = True
    game.touch()


def handle_start_tie_breaker(game: GameState, tied: list[int]) -> dict:
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language
    if len(tied) < 2 or any(seat not in game.day_state.police_candidates for seat in tied):
        return ActionResult.fail(t("police.invalid_tie", language=lang)).to_dict()
    start_tie_breaker(game, tied)
    return ActionResult.ok(
        t("police.tie", language=lang, seats=", ".join(str(s) for s in tied)), tie=list(tied)
    ).to_dict()


def handle_elect_police_chief(game: GameState) -> dict:
    """
    Count the police votes, unweighted.

    No votes leaves the election untouched. A single leader becomes chief;
    a tie restarts the vote among the tied seats.
    """
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language
    day = game.day_state

    result = tally(day.police_votes, weighted=False)
    if not result.vote_count:
        return ActionResult.ok(t("police.no_votes", language=lang), chief=None, tie=[]).to_dict()

    step = DayStep.POLICE_VOTE.value
    game.add_action(
        0, ActionType.POLICE_ELECT, 0, step=step,
        description=t("police.vote_count", language=lang, summary=format_tally(result, lang)),
    )

    if not result.is_tie:
        chief = result.winners[0]
        day.police_chief = chief
        day.police_tie_breaker = False
        description = t("police.elected", language=lang, seat=chief)
        game.add_action(0, ActionType.POLICE_ELECT, chief, step=step, description=description)
        logger.info("Seat %d elected police chief", chief, extra={"game_id": game.id})
        return ActionResult.ok(description, chief=chief, tie=[]).to_dict()

    seats = ", ".join(str(s) for s in result.winners)
    description = t("police.tie", language=lang, seats=seats)
    game.add_action(0, ActionType.POLICE_ELECT, 0, step=step, description=description)
    start_tie_breaker(game, result.winners)
    return ActionResult.ok(description, chief=None, tie=list(result.winners)).to_dict()


def handle_transfer_badge(game: GameState, target_id: Optional[int]) -> dict:
    """Pass the badge to another living seat, or destroy it when target is empty."""
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language
    day = game.day_state
    previous = day.police_chief
    if previous is None:
        return ActionResult.fail(t("police.no_chief", language=lang)).to_dict()

    if target_id:
        try:
            validate_target(game, target_id, ActionType.POLICE_TRANSFER, previous, allow_self=False)
        except GameException as e:
            return ActionResult.fail(e.message).to_dict()
        day.police_chief = target_id
        description = t("police.transferred", language=lang, seat=previous, target=target_id)
        game.add_action(previous, ActionType.POLICE_TRANSFER, target_id, description=description)
        return ActionResult.ok(description, chief=target_id).to_dict()

    day.police_chief = None
    description = t("police.destroyed", language=lang, seat=previous)
    game.add_action(previous, ActionType.POLICE_DESTROY, description=description)
    return ActionResult.ok(description, chief=None).to_dict()
