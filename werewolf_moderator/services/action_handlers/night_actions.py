"""Night phase action handlers."""
import logging
from typing import Optional

from werewolf_moderator.core.exceptions import GameException
from werewolf_moderator.i18n import t
from werewolf_moderator.models.game import GameState
from werewolf_moderator.schemas.enums import ActionType, NightStep, RoleType, SeerResult, Team
from .base import ActionResult, find_alive_role, game_over_result, validate_target

logger = logging.getLogger(__name__)

WITCH_POTIONS = (ActionType.ANTIDOTE, ActionType.POISON)


def handle_guard_action(game: GameState, target_id: int) -> dict:
    """Handle guard protect action. Target 0 skips."""
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language
    night = game.night_state
    rules = game.config.rules

    guard = find_alive_role(game, RoleType.GUARD)
    if guard is None:
        return ActionResult.fail(t("errors.role_not_available", language=lang, role=t("roles.guard", language=lang))).to_dict()

    if night.guard_target is not None:
        return ActionResult.fail(t("action_result.guard_already_acted", language=lang)).to_dict()

    if target_id == 0:
        return ActionResult.ok(t("action_result.guard_skipped", language=lang)).to_dict()

    try:
        validate_target(
            game, target_id, ActionType.GUARD, guard.seat_number,
            allow_self=rules.guard_self_protection,
        )
    except GameException as e:
        return ActionResult.fail(e.message).to_dict()

    if not rules.guard_consecutive_protection and target_id == night.guard_last_target:
        return ActionResult.fail(t("action_result.guard_consecutive", language=lang)).to_dict()

    night.guard_target = target_id
    guard.has_used_ability.guard.append(target_id)
    game.add_action(
        guard.seat_number, ActionType.GUARD, target_id, step=NightStep.GUARD.value,
        description=t("records.guard", language=lang, actor=guard.seat_number, target=target_id),
    )
    return ActionResult.ok(t("action_result.guard_success", language=lang, target=target_id)).to_dict()


def handle_wolf_kill_action(game: GameState, target_id: int) -> dict:
    """Handle the werewolf team's kill choice. Target 0 clears the choice."""
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language

    if not game.get_alive_werewolves():
        return ActionResult.fail(t("errors.role_not_available", language=lang, role=t("roles.werewolf", language=lang))).to_dict()

    if target_id == 0:
        game.night_state.wolf_kill_target = None
        game.touch()
        return ActionResult.ok(t("action_result.kill_cleared", language=lang)).to_dict()

    try:
        # Wolves may knife themselves
        validate_target(game, target_id, ActionType.KILL, 0)
    except GameException as e:
        return ActionResult.fail(e.message).to_dict()

    game.night_state.wolf_kill_target = target_id
    game.add_action(
        0, ActionType.KILL, target_id, step=NightStep.WEREWOLF.value,
        description=t("records.kill", language=lang, target=target_id),
    )
    return ActionResult.ok(t("action_result.kill_success", language=lang, target=target_id)).to_dict()


def handle_seer_action(game: GameState, target_id: int) -> dict:
    """Handle seer check. The result is derived from the target's team."""
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language
    night = game.night_state

    seer = find_alive_role(game, RoleType.SEER)
    if seer is None:
        return ActionResult.fail(t("errors.role_not_available", language=lang, role=t("roles.seer", language=lang))).to_dict()

    if night.seer_check_target is not None:
        return ActionResult.fail(t("action_result.seer_already_checked", language=lang)).to_dict()

    try:
        validate_target(game, target_id, ActionType.CHECK, seer.seat_number, allow_self=False)
    except GameException as e:
        return ActionResult.fail(e.message).to_dict()

    target = game.get_player(target_id)
    result = SeerResult.WEREWOLF if target.team == Team.WEREWOLF else SeerResult.GOOD
    night.seer_check_target = target_id
    night.seer_check_result = result
    game.add_action(
        seer.seat_number, ActionType.CHECK, target_id, result=result.value,
        step=NightStep.SEER.value,
        description=t(
            "records.check", language=lang, actor=seer.seat_number, target=target_id,
            result=t(f"seer_results.{result.value}", language=lang),
        ),
    )
    return ActionResult.ok(
        t("action_result.seer_result", language=lang, target=target_id,
          result=t(f"seer_results.{result.value}", language=lang)),
        result=result.value,
    ).to_dict()


def has_checked(game: GameState, seat: int) -> bool:
    """Whether the seer has checked this seat on any night so far."""
    return any(r.action == ActionType.CHECK and r.target == seat for r in game.history)


def handle_witch_action(game: GameState, potion: ActionType, target_id: Optional[int] = None) -> dict:
    """
    Handle witch antidote or poison.

    An empty target means the witch passes: nothing is recorded and the
    potion stays available.
    """
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language
    night = game.night_state

    if potion not in WITCH_POTIONS:
        return ActionResult.fail(t("errors.invalid_action", language=lang)).to_dict()

    witch = find_alive_role(game, RoleType.WITCH)
    if witch is None:
        return ActionResult.fail(t("errors.role_not_available", language=lang, role=t("roles.witch", language=lang))).to_dict()

    if not target_id:
        return ActionResult.ok(t("action_result.witch_skipped", language=lang)).to_dict()

    usage = witch.has_used_ability
    if usage.is_used(potion.value):
        return ActionResult.fail(t(f"action_result.{potion.value}_used", language=lang)).to_dict()

    if potion == ActionType.ANTIDOTE:
        if (
            game.round == 1
            and target_id == witch.seat_number
            and not game.config.rules.witch_first_night_self_save
        ):
            return ActionResult.fail(t("action_result.first_night_self_save", language=lang)).to_dict()
        allow_self = True
    else:
        allow_self = False

    try:
        validate_target(game, target_id, potion, witch.seat_number, allow_self=allow_self)
    except GameException as e:
        return ActionResult.fail(e.message).to_dict()

    if potion == ActionType.ANTIDOTE:
        night.witch_antidote_target = target_id
        night.witch_antidote_used = True
    else:
        night.witch_poison_target = target_id
        night.witch_poison_used = True
    usage.mark_used(potion.value)

    game.add_action(
        witch.seat_number, potion, target_id, step=NightStep.WITCH.value,
        description=t(f"records.{potion.value}", language=lang, actor=witch.seat_number, target=target_id),
    )
    logger.debug("Witch used %s on %d", potion.value, target_id, extra={"game_id": game.id})
    return ActionResult.ok(t(f"action_result.{potion.value}_success", language=lang, target=target_id)).to_dict()


def handle_hunter_status_action(game: GameState, can_shoot: bool) -> dict:
    """Record whether the hunter may shoot, as told by the moderator."""
    ended = game_over_result(game)
    if ended:
        return ended
    lang = game.language

    hunter = find_alive_role(game, RoleType.HUNTER)
    if hunter is None:
        return ActionResult.fail(t("errors.role_not_available", language=lang, role=t("roles.hunter", language=lang))).to_dict()

    game.night_state.hunter_can_shoot = can_shoot
    hunter.can_shoot = can_shoot
    status_key = "hunter_status.can_shoot" if can_shoot else "hunter_status.cannot_shoot"
    game.add_action(
        hunter.seat_number, ActionType.HUNTER_STATUS, result=str(can_shoot).lower(),
        step=NightStep.HUNTER_STATUS.value,
        description=t(status_key, language=lang, actor=hunter.seat_number),
    )
    return ActionResult.ok(t(status_key, language=lang, actor=hunter.seat_number), can_shoot=can_shoot).to_dict()
