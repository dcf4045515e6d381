"""Night death resolution."""
import logging
from typing import Optional

from werewolf_moderator.i18n import t
from werewolf_moderator.models.game import GameState, NightPhaseState, Player
from werewolf_moderator.schemas.enums import ActionType, DayStep, DeathReason, GamePhase, RoleType
from werewolf_moderator.services.win_condition import check_game_end

logger = logging.getLogger(__name__)


def resolve_deaths(night: NightPhaseState, same_guard_same_save: bool = True) -> list[int]:
    """
    Seats that die from the night's actions.

    Kill target:
    - guarded and saved: dies when same_guard_same_save, survives otherwise
    - guarded xor saved: survives
    - neither: dies
    Poison target always dies. Result is deduplicated, kill first.
    """
    deaths: list[int] = []

    kill = night.wolf_kill_target
    if kill:
        guarded = night.guard_target == kill
        saved = night.witch_antidote_target == kill
        if guarded and saved:
            if same_guard_same_save:
                deaths.append(kill)
        elif not guarded and not saved:
            deaths.append(kill)

    poison = night.witch_poison_target
    if poison and poison not in deaths:
        deaths.append(poison)

    return deaths


def can_activate_skill(player: Player, night: NightPhaseState) -> bool:
    """Whether a seat that died tonight may use a death skill at dawn."""
    if player.role.type == RoleType.HUNTER:
        return player.can_shoot and not player.has_shot and night.witch_poison_target != player.seat_number
    if player.role.type == RoleType.WOLF_KING:
        return not player.has_shot
    return False


def pending_deaths(game: GameState) -> list[int]:
    return resolve_deaths(game.night_state, game.config.rules.same_guard_same_save)


def apply_night_deaths(game: GameState) -> list[int]:
    """
    Apply the resolved night deaths at dawn.

    Idempotent: seats already dead are skipped, so calling twice records
    nothing new.

    Returns:
        Seats newly killed by this call
    """
    night = game.night_state
    resolved = pending_deaths(game)
    game.day_state.deaths = list(resolved)

    killed: list[int] = []
    for seat in resolved:
        player: Optional[Player] = game.get_player(seat)
        if player is None or not player.is_alive:
            continue
        poisoned = night.witch_poison_target == seat
        reason = DeathReason.POISON if poisoned else DeathReason.KNIFE
        player.mark_dead(reason, game.round, GamePhase.NIGHT)
        if poisoned and player.role.type == RoleType.HUNTER:
            player.can_shoot = False
        killed.append(seat)

    if killed or not any(r.action == ActionType.DAWN and r.round == game.round for r in game.history):
        if killed:
            seats = ", ".join(str(s) for s in killed)
            description = t("system.night_deaths", language=game.language, seats=seats)
        else:
            description = t("system.peaceful_night", language=game.language)
        game.add_action(0, ActionType.DAWN, description=description, step=DayStep.DAWN.value)
        logger.info("Night %d deaths: %s", game.round, killed, extra={"game_id": game.id})

    night.completed = True
    check_game_end(game)
    return killed
