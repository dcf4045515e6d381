"""Phase and step progression.

The step lists are recomputed from the current state on every advance, so
a role dying mid-night or a chief being elected reshapes the remaining
sequence.
"""
import logging
from typing import Optional, Union

from werewolf_moderator.models.game import DayPhaseState, GameState, NightPhaseState
from werewolf_moderator.schemas.enums import DayStep, GamePhase, NightStep, RoleType, Team
from werewolf_moderator.services.night_resolution import can_activate_skill, pending_deaths

logger = logging.getLogger(__name__)

Step = Union[NightStep, DayStep]

NIGHT_ORDER = [
    NightStep.GUARD,
    NightStep.WEREWOLF,
    NightStep.SEER,
    NightStep.WITCH,
    NightStep.HUNTER_STATUS,
]

DAY_ORDER = list(DayStep)

POLICE_STEPS = [
    DayStep.POLICE_CAMPAIGN,
    DayStep.POLICE_SPEECH,
    DayStep.POLICE_WITHDRAW,
    DayStep.POLICE_VOTE,
]

SELF_DESTRUCT_STEPS = {
    DayStep.POLICE_CAMPAIGN,
    DayStep.POLICE_SPEECH,
    DayStep.POLICE_WITHDRAW,
    DayStep.DISCUSSION,
}

# Boards where a wolf self-destruct on day 1 re-runs the election on day 2
POLICE_RERUN_PLAYER_COUNTS = {12, 15}

_STEP_ROLES = {
    NightStep.GUARD: RoleType.GUARD,
    NightStep.SEER: RoleType.SEER,
    NightStep.WITCH: RoleType.WITCH,
    NightStep.HUNTER_STATUS: RoleType.HUNTER,
}


def night_steps(game: GameState) -> list[NightStep]:
    """Night steps whose acting role has a living holder."""
    steps = []
    for step in NIGHT_ORDER:
        if step == NightStep.WEREWOLF:
            available = any(p.is_alive and p.team == Team.WEREWOLF for p in game.players)
        else:
            available = game.has_alive_role(_STEP_ROLES[step])
        if step == NightStep.GUARD and game.round == 1 and not game.config.rules.first_night_guard:
            available = False
        if available:
            steps.append(step)
    return steps or [NightStep.WEREWOLF]


def should_include_police(game: GameState) -> bool:
    if game.day_state.police_chief is not None:
        return False
    if game.round == 1:
        return True
    return (
        game.round == 2
        and game.config.player_count in POLICE_RERUN_PLAYER_COUNTS
        and game.self_destruct_count > 0
    )


def should_include_skill_activation(game: GameState) -> bool:
    for seat in pending_deaths(game):
        player = game.get_player(seat)
        if player is not None and can_activate_skill(player, game.night_state):
            return True
    return False


def day_steps(game: GameState) -> list[DayStep]:
    steps: list[DayStep] = []
    if should_include_police(game):
        steps.extend(POLICE_STEPS)
    steps.append(DayStep.DAWN)
    if should_include_skill_activation(game):
        steps.append(DayStep.SKILL_ACTIVATION)
    steps.extend([DayStep.LAST_WORDS, DayStep.DISCUSSION, DayStep.VOTE, DayStep.EXECUTION])
    return steps


def allows_self_destruct(step: Optional[Step]) -> bool:
    return step in SELF_DESTRUCT_STEPS


def _following_step(current: Optional[Step], steps: list, canonical: list) -> Optional[Step]:
    """Step after `current` in `steps`, or None when `current` is the last one."""
    if current in steps:
        index = steps.index(current)
        return steps[index + 1] if index + 1 < len(steps) else None
    if current is None or current not in canonical:
        return steps[0] if steps else None
    # Current step dropped out of the list; resume after it in canonical order
    position = canonical.index(current)
    for step in steps:
        if canonical.index(step) > position:
            return step
    return None


def _set_step(game: GameState, step: Step) -> None:
    game.current_step = step.value
    if game.phase == GamePhase.NIGHT:
        game.night_state.current_step = step
    else:
        game.day_state.current_step = step
        game.day_state.allow_self_destruct = allows_self_destruct(step)
    game.touch()


def next_step(game: GameState) -> Step:
    """Advance one step, rolling over into the next phase at the end."""
    if game.phase == GamePhase.NIGHT:
        upcoming = _following_step(game.night_state.current_step, night_steps(game), NIGHT_ORDER)
    else:
        upcoming = _following_step(game.day_state.current_step, day_steps(game), DAY_ORDER)

    if upcoming is None:
        return next_phase(game)

    _set_step(game, upcoming)
    logger.debug("Step -> %s", upcoming.value, extra={"game_id": game.id})
    return upcoming


def next_phase(game: GameState) -> Step:
    """Flip between night and day."""
    if game.phase == GamePhase.NIGHT:
        game.phase = GamePhase.DAY
        chief = game.day_state.police_chief
        game.day_state = DayPhaseState(police_chief=chief)
        first: Step = DayStep.POLICE_CAMPAIGN if should_include_police(game) else DayStep.DAWN
    else:
        game.phase = GamePhase.NIGHT
        game.round += 1
        game.night_state = NightPhaseState(guard_last_target=game.night_state.guard_target)
        game.day_state.allow_self_destruct = False
        first = night_steps(game)[0]

    _set_step(game, first)
    logger.info(
        "Phase -> %s round %d (%s)", game.phase.value, game.round, first.value,
        extra={"game_id": game.id},
    )
    return first
