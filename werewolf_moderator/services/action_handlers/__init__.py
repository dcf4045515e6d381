"""Action handlers for moderator actions.

This module exports all action handlers used by game_engine.py.
"""
from .night_actions import (
    handle_guard_action,
    handle_wolf_kill_action,
    handle_seer_action,
    handle_witch_action,
    handle_hunter_status_action,
    has_checked,
)
from .day_actions import (
    handle_vote_action,
    handle_complete_voting,
    handle_execute_action,
    handle_bomb_action,
    handle_self_destruct_action,
    handle_duel_action,
)
from .shoot_actions import (
    handle_shoot_action,
    can_shoot,
)
from .police_actions import (
    handle_add_candidate,
    handle_remove_candidate,
    handle_withdraw,
    handle_generate_speech_order,
    handle_advance_speech,
    handle_police_vote,
    handle_police_abstain,
    handle_elect_police_chief,
    handle_transfer_badge,
    start_tie_breaker,
    handle_start_tie_breaker,
    speech_order,
)
from .base import validate_target, ActionResult

__all__ = [
    # Night actions
    "handle_guard_action",
    "handle_wolf_kill_action",
    "handle_seer_action",
    "handle_witch_action",
    "handle_hunter_status_action",
    "has_checked",
    # Day actions
    "handle_vote_action",
    "handle_complete_voting",
    "handle_execute_action",
    "handle_bomb_action",
    "handle_self_destruct_action",
    "handle_duel_action",
    # Shoot actions
    "handle_shoot_action",
    "can_shoot",
    # Police election
    "handle_add_candidate",
    "handle_remove_candidate",
    "handle_withdraw",
    "handle_generate_speech_order",
    "handle_advance_speech",
    "handle_police_vote",
    "handle_police_abstain",
    "handle_elect_police_chief",
    "handle_transfer_badge",
    "start_tie_breaker",
    "handle_start_tie_breaker",
    "speech_order",
    # Base utilities
    "validate_target",
    "ActionResult",
]
