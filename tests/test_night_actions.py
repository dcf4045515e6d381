"""Tests for night action handlers."""
import pytest

from werewolf_moderator.core.exceptions import InvalidTargetError, PlayerDeadError
from werewolf_moderator.schemas.enums import ActionType, DeathReason, GamePhase, RoleType, SeerResult
from werewolf_moderator.schemas.game import GameRules
from werewolf_moderator.services.action_handlers import (
    handle_guard_action, handle_hunter_status_action, handle_seer_action,
    handle_witch_action, handle_wolf_kill_action, has_checked,
)
from werewolf_moderator.services.action_handlers.base import validate_target


def _kill(game, seat):
    game.get_player(seat).mark_dead(DeathReason.VOTE, game.round, GamePhase.DAY)


class TestValidateTarget:

    def test_zero_rejected_unless_abstain(self, classic_game):
        with pytest.raises(InvalidTargetError):
            validate_target(classic_game, 0, ActionType.VOTE, 1)
        validate_target(classic_game, 0, ActionType.VOTE, 1, allow_abstain=True)

    def test_missing_seat(self, classic_game):
        with pytest.raises(InvalidTargetError) as exc:
            validate_target(classic_game, 42, ActionType.VOTE, 1)
        assert exc.value.details["target_id"] == 42

    def test_dead_target(self, classic_game):
        _kill(classic_game, 7)
        with pytest.raises(PlayerDeadError) as exc:
            validate_target(classic_game, 7, ActionType.VOTE, 1)
        assert exc.value.message == "Invalid target: player 7 is dead"

    def test_self_target(self, classic_game):
        with pytest.raises(InvalidTargetError) as exc:
            validate_target(classic_game, 4, ActionType.CHECK, 4, allow_self=False)
        assert exc.value.message == "Cannot check yourself"


class TestGuardAction:

    def test_guard_success(self, guard_game):
        result = handle_guard_action(guard_game, 4)
        assert result["success"] is True
        assert guard_game.night_state.guard_target == 4
        assert guard_game.get_player(7).has_used_ability.guard == [4]
        assert guard_game.history[-1].action == ActionType.GUARD
        assert guard_game.history[-1].actor == 7

    def test_guard_skip(self, guard_game):
        result = handle_guard_action(guard_game, 0)
        assert result["success"] is True
        assert guard_game.night_state.guard_target is None
        assert guard_game.history == []

    def test_guard_once_per_night(self, guard_game):
        handle_guard_action(guard_game, 4)
        result = handle_guard_action(guard_game, 5)
        assert result["success"] is False
        assert guard_game.night_state.guard_target == 4

    def test_consecutive_rejected(self, guard_game):
        guard_game.night_state.guard_last_target = 4
        result = handle_guard_action(guard_game, 4)
        assert result["success"] is False
        assert result["message"] == "Cannot guard the same player two nights in a row"

    def test_consecutive_allowed_by_rule(self, game_factory):
        game = game_factory(
            [RoleType.WEREWOLF, RoleType.GUARD, RoleType.SEER, RoleType.VILLAGER],
            rules=GameRules(guard_consecutive_protection=True),
        )
        game.night_state.guard_last_target = 3
        assert handle_guard_action(game, 3)["success"] is True

    def test_self_guard_rule(self, game_factory):
        game = game_factory(
            [RoleType.WEREWOLF, RoleType.GUARD, RoleType.SEER, RoleType.VILLAGER],
            rules=GameRules(guard_self_protection=False),
        )
        assert handle_guard_action(game, 2)["success"] is False

    def test_no_living_guard(self, classic_game):
        result = handle_guard_action(classic_game, 4)
        assert result["success"] is False
        assert result["message"] == "No living Guard in this game"


class TestWolfKillAction:

    def test_kill_and_change(self, classic_game):
        assert handle_wolf_kill_action(classic_game, 7)["success"] is True
        assert handle_wolf_kill_action(classic_game, 8)["success"] is True
        assert classic_game.night_state.wolf_kill_target == 8
        assert classic_game.history[-1].actor == 0

    def test_self_knife_allowed(self, classic_game):
        assert handle_wolf_kill_action(classic_game, 1)["success"] is True

    def test_clear(self, classic_game):
        handle_wolf_kill_action(classic_game, 7)
        result = handle_wolf_kill_action(classic_game, 0)
        assert result["success"] is True
        assert classic_game.night_state.wolf_kill_target is None

    def test_dead_target(self, classic_game):
        _kill(classic_game, 7)
        assert handle_wolf_kill_action(classic_game, 7)["success"] is False


class TestSeerAction:

    def test_check_werewolf(self, classic_game):
        result = handle_seer_action(classic_game, 2)
        assert result["success"] is True
        assert result["result"] == "werewolf"
        assert result["message"] == "Player 2 is werewolf"
        assert classic_game.night_state.seer_check_result == SeerResult.WEREWOLF
        assert classic_game.history[-1].result == "werewolf"

    def test_check_good(self, classic_game):
        assert handle_seer_action(classic_game, 7)["result"] == "good"

    def test_wolf_king_reads_werewolf(self, game_factory):
        game = game_factory([RoleType.WOLF_KING, RoleType.SEER, RoleType.VILLAGER, RoleType.VILLAGER])
        assert handle_seer_action(game, 1)["result"] == "werewolf"

    def test_no_self_check(self, classic_game):
        assert handle_seer_action(classic_game, 4)["success"] is False

    def test_once_per_night(self, classic_game):
        handle_seer_action(classic_game, 7)
        assert handle_seer_action(classic_game, 8)["success"] is False

    def test_has_checked(self, classic_game):
        handle_seer_action(classic_game, 2)
        assert has_checked(classic_game, 2) is True
        assert has_checked(classic_game, 3) is False


class TestWitchAction:

    def test_antidote(self, classic_game):
        result = handle_witch_action(classic_game, ActionType.ANTIDOTE, 7)
        assert result["success"] is True
        night = classic_game.night_state
        assert night.witch_antidote_target == 7
        assert night.witch_antidote_used is True
        assert classic_game.get_player(5).has_used_ability.antidote is True

    def test_antidote_single_use(self, classic_game):
        handle_witch_action(classic_game, ActionType.ANTIDOTE, 7)
        result = handle_witch_action(classic_game, ActionType.ANTIDOTE, 8)
        assert result["success"] is False
        assert result["message"] == "The antidote has already been used"

    def test_first_night_self_save_rejected(self, classic_game):
        result = handle_witch_action(classic_game, ActionType.ANTIDOTE, 5)
        assert result["success"] is False
        assert classic_game.get_player(5).has_used_ability.antidote is False

    def test_first_night_self_save_allowed_by_rule(self, game_factory):
        game = game_factory(
            [RoleType.WEREWOLF, RoleType.WITCH, RoleType.SEER, RoleType.VILLAGER],
            rules=GameRules(witch_first_night_self_save=True),
        )
        assert handle_witch_action(game, ActionType.ANTIDOTE, 2)["success"] is True

    def test_self_save_later_nights(self, classic_game):
        classic_game.round = 2
        assert handle_witch_action(classic_game, ActionType.ANTIDOTE, 5)["success"] is True

    def test_poison(self, classic_game):
        assert handle_witch_action(classic_game, ActionType.POISON, 2)["success"] is True
        assert classic_game.night_state.witch_poison_target == 2
        assert classic_game.get_player(5).has_used_ability.poison is True

    def test_poison_single_use(self, classic_game):
        handle_witch_action(classic_game, ActionType.POISON, 2)
        classic_game.round = 2
        classic_game.night_state.witch_poison_target = None
        result = handle_witch_action(classic_game, ActionType.POISON, 3)
        assert result["success"] is False
        assert result["message"] == "The poison has already been used"
        assert classic_game.get_player(5).has_used_ability.poison is True
        assert classic_game.night_state.witch_poison_target is None

    def test_poison_self_rejected(self, classic_game):
        assert handle_witch_action(classic_game, ActionType.POISON, 5)["success"] is False

    def test_skip_keeps_potion(self, classic_game):
        result = handle_witch_action(classic_game, ActionType.POISON, None)
        assert result["success"] is True
        assert classic_game.get_player(5).has_used_ability.poison is False
        assert classic_game.history == []

    def test_both_potions_same_night(self, classic_game):
        assert handle_witch_action(classic_game, ActionType.ANTIDOTE, 7)["success"] is True
        assert handle_witch_action(classic_game, ActionType.POISON, 2)["success"] is True

    def test_unknown_potion(self, classic_game):
        assert handle_witch_action(classic_game, ActionType.VOTE, 2)["success"] is False

    def test_dead_witch(self, classic_game):
        _kill(classic_game, 5)
        assert handle_witch_action(classic_game, ActionType.POISON, 2)["success"] is False


class TestHunterStatus:

    def test_set_status(self, classic_game):
        result = handle_hunter_status_action(classic_game, False)
        assert result["success"] is True
        assert result["can_shoot"] is False
        assert classic_game.night_state.hunter_can_shoot is False
        assert classic_game.get_player(6).can_shoot is False
        assert classic_game.history[-1].result == "false"

    def test_refused_after_game_end(self, classic_game):
        classic_game.game_ended = True
        result = handle_hunter_status_action(classic_game, True)
        assert result["success"] is False
        assert result["message"] == "The game has already ended"
