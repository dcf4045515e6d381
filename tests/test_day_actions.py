"""Tests for day action handlers."""
import pytest

from werewolf_moderator.schemas.enums import ActionType, DayStep, DeathReason, GamePhase, RoleType, Team
from werewolf_moderator.services.action_handlers import (
    handle_bomb_action, handle_complete_voting, handle_duel_action,
    handle_execute_action, handle_self_destruct_action, handle_vote_action,
)

W = RoleType.WEREWOLF
V = RoleType.VILLAGER

# 1 white wolf, 2-4 wolves, 5 seer, 6 witch, 7 hunter, 8 knight, 9-12 villagers
WHITE_WOLF_KNIGHT = [
    RoleType.WHITE_WOLF, W, W, W,
    RoleType.SEER, RoleType.WITCH, RoleType.HUNTER, RoleType.KNIGHT,
    V, V, V, V,
]


@pytest.fixture
def day_game(classic_game):
    classic_game.phase = GamePhase.DAY
    classic_game.day_state.current_step = DayStep.VOTE
    classic_game.current_step = DayStep.VOTE.value
    return classic_game


@pytest.fixture
def knight_game(game_factory):
    game = game_factory(WHITE_WOLF_KNIGHT)
    game.phase = GamePhase.DAY
    game.day_state.current_step = DayStep.DISCUSSION
    game.day_state.allow_self_destruct = True
    return game


class TestVoteAction:

    def test_vote_recorded(self, day_game):
        result = handle_vote_action(day_game, 1, 4)
        assert result["success"] is True
        vote = day_game.day_state.votes[0]
        assert (vote.voter, vote.target, vote.is_police_vote) == (1, 4, False)

    def test_chief_vote_flagged(self, day_game):
        day_game.day_state.police_chief = 4
        handle_vote_action(day_game, 4, 1)
        assert day_game.day_state.votes[0].is_police_vote is True

    def test_abstain(self, day_game):
        assert handle_vote_action(day_game, 1, 0)["success"] is True
        assert day_game.day_state.votes[0].target == 0

    def test_one_vote_per_voter(self, day_game):
        handle_vote_action(day_game, 1, 4)
        result = handle_vote_action(day_game, 1, 5)
        assert result["success"] is False
        assert result["message"] == "Player 1 has already voted"

    def test_dead_voter(self, day_game):
        day_game.get_player(1).mark_dead(DeathReason.KNIFE, 1, GamePhase.NIGHT)
        result = handle_vote_action(day_game, 1, 4)
        assert result["success"] is False
        assert result["message"] == "Player 1 is dead and cannot vote"

    def test_no_self_vote(self, day_game):
        assert handle_vote_action(day_game, 4, 4)["success"] is False

    def test_dead_target(self, day_game):
        day_game.get_player(7).mark_dead(DeathReason.KNIFE, 1, GamePhase.NIGHT)
        assert handle_vote_action(day_game, 1, 7)["success"] is False

    def test_rejected_at_night(self, classic_game):
        result = handle_vote_action(classic_game, 1, 4)
        assert result["success"] is False
        assert result["message"] == "Votes can only be cast during the day"
        assert classic_game.day_state.votes == []


class TestCompleteVoting:

    def test_single_winner(self, day_game):
        for voter, target in [(1, 4), (2, 4), (3, 5), (6, 0)]:
            handle_vote_action(day_game, voter, target)
        result = handle_complete_voting(day_game)

        assert result["success"] is True
        assert result["execution_target"] == 4
        assert result["vote_count"] == {4: 2, 5: 1}
        assert result["abstain_count"] == 1
        assert result["is_tie"] is False
        assert day_game.history[-1].description == "Vote result: 4 (2 votes), 5 (1 votes), abstain (1 votes)"

    def test_tie_has_no_target(self, day_game):
        handle_vote_action(day_game, 1, 4)
        handle_vote_action(day_game, 2, 5)
        result = handle_complete_voting(day_game)
        assert result["is_tie"] is True
        assert result["winners"] == [4, 5]
        assert result["execution_target"] is None

    def test_chief_weight_breaks_tie(self, day_game):
        day_game.day_state.police_chief = 7
        handle_vote_action(day_game, 1, 4)
        handle_vote_action(day_game, 7, 5)
        assert handle_complete_voting(day_game)["execution_target"] == 5


class TestExecuteAction:

    def test_execute(self, day_game):
        result = handle_execute_action(day_game, 7)
        assert result["success"] is True
        assert result["can_shoot"] is False
        player = day_game.get_player(7)
        assert player.death_reason == DeathReason.VOTE
        assert player.death_phase == GamePhase.DAY

    def test_executed_hunter_can_shoot(self, day_game):
        assert handle_execute_action(day_game, 6)["can_shoot"] is True

    def test_execute_dead_seat(self, day_game):
        handle_execute_action(day_game, 7)
        assert handle_execute_action(day_game, 7)["success"] is False

    def test_execution_ends_game(self, game_factory):
        game = game_factory([W, RoleType.SEER, V, V])
        game.phase = GamePhase.DAY
        handle_execute_action(game, 1)
        assert game.game_ended is True
        assert game.winner == Team.GOOD
        assert handle_execute_action(game, 3)["success"] is False


class TestBombAction:

    def test_white_wolf_takes_target(self, knight_game):
        result = handle_bomb_action(knight_game, 1, 5)
        assert result["success"] is True
        assert knight_game.get_player(1).death_reason == DeathReason.BOMB
        assert knight_game.get_player(5).death_reason == DeathReason.BOMB
        assert knight_game.explosion_count == 1
        assert knight_game.get_player(1).has_used_ability.bomb is True

    def test_plain_wolf_bombs_alone(self, knight_game):
        result = handle_bomb_action(knight_game, 2)
        assert result["success"] is True
        assert knight_game.get_player(2).is_alive is False
        assert knight_game.explosion_count == 1

    def test_plain_wolf_cannot_take_target(self, knight_game):
        result = handle_bomb_action(knight_game, 2, 5)
        assert result["success"] is False
        assert knight_game.get_player(2).is_alive is True
        assert knight_game.get_player(5).is_alive is True

    def test_villager_cannot_bomb(self, knight_game):
        assert handle_bomb_action(knight_game, 9)["success"] is False


class TestSelfDestruct:

    def test_self_destruct(self, knight_game):
        result = handle_self_destruct_action(knight_game, 2)
        assert result["success"] is True
        assert knight_game.self_destruct_count == 1
        assert knight_game.get_player(2).is_alive is False
        assert knight_game.history[-1].action == ActionType.SELF_DESTRUCT

    def test_outside_window(self, knight_game):
        knight_game.day_state.allow_self_destruct = False
        result = handle_self_destruct_action(knight_game, 2)
        assert result["success"] is False
        assert knight_game.self_destruct_count == 0

    def test_good_player_rejected(self, knight_game):
        assert handle_self_destruct_action(knight_game, 5)["success"] is False


class TestDuelAction:

    def test_duel_wolf(self, knight_game):
        result = handle_duel_action(knight_game, 8, 2)
        assert result["success"] is True
        assert result["duel_success"] is True
        assert knight_game.get_player(2).death_reason == DeathReason.DUEL
        assert knight_game.get_player(8).is_alive is True
        assert knight_game.history[-1].result == "success"

    def test_duel_good_player(self, knight_game):
        result = handle_duel_action(knight_game, 8, 9)
        assert result["duel_success"] is False
        assert knight_game.get_player(8).death_reason == DeathReason.DUEL
        assert knight_game.get_player(9).is_alive is True

    def test_duel_once(self, knight_game):
        handle_duel_action(knight_game, 8, 2)
        result = handle_duel_action(knight_game, 8, 3)
        assert result["success"] is False
        assert result["message"] == "The duel has already been used"

    def test_only_knight_duels(self, knight_game):
        assert handle_duel_action(knight_game, 9, 2)["success"] is False

    def test_no_self_duel(self, knight_game):
        assert handle_duel_action(knight_game, 8, 8)["success"] is False
