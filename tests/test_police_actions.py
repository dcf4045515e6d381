"""Tests for the police chief election."""
from datetime import datetime

import pytest

from werewolf_moderator.schemas.enums import ActionType, DayStep, DeathReason, GamePhase
from werewolf_moderator.services.action_handlers import (
    handle_add_candidate, handle_advance_speech, handle_elect_police_chief,
    handle_generate_speech_order, handle_police_abstain, handle_police_vote,
    handle_remove_candidate, handle_start_tie_breaker, handle_transfer_badge,
    handle_withdraw, speech_order,
)


@pytest.fixture
def election(classic_game):
    classic_game.phase = GamePhase.DAY
    classic_game.day_state.current_step = DayStep.POLICE_CAMPAIGN
    classic_game.current_step = DayStep.POLICE_CAMPAIGN.value
    for seat in (1, 4, 7):
        handle_add_candidate(classic_game, seat)
    return classic_game


class TestCandidates:

    def test_add_is_idempotent(self, election):
        handle_add_candidate(election, 4)
        assert election.day_state.police_candidates == [1, 4, 7]

    def test_dead_candidate_rejected(self, election):
        election.get_player(9).mark_dead(DeathReason.KNIFE, 1, GamePhase.NIGHT)
        assert handle_add_candidate(election, 9)["success"] is False

    def test_remove(self, election):
        assert handle_remove_candidate(election, 4)["success"] is True
        assert handle_remove_candidate(election, 4)["success"] is True
        assert election.day_state.police_candidates == [1, 7]

    def test_withdraw(self, election):
        result = handle_withdraw(election, 7)
        assert result["success"] is True
        assert election.day_state.police_candidates == [1, 4]
        assert election.day_state.police_withdrawn == [7]
        assert election.history[-1].action == ActionType.POLICE_WITHDRAW

    def test_withdrawn_cannot_rejoin(self, election):
        handle_withdraw(election, 7)
        result = handle_add_candidate(election, 7)
        assert result["success"] is False
        assert result["message"] == "Player 7 has withdrawn and cannot run again"

    def test_withdraw_non_candidate(self, election):
        assert handle_withdraw(election, 2)["success"] is False


class TestSpeechOrder:

    @pytest.mark.parametrize("minute,expected", [
        (1, [3, 4, 6, 1]),   # odd start goes up
        (2, [4, 3, 1, 6]),   # even start goes down
        (4, [1, 3, 4, 6]),
        (7, [6, 4, 3, 1]),
    ])
    def test_order(self, minute, expected):
        assert speech_order([1, 3, 4, 6], minute) == expected

    def test_empty(self):
        assert speech_order([], 5) == []

    def test_generate_and_advance(self, election):
        result = handle_generate_speech_order(election, now=datetime(2024, 1, 1, 12, 1))
        assert result["order"] == [4, 1, 7]
        assert election.day_state.police_speech_index == 0

        assert handle_advance_speech(election)["speaker"] == 1
        assert handle_advance_speech(election)["speaker"] == 7
        assert handle_advance_speech(election)["speaker"] is None
        assert handle_advance_speech(election)["speaker"] is None
        assert election.day_state.police_speech_index == 3


class TestPoliceVote:

    def test_vote(self, election):
        assert handle_police_vote(election, 2, 4)["success"] is True
        assert election.day_state.police_votes[0].target == 4

    def test_candidate_cannot_vote(self, election):
        result = handle_police_vote(election, 1, 4)
        assert result["success"] is False
        assert result["message"] == "Player 1 cannot vote in this election"

    def test_withdrawn_cannot_vote(self, election):
        handle_withdraw(election, 7)
        assert handle_police_vote(election, 7, 4)["success"] is False

    def test_target_must_be_candidate(self, election):
        assert handle_police_vote(election, 2, 3)["success"] is False

    def test_one_vote_each(self, election):
        handle_police_vote(election, 2, 4)
        assert handle_police_vote(election, 2, 1)["success"] is False
        assert handle_police_abstain(election, 2)["success"] is False

    def test_abstain_idempotent(self, election):
        assert handle_police_abstain(election, 2)["success"] is True
        assert handle_police_abstain(election, 2)["success"] is True
        assert election.day_state.police_abstentions == [2]
        assert handle_police_vote(election, 2, 4)["success"] is False


class TestElection:

    def test_no_votes(self, election):
        result = handle_elect_police_chief(election)
        assert result["success"] is True
        assert result["chief"] is None
        assert election.day_state.police_chief is None

    def test_single_winner(self, election):
        handle_police_vote(election, 2, 4)
        handle_police_vote(election, 3, 4)
        handle_police_vote(election, 5, 1)
        result = handle_elect_police_chief(election)

        assert result["chief"] == 4
        assert election.day_state.police_chief == 4
        assert election.day_state.police_tie_breaker is False
        assert election.history[-1].description == "Player 4 was elected police chief"

    def test_tie_starts_run_off(self, election):
        handle_police_vote(election, 2, 4)
        handle_police_vote(election, 3, 1)
        result = handle_elect_police_chief(election)

        assert result["chief"] is None
        assert result["tie"] == [1, 4]
        day = election.day_state
        assert day.police_tie_breaker is True
        assert day.police_candidates == [1, 4]
        assert day.police_votes == []
        # Candidate 7 is out of the run-off and may now vote
        assert handle_police_vote(election, 7, 1)["success"] is True
        assert handle_elect_police_chief(election)["chief"] == 1
        assert day.police_tie_breaker is False

    def test_manual_tie_breaker(self, election):
        result = handle_start_tie_breaker(election, [4, 7])
        assert result["success"] is True
        assert election.day_state.police_candidates == [4, 7]

    def test_manual_tie_breaker_validation(self, election):
        assert handle_start_tie_breaker(election, [4])["success"] is False
        assert handle_start_tie_breaker(election, [4, 9])["success"] is False


class TestBadge:

    def test_no_chief(self, election):
        result = handle_transfer_badge(election, 5)
        assert result["success"] is False
        assert result["message"] == "There is no police chief"

    def test_transfer(self, election):
        election.day_state.police_chief = 4
        result = handle_transfer_badge(election, 5)
        assert result["success"] is True
        assert result["chief"] == 5
        assert election.history[-1].action == ActionType.POLICE_TRANSFER

    def test_transfer_to_dead_seat(self, election):
        election.day_state.police_chief = 4
        election.get_player(5).mark_dead(DeathReason.KNIFE, 1, GamePhase.NIGHT)
        assert handle_transfer_badge(election, 5)["success"] is False
        assert election.day_state.police_chief == 4

    def test_destroy(self, election):
        election.day_state.police_chief = 4
        result = handle_transfer_badge(election, None)
        assert result["chief"] is None
        assert election.day_state.police_chief is None
        assert election.history[-1].action == ActionType.POLICE_DESTROY


class TestEndedGame:

    def test_handlers_refuse(self, election):
        handle_generate_speech_order(election, now=datetime(2024, 1, 1, 12, 1))
        election.day_state.police_chief = 4
        election.game_ended = True

        for result in (
            handle_generate_speech_order(election, now=datetime(2024, 1, 1, 12, 2)),
            handle_advance_speech(election),
            handle_transfer_badge(election, 5),
        ):
            assert result["success"] is False
            assert result["message"] == "The game has already ended"
        assert election.day_state.police_speech_order == [4, 1, 7]
        assert election.day_state.police_speech_index == 0
        assert election.day_state.police_chief == 4
