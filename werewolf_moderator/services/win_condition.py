"""Win condition evaluation.

Precedence is fixed: wolves eliminated, then gods eliminated, then
villagers eliminated, then wolf majority.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from werewolf_moderator.i18n import t
from werewolf_moderator.models.game import GameState, Player
from werewolf_moderator.schemas.enums import Camp, Team, WinReason

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WinResult:
    winner: Optional[Team] = None
    reason: Optional[WinReason] = None

    def describe(self, language: str = "zh") -> str:
        if self.reason is None:
            return ""
        return t(f"win_reasons.{self.reason.value}", language=language)


def evaluate(players: Iterable[Player]) -> WinResult:
    """Evaluate the win condition for a set of players. Pure."""
    alive = [p for p in players if p.is_alive]
    wolves = sum(1 for p in alive if p.team == Team.WEREWOLF)
    good = sum(1 for p in alive if p.team == Team.GOOD)
    gods = sum(1 for p in alive if p.camp == Camp.GODS)
    villagers = sum(1 for p in alive if p.camp == Camp.VILLAGER)

    if wolves == 0:
        return WinResult(Team.GOOD, WinReason.ALL_WEREWOLVES_ELIMINATED)
    if gods == 0:
        return WinResult(Team.WEREWOLF, WinReason.ALL_GODS_ELIMINATED)
    if villagers == 0:
        return WinResult(Team.WEREWOLF, WinReason.ALL_VILLAGERS_ELIMINATED)
    if wolves >= good:
        return WinResult(Team.WEREWOLF, WinReason.WEREWOLF_MAJORITY)
    return WinResult()


def check_game_end(game: GameState) -> WinResult:
    """Evaluate and, when a side has won, mark the game ended."""
    result = evaluate(game.players)
    if result.winner is not None and not game.game_ended:
        game.winner = result.winner
        game.game_ended = True
        game.touch()
        logger.info(
            "Game over: %s wins (%s)", result.winner.value, result.reason.value,
            extra={"game_id": game.id},
        )
    return result
