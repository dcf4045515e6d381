"""Game engine - owns the active game and routes moderator operations.

Every operation takes the engine lock, so calls from a countdown timer
thread and from the UI never interleave. Handler failures come back as
`{"success": False, "message": ...}` and the message is kept in `error`.
"""
import logging
import random
import threading
import time
from datetime import datetime
from typing import Any, Callable, Optional, Union

from werewolf_moderator.core.config import settings
from werewolf_moderator.core.exceptions import (
    AppException, GameNotFoundError, InvalidConfigError, NoActiveGameError, StorageError,
)
from werewolf_moderator.i18n import normalize_language, t
from werewolf_moderator.models.game import GameState, Player
from werewolf_moderator.models.roles import SHOOTER_ROLES, create_game_config, shuffle_roles
from werewolf_moderator.schemas.enums import ActionType, DayStep, GamePhase
from werewolf_moderator.schemas.game import CreateGameParams
from werewolf_moderator.services import step_sequencer
from werewolf_moderator.services.action_handlers import (
    handle_add_candidate,
    handle_advance_speech,
    handle_bomb_action,
    handle_complete_voting,
    handle_duel_action,
    handle_elect_police_chief,
    handle_execute_action,
    handle_generate_speech_order,
    handle_guard_action,
    handle_hunter_status_action,
    handle_police_abstain,
    handle_police_vote,
    handle_remove_candidate,
    handle_seer_action,
    handle_self_destruct_action,
    handle_shoot_action,
    handle_start_tie_breaker,
    handle_transfer_badge,
    handle_vote_action,
    handle_witch_action,
    handle_wolf_kill_action,
    handle_withdraw,
    has_checked,
)
from werewolf_moderator.services.game_persistence import GameStorage
from werewolf_moderator.services.log_manager import clear_game_logs, init_game_logging
from werewolf_moderator.services.night_resolution import apply_night_deaths
from werewolf_moderator.services.win_condition import WinResult, check_game_end

logger = logging.getLogger(__name__)


class GameEngine:
    """Single-game moderator engine."""

    def __init__(self, storage: Optional[GameStorage] = None):
        self.state: Optional[GameState] = None
        self.error: Optional[str] = None
        self.storage = storage if storage is not None else GameStorage()
        self._lock = threading.RLock()
        init_game_logging()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_game(self, operation: str) -> GameState:
        if self.state is None:
            raise NoActiveGameError(operation)
        return self.state

    def _run(self, operation: str, handler: Callable[..., dict], *args: Any) -> dict:
        with self._lock:
            game = self._require_game(operation)
            result = handler(game, *args)
            if result.get("success"):
                self.error = None
            else:
                self.error = result.get("message")
                logger.info(
                    "%s rejected: %s", operation, self.error, extra={"game_id": game.id}
                )
            return result

    def _enter_step(self, game: GameState) -> None:
        if game.phase == GamePhase.DAY and game.day_state.current_step == DayStep.DAWN:
            apply_night_deaths(game)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def create_game(
        self,
        params: Union[CreateGameParams, dict, None] = None,
        rng: Optional[random.Random] = None,
    ) -> GameState:
        """Deal roles and start night 1."""
        if params is None:
            params = CreateGameParams()
        elif isinstance(params, dict):
            params = CreateGameParams(**params)

        with self._lock:
            try:
                config = create_game_config(params.mode, params.custom_roles, params.rules)
                if params.player_count is not None and params.player_count != config.player_count:
                    raise InvalidConfigError(
                        f"Mode {params.mode.value} needs {config.player_count} players",
                        config_key="player_count",
                    )
            except AppException as e:
                self.error = e.message
                raise

            language = normalize_language(params.language or settings.DEFAULT_LANGUAGE)
            roles = shuffle_roles(config.roles, rng)
            names = params.player_names or []

            players = []
            for i, role in enumerate(roles):
                seat = i + 1
                name = names[i] if i < len(names) and names[i] else t(
                    "player.default_name", language=language, n=seat
                )
                players.append(Player(
                    seat_number=seat,
                    name=name,
                    role=role,
                    can_shoot=role.type in SHOOTER_ROLES,
                ))

            game = GameState(
                id=f"game-{int(time.time() * 1000)}",
                config=config,
                language=language,
                players=players,
            )
            first = step_sequencer.night_steps(game)[0]
            game.current_step = first.value
            game.night_state.current_step = first

            if self.state is not None:
                clear_game_logs(self.state.id)
            self.state = game
            self.error = None
            logger.info(
                "Game created: mode=%s players=%d", config.mode.value, config.player_count,
                extra={"game_id": game.id},
            )
            return game

    def reset_game(self) -> None:
        with self._lock:
            if self.state is not None:
                clear_game_logs(self.state.id)
            self.state = None
            self.error = None

    def save_game(self) -> bool:
        """Save the current game; an ended game also goes to history."""
        with self._lock:
            game = self._require_game("save_game")
            game.touch()
            try:
                self.storage.save_current_game(game)
                if game.game_ended:
                    self.storage.save_to_history(game)
            except StorageError as e:
                self.error = e.message
                logger.error("Save failed: %s", e.message, extra={"game_id": game.id})
                return False
            self.error = None
            return True

    def load_game(self, game_id: Optional[str] = None) -> bool:
        """Load the current save, or a game from history when game_id is given."""
        with self._lock:
            try:
                if game_id:
                    game = next(
                        (e.game_state for e in self.storage.get_game_history()
                         if e.game_state.id == game_id),
                        None,
                    )
                    if game is None:
                        raise GameNotFoundError(game_id)
                else:
                    game = self.storage.load_current_game()
                    if game is None:
                        self.error = t("errors.nothing_to_load", language=settings.DEFAULT_LANGUAGE)
                        return False
            except (StorageError, GameNotFoundError) as e:
                self.error = e.message
                logger.warning("Load failed: %s", e.message)
                return False

            self.state = game
            self.error = None
            logger.info("Game loaded", extra={"game_id": game.id})
            return True

    def export_game(self) -> str:
        with self._lock:
            return self.storage.export_game(self._require_game("export_game"))

    def import_game(self, blob: str) -> Optional[GameState]:
        """Replace the active game with an exported one."""
        with self._lock:
            try:
                game = self.storage.import_game(blob)
            except StorageError as e:
                self.error = e.message
                logger.warning("Import failed: %s", e.message)
                return None
            self.state = game
            self.error = None
            logger.info("Game imported", extra={"game_id": game.id})
            return game

    # ------------------------------------------------------------------
    # Progression
    # ------------------------------------------------------------------

    def next_step(self) -> Optional[str]:
        with self._lock:
            game = self._require_game("next_step")
            if game.game_ended:
                self.error = t("errors.game_ended", language=game.language)
                return None
            step = step_sequencer.next_step(game)
            self._enter_step(game)
            self.error = None
            return step.value

    def next_phase(self) -> Optional[str]:
        with self._lock:
            game = self._require_game("next_phase")
            if game.game_ended:
                self.error = t("errors.game_ended", language=game.language)
                return None
            step = step_sequencer.next_phase(game)
            self._enter_step(game)
            self.error = None
            return step.value

    def check_game_end(self) -> WinResult:
        with self._lock:
            return check_game_end(self._require_game("check_game_end"))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_player(self, seat: int) -> Optional[Player]:
        with self._lock:
            return self._require_game("get_player").get_player(seat)

    def has_checked(self, seat: int) -> bool:
        with self._lock:
            return has_checked(self._require_game("has_checked"), seat)

    def night_steps(self) -> list[str]:
        with self._lock:
            return [s.value for s in step_sequencer.night_steps(self._require_game("night_steps"))]

    def day_steps(self) -> list[str]:
        with self._lock:
            return [s.value for s in step_sequencer.day_steps(self._require_game("day_steps"))]

    # ------------------------------------------------------------------
    # Night actions
    # ------------------------------------------------------------------

    def set_guard_target(self, target_id: int) -> dict:
        return self._run("guard", handle_guard_action, target_id)

    def set_wolf_kill_target(self, target_id: int) -> dict:
        return self._run("kill", handle_wolf_kill_action, target_id)

    def set_seer_check_target(self, target_id: int) -> dict:
        return self._run("check", handle_seer_action, target_id)

    def set_witch_action(self, potion: Union[ActionType, str], target_id: Optional[int] = None) -> dict:
        return self._run("witch", handle_witch_action, ActionType(potion), target_id)

    def set_hunter_status(self, can_shoot: bool) -> dict:
        return self._run("hunter_status", handle_hunter_status_action, can_shoot)

    # ------------------------------------------------------------------
    # Day actions
    # ------------------------------------------------------------------

    def add_vote(self, voter_id: int, target_id: int) -> dict:
        return self._run("vote", handle_vote_action, voter_id, target_id)

    def complete_voting(self) -> dict:
        return self._run("complete_voting", handle_complete_voting)

    def execute_player(self, target_id: int) -> dict:
        return self._run("execute", handle_execute_action, target_id)

    def shoot_player(self, shooter_id: int, target_id: int) -> dict:
        return self._run("shoot", handle_shoot_action, shooter_id, target_id)

    def use_bomb(self, bomber_id: int, target_id: Optional[int] = None) -> dict:
        return self._run("bomb", handle_bomb_action, bomber_id, target_id)

    def use_self_destruct(self, wolf_id: int) -> dict:
        return self._run("self_destruct", handle_self_destruct_action, wolf_id)

    def use_duel(self, knight_id: int, target_id: int) -> dict:
        return self._run("duel", handle_duel_action, knight_id, target_id)

    # ------------------------------------------------------------------
    # Police election
    # ------------------------------------------------------------------

    def add_police_candidate(self, seat: int) -> dict:
        return self._run("police_candidate", handle_add_candidate, seat)

    def remove_police_candidate(self, seat: int) -> dict:
        return self._run("police_candidate", handle_remove_candidate, seat)

    def withdraw_from_police(self, seat: int) -> dict:
        return self._run("police_withdraw", handle_withdraw, seat)

    def generate_police_speech_order(self, now: Optional[datetime] = None) -> dict:
        return self._run("police_speech_order", handle_generate_speech_order, now)

    def advance_police_speech(self) -> dict:
        return self._run("police_speech", handle_advance_speech)

    def add_police_vote(self, voter_id: int, target_id: int) -> dict:
        return self._run("police_vote", handle_police_vote, voter_id, target_id)

    def add_police_abstention(self, voter_id: int) -> dict:
        return self._run("police_abstain", handle_police_abstain, voter_id)

    def elect_police_chief(self) -> dict:
        return self._run("police_elect", handle_elect_police_chief)

    def start_police_tie_breaker(self, tied: list[int]) -> dict:
        return self._run("police_tie_breaker", handle_start_tie_breaker, tied)

    def transfer_police_chief(self, target_id: Optional[int]) -> dict:
        return self._run("police_transfer", handle_transfer_badge, target_id)
