"""Saved-game persistence service.

Serializes GameState to JSON-compatible dicts and stores the current game,
a capped newest-first history and export blobs on a pluggable backend.
"""
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from werewolf_moderator.core.config import settings
from werewolf_moderator.core.exceptions import ConfigException, ImportFormatError, StorageError
from werewolf_moderator.models.game import (
    AbilityUsage, ActionRecord, DayPhaseState, GameConfig, GameState,
    NightPhaseState, Player, VoteRecord,
)
from werewolf_moderator.models.roles import get_role
from werewolf_moderator.schemas.base import datetime_to_utc_z, parse_utc_datetime, utc_now
from werewolf_moderator.schemas.enums import (
    ActionType, DayStep, DeathReason, GameMode, GamePhase, NightStep, SeerResult, Team,
)
from werewolf_moderator.schemas.game import ExportEnvelope, GameRules
from werewolf_moderator.storage import GameStoreBackend, create_backend

logger = logging.getLogger(__name__)

CURRENT_GAME_KEY = "current_game"
GAME_HISTORY_KEY = "game_history"

# Raised by the deserializers on malformed documents
DECODE_ERRORS = (KeyError, TypeError, ValueError, AttributeError, ConfigException)


# ---------------------------------------------------------------------------
# Serialization helpers
# ---------------------------------------------------------------------------

def _value(member) -> Optional[str]:
    return member.value if member is not None else None


def _serialize_game(game: GameState) -> dict:
    """Serialize a GameState dataclass to a JSON-compatible dict."""
    return {
        "id": game.id,
        "config": _serialize_config(game.config),
        "language": game.language,
        "phase": game.phase.value,
        "round": game.round,
        "current_step": game.current_step,
        "players": [_serialize_player(p) for p in game.players],
        "night_state": _serialize_night(game.night_state),
        "day_state": _serialize_day(game.day_state),
        "history": [_serialize_record(r) for r in game.history],
        "explosion_count": game.explosion_count,
        "self_destruct_count": game.self_destruct_count,
        "winner": _value(game.winner),
        "game_ended": game.game_ended,
        "created_at": datetime_to_utc_z(game.created_at),
        "updated_at": datetime_to_utc_z(game.updated_at),
    }


def _serialize_config(config: GameConfig) -> dict:
    return {
        "mode": config.mode.value,
        "player_count": config.player_count,
        "roles": [r.type.value for r in config.roles],
        "rules": config.rules.model_dump(),
        "created_at": datetime_to_utc_z(config.created_at),
    }


def _serialize_player(player: Player) -> dict:
    usage = player.has_used_ability
    return {
        "seat_number": player.seat_number,
        "name": player.name,
        "role": player.role.type.value,
        "is_alive": player.is_alive,
        "death_reason": _value(player.death_reason),
        "death_round": player.death_round,
        "death_phase": _value(player.death_phase),
        "can_shoot": player.can_shoot,
        "has_shot": player.has_shot,
        "has_used_ability": {
            "antidote": usage.antidote,
            "poison": usage.poison,
            "duel": usage.duel,
            "shoot": usage.shoot,
            "bomb": usage.bomb,
            "guard": list(usage.guard),
        },
    }


def _serialize_vote(vote: VoteRecord) -> dict:
    return {
        "round": vote.round,
        "voter": vote.voter,
        "target": vote.target,
        "is_police_vote": vote.is_police_vote,
    }


def _serialize_night(night: NightPhaseState) -> dict:
    return {
        "current_step": _value(night.current_step),
        "guard_target": night.guard_target,
        "guard_last_target": night.guard_last_target,
        "wolf_kill_target": night.wolf_kill_target,
        "seer_check_target": night.seer_check_target,
        "seer_check_result": _value(night.seer_check_result),
        "witch_antidote_target": night.witch_antidote_target,
        "witch_poison_target": night.witch_poison_target,
        "witch_antidote_used": night.witch_antidote_used,
        "witch_poison_used": night.witch_poison_used,
        "hunter_can_shoot": night.hunter_can_shoot,
        "completed": night.completed,
    }


def _serialize_day(day: DayPhaseState) -> dict:
    return {
        "current_step": _value(day.current_step),
        "deaths": list(day.deaths),
        "votes": [_serialize_vote(v) for v in day.votes],
        "police_chief": day.police_chief,
        "police_candidates": list(day.police_candidates),
        "police_withdrawn": list(day.police_withdrawn),
        "police_speech_order": list(day.police_speech_order),
        "police_speech_index": day.police_speech_index,
        "police_votes": [_serialize_vote(v) for v in day.police_votes],
        "police_abstentions": list(day.police_abstentions),
        "police_tie_breaker": day.police_tie_breaker,
        "allow_self_destruct": day.allow_self_destruct,
        "completed": day.completed,
    }


def _serialize_record(record: ActionRecord) -> dict:
    return {
        "id": record.id,
        "round": record.round,
        "phase": record.phase.value,
        "step": record.step,
        "actor": record.actor,
        "action": record.action.value,
        "target": record.target,
        "result": record.result,
        "timestamp": datetime_to_utc_z(record.timestamp),
        "description": record.description,
    }


# ---------------------------------------------------------------------------
# Deserialization helpers
# ---------------------------------------------------------------------------

def _deserialize_game(data: dict) -> GameState:
    """Deserialize a dict back into a GameState dataclass."""
    game = GameState(
        id=data["id"],
        config=_deserialize_config(data["config"]),
        language=data.get("language", settings.DEFAULT_LANGUAGE),
    )
    game.phase = GamePhase(data["phase"])
    game.round = data["round"]
    game.current_step = data.get("current_step")
    game.players = [_deserialize_player(p) for p in data.get("players", [])]
    game.night_state = _deserialize_night(data.get("night_state", {}))
    game.day_state = _deserialize_day(data.get("day_state", {}))
    game.history = [_deserialize_record(r) for r in data.get("history", [])]
    game.explosion_count = data.get("explosion_count", 0)
    game.self_destruct_count = data.get("self_destruct_count", 0)
    game.winner = Team(data["winner"]) if data.get("winner") else None
    game.game_ended = data.get("game_ended", False)
    game.created_at = parse_utc_datetime(data["created_at"])
    game.updated_at = parse_utc_datetime(data["updated_at"])
    return game


def _deserialize_config(data: dict) -> GameConfig:
    return GameConfig(
        mode=GameMode(data["mode"]),
        player_count=data["player_count"],
        roles=[get_role(r) for r in data.get("roles", [])],
        rules=GameRules(**data.get("rules", {})),
        created_at=parse_utc_datetime(data.get("created_at")) or utc_now(),
    )


def _deserialize_player(data: dict) -> Player:
    usage = data.get("has_used_ability", {})
    return Player(
        seat_number=data["seat_number"],
        name=data["name"],
        role=get_role(data["role"]),
        is_alive=data.get("is_alive", True),
        death_reason=DeathReason(data["death_reason"]) if data.get("death_reason") else None,
        death_round=data.get("death_round"),
        death_phase=GamePhase(data["death_phase"]) if data.get("death_phase") else None,
        can_shoot=data.get("can_shoot", False),
        has_shot=data.get("has_shot", False),
        has_used_ability=AbilityUsage(
            antidote=usage.get("antidote", False),
            poison=usage.get("poison", False),
            duel=usage.get("duel", False),
            shoot=usage.get("shoot", False),
            bomb=usage.get("bomb", False),
            guard=list(usage.get("guard", [])),
        ),
    )


def _deserialize_vote(data: dict) -> VoteRecord:
    return VoteRecord(
        round=data["round"],
        voter=data["voter"],
        target=data["target"],
        is_police_vote=data.get("is_police_vote", False),
    )


def _deserialize_night(data: dict) -> NightPhaseState:
    return NightPhaseState(
        current_step=NightStep(data["current_step"]) if data.get("current_step") else None,
        guard_target=data.get("guard_target"),
        guard_last_target=data.get("guard_last_target"),
        wolf_kill_target=data.get("wolf_kill_target"),
        seer_check_target=data.get("seer_check_target"),
        seer_check_result=SeerResult(data["seer_check_result"]) if data.get("seer_check_result") else None,
        witch_antidote_target=data.get("witch_antidote_target"),
        witch_poison_target=data.get("witch_poison_target"),
        witch_antidote_used=data.get("witch_antidote_used", False),
        witch_poison_used=data.get("witch_poison_used", False),
        hunter_can_shoot=data.get("hunter_can_shoot"),
        completed=data.get("completed", False),
    )


def _deserialize_day(data: dict) -> DayPhaseState:
    return DayPhaseState(
        current_step=DayStep(data["current_step"]) if data.get("current_step") else None,
        deaths=list(data.get("deaths", [])),
        votes=[_deserialize_vote(v) for v in data.get("votes", [])],
        police_chief=data.get("police_chief"),
        police_candidates=list(data.get("police_candidates", [])),
        police_withdrawn=list(data.get("police_withdrawn", [])),
        police_speech_order=list(data.get("police_speech_order", [])),
        police_speech_index=data.get("police_speech_index", 0),
        police_votes=[_deserialize_vote(v) for v in data.get("police_votes", [])],
        police_abstentions=list(data.get("police_abstentions", [])),
        police_tie_breaker=data.get("police_tie_breaker", False),
        allow_self_destruct=data.get("allow_self_destruct", False),
        completed=data.get("completed", False),
    )


def _deserialize_record(data: dict) -> ActionRecord:
    return ActionRecord(
        id=data["id"],
        round=data["round"],
        phase=GamePhase(data["phase"]),
        step=data.get("step", ""),
        actor=data["actor"],
        action=ActionType(data["action"]),
        target=data.get("target"),
        result=data.get("result"),
        timestamp=parse_utc_datetime(data["timestamp"]),
        description=data.get("description", ""),
    )


# ---------------------------------------------------------------------------
# Persistence service
# ---------------------------------------------------------------------------

@dataclass
class SavedGame:
    """A history entry."""
    game_state: GameState
    last_saved: datetime


class GameStorage:
    """Current game slot, game history and export/import.

    Design:
    - Documents are JSON text on a key/value backend
    - History is newest first and capped at HISTORY_LIMIT entries
    - Re-saving a game already in history replaces the older entry
    """

    def __init__(
        self,
        backend: Optional[GameStoreBackend] = None,
        history_limit: Optional[int] = None,
    ):
        self._backend = backend if backend is not None else create_backend()
        self._history_limit = history_limit or settings.HISTORY_LIMIT

    @property
    def backend(self) -> GameStoreBackend:
        return self._backend

    def _read_json(self, key: str) -> Optional[Any]:
        raw = self._backend.get(key)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.error(f"Corrupted document under {key}: {e}")
            raise StorageError(f"Corrupted data under {key}", operation="load") from e

    def _write_json(self, key: str, data: Any) -> None:
        self._backend.put(key, json.dumps(data, ensure_ascii=False))

    # --- current game ---

    def save_current_game(self, game: GameState) -> None:
        """Save the game being played."""
        self._write_json(CURRENT_GAME_KEY, {
            "game_state": _serialize_game(game),
            "last_saved": datetime_to_utc_z(utc_now()),
        })
        logger.debug("Saved current game", extra={"game_id": game.id})

    def load_current_game(self) -> Optional[GameState]:
        data = self._read_json(CURRENT_GAME_KEY)
        if data is None:
            return None
        try:
            return _deserialize_game(data["game_state"])
        except DECODE_ERRORS as e:
            logger.error(f"Failed to deserialize current game: {e}")
            raise StorageError("Saved game is unreadable", operation="load") from e

    def clear_current_game(self) -> None:
        self._backend.delete(CURRENT_GAME_KEY)

    # --- history ---

    def _read_history(self) -> list[dict]:
        entries = self._read_json(GAME_HISTORY_KEY)
        if not isinstance(entries, list):
            return []
        return [e for e in entries if isinstance(e, dict) and isinstance(e.get("game_state"), dict)]

    def save_to_history(self, game: GameState) -> None:
        """Prepend the game to history, keeping at most HISTORY_LIMIT entries."""
        entries = [
            e for e in self._read_history()
            if e.get("game_state", {}).get("id") != game.id
        ]
        entries.insert(0, {
            "game_state": _serialize_game(game),
            "last_saved": datetime_to_utc_z(utc_now()),
        })
        self._write_json(GAME_HISTORY_KEY, entries[:self._history_limit])
        logger.info("Saved game to history", extra={"game_id": game.id})

    def get_game_history(self) -> list[SavedGame]:
        """History entries, newest first. Unreadable entries are skipped."""
        history = []
        for entry in self._read_history():
            try:
                history.append(SavedGame(
                    game_state=_deserialize_game(entry["game_state"]),
                    last_saved=parse_utc_datetime(entry.get("last_saved")) or utc_now(),
                ))
            except DECODE_ERRORS as e:
                logger.warning(f"Skipping unreadable history entry: {e}")
        return history

    def delete_from_history(self, game_id: str) -> bool:
        entries = self._read_history()
        kept = [e for e in entries if e.get("game_state", {}).get("id") != game_id]
        if len(kept) == len(entries):
            return False
        self._write_json(GAME_HISTORY_KEY, kept)
        return True

    def clear_history(self) -> None:
        self._backend.delete(GAME_HISTORY_KEY)

    # --- export / import ---

    def export_game(self, game: GameState) -> str:
        """Export a game as a versioned JSON blob."""
        envelope = ExportEnvelope(
            version=settings.EXPORT_FORMAT_VERSION,
            game_state=_serialize_game(game),
        )
        return envelope.model_dump_json(indent=2)

    def import_game(self, blob: str) -> GameState:
        """Parse an exported blob back into a GameState."""
        try:
            data = json.loads(blob)
        except (json.JSONDecodeError, TypeError) as e:
            raise ImportFormatError(f"Import failed: {e}") from e

        if not isinstance(data, dict) or not data.get("game_state"):
            raise ImportFormatError("Import failed: invalid game data format")

        try:
            envelope = ExportEnvelope(
                version=str(data.get("version", "")),
                game_state=data["game_state"],
            )
            return _deserialize_game(envelope.game_state)
        except DECODE_ERRORS as e:
            raise ImportFormatError(f"Import failed: {e}") from e
