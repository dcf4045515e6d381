"""Game data models for in-memory state."""
from datetime import datetime
from typing import Optional
from dataclasses import dataclass, field

from werewolf_moderator.models.roles import Role
from werewolf_moderator.schemas.base import utc_now
from werewolf_moderator.schemas.enums import (
    ActionType, Camp, DayStep, DeathReason, GameMode, GamePhase, NightStep,
    RoleType, SeerResult, Team,
)
from werewolf_moderator.schemas.game import GameRules


@dataclass
class AbilityUsage:
    """Per-player ability usage. Single-use flags are never reset."""
    antidote: bool = False
    poison: bool = False
    duel: bool = False
    shoot: bool = False
    bomb: bool = False
    guard: list[int] = field(default_factory=list)  # Guarded seats, oldest first

    def mark_used(self, ability_id: str) -> None:
        if ability_id not in ("antidote", "poison", "duel", "shoot", "bomb"):
            raise ValueError(f"Not a single-use ability: {ability_id}")
        setattr(self, ability_id, True)

    def is_used(self, ability_id: str) -> bool:
        return bool(getattr(self, ability_id, False))


@dataclass
class Player:
    """Player model."""
    seat_number: int
    name: str
    role: Role
    is_alive: bool = True
    death_reason: Optional[DeathReason] = None
    death_round: Optional[int] = None
    death_phase: Optional[GamePhase] = None
    # Hunter / wolf king
    can_shoot: bool = False
    has_shot: bool = False
    has_used_ability: AbilityUsage = field(default_factory=AbilityUsage)

    @property
    def role_type(self) -> RoleType:
        return self.role.type

    @property
    def camp(self) -> Camp:
        return self.role.camp

    @property
    def team(self) -> Team:
        return self.role.team

    def mark_dead(self, reason: DeathReason, round_number: int, phase: GamePhase) -> bool:
        """Kill the player. Returns False when already dead; death fields are set once."""
        if not self.is_alive:
            return False
        self.is_alive = False
        self.death_reason = reason
        self.death_round = round_number
        self.death_phase = phase
        return True


@dataclass
class ActionRecord:
    """Append-only log entry."""
    id: str
    round: int
    phase: GamePhase
    step: str
    actor: int  # 0 for system or team actions
    action: ActionType
    target: Optional[int] = None
    result: Optional[str] = None
    timestamp: datetime = field(default_factory=utc_now)
    description: str = ""


@dataclass
class VoteRecord:
    """A single day vote."""
    round: int
    voter: int
    target: int  # 0 = abstain
    is_police_vote: bool = False


@dataclass
class NightPhaseState:
    """Night decisions for the current round."""
    current_step: Optional[NightStep] = None
    guard_target: Optional[int] = None
    guard_last_target: Optional[int] = None  # Previous night, carried across resets
    wolf_kill_target: Optional[int] = None
    seer_check_target: Optional[int] = None
    seer_check_result: Optional[SeerResult] = None
    witch_antidote_target: Optional[int] = None
    witch_poison_target: Optional[int] = None
    witch_antidote_used: bool = False
    witch_poison_used: bool = False
    hunter_can_shoot: Optional[bool] = None
    completed: bool = False


@dataclass
class DayPhaseState:
    """Day bookkeeping including the police election."""
    current_step: Optional[DayStep] = None
    deaths: list[int] = field(default_factory=list)
    votes: list[VoteRecord] = field(default_factory=list)
    police_chief: Optional[int] = None  # Carried across resets
    police_candidates: list[int] = field(default_factory=list)
    police_withdrawn: list[int] = field(default_factory=list)
    police_speech_order: list[int] = field(default_factory=list)
    police_speech_index: int = 0
    police_votes: list[VoteRecord] = field(default_factory=list)
    police_abstentions: list[int] = field(default_factory=list)
    police_tie_breaker: bool = False
    allow_self_destruct: bool = False
    completed: bool = False


@dataclass
class GameConfig:
    """Board setup, fixed at creation."""
    mode: GameMode
    player_count: int
    roles: list[Role]
    rules: GameRules = field(default_factory=GameRules)
    created_at: datetime = field(default_factory=utc_now)


@dataclass
class GameState:
    """Game model."""
    id: str
    config: GameConfig
    language: str = "zh"
    phase: GamePhase = GamePhase.NIGHT
    round: int = 1
    current_step: Optional[str] = None
    players: list[Player] = field(default_factory=list)
    night_state: NightPhaseState = field(default_factory=NightPhaseState)
    day_state: DayPhaseState = field(default_factory=DayPhaseState)
    history: list[ActionRecord] = field(default_factory=list)
    explosion_count: int = 0
    self_destruct_count: int = 0
    winner: Optional[Team] = None
    game_ended: bool = False
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)

    def get_player(self, seat_number: int) -> Optional[Player]:
        """Get player by seat number."""
        for p in self.players:
            if p.seat_number == seat_number:
                return p
        return None

    def get_alive_players(self) -> list[Player]:
        return [p for p in self.players if p.is_alive]

    def get_alive_seats(self) -> list[int]:
        return sorted(p.seat_number for p in self.get_alive_players())

    def get_players_by_role(self, role_type: RoleType) -> list[Player]:
        return [p for p in self.players if p.role.type == role_type]

    def get_player_by_role(self, role_type: RoleType) -> Optional[Player]:
        """Get player by role (for unique roles)."""
        for p in self.players:
            if p.role.type == role_type:
                return p
        return None

    def has_alive_role(self, role_type: RoleType) -> bool:
        return any(p.is_alive for p in self.get_players_by_role(role_type))

    def get_alive_werewolves(self) -> list[Player]:
        return [p for p in self.players if p.is_alive and p.team == Team.WEREWOLF]

    def touch(self) -> None:
        self.updated_at = utc_now()

    def add_action(
        self,
        actor: int,
        action: ActionType,
        target: Optional[int] = None,
        result: Optional[str] = None,
        description: str = "",
        step: Optional[str] = None,
    ) -> ActionRecord:
        """Record an action for the current round and phase."""
        timestamp = utc_now()
        record = ActionRecord(
            id=f"{int(timestamp.timestamp() * 1000)}-{len(self.history) + 1}",
            round=self.round,
            phase=self.phase,
            step=step if step is not None else (self.current_step or ""),
            actor=actor,
            action=action,
            target=target,
            result=result,
            timestamp=timestamp,
            description=description,
        )
        self.history.append(record)
        self.updated_at = timestamp
        return record
