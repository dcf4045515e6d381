"""Game enums definition."""
from enum import Enum


class RoleType(str, Enum):
    """Player role enum."""
    WEREWOLF = "werewolf"
    WOLF_KING = "wolf_king"
    WHITE_WOLF = "white_wolf"
    SEER = "seer"
    WITCH = "witch"
    HUNTER = "hunter"
    GUARD = "guard"
    KNIGHT = "knight"
    VILLAGER = "villager"


class Camp(str, Enum):
    """Coarse grouping used for the total-kill win conditions."""
    WEREWOLF = "werewolf"
    GODS = "gods"
    VILLAGER = "villager"


class Team(str, Enum):
    """Binary grouping used for majority win condition and seer results."""
    WEREWOLF = "werewolf"
    GOOD = "good"


class GameMode(str, Enum):
    """Preset boards plus custom."""
    CLASSIC_9 = "classic_9"
    CLASSIC_10 = "classic_10"
    WOLF_KING_GUARD_12 = "wolf_king_guard_12"
    WHITE_WOLF_KNIGHT_12 = "white_wolf_knight_12"
    CUSTOM = "custom"


class DeathReason(str, Enum):
    """Death reason enum."""
    KNIFE = "knife"
    POISON = "poison"
    VOTE = "vote"
    SHOOT = "shoot"
    DUEL = "duel"
    BOMB = "bomb"


class GamePhase(str, Enum):
    """Top-level phase."""
    NIGHT = "night"
    DAY = "day"


class NightStep(str, Enum):
    """Night steps in canonical order."""
    GUARD = "guard"
    WEREWOLF = "werewolf"
    SEER = "seer"
    WITCH = "witch"
    HUNTER_STATUS = "hunter_status"


class DayStep(str, Enum):
    """Day steps in canonical order."""
    POLICE_CAMPAIGN = "police_campaign"
    POLICE_SPEECH = "police_speech"
    POLICE_WITHDRAW = "police_withdraw"
    POLICE_VOTE = "police_vote"
    DAWN = "dawn"
    SKILL_ACTIVATION = "skill_activation"
    LAST_WORDS = "last_words"
    DISCUSSION = "discussion"
    VOTE = "vote"
    EXECUTION = "execution"


class ActionType(str, Enum):
    """Action type enum."""
    GUARD = "guard"
    KILL = "kill"
    CHECK = "check"
    POISON = "poison"
    ANTIDOTE = "antidote"
    SHOOT = "shoot"
    BOMB = "bomb"
    DUEL = "duel"
    VOTE = "vote"
    HUNTER_STATUS = "hunter_status"
    SELF_DESTRUCT = "self_destruct"
    DAWN = "dawn"
    POLICE_ELECT = "police_elect"
    POLICE_ABSTAIN = "police_abstain"
    POLICE_TRANSFER = "police_transfer"
    POLICE_DESTROY = "police_destroy"
    POLICE_WITHDRAW = "police_withdraw"


class SeerResult(str, Enum):
    """What the seer learns about a checked seat."""
    GOOD = "good"
    WEREWOLF = "werewolf"


class WinReason(str, Enum):
    """Why a side won."""
    ALL_WEREWOLVES_ELIMINATED = "all_werewolves_eliminated"
    ALL_GODS_ELIMINATED = "all_gods_eliminated"
    ALL_VILLAGERS_ELIMINATED = "all_villagers_eliminated"
    WEREWOLF_MAJORITY = "werewolf_majority"
