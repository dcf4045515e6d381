"""Vote counting for day votes and police elections."""
from dataclasses import dataclass, field
from typing import Iterable, Optional

from werewolf_moderator.core.config import settings
from werewolf_moderator.i18n import t
from werewolf_moderator.models.game import VoteRecord


@dataclass
class VoteTally:
    vote_count: dict[int, float] = field(default_factory=dict)
    max_votes: float = 0
    winners: list[int] = field(default_factory=list)
    is_tie: bool = False
    abstain_count: float = 0


def tally(
    votes: Iterable[VoteRecord],
    weighted: bool = True,
    police_weight: Optional[float] = None,
) -> VoteTally:
    """
    Count votes per target.

    Args:
        votes: Vote records to count
        weighted: Apply the police chief weight to votes flagged is_police_vote
        police_weight: Override for settings.POLICE_VOTE_WEIGHT

    Returns:
        VoteTally; target 0 counts toward abstain_count only
    """
    weight_for_chief = settings.POLICE_VOTE_WEIGHT if police_weight is None else police_weight
    result = VoteTally()

    for vote in votes:
        weight = weight_for_chief if (weighted and vote.is_police_vote) else 1
        if vote.target == 0:
            result.abstain_count += weight
        else:
            result.vote_count[vote.target] = result.vote_count.get(vote.target, 0) + weight

    if result.vote_count:
        result.max_votes = max(result.vote_count.values())
        result.winners = sorted(
            target for target, count in result.vote_count.items() if count == result.max_votes
        )
        result.is_tie = len(result.winners) > 1
    return result


def execution_target(result: VoteTally) -> Optional[int]:
    """The seat to execute, or None on a tie or when nobody received votes."""
    if result.is_tie or result.max_votes == 0:
        return None
    return result.winners[0]


def format_tally(result: VoteTally, language: str = "zh") -> str:
    """Human-readable summary, e.g. '3 (2 votes), abstain (1 vote)'."""
    parts = [
        t("vote.target_count", language=language, target=target, count=_fmt(count))
        for target, count in sorted(result.vote_count.items())
    ]
    if result.abstain_count > 0:
        parts.append(t("vote.abstain_count", language=language, count=_fmt(result.abstain_count)))
    if not parts:
        return t("vote.no_votes", language=language)
    return ", ".join(parts)


def _fmt(count: float) -> str:
    return str(int(count)) if float(count).is_integer() else str(count)
