"""
Vote and ranking tallies for a room.

Everything here is pure: callers load a room's options, votes and rankings and
pass them in. Options only need ``id`` and ``code``; votes need ``option_id``,
``voter_name`` and ``vote_value``; rankings need ``first_option_id`` and
``second_option_id``. Leaderboards sort by their score descending, then by
option code so equal scores always come out in the same order.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional

FIRST_CHOICE_POINTS = 2
SECOND_CHOICE_POINTS = 1


@dataclass
class VoterVote:
    name: str
    vote: str


@dataclass
class OptionTally:
    option: Any
    yes: int = 0
    maybe: int = 0
    no: int = 0
    voters: List[VoterVote] = field(default_factory=list)

    @property
    def option_id(self) -> str:
        return self.option.id

    @property
    def total(self) -> int:
        return self.yes + self.maybe + self.no

    @property
    def score(self) -> int:
        # maybe is neutral
        return self.yes - self.no

    def _percent(self, count: int) -> float:
        if self.total == 0:
            return 0.0
        return round(count / self.total * 100, 1)

    @property
    def yes_percent(self) -> float:
        return self._percent(self.yes)

    @property
    def maybe_percent(self) -> float:
        return self._percent(self.maybe)

    @property
    def no_percent(self) -> float:
        return self._percent(self.no)


@dataclass
class RankingTally:
    option: Any
    first_place_votes: int = 0
    second_place_votes: int = 0

    @property
    def option_id(self) -> str:
        return self.option.id

    @property
    def points(self) -> int:
        return (
            self.first_place_votes * FIRST_CHOICE_POINTS
            + self.second_place_votes * SECOND_CHOICE_POINTS
        )


def summarize_votes(options: Iterable[Any], votes: Iterable[Any]) -> List[OptionTally]:
    """One tally per option, in the order the options were given.

    Votes for options not in ``options`` are ignored.
    """
    tallies = [OptionTally(option=option) for option in options]
    by_option = {tally.option_id: tally for tally in tallies}

    for vote in votes:
        tally = by_option.get(vote.option_id)
        if tally is None:
            continue
        if vote.vote_value == "yes":
            tally.yes += 1
        elif vote.vote_value == "maybe":
            tally.maybe += 1
        elif vote.vote_value == "no":
            tally.no += 1
        else:
            continue
        tally.voters.append(VoterVote(name=vote.voter_name, vote=vote.vote_value))

    return tallies


def rank_summaries(tallies: Iterable[OptionTally]) -> List[OptionTally]:
    return sorted(tallies, key=lambda t: (-t.score, t.option.code))


def leading_score(tallies: Iterable[OptionTally]) -> Optional[int]:
    """Highest score in the room, or None when nobody is ahead (max <= 0)."""
    scores = [t.score for t in tallies]
    if not scores:
        return None
    best = max(scores)
    return best if best > 0 else None


def is_leader(tally: OptionTally, leading: Optional[int]) -> bool:
    return leading is not None and tally.score == leading


def has_votes(tallies: Iterable[OptionTally]) -> bool:
    return any(t.total > 0 for t in tallies)


def summarize_rankings(options: Iterable[Any], rankings: Iterable[Any]) -> List[RankingTally]:
    """Weighted first/second choice points per option, best first."""
    tallies = [RankingTally(option=option) for option in options]
    by_option = {tally.option_id: tally for tally in tallies}

    for ranking in rankings:
        first = by_option.get(ranking.first_option_id)
        if first is not None:
            first.first_place_votes += 1
        second = by_option.get(ranking.second_option_id)
        if second is not None:
            second.second_place_votes += 1

    return sorted(tallies, key=lambda t: (-t.points, t.option.code))
