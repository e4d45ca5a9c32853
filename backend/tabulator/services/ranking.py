from dataclasses import dataclass, field
from typing import Optional

from tabulator.errors import NoVotesFoundError, ValidationError
from tabulator.resolvers import EntityResolver, EntityKind
from tabulator.stores import VoteStore, VoteRecord, VoteFilter

ALL_CATEGORIES = "all"


@dataclass
class CandidateStanding:
    rank: int
    candidate_id: str
    total_score: int
    average_score: float
    vote_count: int
    scores: list[int] = field(default_factory=list)
    candidate_name: Optional[str] = None


@dataclass
class RankingOutput:
    event_id: str
    category_id: str
    total_votes: int
    standings: list[CandidateStanding]


def aggregate_scores(votes: list[VoteRecord]) -> list[CandidateStanding]:
    """
    Reduce votes to candidate standings ordered by total score.

    Candidates are grouped in the order they first appear in ``votes`` and
    each keeps its raw scores in that same order. The sort is stable, so
    candidates with equal totals stay in first-seen order. Ranks are
    positional: a tie still yields two consecutive ranks.
    """
    totals: dict[str, int] = {}
    scores: dict[str, list[int]] = {}

    for vote in votes:
        if vote.candidate not in totals:
            totals[vote.candidate] = 0
            scores[vote.candidate] = []
        totals[vote.candidate] += vote.score
        scores[vote.candidate].append(vote.score)

    ordered = sorted(totals, key=lambda c: totals[c], reverse=True)

    return [
        CandidateStanding(
            rank=position,
            candidate_id=candidate,
            total_score=totals[candidate],
            average_score=totals[candidate] / len(scores[candidate]),
            vote_count=len(scores[candidate]),
            scores=scores[candidate],
        )
        for position, candidate in enumerate(ordered, start=1)
    ]


class RankingService:
    def __init__(self, store: VoteStore, resolver: Optional[EntityResolver] = None):
        self.store = store
        self.resolver = resolver

    async def compute(self, event_id: Optional[str], category_id: Optional[str] = None) -> RankingOutput:
        if not event_id:
            raise ValidationError("event_id", "Event ID is required")

        votes = await self.store.find_many(VoteFilter(event=event_id, category=category_id or None))
        if not votes:
            raise NoVotesFoundError(event_id, category_id or None)

        standings = aggregate_scores(votes)

        if self.resolver:
            names = await self.resolver.names(
                EntityKind.CANDIDATE, [s.candidate_id for s in standings]
            )
            for standing in standings:
                standing.candidate_name = names.get(standing.candidate_id)

        return RankingOutput(
            event_id=event_id,
            category_id=category_id or ALL_CATEGORIES,
            total_votes=len(votes),
            standings=standings,
        )
