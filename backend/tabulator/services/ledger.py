import logging
import time
from dataclasses import dataclass, field
from typing import Any, Optional

from tabulator.errors import DuplicateVoteError, ValidationError
from tabulator.resolvers import EntityResolver, EntityKind, StaticEntityResolver
from tabulator.stores import VoteStore, VoteRecord, VoteFilter
from .intake import VoteIntakeValidator
from .mutation import VoteMutationGateway
from .ranking import RankingService, RankingOutput

logger = logging.getLogger(__name__)

_REF_KINDS = {
    "event": EntityKind.EVENT,
    "category": EntityKind.CATEGORY,
    "judge": EntityKind.JUDGE,
    "candidate": EntityKind.CANDIDATE,
}


@dataclass
class ResolvedVote:
    """A stored vote with display names for its references."""

    record: VoteRecord
    names: dict[str, Optional[str]] = field(default_factory=dict)

    def name_of(self, ref: str) -> Optional[str]:
        return self.names.get(ref)


class VoteLedger:
    """Entry point for everything the HTTP layer does with votes.

    The store and resolver are injected; the ledger builds the intake
    validator, ranking service and mutation gateway around the same store.
    """

    def __init__(self, store: VoteStore, resolver: Optional[EntityResolver] = None):
        self.store = store
        self.resolver = resolver or StaticEntityResolver()
        self.validator = VoteIntakeValidator(store)
        self.ranking_service = RankingService(store, self.resolver)
        self.mutation_gateway = VoteMutationGateway(store)

    async def _resolve(self, records: list[VoteRecord]) -> list[ResolvedVote]:
        lookups: dict[str, dict[str, str]] = {}
        for ref, kind in _REF_KINDS.items():
            lookups[ref] = await self.resolver.names(kind, {getattr(r, ref) for r in records})
        return [
            ResolvedVote(
                record=r,
                names={ref: lookups[ref].get(getattr(r, ref)) for ref in _REF_KINDS},
            )
            for r in records
        ]

    async def submit_vote(
        self,
        event: Optional[str],
        category: Optional[str],
        judge: Optional[str],
        candidate: Optional[str],
        score: Any,
    ) -> ResolvedVote:
        try:
            draft = await self.validator.validate(event, category, judge, candidate, score)
            # The store re-checks uniqueness atomically; the validator's lookup
            # only catches the common case early.
            record = await self.store.create(draft)
        except DuplicateVoteError as e:
            logger.warning(
                f"Duplicate vote rejected: judge={e.judge} candidate={e.candidate} "
                f"event={e.event} category={e.category}"
            )
            raise
        except ValidationError as e:
            logger.info(f"Vote rejected on field '{e.field}': {e.message}")
            raise

        logger.info(
            f"Vote {record.id} recorded: judge={record.judge} candidate={record.candidate} "
            f"event={record.event} category={record.category} score={record.score}"
        )
        resolved = await self._resolve([record])
        return resolved[0]

    async def list_judge_votes(
        self,
        judge_id: Optional[str],
        event_id: Optional[str] = None,
    ) -> list[ResolvedVote]:
        """Votes cast by one judge, newest first, optionally within one event."""
        if not judge_id:
            raise ValidationError("judge_id", "Judge ID is required")
        records = await self.store.find_many(VoteFilter(judge=judge_id, event=event_id or None))
        return await self._resolve(list(reversed(records)))

    async def compute_ranking(
        self,
        event_id: Optional[str],
        category_id: Optional[str] = None,
    ) -> RankingOutput:
        start = time.perf_counter()
        ranking = await self.ranking_service.compute(event_id, category_id)
        duration_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"Ranking for event {ranking.event_id} (category {ranking.category_id}) computed from "
            f"{ranking.total_votes} votes across {len(ranking.standings)} candidates "
            f"in {duration_ms:.1f}ms"
        )
        return ranking

    async def update_score(self, vote_id: str, score: Any) -> ResolvedVote:
        record = await self.mutation_gateway.update_score(vote_id, score)
        resolved = await self._resolve([record])
        return resolved[0]

    async def remove_vote(self, vote_id: str) -> None:
        await self.mutation_gateway.remove_vote(vote_id)

    async def purge_votes(
        self,
        event: Optional[str] = None,
        category: Optional[str] = None,
        candidate: Optional[str] = None,
        judge: Optional[str] = None,
    ) -> int:
        """
        Remove every vote referencing the given entities.

        Called by the event management side when an event, category,
        candidate or judge is deleted. Purging a filter with no matches is
        not an error.
        """
        vote_filter = VoteFilter(event=event, category=category, candidate=candidate, judge=judge)
        removed = await self.store.delete_many(vote_filter)
        logger.info(f"Purged {removed} votes matching {vote_filter.as_dict()}")
        return removed

    async def count_votes(
        self,
        event: Optional[str] = None,
        category: Optional[str] = None,
        candidate: Optional[str] = None,
        judge: Optional[str] = None,
    ) -> int:
        return await self.store.count(
            VoteFilter(event=event, category=category, candidate=candidate, judge=judge)
        )
