import asyncio
import uuid
from datetime import datetime, timezone
from typing import Any, Optional

from tabulator.errors import DuplicateVoteError, NotFoundError, ValidationError
from .base import (
    VoteStore, VoteDraft, VoteRecord, VoteFilter,
    DEFAULT_MIN_SCORE, DEFAULT_MAX_SCORE,
)


class InMemoryVoteStore(VoteStore):
    """Vote store held in process memory.

    Votes live in a dict keyed by id, which preserves insertion order, plus a
    tuple index used for the uniqueness check. Writes hold an asyncio lock so
    the check and the insert in ``create`` happen as one step.
    """

    def __init__(self, min_score: int = DEFAULT_MIN_SCORE, max_score: int = DEFAULT_MAX_SCORE):
        self.min_score = min_score
        self.max_score = max_score
        self._votes: dict[str, VoteRecord] = {}
        self._by_tuple: dict[tuple[str, str, str, str], str] = {}
        self._lock = asyncio.Lock()

    async def create(self, draft: VoteDraft) -> VoteRecord:
        score = self.check_score(draft.score)
        key = (draft.event, draft.category, draft.judge, draft.candidate)
        async with self._lock:
            if key in self._by_tuple:
                raise DuplicateVoteError(*key)
            record = VoteRecord(
                id=uuid.uuid4().hex,
                event=draft.event,
                category=draft.category,
                judge=draft.judge,
                candidate=draft.candidate,
                score=score,
                created_at=datetime.now(timezone.utc),
            )
            self._votes[record.id] = record
            self._by_tuple[key] = record.id
        return _copy(record)

    async def find_by_tuple(
        self,
        event: str,
        category: str,
        judge: str,
        candidate: str,
    ) -> Optional[VoteRecord]:
        vote_id = self._by_tuple.get((event, category, judge, candidate))
        if vote_id is None:
            return None
        return _copy(self._votes[vote_id])

    async def find_by_id(self, vote_id: str) -> Optional[VoteRecord]:
        record = self._votes.get(vote_id)
        return _copy(record) if record else None

    async def find_many(self, vote_filter: VoteFilter) -> list[VoteRecord]:
        return [_copy(r) for r in self._votes.values() if vote_filter.matches(r)]

    async def update(self, vote_id: str, score: Any) -> VoteRecord:
        score = self.check_score(score)
        async with self._lock:
            record = self._votes.get(vote_id)
            if record is None:
                raise NotFoundError(vote_id)
            record.score = score
        return _copy(record)

    async def delete(self, vote_id: str) -> None:
        async with self._lock:
            record = self._votes.pop(vote_id, None)
            if record is None:
                raise NotFoundError(vote_id)
            del self._by_tuple[record.key]

    async def delete_many(self, vote_filter: VoteFilter) -> int:
        if vote_filter.is_empty():
            raise ValidationError("filter", "Bulk delete requires at least one reference filter")
        async with self._lock:
            doomed = [r for r in self._votes.values() if vote_filter.matches(r)]
            for record in doomed:
                del self._votes[record.id]
                del self._by_tuple[record.key]
        return len(doomed)

    async def count(self, vote_filter: VoteFilter) -> int:
        return sum(1 for r in self._votes.values() if vote_filter.matches(r))


def _copy(record: VoteRecord) -> VoteRecord:
    # Callers must not be able to mutate stored records in place
    return VoteRecord(**vars(record))
