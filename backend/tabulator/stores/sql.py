import logging
from datetime import timezone
from typing import Any, Optional

from sqlalchemy import select, delete, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from tabulator.errors import DuplicateVoteError, NotFoundError, ValidationError
from tabulator.models import VoteORM
from .base import (
    VoteStore, VoteDraft, VoteRecord, VoteFilter,
    DEFAULT_MIN_SCORE, DEFAULT_MAX_SCORE,
)

logger = logging.getLogger(__name__)

_FILTER_COLUMNS = {
    "event": VoteORM.event_id,
    "category": VoteORM.category_id,
    "judge": VoteORM.judge_id,
    "candidate": VoteORM.candidate_id,
}


def _to_record(row: VoteORM) -> VoteRecord:
    created_at = row.created_at
    # SQLite hands datetimes back without tzinfo; they are stored as UTC
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return VoteRecord(
        id=row.id,
        event=row.event_id,
        category=row.category_id,
        judge=row.judge_id,
        candidate=row.candidate_id,
        score=row.score,
        created_at=created_at,
    )


def _conditions(vote_filter: VoteFilter) -> list:
    return [_FILTER_COLUMNS[name] == value for name, value in vote_filter.as_dict().items()]


class SqlVoteStore(VoteStore):
    """Vote store on top of an async SQLAlchemy session.

    Uniqueness is enforced by the ``uq_votes_tuple`` constraint on the votes
    table, so a concurrent insert for the same tuple fails inside the database
    and surfaces as DuplicateVoteError.
    """

    def __init__(
        self,
        db: AsyncSession,
        min_score: int = DEFAULT_MIN_SCORE,
        max_score: int = DEFAULT_MAX_SCORE,
    ):
        self.db = db
        self.min_score = min_score
        self.max_score = max_score

    async def _get_row(self, vote_id: str) -> Optional[VoteORM]:
        result = await self.db.execute(select(VoteORM).where(VoteORM.id == vote_id))
        return result.scalar_one_or_none()

    async def create(self, draft: VoteDraft) -> VoteRecord:
        score = self.check_score(draft.score)
        row = VoteORM(
            event_id=draft.event,
            category_id=draft.category,
            judge_id=draft.judge,
            candidate_id=draft.candidate,
            score=score,
        )
        self.db.add(row)
        try:
            await self.db.flush()
        except IntegrityError:
            await self.db.rollback()
            logger.warning(
                f"Unique constraint rejected vote for event={draft.event} category={draft.category} "
                f"judge={draft.judge} candidate={draft.candidate}"
            )
            raise DuplicateVoteError(draft.event, draft.category, draft.judge, draft.candidate)
        record = _to_record(row)
        await self.db.commit()
        return record

    async def find_by_tuple(
        self,
        event: str,
        category: str,
        judge: str,
        candidate: str,
    ) -> Optional[VoteRecord]:
        result = await self.db.execute(
            select(VoteORM).where(
                VoteORM.event_id == event,
                VoteORM.category_id == category,
                VoteORM.judge_id == judge,
                VoteORM.candidate_id == candidate,
            )
        )
        row = result.scalar_one_or_none()
        return _to_record(row) if row else None

    async def find_by_id(self, vote_id: str) -> Optional[VoteRecord]:
        row = await self._get_row(vote_id)
        return _to_record(row) if row else None

    async def find_many(self, vote_filter: VoteFilter) -> list[VoteRecord]:
        result = await self.db.execute(
            select(VoteORM)
            .where(*_conditions(vote_filter))
            .order_by(VoteORM.seq)
        )
        return [_to_record(row) for row in result.scalars().all()]

    async def update(self, vote_id: str, score: Any) -> VoteRecord:
        score = self.check_score(score)
        row = await self._get_row(vote_id)
        if not row:
            raise NotFoundError(vote_id)
        row.score = score
        record = _to_record(row)
        await self.db.commit()
        return record

    async def delete(self, vote_id: str) -> None:
        row = await self._get_row(vote_id)
        if not row:
            raise NotFoundError(vote_id)
        await self.db.delete(row)
        await self.db.commit()

    async def delete_many(self, vote_filter: VoteFilter) -> int:
        if vote_filter.is_empty():
            raise ValidationError("filter", "Bulk delete requires at least one reference filter")
        result = await self.db.execute(delete(VoteORM).where(*_conditions(vote_filter)))
        await self.db.commit()
        return result.rowcount or 0

    async def count(self, vote_filter: VoteFilter) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(VoteORM).where(*_conditions(vote_filter))
        )
        return result.scalar_one()
