from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tabulator.models import EventORM, CategoryORM, CandidateORM, UserORM
from .base import EntityResolver, EntityKind

_MODELS = {
    EntityKind.EVENT: EventORM,
    EntityKind.CATEGORY: CategoryORM,
    EntityKind.CANDIDATE: CandidateORM,
    EntityKind.JUDGE: UserORM,
}


class SqlEntityResolver(EntityResolver):
    def __init__(self, db: AsyncSession):
        self.db = db

    async def names(self, kind: EntityKind, ids: Iterable[str]) -> dict[str, str]:
        wanted = set(ids)
        if not wanted:
            return {}
        model = _MODELS[EntityKind(kind)]
        result = await self.db.execute(
            select(model.id, model.name).where(model.id.in_(wanted))
        )
        return {row.id: row.name for row in result.all()}
