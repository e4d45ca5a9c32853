from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tabulator.config import get_settings
from tabulator.models import get_db
from tabulator.resolvers import SqlEntityResolver
from tabulator.services import VoteLedger
from tabulator.stores import SqlVoteStore


async def get_vote_ledger(db: AsyncSession = Depends(get_db)) -> VoteLedger:
    """Build a ledger bound to the request's database session."""
    settings = get_settings()
    store = SqlVoteStore(db, min_score=settings.min_score, max_score=settings.max_score)
    return VoteLedger(store, SqlEntityResolver(db))
