import logging
from typing import Any

from tabulator.errors import ValidationError
from tabulator.stores import VoteStore, VoteRecord

logger = logging.getLogger(__name__)


class VoteMutationGateway:
    """Score corrections and removals for individual votes.

    The identifying tuple of a vote never changes here, so uniqueness is not
    re-checked on update.
    """

    def __init__(self, store: VoteStore):
        self.store = store

    async def update_score(self, vote_id: str, score: Any) -> VoteRecord:
        if not vote_id:
            raise ValidationError("vote_id", "Vote ID is required")
        if score is None:
            raise ValidationError(
                "score",
                f"Valid score ({self.store.min_score}-{self.store.max_score}) is required",
            )
        record = await self.store.update(vote_id, score)
        logger.info(f"Vote {vote_id} score set to {record.score}")
        return record

    async def remove_vote(self, vote_id: str) -> None:
        if not vote_id:
            raise ValidationError("vote_id", "Vote ID is required")
        await self.store.delete(vote_id)
        logger.info(f"Vote {vote_id} deleted")
