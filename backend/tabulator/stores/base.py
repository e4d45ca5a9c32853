from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from datetime import datetime
from typing import Any, Optional

from tabulator.errors import ScoreRangeError

DEFAULT_MIN_SCORE = 1
DEFAULT_MAX_SCORE = 10


@dataclass(frozen=True)
class VoteDraft:
    event: str
    category: str
    judge: str
    candidate: str
    score: int


@dataclass
class VoteRecord:
    id: str
    event: str
    category: str
    judge: str
    candidate: str
    score: int
    created_at: datetime

    @property
    def key(self) -> tuple[str, str, str, str]:
        return (self.event, self.category, self.judge, self.candidate)


@dataclass(frozen=True)
class VoteFilter:
    """Subset of vote references; set fields are ANDed together."""

    event: Optional[str] = None
    category: Optional[str] = None
    judge: Optional[str] = None
    candidate: Optional[str] = None

    def as_dict(self) -> dict[str, str]:
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    def is_empty(self) -> bool:
        return not self.as_dict()

    def matches(self, record: VoteRecord) -> bool:
        return all(getattr(record, name) == value for name, value in self.as_dict().items())


def normalize_score(
    score: Any,
    min_score: int = DEFAULT_MIN_SCORE,
    max_score: int = DEFAULT_MAX_SCORE,
) -> int:
    """Return ``score`` as an int in [min_score, max_score] or raise ScoreRangeError.

    Integral floats such as ``7.0`` are accepted; booleans, fractional values
    and non-numbers are not.
    """
    if isinstance(score, bool):
        raise ScoreRangeError(score, min_score, max_score)
    if isinstance(score, float):
        if not score.is_integer():
            raise ScoreRangeError(score, min_score, max_score)
        score = int(score)
    if not isinstance(score, int):
        raise ScoreRangeError(score, min_score, max_score)
    if score < min_score or score > max_score:
        raise ScoreRangeError(score, min_score, max_score)
    return score


class VoteStore(ABC):
    """Keyed vote storage.

    Implementations own the one-vote-per-tuple rule: ``create`` must check
    and insert atomically, so it stays correct even when two requests pass
    intake validation for the same tuple at the same time.
    """

    min_score: int = DEFAULT_MIN_SCORE
    max_score: int = DEFAULT_MAX_SCORE

    @abstractmethod
    async def create(self, draft: VoteDraft) -> VoteRecord:
        """Persist a new vote. Raises DuplicateVoteError or ScoreRangeError."""
        pass

    @abstractmethod
    async def find_by_tuple(
        self,
        event: str,
        category: str,
        judge: str,
        candidate: str,
    ) -> Optional[VoteRecord]:
        pass

    @abstractmethod
    async def find_by_id(self, vote_id: str) -> Optional[VoteRecord]:
        pass

    @abstractmethod
    async def find_many(self, vote_filter: VoteFilter) -> list[VoteRecord]:
        """Return matching votes, oldest first."""
        pass

    @abstractmethod
    async def update(self, vote_id: str, score: Any) -> VoteRecord:
        """Replace the score of a vote. Raises NotFoundError or ScoreRangeError."""
        pass

    @abstractmethod
    async def delete(self, vote_id: str) -> None:
        """Remove a vote. Raises NotFoundError."""
        pass

    @abstractmethod
    async def delete_many(self, vote_filter: VoteFilter) -> int:
        """Remove every matching vote and return how many went away."""
        pass

    @abstractmethod
    async def count(self, vote_filter: VoteFilter) -> int:
        pass

    def check_score(self, score: Any) -> int:
        return normalize_score(score, self.min_score, self.max_score)
