"""Error family raised by the vote ledger.

Every error carries an ``ErrorKind`` tag so callers can branch on the kind
instead of matching message text. The HTTP layer maps kinds to status codes.
"""

import math
from enum import Enum
from typing import Any, Optional


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    DUPLICATE_VOTE = "duplicate_vote"
    NOT_FOUND = "not_found"
    NO_VOTES = "no_votes"


class VoteError(Exception):
    kind: ErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def context(self) -> dict[str, Any]:
        """Structured fields describing the failure."""
        return {}


class ValidationError(VoteError):
    kind = ErrorKind.VALIDATION

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field

    def context(self) -> dict[str, Any]:
        return {"field": self.field}


class ScoreRangeError(ValidationError):
    def __init__(self, score: Any, min_score: int = 1, max_score: int = 10):
        super().__init__(
            "score",
            f"Score must be an integer between {min_score} and {max_score}",
        )
        self.score = score
        self.min_score = min_score
        self.max_score = max_score

    def context(self) -> dict[str, Any]:
        score = self.score
        # JSON has no inf or nan, so those go out as their repr
        if isinstance(score, float) and not math.isfinite(score):
            score = repr(score)
        return {
            "field": self.field,
            "score": score,
            "min_score": self.min_score,
            "max_score": self.max_score,
        }


class DuplicateVoteError(VoteError):
    kind = ErrorKind.DUPLICATE_VOTE

    def __init__(self, event: str, category: str, judge: str, candidate: str):
        super().__init__("Judge has already voted for this candidate in this category")
        self.event = event
        self.category = category
        self.judge = judge
        self.candidate = candidate

    def context(self) -> dict[str, Any]:
        return {
            "event": self.event,
            "category": self.category,
            "judge": self.judge,
            "candidate": self.candidate,
        }


class NotFoundError(VoteError):
    kind = ErrorKind.NOT_FOUND

    def __init__(self, vote_id: str):
        super().__init__(f"Vote {vote_id} not found")
        self.vote_id = vote_id

    def context(self) -> dict[str, Any]:
        return {"vote_id": self.vote_id}


class NoVotesFoundError(VoteError):
    kind = ErrorKind.NO_VOTES

    def __init__(self, event_id: str, category_id: Optional[str] = None):
        if category_id:
            message = f"No votes found for event {event_id} in category {category_id}"
        else:
            message = f"No votes found for event {event_id}"
        super().__init__(message)
        self.event_id = event_id
        self.category_id = category_id

    def context(self) -> dict[str, Any]:
        return {"event_id": self.event_id, "category_id": self.category_id}
