from typing import Any, Optional

from tabulator.errors import DuplicateVoteError, ValidationError
from tabulator.stores import VoteStore, VoteDraft, normalize_score

REFERENCE_FIELDS = ("event", "category", "judge", "candidate")


def _present(value: Optional[str]) -> bool:
    return isinstance(value, str) and bool(value.strip())


class VoteIntakeValidator:
    def __init__(self, store: VoteStore):
        self.store = store

    async def validate(
        self,
        event: Optional[str],
        category: Optional[str],
        judge: Optional[str],
        candidate: Optional[str],
        score: Any,
    ) -> VoteDraft:
        """
        Check an incoming vote and return it as a draft ready for the store.

        Checks run in a fixed order: required fields, then score range, then
        the duplicate lookup. Zero is a present score, so presence is tested
        against None rather than truthiness.

        Raises:
            ValidationError: a reference or the score is missing
            ScoreRangeError: score is not an integer within the allowed range
            DuplicateVoteError: the judge already scored this candidate in
                this category of this event
        """
        refs = {"event": event, "category": category, "judge": judge, "candidate": candidate}
        missing = [name for name in REFERENCE_FIELDS if not _present(refs[name])]
        if missing:
            raise ValidationError(
                missing[0],
                "All fields are required: event, category, judge, candidate, score",
            )
        if score is None:
            raise ValidationError(
                "score",
                "All fields are required: event, category, judge, candidate, score",
            )

        score = normalize_score(score, self.store.min_score, self.store.max_score)

        event, category, judge, candidate = (refs[name].strip() for name in REFERENCE_FIELDS)
        existing = await self.store.find_by_tuple(event, category, judge, candidate)
        if existing:
            raise DuplicateVoteError(event, category, judge, candidate)

        return VoteDraft(
            event=event,
            category=category,
            judge=judge,
            candidate=candidate,
            score=score,
        )
