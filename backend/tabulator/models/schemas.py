from datetime import datetime
from typing import Any, Optional, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VoteCreate(CamelModel):
    # Every field is optional here so that missing values reach the intake
    # validator and come back as a ledger ValidationError.
    event: Optional[str] = None
    category: Optional[str] = None
    judge: Optional[str] = None
    candidate: Optional[str] = None
    score: Optional[Union[int, float]] = None


class VoteScoreUpdate(CamelModel):
    score: Optional[Union[int, float]] = None


class EntityRef(CamelModel):
    id: str
    name: Optional[str] = None


class VoteResponse(CamelModel):
    id: str
    event: EntityRef
    category: EntityRef
    judge: EntityRef
    candidate: EntityRef
    score: int
    created_at: datetime


class VoteEnvelope(CamelModel):
    message: str
    vote: VoteResponse


class VoteDeleted(CamelModel):
    message: str
    vote_id: str


class JudgeVotesResponse(CamelModel):
    judge_id: str
    event_id: str = "all"
    total_votes: int
    votes: list[VoteResponse] = []


class CandidateStandingResponse(CamelModel):
    rank: int = Field(ge=1)
    candidate: EntityRef
    total_score: int
    average_score: float
    vote_count: int
    scores: list[int]


class RankingResponse(CamelModel):
    event_id: str
    category_id: str = "all"
    total_votes: int
    ranking: list[CandidateStandingResponse]


class HealthResponse(CamelModel):
    status: str
    timestamp: datetime
    version: str


class ErrorResponse(CamelModel):
    detail: str
    error: str
    context: dict[str, Any] = {}
