from .database import Base, engine, async_session, init_db, get_db
from .schemas import (
    VoteCreate, VoteScoreUpdate,
    EntityRef, VoteResponse, VoteEnvelope, VoteDeleted,
    JudgeVotesResponse,
    CandidateStandingResponse, RankingResponse,
    HealthResponse, ErrorResponse,
)
from .orm import VoteORM, EventORM, CategoryORM, CandidateORM, UserORM

__all__ = [
    "Base", "engine", "async_session", "init_db", "get_db",
    "VoteCreate", "VoteScoreUpdate",
    "EntityRef", "VoteResponse", "VoteEnvelope", "VoteDeleted",
    "JudgeVotesResponse",
    "CandidateStandingResponse", "RankingResponse",
    "HealthResponse", "ErrorResponse",
    "VoteORM", "EventORM", "CategoryORM", "CandidateORM", "UserORM",
]
