from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query

from tabulator import __version__
from tabulator.errors import ValidationError
from tabulator.models import (
    VoteCreate, VoteScoreUpdate,
    EntityRef, VoteResponse, VoteEnvelope, VoteDeleted,
    JudgeVotesResponse, CandidateStandingResponse, RankingResponse,
    HealthResponse,
)
from tabulator.services import VoteLedger, ResolvedVote, RankingOutput
from .dependencies import get_vote_ledger

router = APIRouter()


def vote_to_response(vote: ResolvedVote) -> VoteResponse:
    """Convert a resolved vote to its response schema."""
    r = vote.record
    return VoteResponse(
        id=r.id,
        event=EntityRef(id=r.event, name=vote.name_of("event")),
        category=EntityRef(id=r.category, name=vote.name_of("category")),
        judge=EntityRef(id=r.judge, name=vote.name_of("judge")),
        candidate=EntityRef(id=r.candidate, name=vote.name_of("candidate")),
        score=r.score,
        created_at=r.created_at,
    )


def ranking_to_response(ranking: RankingOutput) -> RankingResponse:
    return RankingResponse(
        event_id=ranking.event_id,
        category_id=ranking.category_id,
        total_votes=ranking.total_votes,
        ranking=[
            CandidateStandingResponse(
                rank=s.rank,
                candidate=EntityRef(id=s.candidate_id, name=s.candidate_name),
                total_score=s.total_score,
                average_score=s.average_score,
                vote_count=s.vote_count,
                scores=s.scores,
            )
            for s in ranking.standings
        ],
    )


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        version=__version__,
    )


@router.post("/votes", response_model=VoteEnvelope, status_code=201)
async def submit_vote(
    vote_create: VoteCreate,
    ledger: VoteLedger = Depends(get_vote_ledger),
):
    vote = await ledger.submit_vote(
        event=vote_create.event,
        category=vote_create.category,
        judge=vote_create.judge,
        candidate=vote_create.candidate,
        score=vote_create.score,
    )
    return VoteEnvelope(message="Vote submitted successfully", vote=vote_to_response(vote))


@router.get("/votes/ranking", response_model=RankingResponse)
async def ranking_without_event():
    raise ValidationError("event_id", "Event ID is required")


@router.get("/votes/ranking/{event_id}", response_model=RankingResponse)
async def get_ranking(
    event_id: str,
    category_id: Optional[str] = Query(default=None, alias="categoryId"),
    ledger: VoteLedger = Depends(get_vote_ledger),
):
    ranking = await ledger.compute_ranking(event_id, category_id)
    return ranking_to_response(ranking)


@router.get("/votes/judge", response_model=JudgeVotesResponse)
async def judge_votes_without_judge():
    raise ValidationError("judge_id", "Judge ID is required")


@router.get("/votes/judge/{judge_id}", response_model=JudgeVotesResponse)
async def get_votes_by_judge(
    judge_id: str,
    event_id: Optional[str] = Query(default=None, alias="eventId"),
    ledger: VoteLedger = Depends(get_vote_ledger),
):
    votes = await ledger.list_judge_votes(judge_id, event_id)
    return JudgeVotesResponse(
        judge_id=judge_id,
        event_id=event_id or "all",
        total_votes=len(votes),
        votes=[vote_to_response(v) for v in votes],
    )


@router.put("/votes/{vote_id}", response_model=VoteEnvelope)
async def update_vote(
    vote_id: str,
    update: VoteScoreUpdate,
    ledger: VoteLedger = Depends(get_vote_ledger),
):
    vote = await ledger.update_score(vote_id, update.score)
    return VoteEnvelope(message="Vote updated successfully", vote=vote_to_response(vote))


@router.delete("/votes/{vote_id}", response_model=VoteDeleted)
async def delete_vote(
    vote_id: str,
    ledger: VoteLedger = Depends(get_vote_ledger),
):
    await ledger.remove_vote(vote_id)
    return VoteDeleted(message="Vote deleted successfully", vote_id=vote_id)
