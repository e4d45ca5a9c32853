import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import String, Integer, DateTime, CheckConstraint, UniqueConstraint, Index
from sqlalchemy.orm import Mapped, mapped_column

from tabulator.config import get_settings
from .database import Base

_settings = get_settings()


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class VoteORM(Base):
    __tablename__ = "votes"
    __table_args__ = (
        UniqueConstraint("event_id", "category_id", "judge_id", "candidate_id", name="uq_votes_tuple"),
        CheckConstraint(
            f"score >= {_settings.min_score} AND score <= {_settings.max_score}",
            name="ck_votes_score_range",
        ),
        Index("ix_votes_event_category", "event_id", "category_id"),
        Index("ix_votes_judge", "judge_id"),
        Index("ix_votes_candidate", "candidate_id"),
    )

    # insertion order
    seq: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(32), unique=True, default=_new_id)
    event_id: Mapped[str] = mapped_column(String(64))
    category_id: Mapped[str] = mapped_column(String(64))
    judge_id: Mapped[str] = mapped_column(String(64))
    candidate_id: Mapped[str] = mapped_column(String(64))
    score: Mapped[int] = mapped_column(Integer)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow)


# Name tables owned by the event management side. The ledger only reads them
# to put display names next to the opaque references it stores.


class EventORM(Base):
    __tablename__ = "events"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)


class CategoryORM(Base):
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    event_id: Mapped[str] = mapped_column(String(64), index=True)


class CandidateORM(Base):
    __tablename__ = "candidates"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
    event_id: Mapped[str] = mapped_column(String(64), index=True)


class UserORM(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200))
