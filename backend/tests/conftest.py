"""Shared fixtures for the ledger tests.

- Store contract tests run against both backends through ``any_store``
- SQL fixtures use a private in-memory SQLite database per test
- HTTP tests swap the ledger dependency for one backed by the in-memory store
"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from tabulator.api import get_vote_ledger
from tabulator.main import create_app
from tabulator.models import Base
from tabulator.resolvers import EntityKind, StaticEntityResolver
from tabulator.services import VoteLedger
from tabulator.stores import InMemoryVoteStore, SqlVoteStore, VoteDraft


def make_draft(
    candidate: str = "c1",
    score: int = 5,
    judge: str = "j1",
    category: str = "singing",
    event: str = "e1",
) -> VoteDraft:
    return VoteDraft(event=event, category=category, judge=judge, candidate=candidate, score=score)


@pytest.fixture
def store() -> InMemoryVoteStore:
    return InMemoryVoteStore()


@pytest.fixture
def resolver() -> StaticEntityResolver:
    return StaticEntityResolver({
        EntityKind.EVENT: {"e1": "Spring Gala"},
        EntityKind.CATEGORY: {"singing": "Singing", "dancing": "Dancing"},
        EntityKind.JUDGE: {"j1": "Ada", "j2": "Grace"},
        EntityKind.CANDIDATE: {"c1": "Alice", "c2": "Bob", "c3": "Carol"},
    })


@pytest.fixture
def ledger(store: InMemoryVoteStore, resolver: StaticEntityResolver) -> VoteLedger:
    return VoteLedger(store, resolver)


@pytest.fixture
async def session_factory():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def sql_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(params=["memory", "sql"])
async def any_store(request, session_factory):
    if request.param == "memory":
        yield InMemoryVoteStore()
    else:
        async with session_factory() as session:
            yield SqlVoteStore(session)


@pytest.fixture
def client(ledger: VoteLedger):
    app = create_app(init_database=False)
    app.dependency_overrides[get_vote_ledger] = lambda: ledger
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
