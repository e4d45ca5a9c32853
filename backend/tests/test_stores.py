"""Contract tests shared by every vote store backend."""

import asyncio

import pytest

from tabulator.errors import DuplicateVoteError, NotFoundError, ScoreRangeError, ValidationError
from tabulator.stores import InMemoryVoteStore, VoteFilter, normalize_score
from tests.conftest import make_draft


class TestNormalizeScore:
    @pytest.mark.parametrize("score", [1, 5, 10])
    def test_accepts_scores_in_range(self, score):
        assert normalize_score(score) == score

    def test_accepts_integral_float(self):
        result = normalize_score(7.0)
        assert result == 7
        assert isinstance(result, int)

    @pytest.mark.parametrize("score", [0, -1, 11, 10.5, 0.5, float("nan"), True, "7", None])
    def test_rejects_everything_else(self, score):
        with pytest.raises(ScoreRangeError) as exc_info:
            normalize_score(score)
        assert exc_info.value.field == "score"

    @pytest.mark.parametrize("score, shown", [(float("inf"), "inf"), (float("nan"), "nan"), (11, 11)])
    def test_error_context_is_json_safe(self, score, shown):
        with pytest.raises(ScoreRangeError) as exc_info:
            normalize_score(score)
        assert exc_info.value.context()["score"] == shown

    def test_custom_range(self):
        assert normalize_score(100, 0, 100) == 100
        with pytest.raises(ScoreRangeError):
            normalize_score(101, 0, 100)


class TestVoteFilter:
    def test_empty(self):
        assert VoteFilter().is_empty()
        assert not VoteFilter(event="e1").is_empty()

    def test_as_dict_skips_unset_fields(self):
        assert VoteFilter(event="e1", judge="j1").as_dict() == {"event": "e1", "judge": "j1"}


class TestStoreContract:
    async def test_create_assigns_id_and_timestamp(self, any_store):
        record = await any_store.create(make_draft(score=8))
        assert record.id
        assert record.created_at is not None
        assert record.created_at.tzinfo is not None
        assert (record.event, record.category, record.judge, record.candidate) == ("e1", "singing", "j1", "c1")
        assert record.score == 8

    async def test_create_twice_is_duplicate(self, any_store):
        await any_store.create(make_draft(score=8))
        with pytest.raises(DuplicateVoteError) as exc_info:
            await any_store.create(make_draft(score=3))
        assert exc_info.value.context() == {
            "event": "e1", "category": "singing", "judge": "j1", "candidate": "c1",
        }
        assert await any_store.count(VoteFilter(event="e1")) == 1

    async def test_store_usable_after_duplicate(self, any_store):
        await any_store.create(make_draft())
        with pytest.raises(DuplicateVoteError):
            await any_store.create(make_draft())
        other = await any_store.create(make_draft(candidate="c2"))
        assert other.candidate == "c2"

    async def test_same_candidate_in_other_category_is_allowed(self, any_store):
        await any_store.create(make_draft(category="singing"))
        await any_store.create(make_draft(category="dancing"))
        await any_store.create(make_draft(judge="j2"))
        assert await any_store.count(VoteFilter(candidate="c1")) == 3

    @pytest.mark.parametrize("score", [0, 11, 10.5])
    async def test_create_rejects_out_of_range(self, any_store, score):
        with pytest.raises(ScoreRangeError):
            await any_store.create(make_draft(score=score))
        assert await any_store.count(VoteFilter(event="e1")) == 0

    async def test_find_by_tuple(self, any_store):
        created = await any_store.create(make_draft())
        found = await any_store.find_by_tuple("e1", "singing", "j1", "c1")
        assert found.id == created.id
        assert await any_store.find_by_tuple("e1", "singing", "j1", "c2") is None

    async def test_find_by_id(self, any_store):
        created = await any_store.create(make_draft())
        assert (await any_store.find_by_id(created.id)).score == created.score
        assert await any_store.find_by_id("missing") is None

    async def test_find_many_filters_are_anded(self, any_store):
        await any_store.create(make_draft(candidate="c1", judge="j1"))
        await any_store.create(make_draft(candidate="c2", judge="j1"))
        await any_store.create(make_draft(candidate="c1", judge="j2"))
        await any_store.create(make_draft(candidate="c1", judge="j1", event="e2"))

        assert len(await any_store.find_many(VoteFilter(event="e1"))) == 3
        assert len(await any_store.find_many(VoteFilter(event="e1", judge="j1"))) == 2
        assert len(await any_store.find_many(VoteFilter(judge="j1"))) == 3
        assert await any_store.find_many(VoteFilter(event="e3")) == []

    async def test_update_changes_only_score(self, any_store):
        created = await any_store.create(make_draft(score=4))
        updated = await any_store.update(created.id, 9)
        assert updated.score == 9
        assert updated.key == created.key
        assert updated.id == created.id
        assert (await any_store.find_by_id(created.id)).score == 9

    async def test_update_unknown_vote(self, any_store):
        with pytest.raises(NotFoundError):
            await any_store.update("missing", 5)

    async def test_update_rejects_out_of_range(self, any_store):
        created = await any_store.create(make_draft(score=4))
        with pytest.raises(ScoreRangeError):
            await any_store.update(created.id, 0)
        assert (await any_store.find_by_id(created.id)).score == 4

    async def test_delete(self, any_store):
        created = await any_store.create(make_draft())
        await any_store.delete(created.id)
        assert await any_store.find_by_id(created.id) is None
        with pytest.raises(NotFoundError):
            await any_store.delete(created.id)

    async def test_delete_frees_the_tuple(self, any_store):
        created = await any_store.create(make_draft(score=2))
        await any_store.delete(created.id)
        again = await any_store.create(make_draft(score=6))
        assert again.score == 6

    async def test_delete_many(self, any_store):
        await any_store.create(make_draft(candidate="c1", category="singing"))
        await any_store.create(make_draft(candidate="c2", category="singing"))
        await any_store.create(make_draft(candidate="c1", category="dancing"))

        assert await any_store.delete_many(VoteFilter(category="singing")) == 2
        assert await any_store.count(VoteFilter(event="e1")) == 1
        # idempotent
        assert await any_store.delete_many(VoteFilter(category="singing")) == 0

    async def test_delete_many_requires_a_filter(self, any_store):
        await any_store.create(make_draft())
        with pytest.raises(ValidationError):
            await any_store.delete_many(VoteFilter())
        assert await any_store.count(VoteFilter(event="e1")) == 1


class TestInMemoryConcurrency:
    async def test_concurrent_creates_for_same_tuple(self):
        store = InMemoryVoteStore()
        results = await asyncio.gather(
            *[store.create(make_draft(score=s)) for s in (3, 7, 9)],
            return_exceptions=True,
        )
        successes = [r for r in results if not isinstance(r, Exception)]
        failures = [r for r in results if isinstance(r, DuplicateVoteError)]
        assert len(successes) == 1
        assert len(failures) == 2

    async def test_returned_records_are_copies(self):
        store = InMemoryVoteStore()
        record = await store.create(make_draft(score=5))
        record.score = 1
        assert (await store.find_by_id(record.id)).score == 5
