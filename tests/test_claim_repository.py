import asyncio

import pytest

from core.keys import encode_location
from model.claim import Claim, ClaimStatus
from repository.claim_repository import ClaimRepository
from util.errors import ClaimAlreadyExistsError, ClaimNotFoundError, ClaimStateError

pytestmark = pytest.mark.anyio


def _claim(user_id: str = "u1", claim_id: str = "01J0000000000000000000000A", **kw) -> Claim:
    fields = dict(
        user_id=user_id,
        claim_id=claim_id,
        filename="claim.txt",
        storage_location=encode_location(user_id, claim_id),
        tags=["auto", "front bumper"],
        client="web",
    )
    fields.update(kw)
    return Claim(**fields)


async def test_create_then_get(claims):
    await claims.create_if_absent(_claim())
    stored = await claims.get("u1", "01J0000000000000000000000A")
    assert stored is not None
    assert stored.status is ClaimStatus.PENDING
    assert stored.tags == ["auto", "front bumper"]
    assert stored.storage_location == "user/u1/01J0000000000000000000000A.txt"
    assert stored.uploaded_at is None and stored.size_bytes is None and stored.etag is None


async def test_second_create_fails_and_does_not_overwrite(claims):
    await claims.create_if_absent(_claim(filename="first.txt"))
    with pytest.raises(ClaimAlreadyExistsError) as exc:
        await claims.create_if_absent(_claim(filename="second.txt"))
    assert exc.value.status_code == 409
    stored = await claims.get("u1", "01J0000000000000000000000A")
    assert stored.filename == "first.txt"


async def test_concurrent_create_exactly_one_wins(claims):
    results = await asyncio.gather(
        *(claims.create_if_absent(_claim(client=f"c{i}")) for i in range(5)),
        return_exceptions=True,
    )
    assert results.count(None) == 1
    assert sum(isinstance(r, ClaimAlreadyExistsError) for r in results) == 4
    assert len(await claims.list_by_owner("u1", 10)) == 1


async def test_same_claim_id_for_different_users_is_allowed(claims):
    await claims.create_if_absent(_claim(user_id="u1"))
    await claims.create_if_absent(_claim(user_id="u2"))
    assert len(await claims.list_by_owner("u1", 10)) == 1
    assert len(await claims.list_by_owner("u2", 10)) == 1


async def test_complete_is_idempotent(claims):
    await claims.create_if_absent(_claim())
    args = ("u1", "01J0000000000000000000000A", 42, "abc123", "2026-10-01T12:30:00Z")
    await claims.complete_if_present(*args)
    first = await claims.get("u1", "01J0000000000000000000000A")
    await claims.complete_if_present(*args)
    second = await claims.get("u1", "01J0000000000000000000000A")
    assert first == second
    assert second.status is ClaimStatus.COMPLETE
    assert second.size_bytes == 42
    assert second.etag == "abc123"
    assert second.uploaded_at == "2026-10-01T12:30:00Z"


async def test_concurrent_duplicate_completion(claims):
    await claims.create_if_absent(_claim())
    args = ("u1", "01J0000000000000000000000A", 7, "e", "2026-10-01T12:30:00Z")
    results = await asyncio.gather(
        *(claims.complete_if_present(*args) for _ in range(4)), return_exceptions=True
    )
    assert results == [None] * 4
    assert (await claims.get("u1", "01J0000000000000000000000A")).status is ClaimStatus.COMPLETE


async def test_complete_missing_record_creates_nothing(claims):
    with pytest.raises(ClaimNotFoundError):
        await claims.complete_if_present("u1", "nope", 1, "e", "2026-10-01T12:30:00Z")
    assert await claims.get("u1", "nope") is None
    assert await claims.list_by_owner("u1", 10) == []


async def test_complete_with_unencodable_ids_is_not_found(claims):
    with pytest.raises(ClaimNotFoundError):
        await claims.complete_if_present("a/b", "c", 1, "e", "2026-10-01T12:30:00Z")


async def test_fail_only_from_pending(claims):
    await claims.create_if_absent(_claim())
    await claims.fail_if_pending("u1", "01J0000000000000000000000A", "bad content")
    stored = await claims.get("u1", "01J0000000000000000000000A")
    assert stored.status is ClaimStatus.FAILED
    assert stored.failure_reason == "bad content"
    # repeated failure is a no-op
    await claims.fail_if_pending("u1", "01J0000000000000000000000A", "other")
    stored = await claims.get("u1", "01J0000000000000000000000A")
    assert stored.failure_reason == "bad content"


async def test_status_never_leaves_terminal_states(claims):
    await claims.create_if_absent(_claim(claim_id="A"))
    await claims.create_if_absent(_claim(claim_id="B"))
    await claims.complete_if_present("u1", "A", 1, "e", "2026-10-01T12:30:00Z")
    await claims.fail_if_pending("u1", "B", "rejected")

    with pytest.raises(ClaimStateError):
        await claims.fail_if_pending("u1", "A", "late failure")
    with pytest.raises(ClaimStateError):
        await claims.complete_if_present("u1", "B", 1, "e", "2026-10-01T12:30:00Z")
    with pytest.raises(ClaimAlreadyExistsError):
        await claims.create_if_absent(_claim(claim_id="A"))
    with pytest.raises(ClaimAlreadyExistsError):
        await claims.create_if_absent(_claim(claim_id="B"))

    assert (await claims.get("u1", "A")).status is ClaimStatus.COMPLETE
    assert (await claims.get("u1", "B")).status is ClaimStatus.FAILED


async def test_fail_missing_record(claims):
    with pytest.raises(ClaimNotFoundError):
        await claims.fail_if_pending("u1", "ghost", "x")


async def test_list_newest_first_and_truncated(claims):
    ids = ["01J0000000000000000000000A", "01J0000000000000000000000B", "01J0000000000000000000000C"]
    for cid in ids:
        await claims.create_if_absent(_claim(claim_id=cid))
    listed = await claims.list_by_owner("u1", 10)
    assert [c.claim_id for c in listed] == list(reversed(ids))
    top = await claims.list_by_owner("u1", 2)
    assert [c.claim_id for c in top] == ids[:0:-1]


async def test_list_is_scoped_to_owner(claims):
    await claims.create_if_absent(_claim(user_id="u1", claim_id="A"))
    await claims.create_if_absent(_claim(user_id="u2", claim_id="B"))
    assert [c.claim_id for c in await claims.list_by_owner("u1", 10)] == ["A"]
    assert await claims.list_by_owner("nobody", 10) == []


@pytest.mark.parametrize("limit", [None, 0, -1])
async def test_non_positive_limit_means_default(claims, limit):
    for cid in ("A", "B"):
        await claims.create_if_absent(_claim(claim_id=cid))
    assert [c.claim_id for c in await claims.list_by_owner("u1", limit)] == ["B", "A"]


async def test_default_and_cap_are_configurable(redis_client):
    small = ClaimRepository(redis_client, default_limit=2, max_limit=3)
    for cid in ("A", "B", "C", "D"):
        await small.create_if_absent(_claim(claim_id=cid))
    assert len(await small.list_by_owner("u1", 0)) == 2
    assert len(await small.list_by_owner("u1", 50)) == 3


@pytest.mark.parametrize("limit,expected", [(None, 100), (0, 100), (-5, 100), (7, 7), (5000, 1000)])
def test_effective_limit(claims, limit, expected):
    assert claims.effective_limit(limit) == expected
