import json
import logging
from typing import Final, List, Mapping, Optional
from redis.asyncio import Redis
from config.cache import get_redis
from core.keys import encode_location
from model.claim import Claim, ClaimStatus
from repository.namespaces import CLAIMS, OWNERS
from util.errors import ClaimAlreadyExistsError, ClaimNotFoundError, ClaimStateError
from util.functions import as_text

logger = logging.getLogger(__name__)

# Every mutation is one Lua script: Redis runs it atomically, so the existence
# precondition and the write can't interleave with another invocation.

_CREATE_IF_ABSENT: Final[str] = """
if redis.call('EXISTS', KEYS[1]) == 1 then
  return 0
end
redis.call('HSET', KEYS[1],
  'claim_id', ARGV[1], 'user_id', ARGV[2], 'filename', ARGV[3],
  'storage_location', ARGV[4], 'tags', ARGV[5], 'client', ARGV[6],
  'status', ARGV[7])
redis.call('ZADD', KEYS[2], 0, ARGV[1])
return 1
"""

_COMPLETE_IF_PRESENT: Final[str] = """
local status = redis.call('HGET', KEYS[1], 'status')
if not status then
  return 0
end
if status == 'FAILED' then
  return -1
end
redis.call('HSET', KEYS[1],
  'status', 'COMPLETE', 'uploaded_at', ARGV[1],
  'size_bytes', ARGV[2], 'etag', ARGV[3])
return 1
"""

_FAIL_IF_PENDING: Final[str] = """
local status = redis.call('HGET', KEYS[1], 'status')
if not status then
  return 0
end
if status == 'COMPLETE' then
  return -1
end
if status == 'PENDING' then
  redis.call('HSET', KEYS[1], 'status', 'FAILED', 'failure_reason', ARGV[1])
end
return 1
"""

MISSING: Final[int] = 0
APPLIED: Final[int] = 1
WRONG_STATE: Final[int] = -1

DEFAULT_LIST_LIMIT: Final[int] = 100
MAX_LIST_LIMIT: Final[int] = 1000


class ClaimRepository:
    """
    Redis-backed claim registry.

    Layout:
    - claimportal:claims:<storage location>  hash, one per (user_id, claim_id)
    - claimportal:owners:<user_id>           zset of claim ids, all score 0,
      read with ZREVRANGEBYLEX so ULIDs come back newest first.
    """

    def __init__(
        self,
        client: Optional[Redis] = None,
        *,
        default_limit: int = DEFAULT_LIST_LIMIT,
        max_limit: int = MAX_LIST_LIMIT,
    ) -> None:
        self._redis = client
        self._default_limit = default_limit
        self._max_limit = max_limit

    async def _client(self) -> Redis:
        if self._redis is not None:
            return self._redis
        return await get_redis()

    @staticmethod
    def _key(user_id: str, claim_id: str) -> str:
        return f"{CLAIMS}:{encode_location(user_id, claim_id)}"

    @staticmethod
    def _owner_key(user_id: str) -> str:
        return f"{OWNERS}:{user_id}"

    @staticmethod
    def _hydrate(h: Mapping[bytes, bytes]) -> Claim:
        fields = {as_text(k): as_text(v) for k, v in h.items()}
        size = fields.get("size_bytes")
        return Claim(
            user_id=fields["user_id"],
            claim_id=fields["claim_id"],
            filename=fields.get("filename", ""),
            storage_location=fields.get("storage_location", ""),
            tags=json.loads(fields.get("tags") or "[]"),
            client=fields.get("client", ""),
            status=ClaimStatus(fields.get("status") or ClaimStatus.PENDING.value),
            uploaded_at=fields.get("uploaded_at") or None,
            size_bytes=int(size) if size else None,
            etag=fields.get("etag") or None,
            failure_reason=fields.get("failure_reason") or None,
        )

    # ---------------- Conditional writes ----------------

    async def create_if_absent(self, claim: Claim) -> None:
        r = await self._client()
        script = r.register_script(_CREATE_IF_ABSENT)
        created = await script(
            keys=[self._key(claim.user_id, claim.claim_id), self._owner_key(claim.user_id)],
            args=[
                claim.claim_id,
                claim.user_id,
                claim.filename,
                claim.storage_location,
                json.dumps(list(claim.tags), separators=(",", ":")),
                claim.client,
                ClaimStatus.PENDING.value,
            ],
        )
        if int(created) != APPLIED:
            raise ClaimAlreadyExistsError()

    async def complete_if_present(
        self,
        user_id: str,
        claim_id: str,
        size_bytes: int,
        etag: str,
        uploaded_at: str,
    ) -> None:
        """
        PENDING|COMPLETE -> COMPLETE. Re-applying the same values is a
        harmless rewrite. FAILED stays FAILED.
        """
        try:
            key = self._key(user_id, claim_id)
        except ValueError:
            raise ClaimNotFoundError()
        r = await self._client()
        script = r.register_script(_COMPLETE_IF_PRESENT)
        res = int(await script(keys=[key], args=[uploaded_at, str(size_bytes), etag]))
        if res == MISSING:
            raise ClaimNotFoundError()
        if res == WRONG_STATE:
            raise ClaimStateError("claim already failed")

    async def fail_if_pending(self, user_id: str, claim_id: str, reason: str) -> None:
        try:
            key = self._key(user_id, claim_id)
        except ValueError:
            raise ClaimNotFoundError()
        r = await self._client()
        script = r.register_script(_FAIL_IF_PENDING)
        res = int(await script(keys=[key], args=[reason]))
        if res == MISSING:
            raise ClaimNotFoundError()
        if res == WRONG_STATE:
            raise ClaimStateError("claim already complete")

    # ---------------- Reads ----------------

    async def get(self, user_id: str, claim_id: str) -> Optional[Claim]:
        try:
            key = self._key(user_id, claim_id)
        except ValueError:
            return None
        r = await self._client()
        h = await r.hgetall(key)
        if not h:
            return None
        return self._hydrate(h)

    def effective_limit(self, limit: Optional[int]) -> int:
        if limit is None or limit <= 0:
            return self._default_limit
        return min(limit, self._max_limit)

    async def list_by_owner(self, user_id: str, limit: Optional[int] = None) -> List[Claim]:
        """Newest first. A missing or non-positive limit means the default."""
        n = self.effective_limit(limit)
        r = await self._client()
        ids = await r.zrevrangebylex(self._owner_key(user_id), "+", "-", start=0, num=n)
        if not ids:
            return []
        pipe = r.pipeline(transaction=False)
        for raw in ids:
            pipe.hgetall(self._key(user_id, as_text(raw)))
        rows = await pipe.execute()
        out: List[Claim] = []
        for raw, h in zip(ids, rows):
            if not h:
                # index entry without a record; leave it for operator cleanup
                logger.warning("claims.list.orphan user=%s claim=%s", user_id, as_text(raw))
                continue
            out.append(self._hydrate(h))
        return out
