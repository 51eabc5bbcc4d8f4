import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping, Tuple, Union
from urllib.parse import unquote_plus
from core.entities import ObjectHead
from core.keys import decode_location
from util.constants import ObjectStore
from util.errors import NotResolvableError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompleteClaim:
    user_id: str
    claim_id: str
    size_bytes: int
    etag: str
    uploaded_at: str
    content_type_ok: bool


@dataclass(frozen=True)
class FailClaim:
    user_id: str
    claim_id: str
    reason: str


FinalizationCommand = Union[CompleteClaim, FailClaim]


def normalize_location(location_ref: str) -> str:
    # S3 event keys arrive form-encoded ("+" for spaces)
    return unquote_plus(location_ref or "").strip()


def resolve_owner(location: str, metadata: Mapping[str, str]) -> Tuple[str, str]:
    """
    Metadata ids win when both are present; otherwise the key is decoded and
    any single metadata value still takes its own slot.
    """
    user_id = (metadata.get(ObjectStore.META_USER_ID) or "").strip()
    claim_id = (metadata.get(ObjectStore.META_CLAIM_ID) or "").strip()
    if user_id and claim_id:
        return user_id, claim_id

    key_user, key_claim, ok = decode_location(location)
    if not ok:
        raise NotResolvableError(f"unexpected key shape: {location}")
    return user_id or key_user, claim_id or key_claim


def content_type_matches(content_type: str) -> bool:
    # Missing content type is tolerated; only an explicit mismatch counts.
    media = (content_type or "").split(";", 1)[0].strip().lower()
    return media in ("", ObjectStore.CONTENT_TYPE_TEXT)


def _iso(ts: datetime | None) -> str:
    if ts is None:
        # redeliveries of this object will not agree on uploaded_at
        logger.warning("finalize.last_modified.missing using=now")
        ts = datetime.now(timezone.utc)
    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def plan_finalization(
    location: str, head: ObjectHead, *, strict_content_type: bool = False
) -> FinalizationCommand:
    """
    Pure step of finalization: object facts in, registry command out.

    uploaded_at is taken from the object's Last-Modified so that a redelivered
    notification produces the very same terminal values.
    """
    user_id, claim_id = resolve_owner(location, head.metadata)
    ct_ok = content_type_matches(head.content_type)
    if not ct_ok and strict_content_type:
        return FailClaim(
            user_id=user_id,
            claim_id=claim_id,
            reason=f"unexpected content-type {head.content_type}",
        )
    return CompleteClaim(
        user_id=user_id,
        claim_id=claim_id,
        size_bytes=head.size,
        etag=head.etag,
        uploaded_at=_iso(head.last_modified),
        content_type_ok=ct_ok,
    )
