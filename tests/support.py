import base64
import json
from datetime import datetime, timezone

BUCKET = "claims-test"
PRESIGNED_URL = "https://claims-test.s3.amazonaws.com/upload?X-Amz-Signature=abc"
LAST_MODIFIED = datetime(2026, 10, 1, 12, 30, 0, tzinfo=timezone.utc)


def make_bearer(payload: dict) -> str:
    def _seg(obj: dict) -> str:
        raw = json.dumps(obj).encode("utf-8")
        return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")

    return f"Bearer {_seg({'alg': 'none'})}.{_seg(payload)}.sig"


def head_response(
    *,
    user_id: str = "",
    claim_id: str = "",
    size: int = 42,
    etag: str = '"abc123"',
    content_type: str = "text/plain",
) -> dict:
    meta = {}
    if user_id:
        meta["user_id"] = user_id
    if claim_id:
        meta["claim_id"] = claim_id
    return {
        "ContentLength": size,
        "ETag": etag,
        "ContentType": content_type,
        "LastModified": LAST_MODIFIED,
        "Metadata": meta,
    }
