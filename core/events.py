import logging
from typing import Any, List, Mapping, Tuple
from pydantic import ValidationError
from model.api import UploadNotification
from util.errors import InvalidRequestError
from util.types import S3EventRecord

logger = logging.getLogger(__name__)

OBJECT_CREATED = "ObjectCreated"


def _from_record(record: S3EventRecord) -> UploadNotification | None:
    event_name = record.get("eventName") or ""
    if event_name and not event_name.startswith(OBJECT_CREATED):
        return None
    s3 = record.get("s3") or {}
    bucket = (s3.get("bucket") or {}).get("name") or ""
    key = (s3.get("object") or {}).get("key") or ""
    if not bucket or not key:
        return None
    return UploadNotification(bucket_ref=bucket, location_ref=key)


def parse_notifications(body: Any) -> Tuple[List[UploadNotification], int]:
    """
    Accepts a raw S3 event ({"Records": [...]}) or our own
    {"notifications": [{bucket_ref, location_ref}]} batch.
    Returns (notifications, number of unusable records).
    """
    if not isinstance(body, Mapping):
        raise InvalidRequestError("notification body must be an object")

    if "Records" in body:
        records = body.get("Records") or []
        if not isinstance(records, list):
            raise InvalidRequestError("Records must be a list")
        out: List[UploadNotification] = []
        dropped = 0
        for rec in records:
            n = _from_record(rec) if isinstance(rec, Mapping) else None
            if n is None:
                dropped += 1
                continue
            out.append(n)
        if dropped:
            logger.warning("events.records.dropped count=%d", dropped)
        return out, dropped

    items = body.get("notifications")
    if items is None:
        items = []
    if not isinstance(items, list):
        raise InvalidRequestError("notifications must be a list")
    out = []
    dropped = 0
    for item in items:
        try:
            out.append(UploadNotification.model_validate(item))
        except ValidationError:
            dropped += 1
    if dropped:
        logger.warning("events.notifications.dropped count=%d", dropped)
    return out, dropped
