import pytest

from core.events import parse_notifications
from model.api import UploadNotification
from util.errors import InvalidRequestError


def _record(bucket="claims-test", key="user/u/c.txt", event="ObjectCreated:Put"):
    return {"eventName": event, "s3": {"bucket": {"name": bucket}, "object": {"key": key}}}


def test_parses_raw_s3_event():
    body = {"Records": [_record(), _record(key="user/u/d.txt", event="ObjectCreated:CompleteMultipartUpload")]}
    notifications, dropped = parse_notifications(body)
    assert dropped == 0
    assert notifications == [
        UploadNotification(bucket_ref="claims-test", location_ref="user/u/c.txt"),
        UploadNotification(bucket_ref="claims-test", location_ref="user/u/d.txt"),
    ]


def test_drops_unusable_records_without_failing_the_batch():
    body = {
        "Records": [
            _record(),
            _record(event="ObjectRemoved:Delete"),
            {"s3": {"bucket": {"name": "b"}}},
            "garbage",
        ]
    }
    notifications, dropped = parse_notifications(body)
    assert [n.location_ref for n in notifications] == ["user/u/c.txt"]
    assert dropped == 3


def test_parses_notification_batch():
    body = {"notifications": [{"bucket_ref": "b", "location_ref": "user/u/c.txt"}]}
    notifications, dropped = parse_notifications(body)
    assert notifications == [UploadNotification(bucket_ref="b", location_ref="user/u/c.txt")]
    assert dropped == 0


def test_bad_batch_entry_is_dropped_not_fatal():
    body = {
        "notifications": [
            {"bucket_ref": "claims-test", "location_ref": "user/u1/A.txt"},
            {"bucket_ref": "claims-test"},
            "garbage",
            {"bucket_ref": "claims-test", "location_ref": "user/u1/B.txt"},
        ]
    }
    notifications, dropped = parse_notifications(body)
    assert [n.location_ref for n in notifications] == ["user/u1/A.txt", "user/u1/B.txt"]
    assert dropped == 2


@pytest.mark.parametrize(
    "body",
    [
        [],
        "text",
        {"Records": "nope"},
        {"notifications": "nope"},
    ],
)
def test_rejects_malformed_bodies(body):
    with pytest.raises(InvalidRequestError):
        parse_notifications(body)
