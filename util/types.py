# util/types.py
from typing import List, TypedDict


# Flow: Narrow types for the raw S3 event notification shape.
class S3BucketRef(TypedDict, total=False):
    name: str


class S3ObjectRef(TypedDict, total=False):
    key: str
    size: int
    eTag: str


class S3Entity(TypedDict, total=False):
    bucket: S3BucketRef
    object: S3ObjectRef


class S3EventRecord(TypedDict, total=False):
    eventName: str
    s3: S3Entity


class S3Event(TypedDict, total=False):
    Records: List[S3EventRecord]
