# config/aws.py
from typing import Any, Optional
import boto3
from botocore.config import Config
from config.settings import settings

_s3: Optional[Any] = None


def get_s3_client() -> Any:
    """
    Shared S3 client. Path-style addressing is forced when a custom endpoint
    (LocalStack, MinIO) is configured. SDK retries are disabled: redelivery is
    owned by the notification source, not by us.
    """
    global _s3
    if _s3 is None:
        endpoint = settings.AWS_ENDPOINT_URL.strip() or None
        session = boto3.session.Session(region_name=settings.AWS_REGION or None)
        _s3 = session.client(
            "s3",
            endpoint_url=endpoint,
            config=Config(
                signature_version="s3v4",
                connect_timeout=settings.S3_CONNECT_TIMEOUT_SECONDS,
                read_timeout=settings.S3_READ_TIMEOUT_SECONDS,
                retries={"total_max_attempts": 1},
                s3={"addressing_style": "path" if endpoint else "auto"},
            ),
        )
    return _s3
