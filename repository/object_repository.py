import logging
from typing import Any, Dict, Optional
from botocore.exceptions import BotoCoreError, ClientError
from starlette.concurrency import run_in_threadpool
from config.aws import get_s3_client
from core.entities import ObjectHead, PresignedPut
from util.constants import ObjectStore
from util.errors import UpstreamError

logger = logging.getLogger(__name__)


class ObjectRepository:
    """
    S3 boundary: presigned PUTs for intake, HEAD for finalization.
    Object bytes never pass through this service.
    """

    def __init__(self, client: Optional[Any] = None) -> None:
        self._s3 = client

    def _client(self) -> Any:
        if self._s3 is None:
            self._s3 = get_s3_client()
        return self._s3

    def presign_put(
        self,
        *,
        bucket: str,
        key: str,
        content_type: str,
        metadata: Dict[str, str],
        expires_in: int,
    ) -> PresignedPut:
        # Signing is local (no network); Content-Type, SSE and metadata are
        # part of the signature, so the client must send them verbatim.
        try:
            url = self._client().generate_presigned_url(
                "put_object",
                Params={
                    "Bucket": bucket,
                    "Key": key,
                    "ContentType": content_type,
                    "Metadata": metadata,
                    "ServerSideEncryption": ObjectStore.SSE_ALGORITHM,
                },
                ExpiresIn=expires_in,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("s3.presign.error key=%s err=%s", key, type(e).__name__)
            raise UpstreamError()
        return PresignedPut(url=url, expires_in=expires_in)

    async def head(self, bucket: str, key: str) -> ObjectHead:
        try:
            res = await run_in_threadpool(
                self._client().head_object, Bucket=bucket, Key=key
            )
        except (BotoCoreError, ClientError) as e:
            logger.error(
                "s3.head.error bucket=%s key=%s err=%s", bucket, key, type(e).__name__
            )
            raise UpstreamError()
        return ObjectHead(
            size=int(res.get("ContentLength") or 0),
            etag=str(res.get("ETag") or "").strip('"'),
            content_type=str(res.get("ContentType") or "").lower(),
            last_modified=res.get("LastModified"),
            metadata={
                str(k).lower(): str(v) for k, v in (res.get("Metadata") or {}).items()
            },
        )
