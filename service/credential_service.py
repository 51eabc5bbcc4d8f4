import logging
from typing import Dict, Sequence
from model.api import UploadCredential
from repository.object_repository import ObjectRepository
from util.constants import ObjectStore

logger = logging.getLogger(__name__)


def upload_metadata(
    *, claim_id: str, user_id: str, tags: Sequence[str], client: str
) -> Dict[str, str]:
    """User metadata S3 stores with the object; finalization reads it back."""
    return {
        ObjectStore.META_CLAIM_ID: claim_id,
        ObjectStore.META_USER_ID: user_id,
        ObjectStore.META_TAGS: ",".join(tags),
        ObjectStore.META_CLIENT: client,
    }


def required_headers(content_type: str, metadata: Dict[str, str]) -> Dict[str, str]:
    headers = {
        "Content-Type": content_type,
        "x-amz-server-side-encryption": ObjectStore.SSE_ALGORITHM,
    }
    for k, v in metadata.items():
        headers[f"{ObjectStore.META_PREFIX}{k}"] = v
    return headers


class UploadCredentialIssuer:
    """
    Time-bounded, write-scoped credential for exactly one storage location.
    """

    def __init__(self, objects: ObjectRepository, bucket: str, ttl_seconds: int) -> None:
        self._objects = objects
        self._bucket = bucket
        self._ttl = int(ttl_seconds)

    def issue(
        self, *, location: str, content_type: str, metadata: Dict[str, str]
    ) -> UploadCredential:
        presigned = self._objects.presign_put(
            bucket=self._bucket,
            key=location,
            content_type=content_type,
            metadata=metadata,
            expires_in=self._ttl,
        )
        logger.info("credential.issued key=%s ttl=%d", location, presigned.expires_in)
        return UploadCredential(
            url=presigned.url,
            expires_in=presigned.expires_in,
            content_type=content_type,
            required_headers=required_headers(content_type, metadata),
        )
