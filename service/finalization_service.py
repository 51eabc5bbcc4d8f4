import asyncio
import logging
from typing import List, Sequence, Tuple
from redis.exceptions import RedisError
from core.finalization import FailClaim, normalize_location, plan_finalization
from model.api import BatchResult, NotificationFailure, UploadNotification
from model.claim import ClaimStatus
from repository.claim_repository import ClaimRepository
from repository.object_repository import ObjectRepository
from util.enums import ErrorMessage
from util.errors import AppError, ClaimNotFoundError, NotResolvableError, StorageError
from util.timing import timed

logger = logging.getLogger(__name__)


class FinalizationCoordinator:
    """
    Promotes PENDING claims once their object exists in the bucket.

    Delivery is at-least-once and unordered: finalize() may see the same
    object twice, or concurrently; the conditional registry update makes
    that safe without locks.
    """

    def __init__(
        self,
        claims: ClaimRepository,
        objects: ObjectRepository,
        *,
        strict_content_type: bool = False,
        concurrency: int = 4,
    ) -> None:
        self._claims = claims
        self._objects = objects
        self._strict = strict_content_type
        self._concurrency = max(1, concurrency)

    async def finalize(self, bucket_ref: str, location_ref: str) -> ClaimStatus:
        location = normalize_location(location_ref)
        if not location:
            raise NotResolvableError("empty location")

        head = await self._objects.head(bucket_ref, location)
        command = plan_finalization(location, head, strict_content_type=self._strict)

        try:
            if isinstance(command, FailClaim):
                logger.warning(
                    "finalize.reject user=%s claim=%s reason=%s",
                    command.user_id,
                    command.claim_id,
                    command.reason,
                )
                await self._claims.fail_if_pending(
                    command.user_id, command.claim_id, command.reason
                )
                return ClaimStatus.FAILED

            if not command.content_type_ok:
                logger.warning(
                    "finalize.content_type.anomaly key=%s content_type=%s",
                    location,
                    head.content_type,
                )
            await self._claims.complete_if_present(
                command.user_id,
                command.claim_id,
                command.size_bytes,
                command.etag,
                command.uploaded_at,
            )
        except ClaimNotFoundError:
            logger.warning("finalize.unregistered bucket=%s key=%s", bucket_ref, location)
            raise
        except RedisError as e:
            logger.error("finalize.persist.error key=%s err=%s", location, type(e).__name__)
            raise StorageError()

        logger.info(
            "finalize.ok user=%s claim=%s size=%d etag=%s",
            command.user_id,
            command.claim_id,
            command.size_bytes,
            command.etag,
        )
        return ClaimStatus.COMPLETE

    async def _finalize_one(
        self, sem: asyncio.Semaphore, item: UploadNotification
    ) -> Tuple[UploadNotification, ClaimStatus | None, str]:
        async with sem:
            try:
                return item, await self.finalize(item.bucket_ref, item.location_ref), ""
            except AppError as e:
                logger.warning(
                    "finalize.skip key=%s status=%d msg=%s",
                    item.location_ref,
                    e.status_code,
                    e.message,
                )
                return item, None, e.message
            except Exception:
                logger.exception("finalize.unexpected key=%s", item.location_ref)
                return item, None, ErrorMessage.INTERNAL_ERROR.value.message

    async def finalize_batch(
        self, notifications: Sequence[UploadNotification], *, malformed: int = 0
    ) -> BatchResult:
        """
        One bad notification never aborts the rest; failures are reported in
        the result and left to the delivery mechanism's redelivery.
        """
        result = BatchResult(received=len(notifications) + malformed, skipped=malformed)
        sem = asyncio.Semaphore(self._concurrency)
        with timed(logger, "finalize.batch", records=len(notifications)):
            outcomes: List[Tuple[UploadNotification, ClaimStatus | None, str]] = (
                await asyncio.gather(*(self._finalize_one(sem, n) for n in notifications))
            )
        for item, status, message in outcomes:
            if status is ClaimStatus.COMPLETE:
                result.completed += 1
            elif status is ClaimStatus.FAILED:
                result.failed += 1
            else:
                result.skipped += 1
                result.errors.append(
                    NotificationFailure(location_ref=item.location_ref, message=message)
                )
        return result
