import logging
from typing import Callable, List, Optional
from redis.exceptions import RedisError
from ulid import ULID
from core.entities import RequestContext
from core.identity import IdentityResolver
from core.keys import encode_location
from core.validation import validate_intake
from model.api import ClaimSummary, IntakeRequest, IntakeResponse
from model.claim import Claim, ClaimStatus
from repository.claim_repository import ClaimRepository
from service.credential_service import UploadCredentialIssuer, upload_metadata
from util.errors import InvalidRequestError, StorageError
from util.timing import timed

logger = logging.getLogger(__name__)


def new_claim_id() -> str:
    # ULID: 48-bit ms timestamp + 80 random bits, Crockford base32, sorts by time
    return str(ULID())


class IntakeService:
    def __init__(
        self,
        identity: IdentityResolver,
        claims: ClaimRepository,
        credentials: UploadCredentialIssuer,
        *,
        id_factory: Callable[[], str] = new_claim_id,
    ) -> None:
        self._identity = identity
        self._claims = claims
        self._credentials = credentials
        self._new_id = id_factory

    async def intake(self, context: RequestContext, payload: IntakeRequest) -> IntakeResponse:
        """
        Register a PENDING claim and hand back a presigned PUT for it.
        Nothing is written until identity and payload are both accepted.
        If credential issuance fails the PENDING record stays behind.
        """
        user_id = self._identity.resolve(context)
        req = validate_intake(payload)

        claim_id = self._new_id()
        try:
            location = encode_location(user_id, claim_id)
        except ValueError:
            logger.warning("intake.location.invalid user=%s", user_id)
            raise InvalidRequestError("unsupported user identifier")

        claim = Claim(
            user_id=user_id,
            claim_id=claim_id,
            filename=req.filename,
            storage_location=location,
            tags=list(req.tags),
            client=req.client,
            status=ClaimStatus.PENDING,
        )
        with timed(logger, "intake", user=user_id, claim=claim_id):
            try:
                await self._claims.create_if_absent(claim)
            except RedisError as e:
                logger.error(
                    "intake.persist.error user=%s claim=%s err=%s",
                    user_id,
                    claim_id,
                    type(e).__name__,
                )
                raise StorageError()

            credential = self._credentials.issue(
                location=location,
                content_type=req.content_type,
                metadata=upload_metadata(
                    claim_id=claim_id, user_id=user_id, tags=req.tags, client=req.client
                ),
            )

        logger.info(
            "intake.ok user=%s claim=%s tags=%d", user_id, claim_id, len(req.tags)
        )
        return IntakeResponse(
            claim_id=claim_id,
            storage_location=location,
            upload_credential=credential,
        )

    async def list_claims(
        self, context: RequestContext, limit: Optional[int] = None
    ) -> List[ClaimSummary]:
        user_id = self._identity.resolve(context)
        try:
            claims = await self._claims.list_by_owner(user_id, limit)
        except RedisError as e:
            logger.error("list.error user=%s err=%s", user_id, type(e).__name__)
            raise StorageError()
        logger.info("list.ok user=%s count=%d", user_id, len(claims))
        return [ClaimSummary.from_claim(c) for c in claims]
