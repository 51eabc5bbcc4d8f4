from typing import Any, List, Mapping, Optional
from fastapi import Depends, Request
from fastapi_limiter.depends import RateLimiter
from config.settings import settings
from core.entities import RequestContext
from core.identity import IdentityResolver
from repository.claim_repository import ClaimRepository
from repository.object_repository import ObjectRepository
from service.credential_service import UploadCredentialIssuer
from service.finalization_service import FinalizationCoordinator
from service.intake_service import IntakeService
from util.constants import Headers
from util.errors import UnauthorizedError
from util.functions import header_lookup


def rate_limit_dependencies() -> List[Any]:
    # RATE_LIMIT_TIMES <= 0 turns the limiter off (local runs, tests)
    if settings.RATE_LIMIT_TIMES <= 0:
        return []
    return [
        Depends(
            RateLimiter(
                times=settings.RATE_LIMIT_TIMES, seconds=settings.RATE_LIMIT_SECONDS
            )
        )
    ]


def _authorizer_from_scope(request: Request) -> Optional[Mapping[str, Any]]:
    # Lambda ASGI adapters expose the API Gateway event under scope["aws.event"]
    event = request.scope.get("aws.event") or {}
    authorizer = (event.get("requestContext") or {}).get("authorizer")
    return authorizer if isinstance(authorizer, Mapping) else None


def get_request_context(request: Request) -> RequestContext:
    return RequestContext(
        headers=dict(request.headers), authorizer=_authorizer_from_scope(request)
    )


def get_identity_resolver() -> IdentityResolver:
    return IdentityResolver(
        dev_bypass_enabled=settings.DEV_BYPASS_AUTH,
        bypass_header=settings.DEV_BYPASS_HEADER,
    )


def get_claim_repository() -> ClaimRepository:
    return ClaimRepository(
        default_limit=settings.LIST_DEFAULT_LIMIT, max_limit=settings.LIST_MAX_LIMIT
    )


def get_object_repository() -> ObjectRepository:
    return ObjectRepository()


def get_intake_service(
    identity: IdentityResolver = Depends(get_identity_resolver),
    claims: ClaimRepository = Depends(get_claim_repository),
    objects: ObjectRepository = Depends(get_object_repository),
) -> IntakeService:
    issuer = UploadCredentialIssuer(
        objects, bucket=settings.S3_BUCKET, ttl_seconds=settings.PRESIGN_TTL_SECONDS
    )
    return IntakeService(identity, claims, issuer)


def get_finalization_coordinator(
    claims: ClaimRepository = Depends(get_claim_repository),
    objects: ObjectRepository = Depends(get_object_repository),
) -> FinalizationCoordinator:
    return FinalizationCoordinator(
        claims, objects, strict_content_type=settings.STRICT_CONTENT_TYPE
    )


async def verify_events_token(request: Request) -> None:
    expected = settings.EVENTS_TOKEN
    if not expected:
        return
    if header_lookup(request.headers, Headers.EVENTS_TOKEN) != expected:
        raise UnauthorizedError("invalid events token")
