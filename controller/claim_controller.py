from typing import List
from fastapi import APIRouter, Depends, Query, status
from controller.controller_dependencies import (
    get_intake_service,
    get_request_context,
    rate_limit_dependencies,
)
from core.entities import RequestContext
from model.api import ClaimSummary, IntakeRequest, IntakeResponse
from service.intake_service import IntakeService
from util.constants import InternalURIs

claim_router = APIRouter(dependencies=rate_limit_dependencies())


@claim_router.post(
    InternalURIs.CLAIMS,
    response_model=IntakeResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_claim(
    payload: IntakeRequest,
    context: RequestContext = Depends(get_request_context),
    service: IntakeService = Depends(get_intake_service),
) -> IntakeResponse:
    return await service.intake(context, payload)


@claim_router.get(InternalURIs.CLAIMS, response_model=List[ClaimSummary])
async def list_claims(
    limit: int = Query(default=0),
    context: RequestContext = Depends(get_request_context),
    service: IntakeService = Depends(get_intake_service),
) -> List[ClaimSummary]:
    return await service.list_claims(context, limit)
