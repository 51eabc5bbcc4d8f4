from typing import Any, Dict
from fastapi import APIRouter, Body, Depends
from controller.controller_dependencies import (
    get_finalization_coordinator,
    verify_events_token,
)
from core.events import parse_notifications
from model.api import BatchResult
from service.finalization_service import FinalizationCoordinator
from util.constants import InternalURIs

upload_event_router = APIRouter(dependencies=[Depends(verify_events_token)])


@upload_event_router.post(InternalURIs.UPLOAD_EVENTS, response_model=BatchResult)
async def upload_events(
    body: Dict[str, Any] = Body(...),
    coordinator: FinalizationCoordinator = Depends(get_finalization_coordinator),
) -> BatchResult:
    notifications, malformed = parse_notifications(body)
    return await coordinator.finalize_batch(notifications, malformed=malformed)
