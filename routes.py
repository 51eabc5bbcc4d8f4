# routes.py
from fastapi import FastAPI
from controller.claim_controller import claim_router
from controller.upload_event_controller import upload_event_router


def register_routes(app: FastAPI) -> None:
    """Register & Access control controllers here."""
    app.include_router(claim_router)
    app.include_router(upload_event_router)
