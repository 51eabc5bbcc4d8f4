import os
import pathlib
import sys
from unittest.mock import MagicMock

import fakeredis
import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
for path in (ROOT, ROOT / "tests"):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

# Settings are read once at import time; pin them before any app import.
os.environ["APP_ENV"] = "test"
os.environ["REDIS_URL"] = "redis://localhost:6379/15"
os.environ["ALLOWED_ORIGIN"] = "http://localhost:5173"
os.environ["S3_BUCKET"] = "claims-test"
os.environ["RATE_LIMIT_TIMES"] = "0"
os.environ["DEV_BYPASS_AUTH"] = "true"
os.environ["EVENTS_TOKEN"] = ""
os.environ["STRICT_CONTENT_TYPE"] = "false"

from core.identity import IdentityResolver
from repository.claim_repository import ClaimRepository
from repository.object_repository import ObjectRepository
from service.credential_service import UploadCredentialIssuer
from service.finalization_service import FinalizationCoordinator
from service.intake_service import IntakeService
from support import BUCKET, PRESIGNED_URL, head_response


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def redis_client():
    return fakeredis.FakeAsyncRedis(server=fakeredis.FakeServer())


@pytest.fixture
def claims(redis_client) -> ClaimRepository:
    return ClaimRepository(redis_client)


@pytest.fixture
def s3_client() -> MagicMock:
    client = MagicMock()
    client.generate_presigned_url.return_value = PRESIGNED_URL
    client.head_object.return_value = head_response()
    return client


@pytest.fixture
def objects(s3_client) -> ObjectRepository:
    return ObjectRepository(s3_client)


@pytest.fixture
def intake_service(claims, objects) -> IntakeService:
    issuer = UploadCredentialIssuer(objects, bucket=BUCKET, ttl_seconds=300)
    return IntakeService(IdentityResolver(dev_bypass_enabled=True), claims, issuer)


@pytest.fixture
def coordinator(claims, objects) -> FinalizationCoordinator:
    return FinalizationCoordinator(claims, objects)
