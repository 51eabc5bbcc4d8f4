from pydantic import BaseModel, Field
from model.claim import Claim, ClaimStatus


class IntakeRequest(BaseModel):
    filename: str = ""
    tags: list[str] = Field(default_factory=list)
    client: str = ""
    content_type: str | None = None


class UploadCredential(BaseModel):
    url: str
    expires_in: int
    content_type: str
    required_headers: dict[str, str]


class IntakeResponse(BaseModel):
    claim_id: str
    storage_location: str
    upload_credential: UploadCredential


class ClaimSummary(BaseModel):
    claim_id: str
    filename: str
    tags: list[str]
    client: str
    status: ClaimStatus
    uploaded_at: str | None = None
    size_bytes: int | None = None
    etag: str | None = None
    storage_location: str

    @classmethod
    def from_claim(cls, claim: Claim) -> "ClaimSummary":
        return cls.model_validate(claim.model_dump())


class UploadNotification(BaseModel):
    bucket_ref: str
    location_ref: str


class NotificationFailure(BaseModel):
    location_ref: str
    message: str


class BatchResult(BaseModel):
    received: int = 0
    completed: int = 0
    failed: int = 0
    skipped: int = 0
    errors: list[NotificationFailure] = Field(default_factory=list)
