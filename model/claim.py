from enum import Enum
from pydantic import BaseModel, Field


class ClaimStatus(str, Enum):
    PENDING = "PENDING"
    COMPLETE = "COMPLETE"
    FAILED = "FAILED"

    @property
    def terminal(self) -> bool:
        return self is not ClaimStatus.PENDING


class Claim(BaseModel):
    user_id: str = Field(min_length=1)
    claim_id: str = Field(min_length=1)
    filename: str
    storage_location: str
    tags: list[str]
    client: str
    status: ClaimStatus = ClaimStatus.PENDING
    uploaded_at: str | None = None
    size_bytes: int | None = None
    etag: str | None = None
    failure_reason: str | None = None
