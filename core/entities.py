from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Mapping, Optional


@dataclass(frozen=True)
class RequestContext:
    """
    Transport-neutral view of an inbound request: headers plus the
    authorizer block an upstream gateway may have attached.
    """

    headers: Mapping[str, str] = field(default_factory=dict)
    authorizer: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class ObjectHead:
    size: int
    etag: str
    content_type: str
    last_modified: Optional[datetime]
    metadata: Dict[str, str]  # user metadata, lowercased keys


@dataclass(frozen=True)
class PresignedPut:
    url: str
    expires_in: int
