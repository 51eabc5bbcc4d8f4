import re
from dataclasses import dataclass
from typing import Final, List, Tuple
from model.api import IntakeRequest
from util.constants import ObjectStore
from util.errors import InvalidRequestError

MAX_TAGS: Final[int] = 10
TAG_PATTERN: Final[re.Pattern[str]] = re.compile(r"[A-Za-z0-9 _\-]{1,32}")


@dataclass(frozen=True)
class ValidIntake:
    filename: str
    tags: Tuple[str, ...]
    client: str
    content_type: str


def _check_filename(filename: str) -> str:
    name = (filename or "").strip()
    if not name.lower().endswith(ObjectStore.SUFFIX):
        raise InvalidRequestError(f"only {ObjectStore.SUFFIX} files allowed")
    return name


def _check_content_type(content_type: str | None) -> str:
    if content_type is None or not content_type.strip():
        return ObjectStore.CONTENT_TYPE_TEXT
    if content_type.strip().lower() != ObjectStore.CONTENT_TYPE_TEXT:
        raise InvalidRequestError(
            f"Content-Type must be {ObjectStore.CONTENT_TYPE_TEXT}"
        )
    return ObjectStore.CONTENT_TYPE_TEXT


def _check_tags(tags: List[str]) -> Tuple[str, ...]:
    if not tags or len(tags) > MAX_TAGS:
        raise InvalidRequestError(f"provide 1..{MAX_TAGS} tags")
    for tag in tags:
        if not isinstance(tag, str) or not TAG_PATTERN.fullmatch(tag):
            raise InvalidRequestError(f"invalid tag: {tag}")
    # ordered set: keep first occurrence
    return tuple(dict.fromkeys(tags))


def _check_client(client: str) -> str:
    value = (client or "").strip()
    if not value:
        raise InvalidRequestError("client required")
    return value


def validate_intake(payload: IntakeRequest) -> ValidIntake:
    """Raises InvalidRequestError with the first violated rule."""
    filename = _check_filename(payload.filename)
    content_type = _check_content_type(payload.content_type)
    tags = _check_tags(payload.tags)
    client = _check_client(payload.client)
    return ValidIntake(
        filename=filename, tags=tags, client=client, content_type=content_type
    )
