import base64
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterator, List, Mapping, Optional, Tuple, Union
from core.entities import RequestContext
from util.constants import Headers
from util.errors import UnauthorizedError
from util.functions import header_lookup, non_empty_str

logger = logging.getLogger(__name__)

DEFAULT_BYPASS_HEADER = "x-user-sub"
BEARER = "bearer"


def _sub(mapping: Mapping[str, Any]) -> str:
    return non_empty_str(mapping.get("sub")).strip()


# Authorizer context shapes. API Gateway hands the authorizer block over in
# several encodings depending on the authorizer type and integration.


@dataclass(frozen=True)
class NestedClaims:
    """Cognito user-pool authorizer: {"claims": {"sub": ...}}"""

    claims: Mapping[str, Any]

    def subject(self) -> str:
        return _sub(self.claims)


@dataclass(frozen=True)
class EncodedClaims:
    """Claims forwarded as a JSON string: {"claims": "{\\"sub\\": ...}"}"""

    raw: str

    def subject(self) -> str:
        try:
            decoded = json.loads(self.raw)
        except ValueError:
            return ""
        return _sub(decoded) if isinstance(decoded, dict) else ""


@dataclass(frozen=True)
class FlatClaims:
    """Lambda authorizer context flattened to top-level string fields."""

    fields: Mapping[str, Any]

    def subject(self) -> str:
        return _sub(self.fields)


@dataclass(frozen=True)
class Principal:
    principal_id: str

    def subject(self) -> str:
        return self.principal_id.strip()


AuthorizerShape = Union[NestedClaims, EncodedClaims, FlatClaims, Principal]


def authorizer_shapes(authorizer: Optional[Mapping[str, Any]]) -> List[AuthorizerShape]:
    """Shapes to try for one authorizer block, in precedence order."""
    if not authorizer:
        return []
    shapes: List[AuthorizerShape] = []
    claims = authorizer.get("claims")
    if isinstance(claims, Mapping):
        shapes.append(NestedClaims(claims))
    elif isinstance(claims, str):
        shapes.append(EncodedClaims(claims))
    shapes.append(FlatClaims(authorizer))
    shapes.append(Principal(non_empty_str(authorizer.get("principalId"))))
    return shapes


def subject_from_bearer(headers: Mapping[str, str]) -> str:
    """
    Reads `sub` from an unverified JWT payload. Signature and expiry are NOT
    checked; only use behind a gateway that already validated the token.
    """
    auth = header_lookup(headers, Headers.AUTHORIZATION).strip()
    scheme, _, token = auth.partition(" ")
    if scheme.lower() != BEARER:
        return ""
    parts = token.strip().split(".")
    if len(parts) != 3:
        return ""
    segment = parts[1]
    try:
        payload = base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))
        decoded = json.loads(payload)
    except ValueError:
        return ""
    return _sub(decoded) if isinstance(decoded, dict) else ""


class IdentityResolver:
    """
    Produces the same user id for a request no matter which authentication
    context carried it. Strategies, first non-empty wins:
      1. dev bypass header (only when enabled)
      2. structured authorizer claims (nested, JSON-encoded, flat)
      3. authorizer principalId
      4. unverified bearer token payload
    """

    def __init__(
        self,
        dev_bypass_enabled: bool = False,
        bypass_header: str = DEFAULT_BYPASS_HEADER,
    ) -> None:
        self._dev_bypass = dev_bypass_enabled
        self._bypass_header = bypass_header

    def _strategies(
        self, context: RequestContext
    ) -> Iterator[Tuple[str, Callable[[], str]]]:
        if self._dev_bypass:
            yield "dev_bypass", lambda: header_lookup(
                context.headers, self._bypass_header
            ).strip()
        for shape in authorizer_shapes(context.authorizer):
            yield type(shape).__name__, shape.subject
        yield "bearer", lambda: subject_from_bearer(context.headers)

    def resolve(self, context: RequestContext) -> str:
        for name, strategy in self._strategies(context):
            user_id = strategy()
            if user_id:
                logger.debug("identity.resolved via=%s", name)
                return user_id
        logger.warning("identity.unresolved")
        raise UnauthorizedError()
