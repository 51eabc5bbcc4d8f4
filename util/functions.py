from typing import Mapping, Optional


def header_lookup(headers: Optional[Mapping[str, str]], key: str) -> str:
    """
    - Case-insensitive header read; returns "" when absent.
    - Works for plain dicts (API Gateway events) and Starlette Headers alike.
    """
    if not headers:
        return ""
    wanted = key.lower()
    for k, v in headers.items():
        if k.lower() == wanted:
            return v or ""
    return ""


def non_empty_str(value: object) -> str:
    if isinstance(value, str) and value:
        return value
    return ""


def as_text(value: object, default: str = "") -> str:
    # Redis hands back bytes (decode_responses=False)
    if value is None:
        return default
    if isinstance(value, (bytes, bytearray)):
        return value.decode("utf-8")
    return str(value)
