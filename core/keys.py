from typing import Tuple
from util.constants import ObjectStore

SEPARATOR = "/"


def encode_location(user_id: str, claim_id: str) -> str:
    """
    Storage key for a claim: user/<user_id>/<claim_id>.txt

    Identifiers must be non-empty and free of path separators, otherwise the
    key could not be decoded back to the same pair.
    """
    for name, value in (("user_id", user_id), ("claim_id", claim_id)):
        if not value:
            raise ValueError(f"{name} must not be empty")
        if SEPARATOR in value:
            raise ValueError(f"{name} must not contain '{SEPARATOR}'")
    return SEPARATOR.join(
        (ObjectStore.ROOT_SEGMENT, user_id, claim_id + ObjectStore.SUFFIX)
    )


def decode_location(location: str) -> Tuple[str, str, bool]:
    """Inverse of encode_location; ("", "", False) for anything else."""
    parts = (location or "").split(SEPARATOR)
    if len(parts) != 3 or parts[0] != ObjectStore.ROOT_SEGMENT:
        return "", "", False
    user_id, leaf = parts[1], parts[2]
    if not leaf.endswith(ObjectStore.SUFFIX):
        return "", "", False
    claim_id = leaf[: -len(ObjectStore.SUFFIX)]
    if not user_id or not claim_id:
        return "", "", False
    return user_id, claim_id, True
