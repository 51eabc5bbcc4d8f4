from typing import Final

ROOT: Final[str] = "claimportal"

CLAIMS: Final[str] = f"{ROOT}:claims"  # one hash per claim, keyed by storage location
OWNERS: Final[str] = f"{ROOT}:owners"  # per-user sorted set of claim ids
