# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    INVALID_REQUEST = ErrorInfo("Invalid request", status.HTTP_400_BAD_REQUEST)
    UNAUTHORIZED = ErrorInfo("missing or invalid user", status.HTTP_401_UNAUTHORIZED)
    CONFLICT = ErrorInfo("claim already exists", status.HTTP_409_CONFLICT)
    CLAIM_STATE = ErrorInfo(
        "claim is in a terminal state", status.HTTP_409_CONFLICT
    )
    NOT_FOUND = ErrorInfo("claim not found", status.HTTP_404_NOT_FOUND)
    NOT_RESOLVABLE = ErrorInfo(
        "claim owner could not be resolved", 422
    )
    STORAGE_ERROR = ErrorInfo("db error", status.HTTP_500_INTERNAL_SERVER_ERROR)
    UPSTREAM_ERROR = ErrorInfo("object store error", status.HTTP_502_BAD_GATEWAY)
    INTERNAL_ERROR = ErrorInfo("Internal Error", status.HTTP_500_INTERNAL_SERVER_ERROR)
