# util/errors.py
from fastapi import HTTPException, status
from util.enums import ErrorMessage


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    def __init__(
        self, message: str, http_status: int = status.HTTP_400_BAD_REQUEST
    ) -> None:
        super().__init__(status_code=http_status, detail=message)

    @property
    def message(self) -> str:
        return str(self.detail)


class _CatalogError(AppError):
    """AppError whose default message/status come from ErrorMessage."""

    info: ErrorMessage = ErrorMessage.INTERNAL_ERROR

    def __init__(self, message: str | None = None) -> None:
        super().__init__(
            message or self.info.value.message, self.info.value.http_status
        )


class InvalidRequestError(_CatalogError):
    info = ErrorMessage.INVALID_REQUEST


class UnauthorizedError(_CatalogError):
    info = ErrorMessage.UNAUTHORIZED


class ConflictError(_CatalogError):
    info = ErrorMessage.CONFLICT


class ClaimAlreadyExistsError(ConflictError):
    pass


class ClaimStateError(ConflictError):
    # Record exists but is terminal in a way the requested transition can't leave.
    info = ErrorMessage.CLAIM_STATE


class ClaimNotFoundError(_CatalogError):
    info = ErrorMessage.NOT_FOUND


class NotResolvableError(_CatalogError):
    info = ErrorMessage.NOT_RESOLVABLE


class StorageError(_CatalogError):
    info = ErrorMessage.STORAGE_ERROR


class UpstreamError(_CatalogError):
    info = ErrorMessage.UPSTREAM_ERROR
