from fastapi import Request, status
from fastapi.responses import JSONResponse


class CottageError(Exception):
    """Base for errors that are reported to the caller as ``{"detail": ...}``."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class NotFoundError(CottageError):
    status_code = status.HTTP_404_NOT_FOUND


class ValidationError(CottageError):
    """Precondition failure, raised before the store is touched."""

    status_code = status.HTTP_400_BAD_REQUEST


class AdminAuthError(CottageError):
    status_code = status.HTTP_403_FORBIDDEN


class StoreError(CottageError):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


class DuplicateKeyError(StoreError):
    status_code = status.HTTP_409_CONFLICT


async def cottage_error_handler(request: Request, exc: CottageError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
