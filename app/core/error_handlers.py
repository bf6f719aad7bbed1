from datetime import datetime
from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    ConflictError,
    DomainError,
    NotFoundError,
    OutOfRangeError,
    ValidationError,
)
from app.core.logging import get_logger

logger = get_logger(__name__)


ERROR_STATUS_MAP: dict[type[DomainError], int] = {
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    ConfigurationError: status.HTTP_400_BAD_REQUEST,
    ConflictError: status.HTTP_409_CONFLICT,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    AuthorizationError: status.HTTP_403_FORBIDDEN,
    # Coordinates are checked before resolution; reaching the resolver out of range is a bug.
    OutOfRangeError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

REQUEST_VALIDATION_CODE = "VAL_REQUEST_001"


def error_envelope(request: Request, status_code: int, errors: list[dict[str, Any]]) -> JSONResponse:
    """Wrap errors in the ``{data, meta, errors}`` response shape."""
    return JSONResponse(
        status_code=status_code,
        content={
            "data": None,
            "meta": {
                "request_id": getattr(request.state, "request_id", None),
                "timestamp": datetime.utcnow().isoformat() + "Z",
            },
            "errors": errors,
        },
    )


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = ERROR_STATUS_MAP.get(type(exc), status.HTTP_500_INTERNAL_SERVER_ERROR)

    if status_code >= 500:
        logger.error("domain_error", code=exc.code, message=exc.message, details=exc.details)
    else:
        logger.info("domain_error", code=exc.code, status_code=status_code)

    return error_envelope(
        request,
        status_code,
        [{"code": exc.code, "message": exc.message, "details": exc.details}],
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed bodies, paths and queries use the same envelope as domain errors (400)."""
    problems = [
        {
            "loc": [str(part) for part in error.get("loc", ())],
            "msg": error.get("msg", ""),
            "type": error.get("type", ""),
        }
        for error in exc.errors()
    ]
    logger.info("request_validation_error", count=len(problems))

    return error_envelope(
        request,
        status.HTTP_400_BAD_REQUEST,
        [
            {
                "code": REQUEST_VALIDATION_CODE,
                "message": "Request validation failed",
                "details": {"errors": problems},
            }
        ],
    )
