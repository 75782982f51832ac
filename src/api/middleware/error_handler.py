"""Global exception handling."""

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse

from src.domains.ifs.errors import ConfigurationError, ValidationError

logger = structlog.get_logger()


def _error_response(status_code: int, error: str, message: str, request_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "message": message, "request_id": request_id},
    )


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")

    if isinstance(exc, ValidationError):
        logger.warning("validation_failed", request_id=request_id, error=str(exc))
        return _error_response(400, "validation_error", str(exc), request_id)

    if isinstance(exc, ConfigurationError):
        logger.error("configuration_error", request_id=request_id, error=str(exc))
        return _error_response(500, "configuration_error", str(exc), request_id)

    if isinstance(exc, ValueError):
        logger.warning("bad_request", request_id=request_id, error=str(exc))
        return _error_response(400, "bad_request", str(exc), request_id)

    if isinstance(exc, (KeyError, LookupError)):
        logger.warning("not_found", request_id=request_id, error=str(exc))
        return _error_response(404, "not_found", str(exc), request_id)

    logger.exception("unhandled_exception", request_id=request_id, error=str(exc))
    return _error_response(
        500, "internal_server_error", "An unexpected error occurred", request_id
    )
