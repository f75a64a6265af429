"""Global exception handling for the risk API."""

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse

logger = structlog.get_logger()

# Exception family -> (status code, error slug). Checked in order.
_STATUS_MAP: tuple[tuple[type[Exception], int, str], ...] = (
    (ValueError, 400, "bad_request"),
    (PermissionError, 403, "forbidden"),
    (LookupError, 404, "not_found"),
)


def _error_body(error: str, message: str, request_id: str) -> dict:
    return {"error": error, "message": message, "request_id": request_id}


async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = getattr(request.state, "request_id", "unknown")

    for exc_type, status_code, error in _STATUS_MAP:
        if isinstance(exc, exc_type):
            logger.warning(error, request_id=request_id, path=request.url.path, error=str(exc))
            return JSONResponse(
                status_code=status_code,
                content=_error_body(error, str(exc), request_id),
            )

    logger.exception("unhandled_exception", request_id=request_id, error=str(exc))
    return JSONResponse(
        status_code=500,
        content=_error_body(
            "internal_server_error", "An unexpected error occurred", request_id
        ),
    )
