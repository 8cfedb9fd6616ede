"""Error Handlers — global exception handlers for the nickname claims API.

Invariants:
    - Every failure body is {"error": {"code", "message"}} and nothing more
    - NicknameServiceError → its own code and message; category/severity only logged
    - RequestValidationError → INVALID_ARGUMENT, field details logged, not returned
    - Exception (catch-all) → INTERNAL, never leaks internal details

Design Decisions:
    - Three-layer handler: domain (NicknameServiceError), validation (Pydantic), catch-all (Exception)
    - Rejected claims log at INFO: they are expected outcomes, not faults
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError

from app.core.claim_outcome import MSG_INTERNAL
from app.core.errors import NicknameServiceError, ClaimError, ErrorSeverity

logger = logging.getLogger(__name__)


def error_envelope(code: str, message: str) -> dict:
    """The only failure shape clients ever see."""
    return {"error": {"code": code, "message": message}}


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_service_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_service_error_handler(app: FastAPI) -> None:
    """Register domain/infrastructure error handler."""

    @app.exception_handler(NicknameServiceError)
    async def service_error_handler(request: Request, exc: NicknameServiceError):
        """Handle all nickname service domain/infrastructure errors."""
        level = (
            logging.INFO if isinstance(exc, ClaimError)
            and exc.severity != ErrorSeverity.CRITICAL else logging.ERROR
        )
        logger.log(
            level,
            f"{type(exc).__name__} [{exc.category.value}/{exc.severity.value}]: "
            f"{exc.message}",
            extra={"error_code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=exc.http_status, content=exc.to_response(),
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {_describe_errors(exc)}",
            extra={"error_code": "INVALID_ARGUMENT", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_envelope("INVALID_ARGUMENT", "Invalid request data"),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        """Catch-all — never leaks internal details."""
        logger.error(
            f"Unhandled exception on {request.url.path}: {exc}",
            exc_info=True,
            extra={"error_code": "INTERNAL", "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_envelope("INTERNAL", MSG_INTERNAL),
        )


def _describe_errors(exc: RequestValidationError) -> str:
    """Compact field-level summary for the log line."""
    return "; ".join(
        f"{'.'.join(str(loc) for loc in e['loc'])}: {e['msg']}"
        for e in exc.errors()
    )
