"""Global error handlers: every failure leaves as a JSON body."""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from notifyhub.errors import NotifyHubError

logger = structlog.get_logger()


def setup_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(NotifyHubError)
    async def app_error_handler(request: Request, exc: NotifyHubError) -> JSONResponse:
        """Map the error taxonomy to its status; 5xx also carry the cause."""
        if exc.status_code >= 500:
            logger.error(
                "request_failed",
                path=request.url.path,
                error_type=type(exc).__name__,
                error=exc.message,
            )
            return JSONResponse(
                status_code=exc.status_code,
                content={"detail": _failure_detail(request), "error": exc.message},
            )
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed bodies and query strings are client errors (400)."""
        return JSONResponse(
            status_code=400,
            content={"detail": "Validation error", "errors": _jsonable_errors(exc)},
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Catch-all for unhandled exceptions."""
        logger.error(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


def _failure_detail(request: Request) -> str:
    if request.url.path == "/login":
        return "Login failed"
    if "send-notification" in request.url.path:
        return "Failed to send notification"
    if request.url.path.endswith("/notifications"):
        return "Failed to fetch notifications"
    return "Request failed"


def _jsonable_errors(exc: RequestValidationError) -> list[dict[str, object]]:
    """Drop the ``ctx``/``input`` members, which may hold non-JSON values."""
    return [{k: v for k, v in err.items() if k in ("type", "loc", "msg")} for err in exc.errors()]
