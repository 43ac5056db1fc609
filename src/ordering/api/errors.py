"""Exception-to-response mapping for the Ordering API.

Every error body carries ``detail``, a stable ``code`` and ``retryable`` so
clients can tell a stale write (reload and retry) from a hard rejection.
"""

from typing import Any

import structlog
from fastapi import FastAPI
from protean.exceptions import ObjectNotFoundError, ValidationError
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from ordering.errors import ConflictError

logger = structlog.get_logger(__name__)


def _body(detail: Any, code: str, retryable: bool = False) -> dict[str, Any]:
    return {"detail": detail, "code": code, "retryable": retryable}


def register_exception_handlers(app: FastAPI) -> None:
    """Register Ordering exception handlers on a FastAPI app."""

    @app.exception_handler(ValidationError)
    async def _validation_error_handler(request: Request, exc: ValidationError) -> Response:
        return JSONResponse(status_code=400, content=_body(exc.messages, "ordering.validation"))

    @app.exception_handler(ObjectNotFoundError)
    async def _not_found_handler(request: Request, exc: ObjectNotFoundError) -> Response:
        detail = exc.args[0] if exc.args else str(exc)
        return JSONResponse(status_code=404, content=_body(detail, "ordering.not_found"))

    @app.exception_handler(ConflictError)
    async def _conflict_handler(request: Request, exc: ConflictError) -> Response:
        return JSONResponse(status_code=409, content=_body(exc.messages, exc.code, exc.retryable))

    @app.exception_handler(Exception)
    async def _unhandled_exception_handler(request: Request, exc: Exception) -> Response:
        logger.exception("Unhandled exception", path=request.url.path, error=str(exc))
        return JSONResponse(status_code=500, content=_body("Internal Server Error", "internal.unhandled"))
