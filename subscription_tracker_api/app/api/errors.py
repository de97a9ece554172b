"""
Exception handlers.

Every error leaves the API as ``{"error": "<message>"}``:

- ``HTTPException`` keeps its status code and uses ``detail`` as message.
- Request validation errors (bad JSON, missing or invalid fields) are 400.
- Domain errors that reach the boundary use their own status code.
- Anything else is logged and reported as 500.
"""

import logging
from typing import Any, Dict, List

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..core.exceptions import SubscriptionTrackerError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, headers: Dict[str, str] = None) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code, headers=headers)


def validation_message(errors: List[Dict[str, Any]]) -> str:
    """Summarize pydantic errors as one short message."""
    if not errors:
        return "Invalid request"
    if any(err.get("type") == "json_invalid" for err in errors):
        return "Invalid JSON body"
    if any(err.get("type") in ("missing", "string_too_short") for err in errors):
        return "Missing required fields"
    first = errors[0]
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    if loc:
        return f"Invalid {loc[-1]}"
    return "Invalid request body"


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(exc.status_code, str(exc.detail), getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = validation_message(exc.errors())
    logger.debug("Rejected %s %s: %s", request.method, request.url.path, message)
    return error_response(status.HTTP_400_BAD_REQUEST, message)


async def domain_exception_handler(request: Request, exc: SubscriptionTrackerError) -> JSONResponse:
    return error_response(exc.status_code, exc.message or "Request failed")


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SubscriptionTrackerError, domain_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
