"""Translate domain and framework exceptions into JSON error responses.

Every error body has the same shape: ``{"error": ..., "code": ...}`` plus
any details the exception carries.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError, ValidationError
from protean.integrations.fastapi import register_exception_handlers

from storefront.errors import Conflict, InvalidRequest, NotFound, StorefrontError

logger = structlog.get_logger(__name__)


def _respond(error: StorefrontError) -> JSONResponse:
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


async def storefront_error_handler(request: Request, exc: StorefrontError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, code=exc.code, error=exc.message)
    else:
        logger.info("Request rejected", path=request.url.path, code=exc.code, status=exc.status_code)
    return _respond(exc)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    messages = getattr(exc, "messages", None) or {}
    return _respond(InvalidRequest("Invalid request", fields=messages))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    fields = {}
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()) if part != "body")
        fields.setdefault(location or "body", []).append(err.get("msg"))
    return _respond(InvalidRequest("Invalid request", fields=fields))


async def not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    return _respond(NotFound())


async def version_conflict_handler(request: Request, exc: ExpectedVersionError) -> JSONResponse:
    logger.warning("Concurrent modification", path=request.url.path)
    return _respond(Conflict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error", "code": "INTERNAL"})


def register_error_handlers(app: FastAPI) -> None:
    # Protean's defaults first, then our body shape on top
    register_exception_handlers(app)

    app.add_exception_handler(StorefrontError, storefront_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ObjectNotFoundError, not_found_handler)
    app.add_exception_handler(ExpectedVersionError, version_conflict_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
