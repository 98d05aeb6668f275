# app/entrypoints/api/errors.py
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from ...domain.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ScoringError,
    ValidationError,
)

log = logging.getLogger(__name__)

_STATUS: tuple[tuple[type[ScoringError], int], ...] = (
    (NotFoundError, 404),
    (ValidationError, 400),
    (PermissionDeniedError, 403),
    (ConflictError, 409),
)


def status_for(exc: ScoringError) -> int:
    for cls, code in _STATUS:
        if isinstance(exc, cls):
            return code
    return 500


async def scoring_error_handler(request: Request, exc: ScoringError) -> JSONResponse:
    status_code = status_for(exc)
    log.warning("%s on %s: %s", exc.__class__.__name__, request.url.path, exc)
    return JSONResponse(
        status_code=status_code,
        content={"error": str(exc), "type": exc.__class__.__name__},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    log.warning("invalid request on %s", request.url.path)
    return JSONResponse(
        status_code=400,
        content={
            "error": "Invalid request",
            "type": "ValidationError",
            "details": jsonable_encoder(exc.errors()),
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail, "type": "HTTPException"},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("Unexpected error in %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "type": "InternalError"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ScoringError, scoring_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
