"""
exception_handlers.py
- Purpose: Convert AppError, request validation failures and generic exceptions
  into consistent API responses.

Also logs errors with request context so failures are diagnosable.
"""

from __future__ import annotations

import logging

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from hep_companion.core import AppError, ErrorCode, ErrorReason

logger = logging.getLogger("hep_companion.exceptions")


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    logger.warning(
        "app_error",
        extra={
            "path": str(getattr(request.url, "path", "")),
            "method": request.method,
            "status_code": exc.status_code,
            "code": getattr(exc, "code", None),
            "reason": getattr(exc, "reason", None),
        },
    )
    return JSONResponse(status_code=exc.status_code, content=jsonable_encoder(exc.to_dict()))


def _field_path(loc) -> str:
    # Drop the leading "body"/"query" segment FastAPI prepends
    parts = [str(p) for p in loc]
    if parts and parts[0] in ("body", "query", "path", "header", "cookie"):
        parts = parts[1:]
    return ".".join(parts)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {"loc": (), "msg": "Invalid input"}
    message = str(first.get("msg", "Invalid input"))
    # pydantic prefixes messages raised from validators
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]

    field = _field_path(first.get("loc", ()))
    logger.warning(
        "validation_error",
        extra={
            "path": str(getattr(request.url, "path", "")),
            "method": request.method,
            "field": field,
        },
    )

    err = AppError(
        code=ErrorCode.VALIDATION_ERROR,
        reason=ErrorReason.INVALID_INPUT,
        status_code=400,
        message=message,
        details={
            "field": field,
            "errors": [{"path": _field_path(e.get("loc", ())), "message": e.get("msg")} for e in errors],
        },
    )
    return JSONResponse(status_code=err.status_code, content=jsonable_encoder(err.to_dict()))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(
        "unhandled_exception",
        extra={"path": str(getattr(request.url, "path", "")), "method": request.method},
    )
    return JSONResponse(
        status_code=500,
        content={"error": {"code": ErrorCode.INTERNAL_ERROR.value, "reason": "Unhandled exception"}},
    )
