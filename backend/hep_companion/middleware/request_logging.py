from __future__ import annotations

import logging
import time
import uuid

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from hep_companion.core.request_context import clear_context, set_context

logger = logging.getLogger("hep_companion.http")

REQUEST_ID_HEADER = "x-request-id"


def _elapsed_ms(t0: float) -> int:
    return int((time.perf_counter() - t0) * 1000)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        # Accept upstream request id if present, else create one
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        set_context(request_id=rid)

        # Query strings are not logged: search terms and prompts may carry PHI.
        t0 = time.perf_counter()
        try:
            logger.info("http.request", extra={"method": request.method, "path": request.url.path})
            try:
                response: Response = await call_next(request)
            except Exception:
                logger.exception(
                    "http.error",
                    extra={"method": request.method, "path": request.url.path, "duration_ms": _elapsed_ms(t0)},
                )
                raise

            logger.info(
                "http.response",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "status_code": response.status_code,
                    "duration_ms": _elapsed_ms(t0),
                },
            )

            response.headers[REQUEST_ID_HEADER] = rid
            return response
        finally:
            clear_context()
