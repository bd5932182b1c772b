"""
Global middleware.
"""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request

from api.error_handlers import internal_error_response

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def register_middleware(app: FastAPI) -> None:
    """
    Attach request id propagation and timing.

    Unhandled exceptions surface here from ``call_next``; they are rendered
    as the same 500 body the catch-all handler produces so the response
    still carries the request id and timing headers.
    """

    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id

        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            response = internal_error_response(request, exc)
        elapsed = time.perf_counter() - start

        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers["X-Process-Time"] = f"{elapsed:.4f}"
        logger.debug(
            "[%s] %s %s → %d in %.3fs",
            request_id, request.method, request.url.path, response.status_code, elapsed,
        )
        return response
