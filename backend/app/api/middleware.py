"""Request-scoped HTTP middleware: correlation ids, access log, last-resort 500s."""

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

REQUEST_ID_HEADER = "X-Request-ID"

access_logger = logging.getLogger("app.access")
logger = logging.getLogger(__name__)


def register_middleware(app: FastAPI) -> None:
    @app.middleware("http")
    async def request_context(request: Request, call_next):
        request_id = (request.headers.get(REQUEST_ID_HEADER) or "").strip() or str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Unhandled error request_id=%s", request_id)
            response = JSONResponse(
                status_code=500,
                content={"error": "Internal Server Error", "request_id": request_id},
            )

        response.headers[REQUEST_ID_HEADER] = request_id
        access_logger.info(
            "HTTP request request_id=%s method=%s path=%s status=%s duration_ms=%.2f ip=%s user_agent=%s",
            request_id,
            request.method,
            request.url.path,
            response.status_code,
            (time.perf_counter() - start) * 1000.0,
            request.client.host if request.client else "-",
            request.headers.get("user-agent", "-"),
        )
        return response
