"""Uniform JSON error envelope for every non-2xx response.

Request validation failures are reported as 400 (not FastAPI's default 422)
with a short message chosen by where the bad input was: path, query or body.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.deps import get_request_id


def error_response(
    request: Request,
    status_code: int,
    message: str,
    *,
    details: list[str] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    content: dict[str, Any] = {"error": message, "request_id": get_request_id(request)}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _field_name(loc: tuple[Any, ...]) -> str:
    parts = [str(p) for p in loc[1:]] or [str(loc[0])]
    return ".".join(parts)


def _validation_message(errors: list[dict[str, Any]]) -> tuple[str, list[str] | None]:
    sources = {err["loc"][0] if err.get("loc") else None for err in errors}
    if "path" in sources:
        return "Invalid user ID", None

    for err in errors:
        loc = tuple(err.get("loc") or ())
        if err.get("type") == "json_invalid" or loc == ("body",):
            return "Invalid request body", None

    details = [f"{_field_name(tuple(err['loc']))} validation failed on {err['type']}" for err in errors]
    if "query" in sources:
        return "Invalid pagination parameters", details
    return "Validation failed", details


def register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return error_response(request, exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        message, details = _validation_message(list(exc.errors()))
        return error_response(request, 400, message, details=details)
