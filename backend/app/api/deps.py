from __future__ import annotations

from fastapi import Request

from app.services.user_service import UserServiceAPI


def get_user_service(request: Request) -> UserServiceAPI:
    """FastAPI dependency returning the service built in ``create_app``."""
    return request.app.state.user_service


def get_request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "")
