from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query, Response

from app.api.deps import get_user_service
from app.core.errors import InvalidDate, NotFound, StorageError
from app.schemas.users import ErrorOut, UserCreateRequest, UserListOut, UserOut, UserUpdateRequest
from app.services.pagination import MAX_PAGE, MAX_PAGE_SIZE
from app.services.user_service import UserServiceAPI

logger = logging.getLogger(__name__)

router = APIRouter(
    responses={
        400: {"model": ErrorOut},
        404: {"model": ErrorOut},
        500: {"model": ErrorOut},
    }
)

# users.id is a 32-bit serial column.
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

INVALID_DATE = "Invalid date format. Expected YYYY-MM-DD"
USER_NOT_FOUND = "User not found"


@router.post("", response_model=UserOut, response_model_exclude_none=True, status_code=201)
def api_create_user(req: UserCreateRequest, service: UserServiceAPI = Depends(get_user_service)) -> UserOut:
    try:
        return service.create_user(req.name, req.dob)
    except InvalidDate:
        raise HTTPException(status_code=400, detail=INVALID_DATE)
    except StorageError:
        logger.exception("Failed to create user")
        raise HTTPException(status_code=500, detail="Failed to create user")


@router.get("", response_model=UserListOut)
def api_list_users(
    page: int = Query(0, ge=0, le=MAX_PAGE),
    page_size: int = Query(0, ge=0, le=MAX_PAGE_SIZE),
    service: UserServiceAPI = Depends(get_user_service),
) -> UserListOut:
    # 0 means "not supplied" and is replaced by the default.
    try:
        return service.list_users(page=page, page_size=page_size)
    except StorageError:
        logger.exception("Failed to list users")
        raise HTTPException(status_code=500, detail="Failed to list users")


@router.get("/{user_id}", response_model=UserOut, response_model_exclude_none=True)
def api_get_user(
    user_id: int = Path(..., ge=INT32_MIN, le=INT32_MAX),
    service: UserServiceAPI = Depends(get_user_service),
) -> UserOut:
    try:
        return service.get_user(user_id)
    except NotFound:
        raise HTTPException(status_code=404, detail=USER_NOT_FOUND)
    except StorageError:
        logger.exception("Failed to get user id=%s", user_id)
        raise HTTPException(status_code=500, detail="Failed to get user")


@router.put("/{user_id}", response_model=UserOut, response_model_exclude_none=True)
def api_update_user(
    req: UserUpdateRequest,
    user_id: int = Path(..., ge=INT32_MIN, le=INT32_MAX),
    service: UserServiceAPI = Depends(get_user_service),
) -> UserOut:
    try:
        return service.update_user(user_id, req.name, req.dob)
    except NotFound:
        raise HTTPException(status_code=404, detail=USER_NOT_FOUND)
    except InvalidDate:
        raise HTTPException(status_code=400, detail=INVALID_DATE)
    except StorageError:
        logger.exception("Failed to update user id=%s", user_id)
        raise HTTPException(status_code=500, detail="Failed to update user")


@router.delete("/{user_id}", status_code=204, response_class=Response)
def api_delete_user(
    user_id: int = Path(..., ge=INT32_MIN, le=INT32_MAX),
    service: UserServiceAPI = Depends(get_user_service),
) -> Response:
    try:
        service.delete_user(user_id)
    except NotFound:
        raise HTTPException(status_code=404, detail=USER_NOT_FOUND)
    except StorageError:
        logger.exception("Failed to delete user id=%s", user_id)
        raise HTTPException(status_code=500, detail="Failed to delete user")
    return Response(status_code=204)
