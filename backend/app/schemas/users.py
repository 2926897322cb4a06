from __future__ import annotations

from pydantic import BaseModel, Field

from app.services.pagination import MAX_PAGE_SIZE

DOB_PATTERN = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}$"


class UserCreateRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=100)
    dob: str = Field(..., pattern=DOB_PATTERN, description="Date of birth, YYYY-MM-DD")


class UserUpdateRequest(UserCreateRequest):
    pass


class UserOut(BaseModel):
    id: int
    name: str
    dob: str
    # Only filled on reads; create/update responses leave it out.
    age: int | None = None


class UserListOut(BaseModel):
    users: list[UserOut]
    total: int
    page: int = Field(..., ge=1)
    page_size: int = Field(..., ge=1, le=MAX_PAGE_SIZE)
    total_pages: int


class HealthOut(BaseModel):
    status: str
    time: str


class ErrorOut(BaseModel):
    error: str
    request_id: str
    details: list[str] | None = None
