"""User business logic between the HTTP layer and the store.

The service parses dates of birth, turns missing rows into :class:`NotFound`
and is the only place that computes ages. Storage failures pass through
unchanged as :class:`StorageError`.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import date, datetime
from typing import Protocol

from app.core.errors import InvalidDate, NotFound
from app.db.repository import User, UserStore
from app.schemas.users import UserListOut, UserOut
from app.services.age import calculate_age
from app.services.pagination import normalize, page_offset, total_pages

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"
_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")


def parse_dob(text: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` date.

    Any real calendar date is accepted, including future ones.
    """

    if not _DATE_RE.fullmatch(text):
        raise InvalidDate(text)
    try:
        return datetime.strptime(text, DATE_FORMAT).date()
    except ValueError as exc:
        raise InvalidDate(text) from exc


class UserServiceAPI(Protocol):
    def create_user(self, name: str, dob: str) -> UserOut: ...

    def get_user(self, user_id: int) -> UserOut: ...

    def list_users(self, page: int | None = None, page_size: int | None = None) -> UserListOut: ...

    def update_user(self, user_id: int, name: str, dob: str) -> UserOut: ...

    def delete_user(self, user_id: int) -> None: ...


class UserService:
    def __init__(self, store: UserStore, today: Callable[[], date] = date.today) -> None:
        self._store = store
        self._today = today

    def _summary(self, user: User, *, with_age: bool, today: date | None = None) -> UserOut:
        age = calculate_age(user.dob, today or self._today()) if with_age else None
        return UserOut(id=user.id, name=user.name, dob=user.dob.isoformat(), age=age)

    def _parse(self, text: str) -> date:
        try:
            return parse_dob(text)
        except InvalidDate:
            logger.warning("Invalid DOB format: %r", text)
            raise

    def create_user(self, name: str, dob: str) -> UserOut:
        user = self._store.create(name, self._parse(dob))
        return self._summary(user, with_age=False)

    def get_user(self, user_id: int) -> UserOut:
        user = self._store.get_by_id(user_id)
        if user is None:
            raise NotFound(user_id)
        return self._summary(user, with_age=True)

    def list_users(self, page: int | None = None, page_size: int | None = None) -> UserListOut:
        """One page of users in id order, each with its age.

        The page and the total come from two separate queries; under
        concurrent writes the total can disagree with the rows returned.
        """

        page, page_size = normalize(page, page_size)
        users = self._store.list(limit=page_size, offset=page_offset(page, page_size))
        total = self._store.count()

        today = self._today()
        return UserListOut(
            users=[self._summary(u, with_age=True, today=today) for u in users],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages(total, page_size),
        )

    def update_user(self, user_id: int, name: str, dob: str) -> UserOut:
        user = self._store.update(user_id, name, self._parse(dob))
        if user is None:
            raise NotFound(user_id)
        return self._summary(user, with_age=False)

    def delete_user(self, user_id: int) -> None:
        if not self._store.delete(user_id):
            raise NotFound(user_id)
