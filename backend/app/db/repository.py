"""Persistence for users.

Every read, update and delete reports a missing row as ``None``/``False``;
only real database failures raise, as :class:`StorageError`. Callers can
therefore always tell "no such user" apart from "the store is unreachable".
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Protocol

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError

from app.core.errors import StorageError
from app.db.models import UserRecord, utcnow
from app.db.session import Database

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class User:
    id: int
    name: str
    dob: date
    created_at: datetime
    updated_at: datetime


class UserStore(Protocol):
    def create(self, name: str, dob: date) -> User: ...

    def get_by_id(self, user_id: int) -> User | None: ...

    def list(self, *, limit: int, offset: int) -> list[User]: ...

    def count(self) -> int: ...

    def update(self, user_id: int, name: str, dob: date) -> User | None: ...

    def delete(self, user_id: int) -> bool: ...


def _to_user(rec: UserRecord) -> User:
    return User(
        id=rec.id,
        name=rec.name,
        dob=rec.dob,
        created_at=rec.created_at,
        updated_at=rec.updated_at,
    )


class SqlAlchemyUserStore:
    """``UserStore`` backed by the ``users`` table.

    Each call opens its own session from the pool and closes it before
    returning, so one instance is shared by all requests.
    """

    def __init__(self, database: Database) -> None:
        self._db = database

    def create(self, name: str, dob: date) -> User:
        try:
            with self._db.SessionLocal() as session:
                rec = UserRecord(name=name, dob=dob)
                session.add(rec)
                session.commit()
                session.refresh(rec)
                user = _to_user(rec)
        except SQLAlchemyError as exc:
            logger.error("Failed to create user: %s", exc)
            raise StorageError("create user failed") from exc

        logger.info("User created id=%s", user.id)
        return user

    def get_by_id(self, user_id: int) -> User | None:
        try:
            with self._db.SessionLocal() as session:
                rec = session.get(UserRecord, user_id)
                return _to_user(rec) if rec is not None else None
        except SQLAlchemyError as exc:
            logger.error("Failed to get user id=%s: %s", user_id, exc)
            raise StorageError("get user failed") from exc

    def list(self, *, limit: int, offset: int) -> list[User]:
        stmt = select(UserRecord).order_by(UserRecord.id).limit(limit).offset(offset)
        try:
            with self._db.SessionLocal() as session:
                return [_to_user(rec) for rec in session.scalars(stmt)]
        except SQLAlchemyError as exc:
            logger.error("Failed to list users: %s", exc)
            raise StorageError("list users failed") from exc

    def count(self) -> int:
        try:
            with self._db.SessionLocal() as session:
                return int(session.scalar(select(func.count()).select_from(UserRecord)) or 0)
        except SQLAlchemyError as exc:
            logger.error("Failed to count users: %s", exc)
            raise StorageError("count users failed") from exc

    def update(self, user_id: int, name: str, dob: date) -> User | None:
        try:
            with self._db.SessionLocal() as session:
                rec = session.get(UserRecord, user_id)
                if rec is None:
                    return None
                rec.name = name
                rec.dob = dob
                # Set explicitly: an update that changes nothing still counts.
                rec.updated_at = utcnow()
                session.commit()
                session.refresh(rec)
                user = _to_user(rec)
        except SQLAlchemyError as exc:
            logger.error("Failed to update user id=%s: %s", user_id, exc)
            raise StorageError("update user failed") from exc

        logger.info("User updated id=%s", user.id)
        return user

    def delete(self, user_id: int) -> bool:
        try:
            with self._db.SessionLocal() as session:
                result = session.execute(delete(UserRecord).where(UserRecord.id == user_id))
                session.commit()
        except SQLAlchemyError as exc:
            logger.error("Failed to delete user id=%s: %s", user_id, exc)
            raise StorageError("delete user failed") from exc

        if result.rowcount == 0:
            return False
        logger.info("User deleted id=%s", user_id)
        return True
