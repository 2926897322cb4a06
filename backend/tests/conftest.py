from __future__ import annotations

import dataclasses
from datetime import date, datetime, timezone

import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.db.repository import SqlAlchemyUserStore, User
from app.db.session import Database
from app.main import create_app
from app.services.user_service import UserService

TODAY = date(2024, 5, 10)


class InMemoryUserStore:
    """Dict-backed ``UserStore`` for service and handler tests."""

    def __init__(self) -> None:
        self.rows: dict[int, User] = {}
        self.calls: list[str] = []
        self._next_id = 1

    def create(self, name: str, dob: date) -> User:
        self.calls.append("create")
        now = datetime.now(timezone.utc)
        user = User(id=self._next_id, name=name, dob=dob, created_at=now, updated_at=now)
        self.rows[user.id] = user
        self._next_id += 1
        return user

    def get_by_id(self, user_id: int) -> User | None:
        self.calls.append("get_by_id")
        return self.rows.get(user_id)

    def list(self, *, limit: int, offset: int) -> list[User]:
        self.calls.append("list")
        ordered = [self.rows[k] for k in sorted(self.rows)]
        return ordered[offset : offset + limit]

    def count(self) -> int:
        self.calls.append("count")
        return len(self.rows)

    def update(self, user_id: int, name: str, dob: date) -> User | None:
        self.calls.append("update")
        user = self.rows.get(user_id)
        if user is None:
            return None
        user = dataclasses.replace(user, name=name, dob=dob, updated_at=datetime.now(timezone.utc))
        self.rows[user_id] = user
        return user

    def delete(self, user_id: int) -> bool:
        self.calls.append("delete")
        return self.rows.pop(user_id, None) is not None


@pytest.fixture()
def app(tmp_path):
    db_path = tmp_path / "test.db"
    return create_app(database_url=f"sqlite:///{db_path}", settings=Settings())


@pytest.fixture()
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def database(tmp_path):
    db = Database.from_url(f"sqlite:///{tmp_path / 'store.db'}", Settings())
    db.create_tables()
    yield db
    db.dispose()


@pytest.fixture()
def store(database) -> SqlAlchemyUserStore:
    return SqlAlchemyUserStore(database)


@pytest.fixture()
def fake_store() -> InMemoryUserStore:
    return InMemoryUserStore()


@pytest.fixture()
def service(fake_store) -> UserService:
    return UserService(fake_store, today=lambda: TODAY)
