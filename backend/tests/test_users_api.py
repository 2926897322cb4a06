from __future__ import annotations

from datetime import date

from fastapi.testclient import TestClient

from app.db.repository import SqlAlchemyUserStore
from app.services.pagination import MAX_PAGE
from app.services.user_service import UserService


def _create(client: TestClient, name: str = "Alice", dob: str = "1990-05-10") -> dict:
    res = client.post("/api/v1/users", json={"name": name, "dob": dob})
    assert res.status_code == 201, res.text
    return res.json()


def test_user_crud(client: TestClient) -> None:
    # Create
    user = _create(client)
    assert set(user) == {"id", "name", "dob"}
    assert user["name"] == "Alice"
    assert user["dob"] == "1990-05-10"
    uid = user["id"]

    # Read
    res = client.get(f"/api/v1/users/{uid}")
    assert res.status_code == 200, res.text
    got = res.json()
    assert got["name"] == "Alice"
    assert got["dob"] == "1990-05-10"
    assert isinstance(got["age"], int) and got["age"] >= 0

    # Update
    res = client.put(f"/api/v1/users/{uid}", json={"name": "Alicia", "dob": "1991-06-11"})
    assert res.status_code == 200, res.text
    assert res.json() == {"id": uid, "name": "Alicia", "dob": "1991-06-11"}

    res = client.get(f"/api/v1/users/{uid}")
    assert res.json()["name"] == "Alicia"
    assert res.json()["dob"] == "1991-06-11"

    # Delete
    res = client.delete(f"/api/v1/users/{uid}")
    assert res.status_code == 204
    assert res.content == b""

    # Gone
    res = client.get(f"/api/v1/users/{uid}")
    assert res.status_code == 404
    assert res.json()["error"] == "User not found"


def test_age_uses_injected_clock(app) -> None:
    app.state.user_service = UserService(SqlAlchemyUserStore(app.state.db), today=lambda: date(2024, 5, 10))
    client = TestClient(app)

    on_birthday = _create(client, "Alice", "1990-05-10")
    day_after = _create(client, "Bob", "1990-05-11")

    assert client.get(f"/api/v1/users/{on_birthday['id']}").json()["age"] == 34
    assert client.get(f"/api/v1/users/{day_after['id']}").json()["age"] == 33


def test_list_pagination(client: TestClient) -> None:
    ids = [_create(client, f"User {i:02d}", "2000-01-01")["id"] for i in range(15)]

    res = client.get("/api/v1/users", params={"page": 2, "page_size": 10})
    assert res.status_code == 200, res.text
    body = res.json()
    assert len(body["users"]) == 5
    assert body["total"] == 15
    assert body["page"] == 2
    assert body["page_size"] == 10
    assert body["total_pages"] == 2
    assert [u["id"] for u in body["users"]] == ids[10:]
    assert all("age" in u for u in body["users"])

    res = client.get("/api/v1/users")
    body = res.json()
    assert (body["page"], body["page_size"]) == (1, 10)
    assert [u["id"] for u in body["users"]] == ids[:10]

    res = client.get("/api/v1/users", params={"page": 0, "page_size": 0})
    assert (res.json()["page"], res.json()["page_size"]) == (1, 10)

    res = client.get("/api/v1/users", params={"page": 5, "page_size": 10})
    assert res.status_code == 200
    assert res.json()["users"] == []


def test_list_empty(client: TestClient) -> None:
    res = client.get("/api/v1/users")
    assert res.status_code == 200
    assert res.json() == {"users": [], "total": 0, "page": 1, "page_size": 10, "total_pages": 0}


def test_invalid_pagination_is_rejected(client: TestClient) -> None:
    bad = [
        {"page": -1},
        {"page_size": 101},
        {"page_size": -5},
        {"page": "abc"},
        {"page": 2**62},
        {"page": 10**19},
        {"page": MAX_PAGE + 1},
    ]
    for params in bad:
        res = client.get("/api/v1/users", params=params)
        assert res.status_code == 400, params
        body = res.json()
        assert body["error"] == "Invalid pagination parameters"
        assert body["details"]


def test_name_validation(client: TestClient) -> None:
    res = client.post("/api/v1/users", json={"name": "A", "dob": "1990-05-10"})
    assert res.status_code == 400
    body = res.json()
    assert body["error"] == "Validation failed"
    assert any(d.startswith("name validation failed") for d in body["details"])

    res = client.post("/api/v1/users", json={"name": "x" * 101, "dob": "1990-05-10"})
    assert res.status_code == 400

    res = client.post("/api/v1/users", json={"dob": "1990-05-10"})
    assert res.status_code == 400
    assert res.json()["error"] == "Validation failed"


def test_bad_date_never_reaches_store(app, fake_store) -> None:
    app.state.user_service = UserService(fake_store)
    client = TestClient(app)

    res = client.post("/api/v1/users", json={"name": "Alice", "dob": "10-05-1990"})
    assert res.status_code == 400
    assert any(d.startswith("dob validation failed") for d in res.json()["details"])
    assert fake_store.calls == []


def test_impossible_date_is_invalid_date(client: TestClient) -> None:
    res = client.post("/api/v1/users", json={"name": "Alice", "dob": "1990-02-30"})
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid date format. Expected YYYY-MM-DD"

    uid = _create(client)["id"]
    res = client.put(f"/api/v1/users/{uid}", json={"name": "Alice", "dob": "1990-13-01"})
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid date format. Expected YYYY-MM-DD"


def test_future_dob_is_accepted(client: TestClient) -> None:
    user = _create(client, "Future", "2999-12-31")
    assert user["dob"] == "2999-12-31"


def test_invalid_ids(client: TestClient) -> None:
    for method in ("get", "delete"):
        res = getattr(client, method)("/api/v1/users/abc")
        assert res.status_code == 400
        assert res.json()["error"] == "Invalid user ID"

    res = client.put("/api/v1/users/abc", json={"name": "Alice", "dob": "1990-05-10"})
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid user ID"

    res = client.get(f"/api/v1/users/{2**31}")
    assert res.status_code == 400


def test_missing_ids_are_404(client: TestClient) -> None:
    assert client.get("/api/v1/users/999").status_code == 404
    assert client.put("/api/v1/users/999", json={"name": "Alice", "dob": "1990-05-10"}).status_code == 404
    assert client.delete("/api/v1/users/999").status_code == 404


def test_delete_twice(client: TestClient) -> None:
    uid = _create(client)["id"]
    assert client.delete(f"/api/v1/users/{uid}").status_code == 204
    res = client.delete(f"/api/v1/users/{uid}")
    assert res.status_code == 404
    assert res.json()["error"] == "User not found"


def test_malformed_body(client: TestClient) -> None:
    res = client.post(
        "/api/v1/users",
        content=b"{not json",
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["error"] == "Invalid request body"


def test_last_allowed_page_is_empty_not_an_error(client: TestClient) -> None:
    _create(client)
    res = client.get("/api/v1/users", params={"page": MAX_PAGE, "page_size": 100})
    assert res.status_code == 200, res.text
    assert res.json()["users"] == []
    assert res.json()["total"] == 1
