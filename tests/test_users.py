from __future__ import annotations

import threading
import uuid
from datetime import datetime, timezone

import pytest

from accounts.repositories.user_repository import UserRepository


def _create(client, username, email, password="longpass1", **extra):
    return client.post("/users", json={"username": username, "email": email, "password": password, **extra})


def test_create_normalizes_email_and_hides_password(client):
    r = _create(client, "alice", "A@x.com ", displayName="Alice", avatarUrl="  https://cdn.example.com/a.png ")

    assert r.status_code == 201
    body = r.json()
    assert body["status"] == "success"
    data = body["data"]
    assert data["email"] == "a@x.com"
    assert data["displayName"] == "Alice"
    assert data["avatarUrl"] == "https://cdn.example.com/a.png"
    assert "password" not in data
    assert "passwordHash" not in data
    assert "password_hash" not in data
    assert {"id", "createdAt", "updatedAt"} <= set(data)


def test_create_then_get_returns_same_user(client, alice):
    r = client.get(f"/users/{alice['id']}")

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["id"] == alice["id"]
    assert data["username"] == "alice"
    assert data["email"] == "a@x.com"
    assert "passwordHash" not in r.text
    assert alice["password"] not in r.text


@pytest.mark.parametrize(
    ("username", "email"),
    [
        ("alice", "other@x.com"),
        ("someone", "a@x.com"),
        ("someone", "  A@X.COM "),
    ],
)
def test_duplicate_username_or_email_is_409(client, alice, username, email):
    r = _create(client, username, email)

    assert r.status_code == 409
    assert r.json() == {
        "status": "error",
        "data": None,
        "error": {"message": "Email or username already exists"},
    }


def test_unknown_id_is_404(client):
    r = client.get(f"/users/{uuid.uuid4()}")

    assert r.status_code == 404
    assert r.json()["error"] == {"message": "Not found"}


def test_malformed_id_is_400(client):
    r = client.get("/users/not-a-uuid")

    assert r.status_code == 400
    error = r.json()["error"]
    assert error["message"] == "Validation failed"
    assert error["details"][0]["loc"] == ["params", "id"]


@pytest.mark.parametrize(
    ("payload", "field"),
    [
        ({"username": "ab", "email": "a@x.com", "password": "longpass1"}, "username"),
        ({"username": "has space", "email": "a@x.com", "password": "longpass1"}, "username"),
        ({"username": "alice", "email": "not-an-email", "password": "longpass1"}, "email"),
        ({"username": "alice", "email": "a@x.com", "password": "xyz7"}, "password"),
        ({"username": "alice", "email": "a@x.com", "password": "longpass1", "avatarUrl": "nope"}, "avatarUrl"),
        ({"email": "a@x.com", "password": "longpass1"}, "username"),
    ],
)
def test_create_validation_reports_field_without_echoing_input(client, payload, field):
    r = client.post("/users", json=payload)

    assert r.status_code == 400
    error = r.json()["error"]
    assert error["message"] == "Validation failed"
    assert [field] in [d["loc"][1:2] for d in error["details"]]
    for d in error["details"]:
        assert set(d) == {"loc", "msg", "type"}
    assert "xyz7" not in r.text


def test_update_changes_only_sent_fields(client, alice):
    r = client.put(f"/users/{alice['id']}", json={"displayName": "Alice L."})

    assert r.status_code == 200
    data = r.json()["data"]
    assert data["displayName"] == "Alice L."
    assert data["username"] == "alice"
    assert data["email"] == "a@x.com"


def test_update_email_is_normalized(client, alice):
    r = client.put(f"/users/{alice['id']}", json={"email": " New@X.com"})

    assert r.status_code == 200
    assert r.json()["data"]["email"] == "new@x.com"


def test_update_password_is_rehashed(client, alice):
    r = client.put(f"/users/{alice['id']}", json={"password": "brand-new-pass"})
    assert r.status_code == 200

    old = client.post("/auth/login", json={"email": "a@x.com", "password": alice["password"]})
    new = client.post("/auth/login", json={"email": "a@x.com", "password": "brand-new-pass"})

    assert old.status_code == 401
    assert new.status_code == 200


@pytest.mark.parametrize("payload", [{}, {"unknownField": 1}])
def test_update_with_nothing_to_change_is_400(client, alice, payload):
    r = client.put(f"/users/{alice['id']}", json=payload)

    assert r.status_code == 400
    assert r.json()["error"]["message"] == "No fields to update"


@pytest.mark.parametrize("field", ["username", "email", "password"])
def test_update_rejects_null_for_required_fields(client, alice, field):
    r = client.put(f"/users/{alice['id']}", json={field: None})

    assert r.status_code == 400
    assert r.json()["error"]["message"] == "Validation failed"


def test_update_display_name_to_null_clears_it(client):
    created = _create(client, "carol", "c@x.com", displayName="Carol").json()["data"]

    r = client.put(f"/users/{created['id']}", json={"displayName": None})

    assert r.status_code == 200
    assert r.json()["data"]["displayName"] is None


def test_update_into_existing_username_is_409(client, alice):
    bob = _create(client, "bob", "b@x.com").json()["data"]

    r = client.put(f"/users/{bob['id']}", json={"username": "alice"})

    assert r.status_code == 409
    assert client.get(f"/users/{bob['id']}").json()["data"]["username"] == "bob"


def test_update_unknown_user_is_404(client):
    r = client.put(f"/users/{uuid.uuid4()}", json={"displayName": "x"})

    assert r.status_code == 404


def test_delete_then_get_is_404(client, alice):
    r = client.delete(f"/users/{alice['id']}")

    assert r.status_code == 200
    assert r.json() == {"status": "success", "data": None, "error": None}
    assert client.get(f"/users/{alice['id']}").status_code == 404
    assert client.delete(f"/users/{alice['id']}").status_code == 404


def test_delete_removes_the_profile_too(client, alice):
    assert client.post(f"/users/{alice['id']}/profile", json={"bio": "hi"}).status_code == 201

    assert client.delete(f"/users/{alice['id']}").status_code == 200
    assert client.get(f"/users/{alice['id']}/profile").status_code == 404


# ──────────────────────────────────────────────────────────────────────────────
# listing
# ──────────────────────────────────────────────────────────────────────────────
@pytest.fixture
def many(client):
    ids = []
    for i in range(5):
        r = _create(client, f"user{i}", f"user{i}@x.com", displayName=f"User {i}")
        assert r.status_code == 201
        ids.append(r.json()["data"]["id"])
    return ids


def test_bare_list_is_a_plain_array(client, many):
    r = client.get("/users")

    assert r.status_code == 200
    data = r.json()["data"]
    assert isinstance(data, list)
    assert sorted(u["id"] for u in data) == sorted(many)


def test_paging_walks_every_user_once(client, many):
    seen = []
    cursor = None
    while True:
        params = {"limit": 2}
        if cursor:
            params["cursor"] = cursor
        page = client.get("/users", params=params).json()["data"]
        assert page["limit"] == 2
        assert len(page["items"]) <= 2
        seen.extend(u["id"] for u in page["items"])
        cursor = page["nextCursor"]
        if cursor is None:
            break

    assert len(seen) == len(set(seen)) == 5
    assert set(seen) == set(many)


def test_search_and_user_filter(client, alice, many):
    found = client.get("/users", params={"q": "ALI"}).json()["data"]["items"]
    assert [u["id"] for u in found] == [alice["id"]]

    only = client.get("/users", params={"userId": many[2]}).json()["data"]["items"]
    assert [u["id"] for u in only] == [many[2]]


def test_date_window(client, many):
    everyone = client.get("/users", params={"after": "2000-01-01"}).json()["data"]["items"]
    nobody = client.get("/users", params={"before": "2000-01-01"}).json()["data"]["items"]

    assert len(everyone) == 5
    assert nobody == []


@pytest.mark.parametrize(
    "params",
    [{"limit": 0}, {"limit": 101}, {"cursor": "nope"}, {"before": "01/02/2020"}, {"q": ""}],
)
def test_bad_list_query_is_400(client, params):
    r = client.get("/users", params=params)

    assert r.status_code == 400
    assert r.json()["error"]["details"][0]["loc"][0] == "query"


def test_timestamps_are_utc_and_move_on_update(client, alice):
    assert alice["createdAt"].endswith(("Z", "+00:00"))
    assert alice["updatedAt"].endswith(("Z", "+00:00"))

    r = client.put(f"/users/{alice['id']}", json={"displayName": "A"})

    assert r.status_code == 200
    assert r.json()["data"]["updatedAt"].endswith(("Z", "+00:00"))


def test_created_today_falls_inside_an_after_today_window(client, alice):
    today = datetime.now(tz=timezone.utc).date().isoformat()

    inside = client.get("/users", params={"after": today}).json()["data"]["items"]
    before_today = client.get("/users", params={"before": today}).json()["data"]["items"]

    assert [u["id"] for u in inside] == [alice["id"]]
    assert before_today == []


# ──────────────────────────────────────────────────────────────────────────────
# persistence runs in the thread pool, not on the event loop
# ──────────────────────────────────────────────────────────────────────────────
def _loop_thread(app, client) -> int:
    @app.get("/_loop_thread")
    async def loop_thread():
        return {"ident": threading.get_ident()}

    return client.get("/_loop_thread").json()["ident"]


def _record_threads(monkeypatch, name) -> list:
    original = getattr(UserRepository, name)
    seen = []

    def recording(self, *args, **kwargs):
        seen.append(threading.get_ident())
        return original(self, *args, **kwargs)

    monkeypatch.setattr(UserRepository, name, recording)
    return seen


def test_create_and_update_touch_the_db_off_the_loop(app, client, monkeypatch):
    loop_ident = _loop_thread(app, client)
    creates = _record_threads(monkeypatch, "create")
    gets = _record_threads(monkeypatch, "get")
    updates = _record_threads(monkeypatch, "update")

    created = _create(client, "dave", "d@x.com")
    assert created.status_code == 201
    r = client.put(f"/users/{created.json()['data']['id']}", json={"displayName": "Dave"})
    assert r.status_code == 200

    assert creates and gets and updates
    assert loop_ident not in creates + gets + updates
