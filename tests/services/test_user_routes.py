"""User routes — login, logout, profile read and update.

Invariants:
    - /api/user/login needs no token; every other user route does
    - Login returns {id, username, token, exp} and the token works on /info
    - /info never exposes the password hash
    - Password changes need the correct old password (401 otherwise)
    - Taking another user's username answers 409
"""

from app.core.security import (
    hash_password, issue_access_token, verify_password,
)
from app.models.user import User


async def login(client, username="admin", password="admin"):
    return await client.post(
        "/api/user/login", json={"username": username, "password": password},
    )


async def test_login_returns_token_envelope(client):
    res = await login(client)
    assert res.status_code == 200
    body = res.json()
    assert body["code"] == 200
    assert body["message"] == "Login successful"
    assert body["data"]["id"] == 1
    assert body["data"]["username"] == "admin"
    assert body["data"]["token"]
    assert body["data"]["exp"] > 0


async def test_login_token_authenticates_info(client):
    token = (await login(client)).json()["data"]["token"]
    res = await client.get(
        "/api/user/info", headers={"Authorization": f"Bearer {token}"},
    )
    assert res.status_code == 200
    assert res.json()["data"]["username"] == "admin"


async def test_login_wrong_password_is_401(client):
    res = await login(client, password="nope")
    assert res.status_code == 401
    assert res.json() == {
        "code": 401, "message": "Invalid username or password", "data": None,
    }


async def test_login_unknown_user_is_401(client):
    res = await login(client, username="ghost")
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid username or password"


async def test_login_missing_fields_is_400(client):
    res = await client.post("/api/user/login", json={"username": "admin"})
    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Invalid request data"
    assert any(d["field"].endswith("password") for d in body["data"])


async def test_info_requires_auth_header(client):
    res = await client.get("/api/user/info")
    assert res.status_code == 401
    assert res.json()["message"] == "missing authentication header"


async def test_info_rejects_non_bearer_scheme(client):
    res = await client.get(
        "/api/user/info", headers={"Authorization": "Token abc"},
    )
    assert res.status_code == 401
    assert res.json()["message"] == "invalid authentication format"


async def test_info_rejects_forged_token(client):
    res = await client.get(
        "/api/user/info", headers={"Authorization": "Bearer forged.token.value"},
    )
    assert res.status_code == 401
    assert res.json()["message"] == "invalid or expired token"


async def test_info_hides_password(client, auth_headers):
    res = await client.get("/api/user/info", headers=auth_headers)
    assert res.status_code == 200
    data = res.json()["data"]
    assert set(data) == {"id", "username", "created_at", "updated_at"}


async def test_info_for_deleted_user_is_404(client, settings):
    token = issue_access_token(999, settings.jwt.secret, 3600).token
    res = await client.get(
        "/api/user/info", headers={"Authorization": f"Bearer {token}"},
    )
    assert res.status_code == 404
    assert res.json()["message"] == "User not found"


async def test_logout_succeeds_with_token(client, auth_headers):
    res = await client.post("/api/user/logout", headers=auth_headers)
    assert res.status_code == 200
    assert res.json()["message"] == "Logout successful"


async def test_logout_requires_token(client):
    res = await client.post("/api/user/logout")
    assert res.status_code == 401


async def test_change_password(client, auth_headers):
    res = await client.put(
        "/api/user/info", headers=auth_headers,
        json={"old_password": "admin", "new_password": "better-pass"},
    )
    assert res.status_code == 200
    assert res.json()["message"] == "User information updated successfully"

    assert (await login(client, password="admin")).status_code == 401
    assert (await login(client, password="better-pass")).status_code == 200


async def test_change_password_wrong_old_password_is_401(client, auth_headers):
    res = await client.put(
        "/api/user/info", headers=auth_headers,
        json={"old_password": "wrong", "new_password": "better-pass"},
    )
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid old password"


async def test_new_password_too_short_is_400(client, auth_headers):
    res = await client.put(
        "/api/user/info", headers=auth_headers,
        json={"old_password": "admin", "new_password": "123"},
    )
    assert res.status_code == 400


async def test_only_new_password_changes_nothing(client, auth_headers):
    res = await client.put(
        "/api/user/info", headers=auth_headers,
        json={"new_password": "better-pass"},
    )
    assert res.status_code == 200
    assert (await login(client, password="admin")).status_code == 200


async def test_rename_user(client, auth_headers):
    res = await client.put(
        "/api/user/info", headers=auth_headers, json={"username": "root"},
    )
    assert res.status_code == 200

    info = await client.get("/api/user/info", headers=auth_headers)
    assert info.json()["data"]["username"] == "root"
    assert (await login(client, username="root")).status_code == 200


async def test_rename_to_taken_username_is_409(client, auth_headers, test_db):
    test_db.add(User(username="taken", password=hash_password("whatever")))
    await test_db.commit()

    res = await client.put(
        "/api/user/info", headers=auth_headers, json={"username": "taken"},
    )
    assert res.status_code == 409
    assert res.json()["message"] == "Username already exists"


async def test_seeded_admin_password_is_hashed(client, test_db):
    admin = await test_db.get(User, 1)
    assert admin.username == "admin"
    assert admin.password != "admin"
    assert verify_password(admin.password, "admin")


async def test_update_with_all_fields_empty_is_noop(client, auth_headers):
    res = await client.put(
        "/api/user/info", headers=auth_headers,
        json={"username": "", "old_password": "", "new_password": ""},
    )
    assert res.status_code == 200

    info = await client.get("/api/user/info", headers=auth_headers)
    assert info.json()["data"]["username"] == "admin"
    assert (await login(client, password="admin")).status_code == 200


async def test_short_new_password_still_rejected_when_non_empty(
    client, auth_headers,
):
    res = await client.put(
        "/api/user/info", headers=auth_headers,
        json={"username": "", "old_password": "admin", "new_password": "abc"},
    )
    assert res.status_code == 400
