import pytest
from sqlalchemy import select

from dimsum.core.models import Admin
from dimsum.core.security import decode_access_token, is_hashed


@pytest.mark.asyncio
async def test_register_hides_password(client, register_admin):
    admin = await register_admin("owner", "secret123")
    assert admin["username"] == "owner"
    assert "password" not in admin

    response = await client.get("/api/admin")
    body = response.json()
    assert response.status_code == 200
    assert body["count"] == 1
    assert body["data"][0]["id"] == admin["id"]
    assert "password" not in body["data"][0]


@pytest.mark.asyncio
async def test_register_stores_bcrypt_hash(client, register_admin, session_factory):
    await register_admin("owner", "secret123")
    async with session_factory() as db:
        stored = (await db.execute(select(Admin.password))).scalar_one()
    assert stored != "secret123"
    assert is_hashed(stored)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"username": "owner"},
        {"password": "secret123"},
        {"username": "ow", "password": "secret123"},
        {"username": "owner", "password": "123"},
    ],
)
async def test_register_rejects_invalid_input(client, payload):
    response = await client.post("/api/admin/register", json=payload)
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_register_duplicate_username(client, register_admin):
    await register_admin("owner")
    response = await client.post(
        "/api/admin/register", json={"username": "owner", "password": "another1"}
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Username already exists"


@pytest.mark.asyncio
async def test_login_returns_admin_and_token(client, register_admin):
    admin = await register_admin("owner", "secret123")

    response = await client.post(
        "/api/admin/login", json={"username": "owner", "password": "secret123"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["admin"]["id"] == admin["id"]
    claims = decode_access_token(body["token"])
    assert claims["sub"] == "owner"
    assert claims["admin_id"] == admin["id"]


@pytest.mark.asyncio
async def test_login_wrong_password_is_unauthorized(client, register_admin):
    await register_admin("owner", "secret123")

    response = await client.post(
        "/api/admin/login", json={"username": "owner", "password": "wrong-pass"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid credentials"

    response = await client.post(
        "/api/admin/login", json={"username": "nobody", "password": "secret123"}
    )
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_missing_fields_is_bad_request(client):
    response = await client.post("/api/admin/login", json={"username": "owner"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_login_upgrades_plaintext_password(client, db_session, session_factory):
    db_session.add(Admin(username="legacy", password="plain123"))
    await db_session.commit()

    response = await client.post(
        "/api/admin/login", json={"username": "legacy", "password": "plain123"}
    )
    assert response.status_code == 200

    async with session_factory() as db:
        stored = (
            await db.execute(select(Admin.password).where(Admin.username == "legacy"))
        ).scalar_one()
    assert is_hashed(stored)

    response = await client.post(
        "/api/admin/login", json={"username": "legacy", "password": "plain123"}
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_logout(client):
    response = await client.post("/api/admin/logout")
    assert response.status_code == 200
    assert response.json()["message"] == "Logout successful"


@pytest.mark.asyncio
async def test_get_admin(client, register_admin):
    admin = await register_admin()

    response = await client.get(f"/api/admin/{admin['id']}")
    assert response.status_code == 200
    assert response.json()["admin"]["username"] == "owner"

    response = await client.get("/api/admin/999")
    assert response.status_code == 404
    assert response.json()["error"] == "Admin not found"


@pytest.mark.asyncio
async def test_update_username(client, register_admin):
    owner = await register_admin("owner")
    await register_admin("helper")

    response = await client.put(f"/api/admin/{owner['id']}", json={"username": "helper"})
    assert response.status_code == 400
    assert response.json()["error"] == "Username already taken by another admin"

    response = await client.put(f"/api/admin/{owner['id']}", json={"username": "boss"})
    assert response.status_code == 200
    assert response.json()["admin"]["username"] == "boss"


@pytest.mark.asyncio
async def test_update_password_rules(client, register_admin):
    owner = await register_admin("owner", "secret123")
    url = f"/api/admin/{owner['id']}"

    response = await client.put(url, json={"new_password": "newsecret"})
    assert response.status_code == 400

    response = await client.put(url, json={"password": "wrong-pass", "new_password": "newsecret"})
    assert response.status_code == 401

    response = await client.put(url, json={"password": "secret123", "new_password": "123"})
    assert response.status_code == 400

    response = await client.put(url, json={"password": "secret123", "new_password": "newsecret"})
    assert response.status_code == 200

    response = await client.post(
        "/api/admin/login", json={"username": "owner", "password": "newsecret"}
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_update_unknown_admin(client):
    response = await client.put("/api/admin/999", json={"username": "ghost"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_last_admin_is_rejected(client, register_admin):
    owner = await register_admin("owner")

    response = await client.delete(f"/api/admin/{owner['id']}")
    assert response.status_code == 400
    assert response.json()["error"] == "Cannot delete the last admin"

    response = await client.get("/api/admin")
    assert response.json()["count"] == 1


@pytest.mark.asyncio
async def test_delete_admin(client, register_admin):
    owner = await register_admin("owner")
    helper = await register_admin("helper")

    response = await client.delete(f"/api/admin/{helper['id']}")
    assert response.status_code == 200
    assert response.json()["deletedAdmin"]["username"] == "helper"

    response = await client.delete(f"/api/admin/{helper['id']}")
    assert response.status_code == 404

    response = await client.get("/api/admin")
    assert [a["id"] for a in response.json()["data"]] == [owner["id"]]


@pytest.mark.asyncio
async def test_change_password(client, register_admin):
    owner = await register_admin("owner", "secret123")
    url = "/api/admin/change-password"

    response = await client.post(
        url, json={"id": owner["id"], "current_password": "nope", "new_password": "newsecret"}
    )
    assert response.status_code == 401

    response = await client.post(
        url, json={"id": owner["id"], "current_password": "secret123", "new_password": "123"}
    )
    assert response.status_code == 400

    response = await client.post(
        url, json={"id": 999, "current_password": "secret123", "new_password": "newsecret"}
    )
    assert response.status_code == 404

    response = await client.post(url, json={"id": owner["id"], "current_password": "secret123"})
    assert response.status_code == 400

    response = await client.post(
        url, json={"id": owner["id"], "current_password": "secret123", "new_password": "newsecret"}
    )
    assert response.status_code == 200

    response = await client.post(
        "/api/admin/login", json={"username": "owner", "password": "newsecret"}
    )
    assert response.status_code == 200


LONG_MULTIBYTE_PASSWORD = "é" * 40  # 40글자, 80바이트


@pytest.mark.asyncio
async def test_register_rejects_password_over_bcrypt_limit(client):
    response = await client.post(
        "/api/admin/register",
        json={"username": "owner", "password": LONG_MULTIBYTE_PASSWORD},
    )
    assert response.status_code == 400
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_new_password_over_bcrypt_limit_is_rejected(client, register_admin):
    owner = await register_admin("owner", "secret123")

    response = await client.put(
        f"/api/admin/{owner['id']}",
        json={"password": "secret123", "new_password": LONG_MULTIBYTE_PASSWORD},
    )
    assert response.status_code == 400

    response = await client.post(
        "/api/admin/change-password",
        json={
            "id": owner["id"],
            "current_password": "secret123",
            "new_password": LONG_MULTIBYTE_PASSWORD,
        },
    )
    assert response.status_code == 400

    response = await client.post(
        "/api/admin/login", json={"username": "owner", "password": "secret123"}
    )
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_long_plaintext_password_logs_in_without_upgrade(client, db_session, session_factory):
    db_session.add(Admin(username="legacy", password=LONG_MULTIBYTE_PASSWORD))
    await db_session.commit()

    response = await client.post(
        "/api/admin/login", json={"username": "legacy", "password": LONG_MULTIBYTE_PASSWORD}
    )
    assert response.status_code == 200

    async with session_factory() as db:
        stored = (
            await db.execute(select(Admin.password).where(Admin.username == "legacy"))
        ).scalar_one()
    assert stored == LONG_MULTIBYTE_PASSWORD


@pytest.mark.asyncio
@pytest.mark.parametrize("blank", ["", "   "])
async def test_update_blank_username_keeps_current(client, register_admin, blank):
    owner = await register_admin("owner")

    response = await client.put(f"/api/admin/{owner['id']}", json={"username": blank})
    assert response.status_code == 200
    assert response.json()["admin"]["username"] == "owner"

    response = await client.get(f"/api/admin/{owner['id']}")
    assert response.json()["admin"]["username"] == "owner"


@pytest.mark.asyncio
async def test_deleting_every_admin_stops_at_the_last_one(client, register_admin):
    owner = await register_admin("owner")
    helper = await register_admin("helper")

    response = await client.delete(f"/api/admin/{owner['id']}")
    assert response.status_code == 200

    response = await client.delete(f"/api/admin/{helper['id']}")
    assert response.status_code == 400
    assert response.json()["error"] == "Cannot delete the last admin"

    response = await client.get("/api/admin")
    assert [a["id"] for a in response.json()["data"]] == [helper["id"]]
