from __future__ import annotations

import pytest

from employee_records.core.config import Settings
from employee_records.core.security import get_password_hash, verify_password
from employee_records.services.user_service import InvalidPasswordError, UserNotFoundError, UserService
from tests.conftest import TEST_ADMIN_EMAIL, TEST_ADMIN_PASSWORD, FakeContainer


def test_login_success_echoes_email(client):
    response = client.post("/api/login", json={"email": TEST_ADMIN_EMAIL, "password": TEST_ADMIN_PASSWORD})

    assert response.status_code == 200
    assert response.json() == {"message": "Login successful", "user": {"email": TEST_ADMIN_EMAIL}}


def test_login_unknown_user_returns_401(client):
    response = client.post("/api/login", json={"email": "nobody@example.com", "password": "admin"})

    assert response.status_code == 401
    assert response.json() == {"message": "User not found"}


def test_login_wrong_password_returns_401(client):
    response = client.post("/api/login", json={"email": TEST_ADMIN_EMAIL, "password": "wrong"})

    assert response.status_code == 401
    assert response.json() == {"message": "Invalid password"}


def test_login_store_failure_returns_500(client, user_container):
    user_container.fail_with = RuntimeError("store down")

    response = client.post("/api/login", json={"email": TEST_ADMIN_EMAIL, "password": "admin"})

    assert response.status_code == 500
    assert response.json()["message"] == "Server error"


def test_verify_password_roundtrip(admin_password_hash):
    assert verify_password(TEST_ADMIN_PASSWORD, admin_password_hash) is True
    assert verify_password("nope", admin_password_hash) is False


def test_verify_password_empty_hash():
    assert verify_password("anything", "") is False


@pytest.mark.anyio
async def test_configured_admin_fallback(admin_password_hash):
    service = UserService()
    await service.initialize(Settings(ADMIN_EMAIL="root@example.com", ADMIN_PASSWORD_HASH=admin_password_hash))

    assert service.initialized is False
    assert await service.authenticate("root@example.com", TEST_ADMIN_PASSWORD) == "root@example.com"
    with pytest.raises(UserNotFoundError):
        await service.authenticate("other@example.com", TEST_ADMIN_PASSWORD)


@pytest.mark.anyio
async def test_fallback_without_admin_rejects_everyone():
    service = UserService()
    await service.initialize(Settings())

    with pytest.raises(UserNotFoundError):
        await service.authenticate("admin@gmail.com", "admin")


@pytest.mark.anyio
async def test_unreadable_hash_is_invalid_password():
    service = UserService()
    service.container = FakeContainer([{"id": "a@b.c", "email": "a@b.c", "password": "not-a-hash"}])

    with pytest.raises(InvalidPasswordError):
        await service.authenticate("a@b.c", "whatever")


@pytest.mark.anyio
async def test_container_user_lookup():
    service = UserService()
    service.container = FakeContainer(
        [{"id": "hr@example.com", "email": "hr@example.com", "password": get_password_hash("s3cret")}]
    )

    assert await service.authenticate("hr@example.com", "s3cret") == "hr@example.com"
    with pytest.raises(InvalidPasswordError):
        await service.authenticate("hr@example.com", "wrong")
