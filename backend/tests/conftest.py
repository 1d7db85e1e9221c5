from __future__ import annotations

import copy
from typing import Any

import pytest
from azure.cosmos.exceptions import CosmosResourceExistsError, CosmosResourceNotFoundError
from httpx import ASGITransport, AsyncClient
from starlette.testclient import TestClient

from employee_records.core.config import settings
from employee_records.core.security import get_password_hash
from employee_records.main import app
from employee_records.services.employee_service import employee_service
from employee_records.services.upload_storage import upload_storage
from employee_records.services.user_service import user_service

TEST_ADMIN_EMAIL = "admin@gmail.com"
TEST_ADMIN_PASSWORD = "admin"


class FakeContainer:
    """In-memory stand-in for an async Cosmos DB container client."""

    def __init__(self, items: list[dict[str, Any]] | None = None) -> None:
        self.items: dict[str, dict[str, Any]] = {}
        for item in items or []:
            self.items[item["id"]] = copy.deepcopy(item)
        self.fail_with: Exception | None = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def _missing(self, item: str) -> CosmosResourceNotFoundError:
        return CosmosResourceNotFoundError(status_code=404, message=f"Entity {item} does not exist")

    def _stored(self, body: dict[str, Any]) -> dict[str, Any]:
        stored = copy.deepcopy(body)
        stored.update({"_rid": "rid", "_etag": "etag", "_ts": 1700000000})
        self.items[stored["id"]] = stored
        return copy.deepcopy(stored)

    async def create_item(self, body: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        self._check()
        if body["id"] in self.items:
            raise CosmosResourceExistsError(status_code=409, message="Entity already exists")
        return self._stored(body)

    async def read_item(self, item: str, partition_key: str, **kwargs: Any) -> dict[str, Any]:
        self._check()
        if item not in self.items:
            raise self._missing(item)
        return copy.deepcopy(self.items[item])

    async def read_all_items(self, **kwargs: Any):
        self._check()
        for item in list(self.items.values()):
            yield copy.deepcopy(item)

    async def replace_item(self, item: str, body: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
        self._check()
        if item not in self.items:
            raise self._missing(item)
        return self._stored(body)

    async def patch_item(
        self,
        item: str,
        partition_key: str,
        patch_operations: list[dict[str, Any]],
        **kwargs: Any,
    ) -> dict[str, Any]:
        self._check()
        if item not in self.items:
            raise self._missing(item)
        document = self.items[item]
        for operation in patch_operations:
            assert operation["op"] == "set"
            document[operation["path"].lstrip("/")] = copy.deepcopy(operation["value"])
        return copy.deepcopy(document)

    async def delete_item(self, item: str, partition_key: str, **kwargs: Any) -> None:
        self._check()
        if item not in self.items:
            raise self._missing(item)
        del self.items[item]

    async def query_items(self, query: str, **kwargs: Any):
        self._check()
        yield len(self.items)


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture(scope="session")
def admin_password_hash() -> str:
    return get_password_hash(TEST_ADMIN_PASSWORD)


@pytest.fixture
def employee_container():
    container = FakeContainer()
    original = (employee_service.container, employee_service.initialized)
    employee_service.container = container
    employee_service.initialized = True
    yield container
    employee_service.container, employee_service.initialized = original


@pytest.fixture
def user_container(admin_password_hash):
    container = FakeContainer(
        [{"id": TEST_ADMIN_EMAIL, "email": TEST_ADMIN_EMAIL, "password": admin_password_hash}]
    )
    original = (user_service.container, user_service.initialized)
    user_service.container = container
    user_service.initialized = True
    yield container
    user_service.container, user_service.initialized = original


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    directory = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(directory))
    upload_storage.configure(settings)
    return directory


@pytest.fixture
def client(employee_container, user_container, upload_dir):
    with TestClient(app) as c:
        yield c


@pytest.fixture
async def async_client(employee_container, user_container, upload_dir):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
