"""Login user lookup and credential check."""

from __future__ import annotations

import logging
from typing import Any

from azure.cosmos.aio import CosmosClient
from azure.cosmos.exceptions import CosmosResourceNotFoundError

from employee_records.core.config import Settings
from employee_records.core.security import verify_password

logger = logging.getLogger(__name__)


class UserNotFoundError(Exception):
    pass


class InvalidPasswordError(Exception):
    pass


class UserService:
    def __init__(self) -> None:
        self.client: CosmosClient | None = None
        self.container: Any = None
        self.initialized: bool = False
        self.admin_email: str = ""
        self.admin_password_hash: str = ""

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        self.admin_email = settings.ADMIN_EMAIL
        self.admin_password_hash = settings.ADMIN_PASSWORD_HASH

        if not settings.COSMOS_DB_ENDPOINT or not settings.COSMOS_DB_KEY:
            logger.warning("Cosmos DB credentials missing, UserService falls back to configured admin")
            return

        self.client = CosmosClient(settings.COSMOS_DB_ENDPOINT, settings.COSMOS_DB_KEY)
        db = self.client.get_database_client(settings.COSMOS_DB_DATABASE)
        self.container = db.get_container_client(settings.COSMOS_DB_USERS_CONTAINER)
        self.initialized = True
        logger.info("UserService initialized (container=%s)", settings.COSMOS_DB_USERS_CONTAINER)

    async def close(self) -> None:
        if self.client:
            await self.client.close()
            self.client = None
            self.container = None
            self.initialized = False

    async def find_user(self, email: str) -> dict[str, Any] | None:
        if self.container:
            try:
                return await self.container.read_item(item=email, partition_key=email)
            except CosmosResourceNotFoundError:
                return None

        if self.admin_email and email == self.admin_email:
            return {"id": email, "email": email, "password": self.admin_password_hash}
        return None

    async def authenticate(self, email: str, password: str) -> str:
        """Return the user's email when the credentials match."""
        user = await self.find_user(email)
        if user is None:
            raise UserNotFoundError(email)

        try:
            valid = verify_password(password, user.get("password", ""))
        except ValueError:
            logger.error("Stored password hash for %s is unreadable", email)
            valid = False

        if not valid:
            raise InvalidPasswordError(email)
        return user["email"]


user_service = UserService()
