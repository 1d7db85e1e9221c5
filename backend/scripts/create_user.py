#!/usr/bin/env python3
"""Create a login user in the Cosmos DB users container.

Run from the backend/ directory:

    python3 scripts/create_user.py [--email EMAIL] [--password PASSWORD] [--verbose]

Email and password default to ADMIN_EMAIL / ADMIN_PASSWORD from the
environment. An existing user with the same email is left untouched.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Any

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from azure.cosmos.aio import CosmosClient  # noqa: E402
from azure.cosmos.exceptions import CosmosResourceNotFoundError  # noqa: E402

from employee_records.core.config import Settings  # noqa: E402
from employee_records.core.security import get_password_hash  # noqa: E402

logger = logging.getLogger(__name__)


def build_user_document(email: str, password: str) -> dict[str, Any]:
    return {
        "id": email,
        "email": email,
        "password": get_password_hash(password),
    }


async def insert_user(container: Any, email: str, password: str) -> bool:
    """Insert the user unless the email is already taken. Returns True when inserted."""
    try:
        await container.read_item(item=email, partition_key=email)
    except CosmosResourceNotFoundError:
        pass
    else:
        logger.info("User %s already exists", email)
        return False

    await container.create_item(body=build_user_document(email, password))
    logger.info("User %s added successfully", email)
    return True


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create a login user for the employee records API")
    parser.add_argument("--email", default=os.environ.get("ADMIN_EMAIL", ""), help="Login email")
    parser.add_argument("--password", default=os.environ.get("ADMIN_PASSWORD", ""), help="Plain-text password")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose (DEBUG) logging")
    return parser.parse_args(argv)


async def create_user(args: argparse.Namespace) -> int:
    settings = Settings()
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")

    if not args.email or not args.password:
        logger.error("Both --email and --password (or ADMIN_EMAIL / ADMIN_PASSWORD) are required")
        return 2
    if not settings.COSMOS_DB_ENDPOINT or not settings.COSMOS_DB_KEY:
        logger.error("COSMOS_DB_ENDPOINT and COSMOS_DB_KEY must be set")
        return 2

    logger.info("Connecting to Cosmos DB...")
    cosmos_client = CosmosClient(settings.COSMOS_DB_ENDPOINT, settings.COSMOS_DB_KEY)
    try:
        db = cosmos_client.get_database_client(settings.COSMOS_DB_DATABASE)
        container = db.get_container_client(settings.COSMOS_DB_USERS_CONTAINER)
        await insert_user(container, args.email, args.password)
    except Exception:
        logger.exception("Error adding user")
        return 1
    finally:
        await cosmos_client.close()
    return 0


def main() -> None:
    args = parse_args()
    sys.exit(asyncio.run(create_user(args)))


if __name__ == "__main__":
    main()
