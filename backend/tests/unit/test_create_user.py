"""Tests for the user seeding script."""

from __future__ import annotations

import pytest

from employee_records.core.security import verify_password
from scripts.create_user import build_user_document, insert_user, parse_args
from tests.conftest import FakeContainer


def test_build_user_document_hashes_password():
    doc = build_user_document("admin@gmail.com", "admin")

    assert doc["id"] == "admin@gmail.com"
    assert doc["email"] == "admin@gmail.com"
    assert doc["password"] != "admin"
    assert verify_password("admin", doc["password"]) is True


@pytest.mark.anyio
async def test_insert_user_creates_new_user():
    container = FakeContainer()

    assert await insert_user(container, "hr@example.com", "s3cret") is True
    assert "hr@example.com" in container.items


@pytest.mark.anyio
async def test_insert_user_leaves_existing_user_alone():
    container = FakeContainer([{"id": "hr@example.com", "email": "hr@example.com", "password": "old"}])

    assert await insert_user(container, "hr@example.com", "new") is False
    assert container.items["hr@example.com"]["password"] == "old"


def test_parse_args_defaults(monkeypatch):
    monkeypatch.delenv("ADMIN_EMAIL", raising=False)
    monkeypatch.delenv("ADMIN_PASSWORD", raising=False)

    args = parse_args([])

    assert args.email == ""
    assert args.password == ""
    assert args.verbose is False


def test_parse_args_explicit():
    args = parse_args(["--email", "a@b.c", "--password", "pw", "--verbose"])

    assert args.email == "a@b.c"
    assert args.password == "pw"
    assert args.verbose is True
