"""Logged-in client session passed explicitly to the pipeline."""

from __future__ import annotations

from pydantic import BaseModel


class Session(BaseModel):
    email: str
    base_url: str
