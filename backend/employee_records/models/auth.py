"""Login request/response models."""

from __future__ import annotations

from pydantic import BaseModel


class LoginRequest(BaseModel):
    email: str
    password: str


class UserInfo(BaseModel):
    email: str


class LoginResponse(BaseModel):
    message: str = "Login successful"
    user: UserInfo
