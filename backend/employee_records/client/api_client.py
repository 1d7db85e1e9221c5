"""aiohttp client for the employee records REST API."""

from __future__ import annotations

import logging
from typing import Any

import aiohttp
from pydantic import BaseModel

from employee_records.client.session import Session
from employee_records.models.employee import Employee, EmployeeFields

logger = logging.getLogger(__name__)


class FileAttachment(BaseModel):
    filename: str
    content: bytes
    content_type: str = "application/octet-stream"


class ApiError(Exception):
    def __init__(self, status: int, message: str) -> None:
        super().__init__(f"{status}: {message}")
        self.status = status
        self.message = message


class NotFoundError(ApiError):
    pass


class AuthenticationError(ApiError):
    pass


def build_form(fields: EmployeeFields, image: FileAttachment | None = None) -> aiohttp.FormData:
    """Encode field slots as multipart, one ``course`` entry per label."""
    form = aiohttp.FormData()
    supplied = fields.supplied()
    courses = supplied.pop("course", [])
    for key, value in supplied.items():
        form.add_field(key, str(value))
    for label in courses:
        form.add_field("course", label)
    if image is not None:
        form.add_field(
            "image",
            image.content,
            filename=image.filename,
            content_type=image.content_type,
        )
    return form


class EmployeeApiClient:
    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    @classmethod
    def for_session(cls, session: Session) -> EmployeeApiClient:
        return cls(session.base_url)

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        async with aiohttp.ClientSession() as session:
            async with session.request(method, url, **kwargs) as response:
                if response.status < 300:
                    if response.content_type == "application/json":
                        return await response.json()
                    return await response.text()

                message = await self._error_message(response)
                logger.debug("%s %s failed: %s %s", method, path, response.status, message)
                if response.status == 401:
                    raise AuthenticationError(response.status, message)
                if response.status == 404:
                    raise NotFoundError(response.status, message)
                raise ApiError(response.status, message)

    @staticmethod
    async def _error_message(response: Any) -> str:
        try:
            data = await response.json()
        except (aiohttp.ContentTypeError, ValueError):
            return await response.text()
        if isinstance(data, dict):
            return str(data.get("message") or data.get("error") or data)
        return str(data)

    async def login(self, email: str, password: str) -> Session:
        data = await self._request("POST", "/api/login", json={"email": email, "password": password})
        return Session(email=data["user"]["email"], base_url=self.base_url)

    async def list_employees(self) -> list[Employee]:
        data = await self._request("GET", "/api/employees")
        return [Employee.model_validate(item) for item in data]

    async def create_employee(self, fields: EmployeeFields, image: FileAttachment | None = None) -> Employee:
        data = await self._request("POST", "/api/employees", data=build_form(fields, image))
        return Employee.model_validate(data)

    async def update_employee(
        self,
        employee_id: str,
        fields: EmployeeFields,
        image: FileAttachment | None = None,
    ) -> Employee:
        data = await self._request("PUT", f"/api/employees/{employee_id}", data=build_form(fields, image))
        return Employee.model_validate(data)

    async def remove_courses(self, employee_id: str, courses: list[str]) -> None:
        await self._request("POST", f"/api/employees/{employee_id}/delete-courses", json={"courses": courses})

    async def delete_employee(self, employee_id: str) -> None:
        await self._request("DELETE", f"/api/employees/{employee_id}")
