"""Editable copy of an employee record while the create/edit form is open."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from employee_records.client.api_client import FileAttachment
from employee_records.models.employee import Course, Employee, EmployeeFields

SCALAR_FIELDS: tuple[str, ...] = ("name", "email", "mobile_no", "designation", "gender", "created_date")


class EmployeeDraft(BaseModel):
    name: str = ""
    email: str = ""
    mobile_no: str = ""
    designation: str = ""
    gender: str = ""
    created_date: str = ""
    course: set[str] = set()
    image: FileAttachment | None = None

    @classmethod
    def for_create(cls) -> EmployeeDraft:
        return cls()

    @classmethod
    def from_record(cls, record: Employee) -> EmployeeDraft:
        return cls(
            name=record.name or "",
            email=record.email or "",
            mobile_no=record.mobile_no or "",
            designation=record.designation or "",
            gender=record.gender or "",
            created_date=record.created_date.date().isoformat() if record.created_date else "",
            course=set(record.course),
        )

    def set_field(self, name: str, value: Any) -> None:
        if name not in SCALAR_FIELDS:
            raise ValueError(f"Not an editable scalar field: {name}")
        setattr(self, name, "" if value is None else str(value))

    def toggle_course(self, label: str, selected: bool) -> None:
        value = Course(label).value
        if selected:
            self.course.add(value)
        else:
            self.course.discard(value)

    def attach(self, attachment: FileAttachment) -> None:
        self.image = attachment

    def detach(self) -> None:
        self.image = None

    def to_fields(self) -> EmployeeFields:
        payload: dict[str, Any] = {name: getattr(self, name) for name in SCALAR_FIELDS}
        payload["course"] = sorted(self.course)
        return EmployeeFields.model_validate(payload)
