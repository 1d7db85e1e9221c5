"""Employee record models shared by the API layer and the client pipeline."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Designation(str, Enum):
    HR = "HR"
    MANAGER = "Manager"
    SALES = "Sales"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class Course(str, Enum):
    MCA = "MCA"
    BCA = "BCA"
    BSC = "BSc"


def unique_courses(values: list[Course] | None) -> list[Course]:
    """Drop repeated labels while keeping first-seen order."""
    seen: list[Course] = []
    for value in values or []:
        if value not in seen:
            seen.append(value)
    return seen


class Employee(BaseModel):
    """Employee record as stored and as sent over the wire."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: str = Field(alias="_id")
    name: str | None = None
    email: str | None = None
    mobile_no: str | None = None
    designation: Designation | None = None
    gender: Gender | None = None
    course: list[Course] = []
    created_date: datetime | None = None
    image: str = ""

    @field_validator("course", mode="after")
    @classmethod
    def _dedupe_course(cls, value: list[Course]) -> list[Course]:
        return unique_courses(value)


class EmployeeFields(BaseModel):
    """Optional field slots carried by create and update request bodies.

    A slot left as ``None`` means "not supplied"; update merges only the
    supplied slots into the stored record.
    """

    model_config = ConfigDict(use_enum_values=True)

    name: str | None = None
    email: str | None = None
    mobile_no: str | None = None
    designation: Designation | None = None
    gender: Gender | None = None
    course: list[Course] | None = None
    created_date: datetime | None = None

    @field_validator("designation", "gender", "created_date", mode="before")
    @classmethod
    def _blank_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("course", mode="after")
    @classmethod
    def _dedupe_course(cls, value: list[Course] | None) -> list[Course] | None:
        if value is None:
            return None
        return unique_courses(value)

    def supplied(self) -> dict:
        return self.model_dump(mode="json", exclude_none=True)


class CourseRemovalRequest(BaseModel):
    courses: list[str] = []
