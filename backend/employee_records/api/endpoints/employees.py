from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, HTTPException, Request, status
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError
from starlette.datastructures import UploadFile

from employee_records.models.employee import CourseRemovalRequest, Employee, EmployeeFields
from employee_records.services.employee_service import EmployeeNotFoundError, employee_service
from employee_records.services.upload_storage import upload_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employees", tags=["employees"])

_SCALAR_FIELDS = ("name", "email", "mobile_no", "designation", "gender", "created_date")
_REQUIRED_ON_CREATE = ("name", "email")


async def _read_body(request: Request) -> tuple[EmployeeFields, UploadFile | None]:
    """Parse a JSON or multipart body into field slots plus an optional image."""
    content_type = request.headers.get("content-type", "")
    image: UploadFile | None = None

    if content_type.startswith("application/json"):
        try:
            payload: Any = await request.json()
        except ValueError as err:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Request body must be a JSON object",
            ) from err
        if not isinstance(payload, dict):
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="Request body must be a JSON object",
            )
    else:
        form = await request.form()
        payload = {key: form.get(key) for key in _SCALAR_FIELDS if key in form}
        if "course" in form:
            payload["course"] = [value for value in form.getlist("course") if isinstance(value, str) and value]
        upload = form.get("image")
        if isinstance(upload, UploadFile) and upload.filename:
            image = upload

    try:
        fields = EmployeeFields.model_validate(payload)
    except ValidationError as err:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Invalid employee data: {err.error_count()} error(s)",
        ) from err
    return fields, image


@router.post("", response_model=Employee, status_code=status.HTTP_201_CREATED)
async def create_employee(request: Request):
    fields, image = await _read_body(request)

    missing = [name for name in _REQUIRED_ON_CREATE if not getattr(fields, name)]
    if missing:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Missing required field(s): {', '.join(missing)}",
        )

    reference = ""
    try:
        if image is not None:
            reference = await upload_storage.save(image)
        return await employee_service.create_employee(fields, image=reference)
    except Exception as err:
        logger.exception("Failed to create employee")
        if reference:
            upload_storage.release(reference)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Server error", "error": str(err)},
        ) from err


@router.get("", response_model=list[Employee])
async def list_employees():
    try:
        return await employee_service.list_employees()
    except Exception as err:
        logger.exception("Failed to list employees")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Server error", "error": str(err)},
        ) from err


@router.put("/{employee_id}", response_model=Employee)
async def update_employee(employee_id: str, request: Request):
    fields, image = await _read_body(request)

    reference: str | None = None
    try:
        previous = await employee_service.get_employee(employee_id)
        if previous is None:
            raise EmployeeNotFoundError(employee_id)
        if image is not None:
            reference = await upload_storage.save(image)
        updated = await employee_service.update_employee(employee_id, fields, image=reference)
    except EmployeeNotFoundError as err:
        if reference:
            upload_storage.release(reference)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Employee not found",
        ) from err
    except Exception as err:
        logger.exception("Failed to update employee %s", employee_id)
        if reference:
            upload_storage.release(reference)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Server error", "error": str(err)},
        ) from err

    if reference and previous.image and previous.image != reference:
        upload_storage.release(previous.image)
    return updated


@router.post("/{employee_id}/delete-courses", response_class=PlainTextResponse)
async def delete_courses(employee_id: str, body: CourseRemovalRequest):
    try:
        await employee_service.remove_courses(employee_id, body.courses)
    except Exception as err:
        logger.exception("Failed to delete courses for employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Error deleting courses",
        ) from err
    return "Courses deleted successfully"


@router.delete("/{employee_id}")
async def delete_employee(employee_id: str):
    try:
        deleted = await employee_service.delete_employee(employee_id)
    except EmployeeNotFoundError as err:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Employee not found",
        ) from err
    except Exception as err:
        logger.exception("Failed to delete employee %s", employee_id)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={"message": "Server error", "error": str(err)},
        ) from err

    if deleted.image:
        upload_storage.release(deleted.image)
    return {"message": "Employee deleted"}
