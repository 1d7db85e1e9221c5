"""Cosmos DB employee record store."""

from __future__ import annotations

import logging
import uuid
from typing import Any

from azure.cosmos.aio import CosmosClient
from azure.cosmos.exceptions import CosmosResourceNotFoundError

from employee_records.core.config import Settings
from employee_records.models.employee import Employee, EmployeeFields, unique_courses

logger = logging.getLogger(__name__)

# Document keys written by this service; Cosmos system properties (_rid, _etag, ...) are dropped on read.
_RECORD_FIELDS: tuple[str, ...] = (
    "name",
    "email",
    "mobile_no",
    "designation",
    "gender",
    "course",
    "created_date",
    "image",
)


class EmployeeNotFoundError(Exception):
    def __init__(self, employee_id: str) -> None:
        super().__init__(f"Employee {employee_id} not found")
        self.employee_id = employee_id


class EmployeeService:
    def __init__(self) -> None:
        self.client: CosmosClient | None = None
        self.container: Any = None
        self.initialized: bool = False

    async def initialize(self, settings: Settings) -> None:
        if self.initialized:
            return

        endpoint = settings.COSMOS_DB_ENDPOINT
        key = settings.COSMOS_DB_KEY
        database_name = settings.COSMOS_DB_DATABASE
        container_name = settings.COSMOS_DB_EMPLOYEES_CONTAINER

        if not endpoint or not key:
            logger.warning("Cosmos DB credentials missing, EmployeeService not initialized")
            return

        self.client = CosmosClient(endpoint, key)
        db = self.client.get_database_client(database_name)
        self.container = db.get_container_client(container_name)
        self.initialized = True
        logger.info("EmployeeService initialized (container=%s)", container_name)

    async def close(self) -> None:
        if self.client:
            await self.client.close()
            self.client = None
            self.container = None
            self.initialized = False

    def _require_container(self) -> Any:
        if not self.container:
            raise RuntimeError("EmployeeService not initialized")
        return self.container

    async def _read_document(self, employee_id: str) -> dict[str, Any] | None:
        container = self._require_container()
        try:
            return await container.read_item(item=employee_id, partition_key=employee_id)
        except CosmosResourceNotFoundError:
            return None

    async def create_employee(self, fields: EmployeeFields, image: str = "") -> Employee:
        container = self._require_container()

        document: dict[str, Any] = {field: None for field in _RECORD_FIELDS}
        document.update(fields.supplied())
        document["id"] = uuid.uuid4().hex
        document["course"] = document.get("course") or []
        document["image"] = image

        created = await container.create_item(body=document)
        logger.info("Created employee %s", document["id"])
        return self._transform_employee(created)

    async def list_employees(self) -> list[Employee]:
        if not self.container:
            return []

        results: list[Employee] = []
        async for item in self.container.read_all_items():
            results.append(self._transform_employee(item))
        return results

    async def get_employee(self, employee_id: str) -> Employee | None:
        document = await self._read_document(employee_id)
        if document is None:
            return None
        return self._transform_employee(document)

    async def update_employee(
        self,
        employee_id: str,
        fields: EmployeeFields,
        image: str | None = None,
    ) -> Employee:
        """Merge the supplied fields into a stored record.

        Scalar fields overwrite, ``course`` labels are added to the stored
        set. Labels can only be taken away through :meth:`remove_courses`.
        """
        container = self._require_container()
        document = await self._read_document(employee_id)
        if document is None:
            raise EmployeeNotFoundError(employee_id)

        changes = fields.supplied()
        if "course" in changes:
            changes["course"] = unique_courses((document.get("course") or []) + changes["course"])
        if image:
            changes["image"] = image

        document.update(changes)
        replaced = await container.replace_item(item=employee_id, body=document)
        logger.info("Updated employee %s (fields=%s)", employee_id, sorted(changes))
        return self._transform_employee(replaced)

    async def remove_courses(self, employee_id: str, courses: list[str]) -> None:
        container = self._require_container()
        document = await self._read_document(employee_id)
        if document is None:
            logger.debug("Course removal for unknown employee %s ignored", employee_id)
            return

        to_remove = set(courses)
        remaining = [label for label in document.get("course") or [] if label not in to_remove]
        await container.patch_item(
            item=employee_id,
            partition_key=employee_id,
            patch_operations=[{"op": "set", "path": "/course", "value": remaining}],
        )
        logger.info("Removed courses %s from employee %s", courses, employee_id)

    async def delete_employee(self, employee_id: str) -> Employee:
        container = self._require_container()
        document = await self._read_document(employee_id)
        if document is None:
            raise EmployeeNotFoundError(employee_id)

        try:
            await container.delete_item(item=employee_id, partition_key=employee_id)
        except CosmosResourceNotFoundError as err:
            raise EmployeeNotFoundError(employee_id) from err

        logger.info("Deleted employee %s", employee_id)
        return self._transform_employee(document)

    async def check_connection(self) -> bool:
        if not self.container:
            return False
        try:
            query = "SELECT VALUE COUNT(1) FROM c"
            async for _ in self.container.query_items(query=query):
                return True
            return True
        except Exception:
            logger.exception("Cosmos DB connection check failed")
            return False

    def _transform_employee(self, raw: dict[str, Any]) -> Employee:
        data: dict[str, Any] = {"_id": raw.get("id") or "unknown"}
        for field in _RECORD_FIELDS:
            value = raw.get(field)
            if value is not None:
                data[field] = value
        return Employee(**data)


employee_service = EmployeeService()
