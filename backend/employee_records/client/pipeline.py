"""Client-side state for the employee list and the create/edit form.

The pipeline owns the authoritative in-memory record list, derives the
displayed page from it, and drives the form draft through submit. Network
failures are logged and kept in :attr:`EmployeePipeline.error`; the
previously displayed state is left as it was and nothing is retried.
"""

from __future__ import annotations

import logging
from enum import Enum

import aiohttp
from pydantic import ValidationError

from employee_records.client.api_client import ApiError, EmployeeApiClient, FileAttachment
from employee_records.client.draft import EmployeeDraft
from employee_records.client.session import Session
from employee_records.client.view import PAGE_SIZE, SortKey, ViewPage, build_view
from employee_records.models.employee import Employee, EmployeeFields

logger = logging.getLogger(__name__)

_TRANSPORT_ERRORS = (ApiError, aiohttp.ClientError)


class FormMode(str, Enum):
    CREATE = "create"
    EDIT = "edit"


class PartialUpdateError(Exception):
    """Course removal went through but the follow-up update did not.

    The stored record is left without the removed labels; the caller has to
    resubmit to restore them.
    """

    def __init__(self, employee_id: str, removed: list[str], cause: Exception) -> None:
        super().__init__(f"Employee {employee_id}: removed courses {removed} but update failed: {cause}")
        self.employee_id = employee_id
        self.removed = removed
        self.cause = cause


class EmployeePipeline:
    def __init__(
        self,
        session: Session,
        api: EmployeeApiClient | None = None,
        page_size: int = PAGE_SIZE,
    ) -> None:
        self.session = session
        self.api = api or EmployeeApiClient.for_session(session)
        self.page_size = page_size

        self.records: list[Employee] = []
        self.search_term = ""
        self.sort_key = SortKey.NAME
        self.page = 1

        self.mode: FormMode | None = None
        self.draft: EmployeeDraft | None = None
        self.editing_id: str | None = None
        self.original_courses: frozenset[str] = frozenset()

        self.error: Exception | None = None

    @property
    def view(self) -> ViewPage:
        return build_view(self.records, self.search_term, self.sort_key, self.page, self.page_size)

    # -- list ---------------------------------------------------------------

    async def refresh(self) -> bool:
        try:
            records = await self.api.list_employees()
        except _TRANSPORT_ERRORS as err:
            logger.error("Error fetching employees for %s: %s", self.session.email, err)
            self.error = err
            return False

        self.records = records
        self.error = None
        return True

    def set_search_term(self, term: str) -> None:
        self.search_term = term
        self.page = 1

    def set_sort_key(self, key: SortKey | str) -> None:
        self.sort_key = SortKey(key)

    def set_page(self, page: int) -> None:
        self.page = page

    def next_page(self) -> None:
        if self.view.has_next:
            self.page += 1

    def previous_page(self) -> None:
        if self.view.has_previous:
            self.page -= 1

    async def delete(self, employee_id: str) -> bool:
        try:
            await self.api.delete_employee(employee_id)
        except _TRANSPORT_ERRORS as err:
            logger.error("Error deleting employee %s: %s", employee_id, err)
            self.error = err
            return False

        self.records = [record for record in self.records if record.id != employee_id]
        self.error = None
        return True

    # -- form ---------------------------------------------------------------

    def begin_create(self) -> EmployeeDraft:
        self.mode = FormMode.CREATE
        self.editing_id = None
        self.original_courses = frozenset()
        self.draft = EmployeeDraft.for_create()
        return self.draft

    def begin_edit(self, record: Employee) -> EmployeeDraft:
        self.mode = FormMode.EDIT
        self.editing_id = record.id
        self.original_courses = frozenset(record.course)
        self.draft = EmployeeDraft.from_record(record)
        return self.draft

    def _require_draft(self) -> EmployeeDraft:
        if self.draft is None:
            raise RuntimeError("No form is open")
        return self.draft

    def set_field(self, name: str, value: str) -> None:
        self._require_draft().set_field(name, value)

    def toggle_course(self, label: str, selected: bool) -> None:
        self._require_draft().toggle_course(label, selected)

    def attach_image(self, attachment: FileAttachment) -> None:
        self._require_draft().attach(attachment)

    def cancel(self) -> None:
        self._close_form()

    def _close_form(self) -> None:
        self.mode = None
        self.draft = None
        self.editing_id = None
        self.original_courses = frozenset()

    async def submit(self) -> bool:
        draft = self._require_draft()
        try:
            fields = draft.to_fields()
        except ValidationError as err:
            logger.error("Draft rejected before submit: %s", err)
            self.error = err
            return False

        if self.mode is FormMode.CREATE:
            try:
                await self.api.create_employee(fields, draft.image)
            except _TRANSPORT_ERRORS as err:
                logger.error("Error creating employee: %s", err)
                self.error = err
                return False
        else:
            if not await self._submit_edit(fields, draft.image):
                return False

        self._close_form()
        self.error = None
        await self.refresh()
        return True

    async def _submit_edit(self, fields: EmployeeFields, image: FileAttachment | None) -> bool:
        # The server merges course labels into the stored set, so the labels
        # the record had when editing started are removed first.
        employee_id = self.editing_id
        if employee_id is None:
            raise RuntimeError("No record is being edited")
        removed = sorted(self.original_courses)

        if removed:
            try:
                await self.api.remove_courses(employee_id, removed)
            except _TRANSPORT_ERRORS as err:
                logger.error("Error removing courses from employee %s: %s", employee_id, err)
                self.error = err
                return False

        try:
            await self.api.update_employee(employee_id, fields, image)
        except _TRANSPORT_ERRORS as err:
            if removed:
                self.error = PartialUpdateError(employee_id, removed, err)
                logger.error("%s", self.error)
            else:
                self.error = err
                logger.error("Error updating employee %s: %s", employee_id, err)
            return False
        return True
