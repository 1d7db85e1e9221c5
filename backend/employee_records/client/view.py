"""Filter, sort and paginate the in-memory employee list for display.

Every function here is pure: the displayed view is recomputed from scratch
whenever the record list, the search term or the sort key changes.
Comparisons use each field's JSON text, so ``created_date`` sorts as ISO
text rather than as a calendar value.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Any, Sequence

from pydantic import BaseModel

from employee_records.models.employee import Employee

PAGE_SIZE = 10

SEARCH_FIELDS: tuple[str, ...] = ("name", "email", "created_date")


class SortKey(str, Enum):
    NAME = "name"
    EMAIL = "email"
    CREATED_DATE = "created_date"
    ID = "_id"


class ViewPage(BaseModel):
    items: list[Employee]
    page: int
    page_count: int
    total: int
    has_previous: bool
    has_next: bool


def _wire(record: Employee) -> dict[str, Any]:
    return record.model_dump(mode="json", by_alias=True)


def wire_text(record: Employee, key: str) -> str:
    value = _wire(record).get(key)
    return "" if value is None else str(value)


def filter_records(records: Sequence[Employee], term: str) -> list[Employee]:
    if not term:
        return list(records)

    needle = term.lower()
    matched: list[Employee] = []
    for record in records:
        wire = _wire(record)
        if any(needle in str(wire.get(field) or "").lower() for field in SEARCH_FIELDS):
            matched.append(record)
    return matched


def sort_records(records: Sequence[Employee], key: SortKey | str) -> list[Employee]:
    field = SortKey(key).value
    return sorted(records, key=lambda record: wire_text(record, field))


def page_count(total: int, page_size: int = PAGE_SIZE) -> int:
    return math.ceil(total / page_size) if total > 0 else 0


def paginate(records: Sequence[Employee], page: int, page_size: int = PAGE_SIZE) -> list[Employee]:
    if page < 1:
        return []
    start = (page - 1) * page_size
    return list(records[start : start + page_size])


def build_view(
    records: Sequence[Employee],
    term: str = "",
    key: SortKey | str = SortKey.NAME,
    page: int = 1,
    page_size: int = PAGE_SIZE,
) -> ViewPage:
    ordered = sort_records(filter_records(records, term), key)
    pages = page_count(len(ordered), page_size)
    return ViewPage(
        items=paginate(ordered, page, page_size),
        page=page,
        page_count=pages,
        total=len(ordered),
        has_previous=page > 1,
        has_next=page < pages,
    )
