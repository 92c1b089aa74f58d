"""Data Record Pager: creation and forward-only cursor pagination.

The cursor is the last id seen; the next page is `id > cursor`, ascending.
Exactly `page_size` rows are fetched (no lookahead row), so "has more" is
guessed from a full page. When the total is an exact multiple of the page
size the last full page still carries a next_cursor and the page after it
is empty.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable
from urllib.parse import urlencode

from sqlalchemy.engine import Engine

from argos.models.domain import DataRecordRow
from argos.repos.common import utcnow_iso
from argos.repos.data_record_repo import DATA_RECORD_FIELDS, DataRecordRepo
from argos.services.errors import storage_boundary
from argos.services.sanitize import sanitize

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class DataRecordPage:
    data: list[dict[str, Any]]
    page_size: int
    next_cursor: int | None


def resolve_page_size(page_size: int | None) -> int:
    if not page_size or page_size < 1:
        return DEFAULT_PAGE_SIZE
    return min(int(page_size), MAX_PAGE_SIZE)


def resolve_fields(raw: str | None) -> tuple[str, ...]:
    """
    Parse a comma separated projection.

    Unknown names are dropped, duplicates collapse, `id` is always present.
    Nothing valid left -> the full default projection.
    """
    if not raw:
        return DATA_RECORD_FIELDS
    picked: list[str] = []
    for part in raw.split(","):
        name = part.strip()
        if name in DATA_RECORD_FIELDS and name not in picked:
            picked.append(name)
    if not picked:
        return DATA_RECORD_FIELDS
    if "id" not in picked:
        picked.insert(0, "id")
    return tuple(picked)


def build_links(path: str, query: Iterable[tuple[str, str]], next_cursor: int | None) -> dict[str, str | None]:
    """Self link from the current query; next link with `cursor` swapped in."""
    items = list(query)
    self_qs = urlencode(items)
    links: dict[str, str | None] = {
        "self": f"{path}?{self_qs}" if self_qs else path,
        "next": None,
    }
    if next_cursor is not None:
        next_items = [(k, v) for k, v in items if k != "cursor"]
        next_items.append(("cursor", str(next_cursor)))
        links["next"] = f"{path}?{urlencode(next_items)}"
    return links


class DataRecordPager:
    def __init__(self, engine: Engine) -> None:
        self._records = DataRecordRepo(engine)

    def create(self, *, value: str, date: str, status: str | None = None) -> DataRecordRow:
        with storage_boundary("data_record.create"):
            row = self._records.insert(
                value=sanitize(value),
                date=date,
                status=status,
                created_at=utcnow_iso(),
            )
        logger.info("data record created", extra={"record_id": row.id})
        return row

    def list_page(
        self,
        *,
        page_size: int | None = None,
        cursor: int | None = None,
        fields: str | None = None,
    ) -> DataRecordPage:
        size = resolve_page_size(page_size)
        projection = resolve_fields(fields)
        with storage_boundary("data_record.list"):
            rows = self._records.list_page(after_id=cursor, limit=size, fields=projection)
        next_cursor = int(rows[-1]["id"]) if len(rows) == size else None
        return DataRecordPage(data=rows, page_size=size, next_cursor=next_cursor)
