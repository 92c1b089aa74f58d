"""Data record API routes."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from argos.api.auth import require_api_key
from argos.api.deps import get_data_record_pager
from argos.api.schemas import CreateDataRecordRequest, DataRecordOut, DataRecordPageOut
from argos.services.data_record_pager import MAX_PAGE_SIZE, DataRecordPager, build_links
from argos.services.errors import ValidationError

router = APIRouter(prefix="/data-records", tags=["data-records"], dependencies=[Depends(require_api_key)])


def require_json_content_type(request: Request) -> None:
    """Reject non-JSON bodies before schema validation sees them."""
    content_type = request.headers.get("content-type", "")
    media_type = content_type.split(";", 1)[0].strip().lower()
    if media_type != "application/json":
        raise ValidationError("Request body must be JSON (Content-Type: application/json)")


@router.post(
    "",
    response_model=DataRecordOut,
    status_code=201,
    dependencies=[Depends(require_json_content_type)],
)
def create_data_record(
    payload: CreateDataRecordRequest,
    pager: DataRecordPager = Depends(get_data_record_pager),
):
    return pager.create(value=payload.value, date=payload.date, status=payload.status).to_dict()


@router.get("", response_model=DataRecordPageOut)
def list_data_records(
    request: Request,
    page_size: Optional[int] = Query(None, ge=1, le=MAX_PAGE_SIZE),
    cursor: Optional[int] = Query(None, ge=0),
    fields: Optional[str] = Query(None),
    pager: DataRecordPager = Depends(get_data_record_pager),
):
    page = pager.list_page(page_size=page_size, cursor=cursor, fields=fields)
    return {
        "data": page.data,
        "meta": {"page_size": page.page_size, "next_cursor": page.next_cursor},
        "links": build_links(request.url.path, request.query_params.multi_items(), page.next_cursor),
    }
