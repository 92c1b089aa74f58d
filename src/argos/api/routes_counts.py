"""Count API routes."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from argos.api.auth import require_api_key
from argos.api.deps import RequestContext, get_count_aggregator, get_request_context
from argos.api.schemas import CountListOut, CountOut, CreateCountRequest, IsoDateTime, UuidStr
from argos.services.count_aggregator import CountAggregator

router = APIRouter(prefix="/counts", tags=["counts"], dependencies=[Depends(require_api_key)])


@router.post("", response_model=CountOut, status_code=201)
def create_count(
    payload: CreateCountRequest,
    ctx: RequestContext = Depends(get_request_context),
    aggregator: CountAggregator = Depends(get_count_aggregator),
):
    return aggregator.create(ctx.machine_id, **payload.model_dump()).to_dict()


@router.get("", response_model=CountListOut)
def list_counts(
    inference_id: Optional[UuidStr] = Query(None),
    machine_id: Optional[str] = Query(None, min_length=1),
    counted_from: Optional[IsoDateTime] = Query(None, alias="from"),
    counted_to: Optional[IsoDateTime] = Query(None, alias="to"),
    limit: Optional[int] = Query(None, ge=1, le=500),
    aggregator: CountAggregator = Depends(get_count_aggregator),
):
    rows = aggregator.list_counts(
        inference_id=inference_id,
        machine_id=machine_id,
        counted_from=counted_from,
        counted_to=counted_to,
        limit=limit,
    )
    return {"data": [r.to_dict() for r in rows]}
