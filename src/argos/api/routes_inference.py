"""Inference lifecycle API routes."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query

from argos.api.auth import require_api_key
from argos.api.deps import (
    RequestContext,
    get_count_aggregator,
    get_inference_lifecycle,
    get_request_context,
)
from argos.api.schemas import (
    EndInferenceRequest,
    InferenceListOut,
    InferenceOut,
    InferenceResultsOut,
    InferenceStatus,
    LatestSummaryOut,
    StartInferenceRequest,
)
from argos.services.count_aggregator import CountAggregator
from argos.services.inference_lifecycle import InferenceLifecycle

router = APIRouter(prefix="/inference", tags=["inference"], dependencies=[Depends(require_api_key)])


@router.post("/start", response_model=InferenceOut, status_code=201)
def start_inference(
    payload: StartInferenceRequest,
    ctx: RequestContext = Depends(get_request_context),
    lifecycle: InferenceLifecycle = Depends(get_inference_lifecycle),
):
    row = lifecycle.start(ctx.machine_id, **payload.model_dump())
    return row.to_dict()


@router.post("/end", response_model=InferenceOut)
def end_inference(
    payload: EndInferenceRequest,
    lifecycle: InferenceLifecycle = Depends(get_inference_lifecycle),
):
    fields = payload.model_dump()
    inference_id = fields.pop("inference_id")
    return lifecycle.end(inference_id, **fields).to_dict()


@router.get("", response_model=InferenceListOut)
def list_inferences(
    machine_id: Optional[str] = Query(None, min_length=1),
    status: Optional[InferenceStatus] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=500),
    lifecycle: InferenceLifecycle = Depends(get_inference_lifecycle),
):
    rows = lifecycle.list_inferences(machine_id=machine_id, status=status, limit=limit)
    return {"data": [r.to_dict() for r in rows]}


# Must stay above /{inference_id} or "latest" would be taken for an id.
@router.get("/latest", response_model=LatestSummaryOut)
def latest_inference_summary(
    machine_id: Optional[str] = Query(None, min_length=1),
    lifecycle: InferenceLifecycle = Depends(get_inference_lifecycle),
):
    return lifecycle.latest_summary(machine_id).to_dict()


@router.get("/{inference_id}", response_model=InferenceOut)
def get_inference(
    inference_id: str,
    lifecycle: InferenceLifecycle = Depends(get_inference_lifecycle),
):
    return lifecycle.get(inference_id).to_dict()


@router.get("/{inference_id}/results", response_model=InferenceResultsOut)
def get_inference_results(
    inference_id: str,
    aggregator: CountAggregator = Depends(get_count_aggregator),
):
    return aggregator.results_for_inference(inference_id).to_dict()
