"""API schemas."""

from __future__ import annotations

import re
from datetime import datetime
from typing import Annotated, Any, Literal, Optional
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

_ISO_DATETIME_RE = re.compile(
    r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}(:\d{2}(\.\d+)?)?(Z|[+-]\d{2}:?\d{2})?$"
)


def _check_iso_datetime(value: str) -> str:
    # Validated but stored verbatim: range filters compare the raw strings.
    if not _ISO_DATETIME_RE.match(value):
        raise ValueError("must be an ISO-8601 datetime")
    try:
        datetime.fromisoformat(value)
    except ValueError as e:
        raise ValueError("must be an ISO-8601 datetime") from e
    return value


def _check_uuid(value: str) -> str:
    try:
        UUID(value)
    except ValueError as e:
        raise ValueError("must be a UUID") from e
    return value


IsoDateTime = Annotated[str, AfterValidator(_check_iso_datetime)]
UuidStr = Annotated[str, AfterValidator(_check_uuid)]
InferenceStatus = Literal["running", "completed"]
DataRecordStatus = Literal["PENDING", "COMPLETED", "FAILED"]


class _Request(BaseModel):
    # Unknown keys (machine_id included) are dropped, never trusted.
    # Infinity and NaN literals are rejected for every float field.
    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)


class StartInferenceRequest(_Request):
    started_at: IsoDateTime
    species: Optional[str] = Field(None, min_length=1)
    batch_id: Optional[str] = Field(None, min_length=1)
    notes: Optional[str] = Field(None, max_length=2000)
    operator_id: Optional[str] = Field(None, min_length=1)
    target_count: Optional[int] = Field(None, ge=0)
    target_biomass_kg: Optional[float] = Field(None, ge=0)


class EndInferenceRequest(_Request):
    inference_id: UuidStr
    ended_at: IsoDateTime
    reason: Optional[str] = Field(None, max_length=500)
    final_count: Optional[int] = Field(None, ge=0)
    final_biomass_kg: Optional[float] = Field(None, ge=0)


class CreateCountRequest(_Request):
    inference_id: UuidStr
    counted_at: IsoDateTime
    fish_count: int = Field(..., ge=0)
    biomass_kg: float = Field(..., ge=0)
    avg_weight_g: Optional[float] = Field(None, ge=0)
    confidence: Optional[float] = Field(None, ge=0, le=1)
    frame_count: Optional[int] = Field(None, gt=0)
    notes: Optional[str] = Field(None, max_length=1000)


class CreateDataRecordRequest(_Request):
    value: str = Field(..., min_length=1)
    date: str = Field(..., pattern=r"^\d{4}-\d{2}-\d{2}$")
    status: Optional[DataRecordStatus] = None


class InferenceOut(BaseModel):
    id: str
    machine_id: str
    status: InferenceStatus
    started_at: str
    ended_at: Optional[str]
    species: Optional[str]
    batch_id: Optional[str]
    notes: Optional[str]
    operator_id: Optional[str]
    target_count: Optional[int]
    target_biomass_kg: Optional[float]
    end_reason: Optional[str]
    final_count: Optional[int]
    final_biomass_kg: Optional[float]
    created_at: str
    updated_at: str


class InferenceListOut(BaseModel):
    data: list[InferenceOut]


class CountOut(BaseModel):
    id: str
    inference_id: str
    machine_id: str
    counted_at: str
    fish_count: int
    biomass_kg: float
    avg_weight_g: Optional[float]
    confidence: Optional[float]
    frame_count: Optional[int]
    notes: Optional[str]
    created_at: str


class CountListOut(BaseModel):
    data: list[CountOut]


class CountSummaryOut(BaseModel):
    total_count: int
    total_biomass_kg: float
    last_counted_at: Optional[str]
    last_fish_count: Optional[int]
    last_biomass_kg: Optional[float]


class InferenceResultsOut(BaseModel):
    inference: InferenceOut
    summary: CountSummaryOut
    data: list[CountOut]


class LatestSummaryOut(BaseModel):
    inference_id: str
    machine_id: str
    status: InferenceStatus
    started_at: str
    ended_at: Optional[str]
    total_fish_count: int
    total_biomass_kg: float
    avg_weight_g: Optional[float]


class DataRecordOut(BaseModel):
    id: int
    value: str
    date: str
    status: Optional[DataRecordStatus]
    created_at: str


class PageMeta(BaseModel):
    page_size: int
    next_cursor: Optional[int]


class DataRecordPageOut(BaseModel):
    # Rows carry only the requested projection, so they stay plain dicts.
    data: list[dict[str, Any]]
    meta: PageMeta
    links: dict[str, Optional[str]]
