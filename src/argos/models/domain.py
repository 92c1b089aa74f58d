from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

INFERENCE_RUNNING = "running"
INFERENCE_COMPLETED = "completed"
INFERENCE_STATUSES = (INFERENCE_RUNNING, INFERENCE_COMPLETED)

DATA_RECORD_STATUSES = ("PENDING", "COMPLETED", "FAILED")


@dataclass(frozen=True)
class InferenceRow:
    id: str
    machine_id: str
    status: str
    started_at: str
    ended_at: str | None
    species: str | None
    batch_id: str | None
    notes: str | None
    operator_id: str | None
    target_count: int | None
    target_biomass_kg: float | None
    end_reason: str | None
    final_count: int | None
    final_biomass_kg: float | None
    created_at: str
    updated_at: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CountRow:
    id: str
    inference_id: str
    machine_id: str
    counted_at: str
    fish_count: int
    biomass_kg: float
    avg_weight_g: float | None
    confidence: float | None
    frame_count: int | None
    notes: str | None
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CountSummary:
    total_count: int
    total_biomass_kg: float
    last_counted_at: str | None
    last_fish_count: int | None
    last_biomass_kg: float | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class InferenceResults:
    inference: InferenceRow
    summary: CountSummary
    counts: list[CountRow]

    def to_dict(self) -> dict[str, Any]:
        return {
            "inference": self.inference.to_dict(),
            "summary": self.summary.to_dict(),
            "data": [c.to_dict() for c in self.counts],
        }


@dataclass(frozen=True)
class LatestSummary:
    inference_id: str
    machine_id: str
    status: str
    started_at: str
    ended_at: str | None
    total_fish_count: int
    total_biomass_kg: float
    avg_weight_g: float | None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DataRecordRow:
    id: int
    value: str
    date: str
    status: str | None
    created_at: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
