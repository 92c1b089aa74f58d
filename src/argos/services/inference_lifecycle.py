"""Inference Lifecycle Manager.

State machine: running --(end)--> completed. `completed` is terminal and
nothing ever deletes an inference from here.
"""

from __future__ import annotations

import logging

from sqlalchemy.engine import Engine

from argos.models.domain import InferenceRow, LatestSummary
from argos.repos.common import new_id, utcnow_iso
from argos.repos.count_repo import CountRepo
from argos.repos.inference_repo import InferenceRepo
from argos.services.count_aggregator import average_weight_g, total_biomass
from argos.services.errors import ConflictError, InternalError, NotFoundError, storage_boundary

logger = logging.getLogger(__name__)


class InferenceLifecycle:
    def __init__(self, engine: Engine) -> None:
        self._inferences = InferenceRepo(engine)
        self._counts = CountRepo(engine)

    def start(
        self,
        machine_id: str,
        *,
        started_at: str,
        species: str | None = None,
        batch_id: str | None = None,
        notes: str | None = None,
        operator_id: str | None = None,
        target_count: int | None = None,
        target_biomass_kg: float | None = None,
    ) -> InferenceRow:
        inference_id = new_id()
        with storage_boundary("inference.start"):
            self._inferences.insert(
                inference_id=inference_id,
                machine_id=machine_id,
                started_at=started_at,
                created_at=utcnow_iso(),
                species=species,
                batch_id=batch_id,
                notes=notes,
                operator_id=operator_id,
                target_count=target_count,
                target_biomass_kg=target_biomass_kg,
            )
            row = self._inferences.get(inference_id)
        if row is None:
            raise InternalError()
        logger.info("inference started", extra={"inference_id": inference_id, "machine_id": machine_id})
        return row

    def end(
        self,
        inference_id: str,
        *,
        ended_at: str,
        reason: str | None = None,
        final_count: int | None = None,
        final_biomass_kg: float | None = None,
    ) -> InferenceRow:
        with storage_boundary("inference.end"):
            completed = self._inferences.complete(
                inference_id,
                ended_at=ended_at,
                updated_at=utcnow_iso(),
                end_reason=reason,
                final_count=final_count,
                final_biomass_kg=final_biomass_kg,
            )
            row = self._inferences.get(inference_id)

        if row is None:
            raise NotFoundError("Inference not found")
        if not completed:
            logger.warning("inference end rejected: already ended", extra={"inference_id": inference_id})
            raise ConflictError("Inference already ended")
        logger.info("inference completed", extra={"inference_id": inference_id})
        return row

    def get(self, inference_id: str) -> InferenceRow:
        with storage_boundary("inference.get"):
            row = self._inferences.get(inference_id)
        if row is None:
            raise NotFoundError("Inference not found")
        return row

    def list_inferences(
        self,
        *,
        machine_id: str | None = None,
        status: str | None = None,
        limit: int | None = None,
    ) -> list[InferenceRow]:
        with storage_boundary("inference.list"):
            return self._inferences.list_inferences(machine_id=machine_id, status=status, limit=limit)

    def latest_summary(self, machine_id: str | None = None) -> LatestSummary:
        """Totals of the most recently started inference, optionally per machine."""
        with storage_boundary("inference.latest"):
            latest = self._inferences.latest(machine_id=machine_id)
            counts = self._counts.list_for_inference(latest.id) if latest is not None else []
        if latest is None:
            raise NotFoundError("No inference found")

        total_count = sum(int(c.fish_count) for c in counts)
        total_kg = total_biomass(counts)
        return LatestSummary(
            inference_id=latest.id,
            machine_id=latest.machine_id,
            status=latest.status,
            started_at=latest.started_at,
            ended_at=latest.ended_at,
            total_fish_count=total_count,
            total_biomass_kg=float(total_kg),
            avg_weight_g=average_weight_g(total_kg, total_count),
        )
