"""Count Aggregator: count creation gate, listing and per-run summaries."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Sequence

from sqlalchemy.engine import Engine

from argos.models.domain import CountRow, CountSummary, InferenceResults
from argos.repos.common import new_id, utcnow_iso
from argos.repos.count_repo import CountRepo
from argos.repos.inference_repo import InferenceRepo
from argos.services.errors import ConflictError, InternalError, NotFoundError, storage_boundary

logger = logging.getLogger(__name__)


def _kg(value: float) -> Decimal:
    # str() gives the shortest repr, so 0.1 becomes Decimal("0.1") and not its binary expansion
    return Decimal(str(value))


def _chronological_key(c: CountRow) -> tuple[str, str, str]:
    return (c.counted_at, c.created_at, c.id)


def total_biomass(counts: Sequence[CountRow]) -> Decimal:
    return sum((_kg(c.biomass_kg) for c in counts), Decimal(0))


def summarize_counts(counts: Sequence[CountRow]) -> CountSummary:
    """
    Totals plus the chronologically last measurement.

    Order of `counts` does not matter. With no counts the totals are 0 and
    every last_* field is None.
    """
    total_count = sum(int(c.fish_count) for c in counts)
    total_kg = total_biomass(counts)
    last = max(counts, key=_chronological_key) if counts else None
    return CountSummary(
        total_count=total_count,
        total_biomass_kg=float(total_kg),
        last_counted_at=last.counted_at if last else None,
        last_fish_count=last.fish_count if last else None,
        last_biomass_kg=last.biomass_kg if last else None,
    )


def average_weight_g(total_kg: Decimal, total_count: int) -> float | None:
    """Mean fish weight in grams, or None when nothing was counted."""
    if total_count <= 0:
        return None
    return float(total_kg * 1000 / Decimal(total_count))


class CountAggregator:
    def __init__(self, engine: Engine) -> None:
        self._counts = CountRepo(engine)
        self._inferences = InferenceRepo(engine)

    def create(
        self,
        machine_id: str,
        *,
        inference_id: str,
        counted_at: str,
        fish_count: int,
        biomass_kg: float,
        avg_weight_g: float | None = None,
        confidence: float | None = None,
        frame_count: int | None = None,
        notes: str | None = None,
    ) -> CountRow:
        """
        Record one measurement against a running inference.

        The parent status is checked by the insert statement itself on every
        call; a completed or missing parent inserts nothing.
        """
        count_id = new_id()
        with storage_boundary("count.create"):
            inserted = self._counts.insert_if_running(
                count_id=count_id,
                inference_id=inference_id,
                machine_id=machine_id,
                counted_at=counted_at,
                fish_count=fish_count,
                biomass_kg=biomass_kg,
                created_at=utcnow_iso(),
                avg_weight_g=avg_weight_g,
                confidence=confidence,
                frame_count=frame_count,
                notes=notes,
            )
            if not inserted:
                parent = self._inferences.get(inference_id)
            else:
                row = self._counts.get(count_id)

        if not inserted:
            if parent is None:
                logger.warning("count rejected: inference missing", extra={"inference_id": inference_id})
                raise NotFoundError("Inference not found")
            logger.warning("count rejected: inference already ended", extra={"inference_id": inference_id})
            raise ConflictError("Inference already ended")

        if row is None:
            raise InternalError()
        logger.info(
            "count recorded",
            extra={"count_id": count_id, "inference_id": inference_id, "machine_id": machine_id},
        )
        return row

    def list_counts(
        self,
        *,
        inference_id: str | None = None,
        machine_id: str | None = None,
        counted_from: str | None = None,
        counted_to: str | None = None,
        limit: int | None = None,
    ) -> list[CountRow]:
        with storage_boundary("count.list"):
            return self._counts.list_counts(
                inference_id=inference_id,
                machine_id=machine_id,
                counted_from=counted_from,
                counted_to=counted_to,
                limit=limit,
            )

    def results_for_inference(self, inference_id: str) -> InferenceResults:
        with storage_boundary("count.results"):
            inference = self._inferences.get(inference_id)
            counts = self._counts.list_for_inference(inference_id) if inference is not None else []
        if inference is None:
            raise NotFoundError("Inference not found")
        return InferenceResults(inference=inference, summary=summarize_counts(counts), counts=counts)
