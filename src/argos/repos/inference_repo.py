from __future__ import annotations

from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Engine

from argos.models.domain import INFERENCE_COMPLETED, INFERENCE_RUNNING, InferenceRow

_COLUMNS = """
    id, machine_id, status, started_at, ended_at, species, batch_id, notes, operator_id,
    target_count, target_biomass_kg, end_reason, final_count, final_biomass_kg,
    created_at, updated_at
"""


def _to_row(r: Any) -> InferenceRow:
    return InferenceRow(**dict(r._mapping))


class InferenceRepo:
    """
    Repository for the `inferences` table.

    Responsibility:
    - insert new runs
    - complete a running run (single conditional UPDATE)
    - fetch / list / pick the latest run
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def insert(
        self,
        *,
        inference_id: str,
        machine_id: str,
        started_at: str,
        created_at: str,
        species: str | None = None,
        batch_id: str | None = None,
        notes: str | None = None,
        operator_id: str | None = None,
        target_count: int | None = None,
        target_biomass_kg: float | None = None,
    ) -> None:
        with self._engine.begin() as conn:
            conn.execute(
                text(
                    """
                    INSERT INTO inferences (
                      id, machine_id, status, started_at, species, batch_id, notes, operator_id,
                      target_count, target_biomass_kg, created_at, updated_at
                    )
                    VALUES (
                      :id, :machine_id, :status, :started_at, :species, :batch_id, :notes, :operator_id,
                      :target_count, :target_biomass_kg, :created_at, :created_at
                    )
                    """
                ),
                {
                    "id": inference_id,
                    "machine_id": machine_id,
                    "status": INFERENCE_RUNNING,
                    "started_at": started_at,
                    "species": species,
                    "batch_id": batch_id,
                    "notes": notes,
                    "operator_id": operator_id,
                    "target_count": target_count,
                    "target_biomass_kg": target_biomass_kg,
                    "created_at": created_at,
                },
            )

    def complete(
        self,
        inference_id: str,
        *,
        ended_at: str,
        updated_at: str,
        end_reason: str | None = None,
        final_count: int | None = None,
        final_biomass_kg: float | None = None,
    ) -> bool:
        """
        Flip running -> completed. Returns False when nothing matched, i.e. the
        run is missing or already completed; the caller tells those apart.
        """
        with self._engine.begin() as conn:
            result = conn.execute(
                text(
                    """
                    UPDATE inferences
                    SET status = :completed, ended_at = :ended_at, end_reason = :end_reason,
                        final_count = :final_count, final_biomass_kg = :final_biomass_kg,
                        updated_at = :updated_at
                    WHERE id = :id AND status = :running
                    """
                ),
                {
                    "id": inference_id,
                    "completed": INFERENCE_COMPLETED,
                    "running": INFERENCE_RUNNING,
                    "ended_at": ended_at,
                    "end_reason": end_reason,
                    "final_count": final_count,
                    "final_biomass_kg": final_biomass_kg,
                    "updated_at": updated_at,
                },
            )
        return result.rowcount == 1

    def get(self, inference_id: str) -> InferenceRow | None:
        with self._engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT {_COLUMNS} FROM inferences WHERE id = :id"),
                {"id": inference_id},
            ).fetchone()
        return _to_row(row) if row is not None else None

    def list_inferences(
        self,
        *,
        machine_id: str | None = None,
        status: str | None = None,
        limit: int | None = None,
    ) -> list[InferenceRow]:
        where: list[str] = []
        params: dict[str, Any] = {}
        if machine_id:
            where.append("machine_id = :machine_id")
            params["machine_id"] = machine_id
        if status:
            where.append("status = :status")
            params["status"] = status

        sql = f"SELECT {_COLUMNS} FROM inferences"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY started_at DESC, created_at DESC, id DESC"
        if limit:
            sql += " LIMIT :limit"
            params["limit"] = int(limit)

        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), params).fetchall()
        return [_to_row(r) for r in rows]

    def latest(self, *, machine_id: str | None = None) -> InferenceRow | None:
        rows = self.list_inferences(machine_id=machine_id, limit=1)
        return rows[0] if rows else None
