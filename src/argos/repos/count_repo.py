from __future__ import annotations

from typing import Any

from sqlalchemy import text
from sqlalchemy.engine import Engine

from argos.models.domain import INFERENCE_RUNNING, CountRow

_COLUMNS = """
    id, inference_id, machine_id, counted_at, fish_count, biomass_kg,
    avg_weight_g, confidence, frame_count, notes, created_at
"""


def _to_row(r: Any) -> CountRow:
    return CountRow(**dict(r._mapping))


class CountRepo:
    """
    Repository for the `counts` table.

    Counts are append-only: there is no update or delete here. Rows vanish
    only through the ON DELETE CASCADE of their parent inference.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def insert_if_running(
        self,
        *,
        count_id: str,
        inference_id: str,
        machine_id: str,
        counted_at: str,
        fish_count: int,
        biomass_kg: float,
        created_at: str,
        avg_weight_g: float | None = None,
        confidence: float | None = None,
        frame_count: int | None = None,
        notes: str | None = None,
    ) -> bool:
        """
        Insert a count only while its parent inference is running.

        Parent check and insert are one statement, so a concurrent `end`
        cannot slip in between them. Returns False when nothing was inserted.
        """
        with self._engine.begin() as conn:
            result = conn.execute(
                text(
                    """
                    INSERT INTO counts (
                      id, inference_id, machine_id, counted_at, fish_count, biomass_kg,
                      avg_weight_g, confidence, frame_count, notes, created_at
                    )
                    SELECT
                      :id, :inference_id, :machine_id, :counted_at, :fish_count, :biomass_kg,
                      :avg_weight_g, :confidence, :frame_count, :notes, :created_at
                    WHERE EXISTS (
                      SELECT 1 FROM inferences WHERE id = :inference_id AND status = :running
                    )
                    """
                ),
                {
                    "id": count_id,
                    "inference_id": inference_id,
                    "machine_id": machine_id,
                    "counted_at": counted_at,
                    "fish_count": int(fish_count),
                    "biomass_kg": float(biomass_kg),
                    "avg_weight_g": avg_weight_g,
                    "confidence": confidence,
                    "frame_count": frame_count,
                    "notes": notes,
                    "created_at": created_at,
                    "running": INFERENCE_RUNNING,
                },
            )
        return result.rowcount == 1

    def get(self, count_id: str) -> CountRow | None:
        with self._engine.connect() as conn:
            row = conn.execute(
                text(f"SELECT {_COLUMNS} FROM counts WHERE id = :id"),
                {"id": count_id},
            ).fetchone()
        return _to_row(row) if row is not None else None

    def list_counts(
        self,
        *,
        inference_id: str | None = None,
        machine_id: str | None = None,
        counted_from: str | None = None,
        counted_to: str | None = None,
        limit: int | None = None,
    ) -> list[CountRow]:
        """Newest `counted_at` first. The time range is inclusive on both ends."""
        where: list[str] = []
        params: dict[str, Any] = {}
        if inference_id:
            where.append("inference_id = :inference_id")
            params["inference_id"] = inference_id
        if machine_id:
            where.append("machine_id = :machine_id")
            params["machine_id"] = machine_id
        if counted_from:
            where.append("counted_at >= :counted_from")
            params["counted_from"] = counted_from
        if counted_to:
            where.append("counted_at <= :counted_to")
            params["counted_to"] = counted_to

        sql = f"SELECT {_COLUMNS} FROM counts"
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += " ORDER BY counted_at DESC, created_at DESC, id DESC"
        if limit:
            sql += " LIMIT :limit"
            params["limit"] = int(limit)

        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), params).fetchall()
        return [_to_row(r) for r in rows]

    def list_for_inference(self, inference_id: str) -> list[CountRow]:
        """All counts of one inference in chronological order."""
        with self._engine.connect() as conn:
            rows = conn.execute(
                text(
                    f"""
                    SELECT {_COLUMNS}
                    FROM counts
                    WHERE inference_id = :inference_id
                    ORDER BY counted_at ASC, created_at ASC, id ASC
                    """
                ),
                {"inference_id": inference_id},
            ).fetchall()
        return [_to_row(r) for r in rows]

    def count_by_inference(self, inference_id: str) -> int:
        with self._engine.connect() as conn:
            return int(
                conn.execute(
                    text("SELECT COUNT(*) FROM counts WHERE inference_id = :inference_id"),
                    {"inference_id": inference_id},
                ).scalar_one()
            )
