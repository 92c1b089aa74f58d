from __future__ import annotations

from typing import Any, Sequence

from sqlalchemy import text
from sqlalchemy.engine import Engine

from argos.models.domain import DataRecordRow

# Projection allowlist; column names are interpolated, so nothing else may pass.
DATA_RECORD_FIELDS = ("id", "value", "date", "status", "created_at")


class DataRecordRepo:
    """Repository for the `data_records` table (insert + forward-only paging)."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def insert(self, *, value: str, date: str, status: str | None, created_at: str) -> DataRecordRow:
        with self._engine.begin() as conn:
            new_id = conn.execute(
                text(
                    """
                    INSERT INTO data_records (value, date, status, created_at)
                    VALUES (:value, :date, :status, :created_at)
                    RETURNING id
                    """
                ),
                {"value": value, "date": date, "status": status, "created_at": created_at},
            ).scalar_one()
        return DataRecordRow(id=int(new_id), value=value, date=date, status=status, created_at=created_at)

    def list_page(
        self,
        *,
        after_id: int | None,
        limit: int,
        fields: Sequence[str] = DATA_RECORD_FIELDS,
    ) -> list[dict[str, Any]]:
        """
        Rows with id > after_id, ascending, at most `limit` of them.
        Only the requested columns are selected.
        """
        unknown = [f for f in fields if f not in DATA_RECORD_FIELDS]
        if unknown or not fields:
            raise ValueError(f"invalid projection: {list(fields)!r}")

        params: dict[str, Any] = {"limit": int(limit)}
        sql = f"SELECT {', '.join(fields)} FROM data_records"
        if after_id is not None:
            sql += " WHERE id > :after_id"
            params["after_id"] = int(after_id)
        sql += " ORDER BY id ASC LIMIT :limit"

        with self._engine.connect() as conn:
            rows = conn.execute(text(sql), params).fetchall()
        return [dict(r._mapping) for r in rows]
