# src/argos/db/engine.py
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool

from argos.config.settings import settings


@dataclass(frozen=True)
class DBPingResult:
    ok: bool
    detail: str


def _enable_sqlite_fks(dbapi_conn, _record) -> None:
    # SQLite ships with FK enforcement off; the counts cascade depends on it.
    cur = dbapi_conn.cursor()
    cur.execute("PRAGMA foreign_keys = ON")
    cur.close()


def build_engine(db_url: Optional[str] = None) -> Engine:
    """
    Build a SQLAlchemy Engine.

    Why allow db_url override?
    - tests need in-memory or temp DBs
    - CLI/API should default to settings.db_url
    """
    url = db_url or os.getenv("DATABASE_URL") or settings.db_url
    if url.startswith("postgresql"):
        return create_engine(url, future=True, pool_pre_ping=True)

    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every checkout sees an empty DB.
            kwargs["poolclass"] = StaticPool
        else:
            path = url.split("sqlite:///", 1)[-1]
            if path and not path.startswith("file:"):
                os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        engine = create_engine(url, future=True, **kwargs)
        event.listen(engine, "connect", _enable_sqlite_fks)
        return engine

    return create_engine(url, future=True)


def ping_db(engine: Engine) -> DBPingResult:
    """
    Lightweight DB connectivity check.
    Must NEVER return None (health endpoint depends on this).
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("select 1")).scalar_one()
        return DBPingResult(ok=True, detail="ok")
    except Exception as e:
        return DBPingResult(ok=False, detail=f"{type(e).__name__}: {e}")
