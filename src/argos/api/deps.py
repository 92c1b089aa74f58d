"""API dependencies."""

from __future__ import annotations

import threading
from dataclasses import dataclass

from fastapi import Depends, Request
from sqlalchemy.engine import Engine

from argos.config.settings import settings
from argos.db.engine import build_engine
from argos.db.init_db import ensure_db
from argos.services.count_aggregator import CountAggregator
from argos.services.data_record_pager import DataRecordPager
from argos.services.inference_lifecycle import InferenceLifecycle

_ENGINE_INIT_LOCK = threading.Lock()


@dataclass(frozen=True)
class RequestContext:
    """Server-side facts about the current request. Never read from the client."""

    machine_id: str


def engine_for_app(app) -> Engine:
    """One pooled engine per app, built and migrated lazily on first use."""
    cached = getattr(app.state, "engine", None)
    if cached is not None:
        return cached
    with _ENGINE_INIT_LOCK:
        cached = getattr(app.state, "engine", None)
        if cached is None:
            cached = build_engine()
            ensure_db(cached)
            app.state.engine = cached
    return cached


def get_engine(request: Request) -> Engine:
    return engine_for_app(request.app)


def get_request_context() -> RequestContext:
    return RequestContext(machine_id=settings.machine_id)


def get_inference_lifecycle(engine: Engine = Depends(get_engine)) -> InferenceLifecycle:
    return InferenceLifecycle(engine)


def get_count_aggregator(engine: Engine = Depends(get_engine)) -> CountAggregator:
    return CountAggregator(engine)


def get_data_record_pager(engine: Engine = Depends(get_engine)) -> DataRecordPager:
    return DataRecordPager(engine)
