from __future__ import annotations

import logging

from sqlalchemy.engine import Engine

from argos.db.schema import Base

logger = logging.getLogger(__name__)


def ensure_db(engine: Engine) -> None:
    """Create any missing tables and indexes. Existing data is left alone."""
    Base.metadata.create_all(bind=engine)


def init_db(engine: Engine) -> None:
    """
    Reset schema: drop every table, then create it again.

    Destroys all inferences, counts and data records.
    """
    with engine.begin() as conn:
        Base.metadata.drop_all(bind=conn)
        Base.metadata.create_all(bind=conn)
    logger.warning("database schema reset", extra={"path": str(engine.url)})
