"""Capability check: shared API key in the x-api-key header."""

from __future__ import annotations

import hmac
import logging
from typing import Optional

from fastapi import Header, Request

from argos.config.settings import settings
from argos.services.errors import AuthError

logger = logging.getLogger(__name__)


def api_key_matches(candidate: Optional[str], expected: Optional[str]) -> bool:
    if not candidate or not expected:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), expected.encode("utf-8"))


def require_api_key(request: Request, x_api_key: Optional[str] = Header(default=None)) -> None:
    """Router dependency. Runs before body/query validation."""
    if not api_key_matches(x_api_key, settings.api_key):
        logger.warning("rejected request: bad or missing API key", extra={"path": request.url.path})
        raise AuthError()
