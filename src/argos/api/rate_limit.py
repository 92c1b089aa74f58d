"""Simple in-memory rate limiter (per-IP fixed window)."""

from __future__ import annotations

from dataclasses import dataclass, field
from time import time as now_time
from typing import Callable


@dataclass
class RateLimiter:
    limit: int
    window_s: int = 60
    time_fn: Callable[[], float] = now_time
    buckets: dict[str, tuple[int, int]] = field(default_factory=dict)

    def allow(self, key: str) -> bool:
        """Return True if request is allowed for the current window."""
        window = int(self.time_fn()) // self.window_s
        count, bucket = self.buckets.get(key, (0, window))
        if bucket != window:
            count = 0
            bucket = window
        if count >= self.limit:
            self.buckets[key] = (count, bucket)
            return False
        self.buckets[key] = (count + 1, bucket)
        return True

    def remaining(self, key: str) -> int:
        window = int(self.time_fn()) // self.window_s
        count, bucket = self.buckets.get(key, (0, window))
        if bucket != window:
            return self.limit
        return max(self.limit - count, 0)
