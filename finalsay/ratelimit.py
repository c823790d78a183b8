# Fixed-window request counter keyed by client identity.
# Buckets live in an injectable store for the process lifetime (no eviction),
# and the clock is injectable so window boundaries can be tested.

from __future__ import annotations
import threading
import time
from dataclasses import dataclass
from typing import Callable, Dict, Mapping, Optional

UNKNOWN_CLIENT = "unknown"


@dataclass
class RateBucket:
    count: int
    window_start: float


class InMemoryBucketStore:
    """Process-local bucket map."""

    def __init__(self):
        self._buckets: Dict[str, RateBucket] = {}

    def get(self, key: str) -> Optional[RateBucket]:
        return self._buckets.get(key)

    def set(self, key: str, bucket: RateBucket) -> None:
        self._buckets[key] = bucket

    def __len__(self) -> int:
        return len(self._buckets)


class RateLimiter:
    """
    Admits up to `capacity` calls per key within a fixed window.

    The window is anchored at the first call after the previous window
    expired, so a burst straddling a boundary can see up to 2 * capacity
    admissions in a short span.
    """

    def __init__(
        self,
        capacity: int = 12,
        window_seconds: float = 60.0,
        store: Optional[InMemoryBucketStore] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.capacity = capacity
        self.window_seconds = window_seconds
        self.store = store if store is not None else InMemoryBucketStore()
        self.clock = clock
        self._lock = threading.Lock()

    def allow(self, key: str) -> bool:
        with self._lock:
            now = self.clock()
            bucket = self.store.get(key)
            if bucket is None:
                bucket = RateBucket(count=0, window_start=now)
            if now - bucket.window_start > self.window_seconds:
                bucket.count = 0
                bucket.window_start = now
            bucket.count += 1
            self.store.set(key, bucket)
            return bucket.count <= self.capacity


def client_key(headers: Mapping[str, str], peer: Optional[str]) -> str:
    """First hop of X-Forwarded-For, else the peer address, else a shared sentinel."""
    forwarded = headers.get("x-forwarded-for") or ""
    first = forwarded.split(",")[0].strip()
    if first:
        return first
    return peer or UNKNOWN_CLIENT
