"""
bookshelf_api.ratelimit.limiter

Per-client token bucket admission control.

Responsibilities:
- Own the registry of buckets (one per client key, created lazily at full capacity).
- Refill buckets intervally: R tokens per whole elapsed interval, capped at capacity.
- Make check-and-decrement atomic per bucket without a lock shared by all clients.
- Bound registry memory by evicting idle, then least recently seen, buckets.
"""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class RateLimitDecision:
    allowed: bool
    remaining: int


@dataclass
class TokenBucket:
    capacity: int
    refill_tokens: int
    refill_seconds: float
    tokens: int
    last_refill: float
    last_seen: float
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def try_consume(self, now: float) -> RateLimitDecision:
        # Refill, check and decrement happen under the bucket's own lock only.
        with self._lock:
            self._refill(now)
            self.last_seen = now
            if self.tokens < 1:
                return RateLimitDecision(allowed=False, remaining=0)
            self.tokens -= 1
            return RateLimitDecision(allowed=True, remaining=self.tokens)

    def available(self, now: float) -> int:
        with self._lock:
            self._refill(now)
            return self.tokens

    def _refill(self, now: float) -> None:
        elapsed = now - self.last_refill
        if elapsed < self.refill_seconds:
            return
        intervals = int(elapsed // self.refill_seconds)
        self.tokens = min(self.capacity, self.tokens + intervals * self.refill_tokens)
        self.last_refill += intervals * self.refill_seconds


class RateLimiter:
    """
    Token bucket registry keyed by client IP.

    `admit` consumes one token; a rejected call leaves the token count untouched.
    """

    def __init__(
        self,
        *,
        capacity: int = 100,
        refill_tokens: int = 100,
        refill_seconds: float = 60.0,
        max_buckets: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if capacity < 1 or refill_tokens < 1 or refill_seconds <= 0 or max_buckets < 1:
            raise ValueError("rate limiter parameters must be positive")
        self.capacity = capacity
        self.refill_tokens = refill_tokens
        self.refill_seconds = refill_seconds
        self.max_buckets = max_buckets
        self._clock = clock
        self._buckets: dict[str, TokenBucket] = {}
        # Guards creation/eviction only; consuming never takes this lock.
        self._registry_lock = threading.Lock()
        # An untouched bucket is guaranteed full again after this long.
        self._idle_after = refill_seconds * math.ceil(capacity / refill_tokens)

    def __len__(self) -> int:
        return len(self._buckets)

    def admit(self, key: str) -> RateLimitDecision:
        now = self._clock()
        bucket = self._buckets.get(key)
        if bucket is None:
            bucket = self._create(key, now)
        return bucket.try_consume(now)

    def remaining(self, key: str) -> int:
        bucket = self._buckets.get(key)
        if bucket is None:
            return self.capacity
        return bucket.available(self._clock())

    def _create(self, key: str, now: float) -> TokenBucket:
        with self._registry_lock:
            existing = self._buckets.get(key)
            if existing is not None:
                return existing
            if len(self._buckets) >= self.max_buckets:
                self._evict(now)
            bucket = TokenBucket(
                capacity=self.capacity,
                refill_tokens=self.refill_tokens,
                refill_seconds=self.refill_seconds,
                tokens=self.capacity,
                last_refill=now,
                last_seen=now,
            )
            self._buckets[key] = bucket
            return bucket

    def _evict(self, now: float) -> None:
        # Idle buckets are full again, so dropping them cannot change any admission result.
        idle = [k for k, b in self._buckets.items() if now - b.last_seen >= self._idle_after]
        for key in idle:
            del self._buckets[key]
        overflow = len(self._buckets) - self.max_buckets + 1
        if overflow <= 0:
            return
        by_age = sorted(self._buckets.items(), key=lambda item: item[1].last_seen)
        for key, _ in by_age[:overflow]:
            del self._buckets[key]


# --- Module Notes -----------------------------------------------------------
# Buckets live in process memory only; multiple API replicas each enforce their own
# limit. The HTTP wiring (client ip resolution, 429 body) lives in `ratelimit.middleware`.
