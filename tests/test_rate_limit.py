"""Tests for the token bucket limiter and its HTTP middleware."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import httpx
import pytest
from starlette.requests import Request

from bookshelf_api.api.app import create_app
from bookshelf_api.ratelimit import RateLimiter, client_ip
from bookshelf_api.ratelimit.middleware import RATE_LIMIT_MESSAGE
from tests.conftest import make_settings


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def limiter(clock: FakeClock) -> RateLimiter:
    return RateLimiter(capacity=5, refill_tokens=3, refill_seconds=60, clock=clock)


class TestRateLimiter:
    def test_admits_up_to_capacity_then_denies(self, limiter):
        remaining = [limiter.admit("1.1.1.1").remaining for _ in range(5)]
        assert remaining == [4, 3, 2, 1, 0]

        denied = limiter.admit("1.1.1.1")
        assert denied.allowed is False
        assert denied.remaining == 0

    def test_denial_has_no_side_effect(self, limiter, clock):
        for _ in range(5):
            limiter.admit("k")
        for _ in range(10):
            assert limiter.admit("k").allowed is False

        clock.advance(60)
        # Exactly one refill of 3 tokens, regardless of the denied attempts.
        assert [limiter.admit("k").allowed for _ in range(4)] == [True, True, True, False]

    def test_no_refill_before_a_full_interval(self, limiter, clock):
        for _ in range(5):
            limiter.admit("k")
        clock.advance(59.9)
        assert limiter.admit("k").allowed is False

    def test_refill_never_exceeds_capacity(self, limiter, clock):
        limiter.admit("k")
        clock.advance(60 * 10)
        assert limiter.remaining("k") == 5
        results = [limiter.admit("k").allowed for _ in range(6)]
        assert results == [True] * 5 + [False]

    def test_multiple_elapsed_intervals_accumulate(self, limiter, clock):
        for _ in range(5):
            limiter.admit("k")
        clock.advance(121)
        assert limiter.remaining("k") == 5

    def test_keys_are_independent(self, limiter):
        for _ in range(5):
            limiter.admit("a")
        assert limiter.admit("a").allowed is False
        assert limiter.admit("b").allowed is True
        assert limiter.admit("b").remaining == 3

    def test_unknown_key_reports_full_capacity(self, limiter):
        assert limiter.remaining("never-seen") == 5
        assert len(limiter) == 0

    def test_rejects_invalid_configuration(self):
        with pytest.raises(ValueError):
            RateLimiter(capacity=0)
        with pytest.raises(ValueError):
            RateLimiter(refill_seconds=0)

    def test_concurrent_admission_never_over_admits(self, clock):
        limiter = RateLimiter(capacity=100, refill_tokens=100, refill_seconds=60, clock=clock)
        with ThreadPoolExecutor(max_workers=16) as pool:
            decisions = list(pool.map(lambda _: limiter.admit("hot"), range(500)))
        assert sum(d.allowed for d in decisions) == 100
        assert sorted(d.remaining for d in decisions if d.allowed) == list(range(100))


class TestBucketEviction:
    def test_idle_buckets_are_evicted_first(self, clock):
        limiter = RateLimiter(
            capacity=5, refill_tokens=5, refill_seconds=60, max_buckets=2, clock=clock
        )
        limiter.admit("a")
        limiter.admit("b")
        clock.advance(61)
        limiter.admit("c")
        assert len(limiter) == 1

    def test_least_recently_seen_bucket_is_evicted_when_full(self, clock):
        limiter = RateLimiter(
            capacity=5, refill_tokens=5, refill_seconds=60, max_buckets=2, clock=clock
        )
        limiter.admit("a")
        clock.advance(1)
        limiter.admit("b")
        clock.advance(1)
        limiter.admit("c")

        assert len(limiter) == 2
        assert limiter.remaining("a") == 5  # dropped, so it would start fresh
        assert limiter.remaining("b") == 4
        assert limiter.remaining("c") == 4


def _request(headers: dict[str, str], client: tuple[str, int] | None) -> Request:
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(k.lower().encode(), v.encode()) for k, v in headers.items()],
        "client": client,
    }
    return Request(scope)


class TestClientIp:
    def test_prefers_first_forwarded_for_entry(self):
        req = _request({"X-Forwarded-For": " 203.0.113.7 , 10.0.0.1"}, ("10.0.0.9", 5000))
        assert client_ip(req) == "203.0.113.7"

    def test_falls_back_to_peer_address(self):
        assert client_ip(_request({}, ("10.0.0.9", 5000))) == "10.0.0.9"

    def test_unknown_without_peer(self):
        assert client_ip(_request({}, None)) == "unknown"


@pytest.mark.asyncio
async def test_rate_limit_over_http(tmp_path) -> None:
    app = create_app(settings=make_settings(tmp_path, rate_limit_capacity=100))
    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            remaining = []
            for _ in range(100):
                r = await client.get("/healthz")
                assert r.status_code == 200
                remaining.append(int(r.headers["X-Rate-Limit-Remaining"]))
            assert remaining == list(range(99, -1, -1))

            r = await client.get("/healthz", headers={"Accept-Language": "fr"})
            assert r.status_code == 429
            assert r.json() == {"success": False, "message": RATE_LIMIT_MESSAGE, "data": None}
            assert "X-Rate-Limit-Remaining" not in r.headers

            # Rejection happens before authentication.
            r = await client.get("/api/v1/books")
            assert r.status_code == 429

            # Another forwarded client owns a separate bucket.
            r = await client.get("/healthz", headers={"X-Forwarded-For": "198.51.100.4"})
            assert r.status_code == 200
            assert r.headers["X-Rate-Limit-Remaining"] == "99"
