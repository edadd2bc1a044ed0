"""
bookshelf_api.ratelimit

Rate limiting package.

Responsibilities:
- In-process token bucket registry (`limiter`).
- Starlette middleware applying it per client IP (`middleware`).
"""

from bookshelf_api.ratelimit.limiter import RateLimitDecision, RateLimiter, TokenBucket
from bookshelf_api.ratelimit.middleware import RateLimitMiddleware, client_ip

__all__ = [
    "RateLimitDecision",
    "RateLimitMiddleware",
    "RateLimiter",
    "TokenBucket",
    "client_ip",
]
