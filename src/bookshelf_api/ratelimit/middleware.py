"""
bookshelf_api.ratelimit.middleware

HTTP admission control in front of every other request layer.

Responsibilities:
- Resolve the client IP (first `X-Forwarded-For` entry, else the peer address).
- Reject over-limit requests with a fixed, non-localized 429 envelope.
- Report the remaining budget on admitted responses.

Note:
- `X-Forwarded-For` is trusted as sent. Without a reverse proxy that overwrites it,
  clients can pick their own bucket key.
"""

from __future__ import annotations

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_429_TOO_MANY_REQUESTS
from starlette.types import ASGIApp

from bookshelf_api.errors import ErrorKind
from bookshelf_api.ratelimit.limiter import RateLimiter

log = structlog.get_logger(__name__)

RATE_LIMIT_HEADER = "X-Rate-Limit-Remaining"
RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    if request.client is not None and request.client.host:
        return request.client.host
    return "unknown"


class RateLimitMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, *, limiter: RateLimiter) -> None:
        super().__init__(app)
        self._limiter = limiter

    async def dispatch(self, request: Request, call_next) -> Response:
        ip = client_ip(request)
        structlog.contextvars.bind_contextvars(client_ip=ip)

        decision = self._limiter.admit(ip)
        if not decision.allowed:
            log.warning("rate_limited", kind=ErrorKind.admission_denied.value)
            # Locale is negotiated further down the stack, so this body is fixed.
            return JSONResponse(
                {"success": False, "message": RATE_LIMIT_MESSAGE, "data": None},
                status_code=HTTP_429_TOO_MANY_REQUESTS,
            )

        response: Response = await call_next(request)
        response.headers[RATE_LIMIT_HEADER] = str(decision.remaining)
        return response
