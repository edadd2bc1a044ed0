"""
bookshelf_api.i18n.middleware

Per-request locale resolution.

Responsibilities:
- Negotiate the response locale from `Accept-Language` against the supported set.
- Expose it as `request.state.locale` and in structlog context.
- Advertise it in `Content-Language` unless a handler already set one.
"""

from __future__ import annotations

from collections.abc import Sequence

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from bookshelf_api.i18n.catalog import negotiate_locale


class LocaleMiddleware(BaseHTTPMiddleware):
    """
    Negotiates the response locale once per request and exposes it as
    `request.state.locale`.
    """

    def __init__(self, app: ASGIApp, *, supported: Sequence[str], default: str) -> None:
        super().__init__(app)
        self._supported = tuple(supported)
        self._default = default

    async def dispatch(self, request: Request, call_next) -> Response:
        locale = negotiate_locale(
            request.headers.get("accept-language"), self._supported, self._default
        )
        request.state.locale = locale
        structlog.contextvars.bind_contextvars(locale=locale)

        response: Response = await call_next(request)
        response.headers.setdefault("Content-Language", locale.replace("_", "-"))
        return response
