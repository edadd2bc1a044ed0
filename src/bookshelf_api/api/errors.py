"""
bookshelf_api.api.errors

Boundary conversion of failures into localized envelopes.

Responsibilities:
- Render `ApiError` with its catalog message in the request locale.
- Render request validation and framework HTTP errors in the same envelope.
- Turn unexpected exceptions into a generic 500 without leaking internals.
"""

from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import Response
from starlette.status import HTTP_400_BAD_REQUEST, HTTP_500_INTERNAL_SERVER_ERROR

from bookshelf_api.api.deps import translator_dep
from bookshelf_api.api.envelope import error_envelope
from bookshelf_api.errors import ApiError, ErrorKind

log = structlog.get_logger(__name__)


def _describe_validation(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        location = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{location}: {err.get('msg', 'invalid')}" if location else err.get("msg", ""))
    return "; ".join(parts)


async def api_error_handler(request: Request, exc: ApiError) -> Response:
    t = translator_dep(request)
    log.info("request_rejected", kind=exc.kind.value, message_key=exc.message_key)
    return error_envelope(
        t(exc.message_key, *exc.params), status_code=exc.status_code, headers=exc.headers
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
    t = translator_dep(request)
    log.info("request_rejected", kind=ErrorKind.validation_failed.value)
    return error_envelope(
        t("error.validation", _describe_validation(exc)), status_code=HTTP_400_BAD_REQUEST
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> Response:
    return error_envelope(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


async def unhandled_error_handler(request: Request, exc: Exception) -> Response:
    log.error("unhandled_exception", exc_info=exc)
    t = translator_dep(request)
    return error_envelope(t("error.internal"), status_code=HTTP_500_INTERNAL_SERVER_ERROR)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ApiError, api_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, validation_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, http_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unhandled_error_handler)


# --- Module Notes -----------------------------------------------------------
# The 429 rate-limit body is produced by `ratelimit.middleware` before any of these
# handlers could run, which is why it is not localized.
