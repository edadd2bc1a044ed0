"""
bookshelf_api.api.envelope

Uniform `{success, message, data}` response body.

Responsibilities:
- Typed envelope model (also used as `response_model` for OpenAPI).
- Helpers building JSON responses for success and error outcomes.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Generic, TypeVar

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel
from starlette.responses import JSONResponse, Response
from starlette.status import HTTP_200_OK, HTTP_304_NOT_MODIFIED

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool
    message: str
    data: T | None = None


def envelope(
    message: str,
    data: Any = None,
    *,
    status_code: int = HTTP_200_OK,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    body = ApiResponse[Any](success=True, message=message, data=data)
    return JSONResponse(jsonable_encoder(body), status_code=status_code, headers=headers)


def error_envelope(
    message: str,
    *,
    status_code: int,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    body = ApiResponse[Any](success=False, message=message, data=None)
    return JSONResponse(jsonable_encoder(body), status_code=status_code, headers=headers)


def not_modified(etag: str) -> Response:
    # 304 carries validators only, never a body.
    return Response(status_code=HTTP_304_NOT_MODIFIED, headers={"ETag": etag})
