"""
bookshelf_api.errors

Error taxonomy shared by routers and exception handlers.

Responsibilities:
- Classify request failures into a small set of kinds with fixed HTTP statuses.
- Carry a catalog message key (plus positional params) instead of raw text, so the
  boundary can render a localized envelope without leaking internal detail.
"""

from __future__ import annotations

import enum
from typing import Any

from starlette import status


class ErrorKind(enum.StrEnum):
    admission_denied = "ADMISSION_DENIED"
    authentication_failed = "AUTHENTICATION_FAILED"
    authorization_denied = "AUTHORIZATION_DENIED"
    not_found = "NOT_FOUND"
    precondition_failed = "PRECONDITION_FAILED"
    precondition_required = "PRECONDITION_REQUIRED"
    validation_failed = "VALIDATION_FAILED"
    internal = "INTERNAL"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.admission_denied: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.authentication_failed: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.authorization_denied: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.not_found: status.HTTP_404_NOT_FOUND,
    ErrorKind.precondition_failed: status.HTTP_412_PRECONDITION_FAILED,
    ErrorKind.precondition_required: status.HTTP_428_PRECONDITION_REQUIRED,
    ErrorKind.validation_failed: status.HTTP_400_BAD_REQUEST,
    ErrorKind.internal: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ApiError(Exception):
    """
    Raised by route handlers; rendered by `api.errors` as a localized envelope.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message_key: str,
        *params: Any,
        headers: dict[str, str] | None = None,
    ) -> None:
        super().__init__(message_key)
        self.kind = kind
        self.message_key = message_key
        self.params = params
        self.headers = headers

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]
