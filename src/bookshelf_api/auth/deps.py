"""
bookshelf_api.auth.deps

FastAPI dependency functions for authentication.

Responsibilities:
- Resolve an optional bearer token into an `Identity` (or stay unauthenticated).
- Gate protected routes before any business logic runs.
"""

from __future__ import annotations

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf_api.api.deps import db_session, token_service_dep
from bookshelf_api.auth.jwt import TokenService
from bookshelf_api.auth.models import Identity
from bookshelf_api.db.repositories.users import UserRepo
from bookshelf_api.errors import ApiError, ErrorKind

log = structlog.get_logger(__name__)

_bearer = HTTPBearer(auto_error=False)


async def resolve_identity(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    tokens: TokenService = Depends(token_service_dep),
    session: AsyncSession = Depends(db_session),
) -> Identity | None:
    # Every failed step leaves the request unauthenticated; none of them aborts it.
    request.state.identity = None
    if creds is None or not creds.credentials:
        return None

    subject = tokens.verify(creds.credentials)
    if subject is None:
        return None

    user = await UserRepo(session).get_by_username(subject)
    if user is None or not user.enabled:
        reason = "unknown_user" if user is None else "disabled"
        log.info("identity_rejected", subject=subject, reason=reason)
        return None

    identity = Identity(username=user.username, enabled=user.enabled)
    request.state.identity = identity
    structlog.contextvars.bind_contextvars(subject=identity.username)
    return identity


def require_identity(identity: Identity | None = Depends(resolve_identity)) -> Identity:
    if identity is None:
        raise ApiError(
            ErrorKind.authorization_denied,
            "error.unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return identity


# --- Module Notes -----------------------------------------------------------
# Public routes may depend on `resolve_identity` alone; protected routers add
# `Depends(require_identity)` at router level.
