"""
bookshelf_api.api.routers.auth

Account endpoints: registration and login, both returning a bearer token.

Login failures are indistinguishable from the outside: unknown user, disabled user and
wrong password produce the same 401 envelope.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool
from starlette.responses import JSONResponse
from starlette.status import HTTP_201_CREATED

from bookshelf_api.api.deps import db_session, password_hasher_dep, token_service_dep, translator_dep
from bookshelf_api.api.envelope import ApiResponse, envelope
from bookshelf_api.api.schemas import AuthPayload, LoginRequest, RegisterRequest
from bookshelf_api.auth.jwt import TokenService
from bookshelf_api.auth.passwords import PasswordHasher
from bookshelf_api.db.repositories.users import UserRepo
from bookshelf_api.errors import ApiError, ErrorKind
from bookshelf_api.i18n.catalog import Translator
from bookshelf_api.services.validation import validate_registration

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v1/auth", tags=["auth"])


def _payload(tokens: TokenService, *, username: str, email: str) -> AuthPayload:
    return AuthPayload(
        token=tokens.issue(username),
        expires_in=int(tokens.ttl.total_seconds()),
        username=username,
        email=email,
    )


@router.post(
    "/register",
    status_code=HTTP_201_CREATED,
    response_model=ApiResponse[AuthPayload],
)
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(db_session),
    tokens: TokenService = Depends(token_service_dep),
    hasher: PasswordHasher = Depends(password_hasher_dep),
    t: Translator = Depends(translator_dep),
) -> JSONResponse:
    issue = validate_registration(body.username, body.email, body.password)
    if issue is not None:
        raise ApiError(ErrorKind.validation_failed, issue.key, *issue.params)

    users = UserRepo(session)
    if await users.username_exists(body.username):
        raise ApiError(ErrorKind.validation_failed, "auth.username.taken")
    if await users.email_exists(body.email):
        raise ApiError(ErrorKind.validation_failed, "auth.email.taken")

    # bcrypt is CPU-bound; keep it off the event loop.
    password_hash = await run_in_threadpool(hasher.hash, body.password)
    try:
        user = await users.create(
            username=body.username, email=body.email, password_hash=password_hash
        )
        await session.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration of the same username/email.
        await session.rollback()
        raise ApiError(ErrorKind.validation_failed, "auth.username.taken") from None

    log.info("user_registered", username=user.username)
    return envelope(
        t("auth.registered"),
        _payload(tokens, username=user.username, email=user.email),
        status_code=HTTP_201_CREATED,
    )


@router.post("/login", response_model=ApiResponse[AuthPayload])
async def login(
    body: LoginRequest,
    session: AsyncSession = Depends(db_session),
    tokens: TokenService = Depends(token_service_dep),
    hasher: PasswordHasher = Depends(password_hasher_dep),
    t: Translator = Depends(translator_dep),
) -> JSONResponse:
    user = await UserRepo(session).get_by_username(body.username)
    # Always run a bcrypt comparison so unknown usernames cost the same as bad passwords.
    password_ok = await run_in_threadpool(
        hasher.verify, body.password, user.password_hash if user is not None else None
    )
    if user is None or not user.enabled or not password_ok:
        log.info("login_failed", username=body.username)
        raise ApiError(ErrorKind.authentication_failed, "auth.invalid.credentials")

    return envelope(
        t("auth.login.success"),
        _payload(tokens, username=user.username, email=user.email),
    )
