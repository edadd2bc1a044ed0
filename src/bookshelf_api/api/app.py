"""
bookshelf_api.api.app

FastAPI app factory for the Bookshelf API.

Responsibilities:
- Build the FastAPI application and register routers, middleware and error handlers.
- Own the app-scoped collaborators (rate limiter, token service, password hasher,
  message catalog) and the DB engine lifecycle.
- Fix the request pipeline order in one place.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import FastAPI
from starlette.middleware.gzip import GZipMiddleware

from bookshelf_api import __version__
from bookshelf_api.api.errors import register_exception_handlers
from bookshelf_api.api.routers.auth import router as auth_router
from bookshelf_api.api.routers.books_v1 import router as books_v1_router
from bookshelf_api.api.routers.books_v2 import router as books_v2_router
from bookshelf_api.api.routers.health import router as health_router
from bookshelf_api.auth.jwt import JwtConfig, TokenService
from bookshelf_api.auth.passwords import PasswordHasher
from bookshelf_api.db.init_db import init_db
from bookshelf_api.db.session import create_engine, create_sessionmaker
from bookshelf_api.i18n.catalog import MessageCatalog
from bookshelf_api.i18n.middleware import LocaleMiddleware
from bookshelf_api.observability.logging import configure_logging, get_logger
from bookshelf_api.observability.middleware import RequestContextMiddleware
from bookshelf_api.ratelimit.limiter import RateLimiter
from bookshelf_api.ratelimit.middleware import RateLimitMiddleware
from bookshelf_api.settings import Settings

log = get_logger(__name__)


def create_app(*, settings: Settings) -> FastAPI:
    configure_logging(
        service_name=settings.service_name,
        level=settings.log_level,
        json_logs=settings.env != "dev",
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        engine = create_engine(settings)
        app.state.engine = engine
        app.state.sessionmaker = create_sessionmaker(engine)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically. Prod runs Alembic.
            await init_db(engine)
        try:
            yield
        finally:
            await engine.dispose()
            log.info("shutdown")

    app = FastAPI(
        title="Bookshelf API",
        version=__version__,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.catalog = MessageCatalog.load(
        settings.supported_locales, default_locale=settings.default_locale
    )
    app.state.rate_limiter = RateLimiter(
        capacity=settings.rate_limit_capacity,
        refill_tokens=settings.rate_limit_refill_tokens,
        refill_seconds=settings.rate_limit_refill_seconds,
        max_buckets=settings.rate_limit_max_buckets,
    )
    app.state.token_service = TokenService(
        JwtConfig(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            secret=settings.jwt_secret,
            ttl=timedelta(seconds=settings.jwt_ttl_seconds),
        )
    )
    app.state.password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)

    register_exception_handlers(app)

    # Starlette runs the last-added middleware first, so the effective order is:
    # request context -> rate limit -> gzip -> locale -> routes (auth as dependency).
    app.add_middleware(
        LocaleMiddleware,
        supported=settings.supported_locales,
        default=settings.default_locale,
    )
    app.add_middleware(GZipMiddleware, minimum_size=settings.gzip_minimum_size)
    app.add_middleware(RateLimitMiddleware, limiter=app.state.rate_limiter)
    app.add_middleware(RequestContextMiddleware)

    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router)
    app.include_router(books_v1_router)
    app.include_router(books_v2_router)

    return app


# --- Module Notes -----------------------------------------------------------
# Nothing here is a module-level singleton: two apps built in the same process (as the
# tests do) never share rate-limit buckets or signing keys.
