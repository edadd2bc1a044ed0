"""
bookshelf_api.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Expose the app-scoped singletons created by the app factory (settings, token
  service, password hasher, message catalog).
- Provide request-scoped DB sessions and a locale-bound translator.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bookshelf_api.auth.jwt import TokenService
from bookshelf_api.auth.passwords import PasswordHasher
from bookshelf_api.i18n.catalog import MessageCatalog, Translator
from bookshelf_api.settings import Settings


def settings_dep(request: Request) -> Settings:
    return request.app.state.settings  # type: ignore[no-any-return]


def token_service_dep(request: Request) -> TokenService:
    return request.app.state.token_service  # type: ignore[no-any-return]


def password_hasher_dep(request: Request) -> PasswordHasher:
    return request.app.state.password_hasher  # type: ignore[no-any-return]


def request_locale(request: Request) -> str:
    # Set by `i18n.middleware.LocaleMiddleware`; absent only if that layer is bypassed.
    catalog: MessageCatalog = request.app.state.catalog
    return getattr(request.state, "locale", catalog.default_locale)


def translator_dep(request: Request) -> Translator:
    return Translator(request.app.state.catalog, request_locale(request))


def sessionmaker_from_app(request: Request) -> async_sessionmaker[AsyncSession]:
    # The sessionmaker is created in the lifespan of `bookshelf_api.api.app.create_app`.
    return request.app.state.sessionmaker  # type: ignore[no-any-return]


async def db_session(
    session_factory: async_sessionmaker[AsyncSession] = Depends(sessionmaker_from_app),
) -> AsyncIterator[AsyncSession]:
    # Request-scoped DB session. Routers commit explicitly after successful writes.
    async with session_factory() as session:
        yield session
