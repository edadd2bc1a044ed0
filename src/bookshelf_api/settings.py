"""
bookshelf_api.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the API, auth, rate limiting and i18n.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for the process entrypoint.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    All knobs are read from `BOOKSHELF_*` environment variables.
    Defaults are safe for local dev; production must override `jwt_secret`.
    """

    model_config = SettingsConfigDict(env_prefix="BOOKSHELF_", case_sensitive=False)

    # Environment controls toggle behavior like auto-init DB tables.
    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "bookshelf-api"
    log_level: str = "INFO"

    api_host: str = "0.0.0.0"
    api_port: int = 8080

    # Auth
    jwt_alg: str = "HS256"
    jwt_issuer: str = "bookshelf-api"
    jwt_secret: str = Field(default="dev-secret-change-me-at-least-32-bytes", repr=False)
    jwt_ttl_seconds: int = Field(default=24 * 60 * 60, ge=1)
    bcrypt_rounds: int = Field(default=12, ge=4, le=31)

    # Persistence
    database_url: str = "sqlite+aiosqlite:///./bookshelf.db"

    # Rate limiting (token bucket per client IP)
    rate_limit_capacity: int = Field(default=100, ge=1)
    rate_limit_refill_tokens: int = Field(default=100, ge=1)
    rate_limit_refill_seconds: float = Field(default=60.0, gt=0)
    rate_limit_max_buckets: int = Field(default=10_000, ge=1)

    # Localization
    default_locale: str = "en"
    supported_locales: list[str] = Field(default_factory=lambda: ["en", "fr", "ar", "es"])

    # HTTP
    gzip_minimum_size: int = 500
    # When true, v1 PUT without If-Match is refused (428) instead of last-write-wins.
    require_if_match: bool = False


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars; the app factory receives this instance once.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# Request handlers read settings from `app.state.settings` (see `api.deps`), so tests
# can inject a custom Settings instance into `create_app` without touching the env.
