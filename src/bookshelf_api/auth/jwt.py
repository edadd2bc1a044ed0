"""
bookshelf_api.auth.jwt

JWT issuing and verification.

Responsibilities:
- Issue HS256 bearer tokens carrying the username as `sub`.
- Verify signature, issuer and expiry; report failure as `None` instead of raising.

Note:
- Tokens are stateless and cannot be revoked; logout is a client-side discard and a
  leaked token stays valid until `exp`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
import structlog
from jwt import InvalidTokenError

log = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    issuer: str
    secret: str
    ttl: timedelta = timedelta(hours=24)


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class TokenService:
    def __init__(self, cfg: JwtConfig, *, clock: Callable[[], datetime] = _utcnow) -> None:
        self._cfg = cfg
        self._clock = clock

    @property
    def ttl(self) -> timedelta:
        return self._cfg.ttl

    def issue(self, subject: str) -> str:
        now = self._clock()
        payload: dict[str, Any] = {
            "iss": self._cfg.issuer,
            "sub": subject,
            "iat": int(now.timestamp()),
            "exp": int((now + self._cfg.ttl).timestamp()),
        }
        return jwt.encode(payload, self._cfg.secret, algorithm=self._cfg.alg)

    def verify(self, token: str) -> str | None:
        try:
            # jwt.decode enforces the signature plus iss/exp; iat must not be in the future.
            payload = jwt.decode(
                token,
                self._cfg.secret,
                algorithms=[self._cfg.alg],
                issuer=self._cfg.issuer,
                options={"require": ["exp", "iat", "iss", "sub"]},
            )
        except InvalidTokenError as e:
            log.info("token_rejected", reason=type(e).__name__)
            return None

        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            log.info("token_rejected", reason="InvalidSubject")
            return None
        return subject
