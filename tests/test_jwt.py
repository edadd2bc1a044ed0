from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from bookshelf_api.auth.jwt import JwtConfig, TokenService
from tests.conftest import TEST_SECRET


@pytest.fixture
def cfg() -> JwtConfig:
    return JwtConfig(alg="HS256", issuer="bookshelf-api", secret=TEST_SECRET)


@pytest.fixture
def tokens(cfg: JwtConfig) -> TokenService:
    return TokenService(cfg)


def test_issue_then_verify_returns_subject(tokens):
    assert tokens.verify(tokens.issue("alice")) == "alice"


def test_claims_carry_issuer_and_ttl(tokens, cfg):
    payload = jwt.decode(tokens.issue("alice"), cfg.secret, algorithms=["HS256"], issuer=cfg.issuer)
    assert payload["sub"] == "alice"
    assert payload["iss"] == "bookshelf-api"
    assert payload["exp"] - payload["iat"] == int(timedelta(hours=24).total_seconds())


def test_expired_token_is_invalid(cfg, tokens):
    issued_long_ago = TokenService(cfg, clock=lambda: datetime.now(tz=UTC) - timedelta(hours=25))
    assert tokens.verify(issued_long_ago.issue("alice")) is None


def test_token_signed_with_other_key_is_invalid(cfg, tokens):
    other = TokenService(JwtConfig(alg=cfg.alg, issuer=cfg.issuer, secret="x" * 40))
    assert tokens.verify(other.issue("alice")) is None


def test_token_with_other_issuer_is_invalid(cfg, tokens):
    other = TokenService(JwtConfig(alg=cfg.alg, issuer="someone-else", secret=cfg.secret))
    assert tokens.verify(other.issue("alice")) is None


def test_tampered_token_is_invalid(tokens):
    token = tokens.issue("alice")
    header, payload, signature = token.split(".")
    forged = tokens.issue("mallory").split(".")[1]
    assert tokens.verify(f"{header}.{forged}.{signature}") is None


@pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b.c"])
def test_malformed_token_is_invalid(tokens, garbage):
    assert tokens.verify(garbage) is None


def test_token_without_subject_is_invalid(cfg, tokens):
    now = int(datetime.now(tz=UTC).timestamp())
    raw = jwt.encode(
        {"iss": cfg.issuer, "iat": now, "exp": now + 60}, cfg.secret, algorithm=cfg.alg
    )
    assert tokens.verify(raw) is None
