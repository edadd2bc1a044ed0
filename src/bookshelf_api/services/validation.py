"""
bookshelf_api.services.validation

Account input rules for registration.

Responsibilities:
- Check username, email and password shape/strength.
- Report the first violated rule as a catalog key (+ params) rather than raising.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from bookshelf_api.auth.passwords import BCRYPT_MAX_BYTES

EMAIL_PATTERN = re.compile(
    r"^[a-zA-Z0-9_+&*-]+(?:\.[a-zA-Z0-9_+&*-]+)*@(?:[a-zA-Z0-9-]+\.)+[a-zA-Z]{2,7}$"
)
USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9_.-]+$")

USERNAME_MIN, USERNAME_MAX = 3, 50
EMAIL_MAX = 255
PASSWORD_MIN, PASSWORD_MAX = 8, 50
COMMON_PASSWORDS = frozenset({"password", "12345678", "qwerty123", "admin123"})


@dataclass(frozen=True, slots=True)
class ValidationIssue:
    key: str
    params: tuple[Any, ...] = ()


def validate_username(username: str | None) -> ValidationIssue | None:
    if username is None or not username.strip():
        return ValidationIssue("validation.username.empty")
    if len(username) < USERNAME_MIN:
        return ValidationIssue("validation.username.short", (USERNAME_MIN,))
    if len(username) > USERNAME_MAX:
        return ValidationIssue("validation.username.long", (USERNAME_MAX,))
    if not USERNAME_PATTERN.match(username):
        return ValidationIssue("validation.username.chars")
    return None


def validate_email(email: str | None) -> ValidationIssue | None:
    if email is None or not email.strip():
        return ValidationIssue("validation.email.empty")
    if len(email) > EMAIL_MAX:
        return ValidationIssue("validation.email.long", (EMAIL_MAX,))
    if not EMAIL_PATTERN.match(email):
        return ValidationIssue("validation.email.format")
    return None


def validate_password(password: str | None) -> ValidationIssue | None:
    if not password:
        return ValidationIssue("validation.password.empty")
    if len(password) < PASSWORD_MIN:
        return ValidationIssue("validation.password.short", (PASSWORD_MIN,))
    if len(password) > PASSWORD_MAX or len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        return ValidationIssue("validation.password.long", (PASSWORD_MAX,))
    if not re.search(r"[a-zA-Z]", password):
        return ValidationIssue("validation.password.letter")
    if not re.search(r"\d", password):
        return ValidationIssue("validation.password.digit")
    if password.lower() in COMMON_PASSWORDS:
        return ValidationIssue("validation.password.common")
    return None


def validate_registration(username: str, email: str, password: str) -> ValidationIssue | None:
    return validate_username(username) or validate_email(email) or validate_password(password)
