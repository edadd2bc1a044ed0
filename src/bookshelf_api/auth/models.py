"""
bookshelf_api.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Identity`) injected into endpoints.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Identity:
    """
    Authenticated caller, resolved from a bearer token's subject.
    """

    username: str
    enabled: bool = True


# --- Module Notes -----------------------------------------------------------
# There are no roles: a request is either authenticated or not.
