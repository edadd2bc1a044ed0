"""
bookshelf_api.api.schemas

Request and response bodies for the HTTP API.

Responsibilities:
- Book input (`BookIn`) with field constraints, and canonical output (`BookOut`).
- Account payloads: register/login requests and the issued-token response.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class BookIn(BaseModel):
    # A client-sent "id" is ignored; identifiers come from the path or the store.
    model_config = ConfigDict(extra="ignore")

    title: str = Field(min_length=1, max_length=255)
    author: str = Field(min_length=1, max_length=255)
    category: str | None = Field(default=None, max_length=128)
    year: int = 0
    price: float = Field(default=0.0, ge=0)


class BookOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    author: str
    category: str | None
    year: int
    price: float


class RegisterRequest(BaseModel):
    # Shape rules live in `services.validation` so they can be reported as catalog keys.
    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    username: str
    password: str


class AuthPayload(BaseModel):
    token: str
    token_type: str = "bearer"
    expires_in: int
    username: str
    email: str
