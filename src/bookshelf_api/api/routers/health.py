"""
bookshelf_api.api.routers.health

Liveness and readiness probes.

Responsibilities:
- `/healthz`: the process serves HTTP; reports the running version.
- `/readyz`: the book store answers a query and message catalogs are loaded.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf_api import __version__
from bookshelf_api.api.deps import db_session

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok", "version": __version__}


@router.get("/readyz")
async def readyz(
    request: Request, session: AsyncSession = Depends(db_session)
) -> dict[str, object]:
    await session.execute(text("SELECT 1"))
    return {"status": "ready", "locales": list(request.app.state.catalog.locales)}


# --- Module Notes -----------------------------------------------------------
# Probe bodies are not wrapped in the `{success, message, data}` envelope.
