from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bookshelf_api.db.models import Book


class BookRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_all(self) -> list[Book]:
        # Stable ordering keeps the collection ETag deterministic.
        stmt = select(Book).order_by(Book.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def get(self, book_id: int, *, for_update: bool = False) -> Book | None:
        return await self._session.get(Book, book_id, with_for_update=for_update)

    async def create(self, fields: dict[str, Any]) -> Book:
        # Identifiers are always generated; a client-supplied id is never honored.
        fields = {k: v for k, v in fields.items() if k != "id"}
        book = Book(**fields)
        self._session.add(book)
        await self._session.flush()
        return book

    async def replace(self, book_id: int, fields: dict[str, Any]) -> Book | None:
        book = await self._session.get(Book, book_id, with_for_update=True)
        if book is None:
            return None
        for name in ("title", "author", "category", "year", "price"):
            if name in fields:
                setattr(book, name, fields[name])
        await self._session.flush()
        return book

    async def delete(self, book_id: int) -> bool:
        book = await self._session.get(Book, book_id)
        if book is None:
            return False
        await self._session.delete(book)
        await self._session.flush()
        return True
