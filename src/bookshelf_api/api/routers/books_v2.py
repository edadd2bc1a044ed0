"""
bookshelf_api.api.routers.books_v2

Book CRUD, version 2: public reads, protected writes, no ETag handling.

Book payloads are rendered with localized field names (`field.<name>` catalog keys),
so a French client sees `{"titre": ..., "auteur": ...}`. Request bodies keep the
canonical field names.
"""

from __future__ import annotations

from typing import Any

import structlog
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from bookshelf_api.api.deps import db_session, translator_dep
from bookshelf_api.api.envelope import ApiResponse, envelope
from bookshelf_api.api.schemas import BookIn, BookOut
from bookshelf_api.auth.deps import require_identity
from bookshelf_api.db.models import Book
from bookshelf_api.db.repositories.books import BookRepo
from bookshelf_api.errors import ApiError, ErrorKind
from bookshelf_api.i18n.catalog import Translator

log = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/v2/books", tags=["books-v2"])


def localize_book(book: Book, t: Translator) -> dict[str, Any]:
    out = BookOut.model_validate(book).model_dump()
    return {t.field(name): value for name, value in out.items()}


@router.get("", response_model=ApiResponse[list[dict[str, Any]]])
async def list_books(
    session: AsyncSession = Depends(db_session),
    t: Translator = Depends(translator_dep),
) -> Response:
    books = await BookRepo(session).list_all()
    message = t("api.success") if books else t("book.list.empty")
    return envelope(message, [localize_book(b, t) for b in books])


@router.get("/{book_id}", response_model=ApiResponse[dict[str, Any]])
async def get_book(
    book_id: int,
    session: AsyncSession = Depends(db_session),
    t: Translator = Depends(translator_dep),
) -> Response:
    book = await BookRepo(session).get(book_id)
    if book is None:
        raise ApiError(ErrorKind.not_found, "book.notfound", book_id)
    return envelope(t("api.success"), localize_book(book, t))


@router.post(
    "",
    status_code=HTTP_201_CREATED,
    response_model=ApiResponse[dict[str, Any]],
    dependencies=[Depends(require_identity)],
)
async def create_book(
    body: BookIn,
    session: AsyncSession = Depends(db_session),
    t: Translator = Depends(translator_dep),
) -> Response:
    book = await BookRepo(session).create(body.model_dump())
    await session.commit()
    log.info("book_created", book_id=book.id)
    return envelope(t("book.created"), localize_book(book, t), status_code=HTTP_201_CREATED)


@router.put(
    "/{book_id}",
    response_model=ApiResponse[dict[str, Any]],
    dependencies=[Depends(require_identity)],
)
async def update_book(
    book_id: int,
    body: BookIn,
    session: AsyncSession = Depends(db_session),
    t: Translator = Depends(translator_dep),
) -> Response:
    book = await BookRepo(session).replace(book_id, body.model_dump())
    if book is None:
        raise ApiError(ErrorKind.not_found, "book.notfound", book_id)
    await session.commit()
    log.info("book_updated", book_id=book_id)
    return envelope(t("book.updated"), localize_book(book, t))


@router.delete(
    "/{book_id}",
    response_model=ApiResponse[None],
    dependencies=[Depends(require_identity)],
)
async def delete_book(
    book_id: int,
    session: AsyncSession = Depends(db_session),
    t: Translator = Depends(translator_dep),
) -> Response:
    if not await BookRepo(session).delete(book_id):
        raise ApiError(ErrorKind.not_found, "book.notfound", book_id)
    await session.commit()
    log.info("book_deleted", book_id=book_id)
    return envelope(t("book.deleted"))
