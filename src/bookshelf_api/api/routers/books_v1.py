"""
bookshelf_api.api.routers.books_v1

Book CRUD, version 1: JWT-protected, with ETag caching and optimistic concurrency.

Responsibilities:
- Conditional GET on the collection and on single books (`If-None-Match` -> 304).
- Conditional PUT (`If-Match` mismatch -> 412, resource untouched).
- Localized envelope messages for every outcome.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.responses import Response
from starlette.status import HTTP_201_CREATED

from bookshelf_api.api.conditional import (
    Precondition,
    evaluate_if_match,
    fingerprint,
    is_not_modified,
    quote_etag,
)
from bookshelf_api.api.deps import db_session, settings_dep, translator_dep
from bookshelf_api.api.envelope import ApiResponse, envelope, not_modified
from bookshelf_api.api.schemas import BookIn, BookOut
from bookshelf_api.auth.deps import require_identity
from bookshelf_api.db.repositories.books import BookRepo
from bookshelf_api.errors import ApiError, ErrorKind
from bookshelf_api.i18n.catalog import Translator
from bookshelf_api.settings import Settings

log = structlog.get_logger(__name__)

router = APIRouter(
    prefix="/api/v1/books",
    tags=["books-v1"],
    dependencies=[Depends(require_identity)],
)


@router.get("", response_model=ApiResponse[list[BookOut]])
async def list_books(
    if_none_match: str | None = Header(default=None),
    session: AsyncSession = Depends(db_session),
    t: Translator = Depends(translator_dep),
) -> Response:
    books = [BookOut.model_validate(b) for b in await BookRepo(session).list_all()]
    tag = fingerprint(books)
    if is_not_modified(if_none_match, tag):
        return not_modified(quote_etag(tag))

    message = t("api.success") if books else t("book.list.empty")
    return envelope(message, books, headers={"ETag": quote_etag(tag)})


@router.get("/{book_id}", response_model=ApiResponse[BookOut])
async def get_book(
    book_id: int,
    if_none_match: str | None = Header(default=None),
    session: AsyncSession = Depends(db_session),
    t: Translator = Depends(translator_dep),
) -> Response:
    book = await BookRepo(session).get(book_id)
    if book is None:
        raise ApiError(ErrorKind.not_found, "book.notfound", book_id)

    out = BookOut.model_validate(book)
    tag = fingerprint(out)
    if is_not_modified(if_none_match, tag):
        return not_modified(quote_etag(tag))
    return envelope(t("api.success"), out, headers={"ETag": quote_etag(tag)})


@router.post("", status_code=HTTP_201_CREATED, response_model=ApiResponse[BookOut])
async def create_book(
    body: BookIn,
    session: AsyncSession = Depends(db_session),
    t: Translator = Depends(translator_dep),
) -> Response:
    book = await BookRepo(session).create(body.model_dump())
    await session.commit()
    out = BookOut.model_validate(book)
    log.info("book_created", book_id=out.id)
    return envelope(
        t("book.created"),
        out,
        status_code=HTTP_201_CREATED,
        headers={"ETag": quote_etag(fingerprint(out)), "Location": f"{router.prefix}/{out.id}"},
    )


@router.put("/{book_id}", response_model=ApiResponse[BookOut])
async def update_book(
    book_id: int,
    body: BookIn,
    if_match: str | None = Header(default=None),
    session: AsyncSession = Depends(db_session),
    settings: Settings = Depends(settings_dep),
    t: Translator = Depends(translator_dep),
) -> Response:
    repo = BookRepo(session)
    if if_match is None and settings.require_if_match:
        raise ApiError(ErrorKind.precondition_required, "book.etag.required")

    if if_match is not None:
        current = await repo.get(book_id, for_update=True)
        current_tag = fingerprint(BookOut.model_validate(current)) if current is not None else None
        outcome = evaluate_if_match(if_match, current_tag)
        if outcome is Precondition.not_found:
            raise ApiError(ErrorKind.not_found, "book.notfound", book_id)
        if outcome is Precondition.failed:
            log.info("etag_precondition_failed", book_id=book_id, current=current_tag)
            raise ApiError(ErrorKind.precondition_failed, "book.etag.mismatch")

    # Without If-Match the write is unconditional (last write wins).
    updated = await repo.replace(book_id, body.model_dump())
    if updated is None:
        raise ApiError(ErrorKind.not_found, "book.notfound", book_id)
    await session.commit()

    out = BookOut.model_validate(updated)
    log.info("book_updated", book_id=book_id)
    return envelope(t("book.updated"), out, headers={"ETag": quote_etag(fingerprint(out))})


@router.delete("/{book_id}", response_model=ApiResponse[None])
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
