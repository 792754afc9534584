"""
Route definitions for the books API.

Endpoints under /books:
- GET    /books          : list the whole collection
- GET    /books/{isbn}   : first book with the given ISBN
- POST   /books          : append a book (all five fields required)
- PUT    /books/{isbn}   : partial update of the first match
- DELETE /books/{isbn}   : remove the first match

Every handler reloads the store from its backing file before doing
anything else, and mutating handlers save it back before responding.
The handlers are plain functions, so FastAPI runs them on its thread
pool and the file I/O never blocks the event loop.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse

from ..models import (
    Book,
    BookMessage,
    CreateBookRequest,
    DeletedBook,
    UpdateBookRequest,
)
from ..storage import BookStore


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/books", tags=["books"])

UPDATABLE_FIELDS = ("title", "author", "publisher", "published_date")


def get_store(request: Request) -> BookStore:
    """Return a fresh store over the application's backing file.

    Each request works on its own snapshot of the collection, so
    concurrent handlers never share an in-memory list. They still race
    on the file itself: the last save wins.
    """
    return BookStore(request.app.state.settings.data_file)


def _not_found(isbn: str) -> HTTPException:
    return HTTPException(status_code=404, detail=f"Book with ISBN {isbn} was not found")


@router.get("", response_model=List[Book])
def list_books(store: BookStore = Depends(get_store)) -> List[Book]:
    return store.load()


@router.get("/{isbn}", response_model=Book)
def get_book(isbn: str, store: BookStore = Depends(get_store)) -> Book:
    store.load()
    book = store.find(isbn)
    if book is None:
        raise _not_found(isbn)
    return book


@router.post("", response_model=BookMessage, status_code=201)
def create_book(
    req: Optional[CreateBookRequest] = Body(default=None),
    store: BookStore = Depends(get_store),
):
    """Append a new book to the collection.

    The presence check runs before the store is touched, so a rejected
    request never rewrites the backing file. ISBN uniqueness is not
    checked: a second book with the same ISBN is appended after the
    first one.
    """
    if req is None or not req.is_complete():
        return PlainTextResponse("All fields are required", status_code=400)

    store.load()
    book = store.add(
        Book(
            title=req.title,
            author=req.author,
            publisher=req.publisher,
            published_date=req.published_date,
            isbn=req.isbn,
        )
    )
    store.save()
    logger.debug("Added book %s (%s)", book.isbn, book.title)
    return BookMessage(
        message=f'Book "{book.title}" has been successfully added',
        book=book,
    )


@router.put("/{isbn}", response_model=BookMessage)
def update_book(
    isbn: str,
    req: Optional[UpdateBookRequest] = Body(default=None),
    store: BookStore = Depends(get_store),
) -> BookMessage:
    """Overwrite the supplied fields of the first book matching ``isbn``.

    Only truthy values overwrite: an absent field, ``null`` or an empty
    string leaves the stored value as it is. The ISBN itself is never
    changed.
    """
    store.load()
    book = store.find(isbn)
    if book is None:
        raise _not_found(isbn)

    old_title = book.title
    if req is not None:
        for field in UPDATABLE_FIELDS:
            value = getattr(req, field)
            if value:
                setattr(book, field, value)
    store.save()
    logger.debug("Updated book %s", isbn)
    return BookMessage(
        message=f'Book "{old_title}" has been successfully updated',
        book=book,
    )


@router.delete("/{isbn}", response_model=DeletedBook)
def delete_book(isbn: str, store: BookStore = Depends(get_store)) -> DeletedBook:
    store.load()
    index = store.index_of(isbn)
    if index == -1:
        raise _not_found(isbn)

    deleted = store.remove_at(index)
    store.save()
    logger.debug("Deleted book %s", isbn)
    return DeletedBook(
        message=f'Book "{deleted.title}" has been successfully deleted',
        isbn=deleted.isbn,
    )
