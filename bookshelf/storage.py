# bookshelf/storage.py
"""
File-backed store for the books collection.

The whole collection lives in a single JSON file holding an array of
book objects. ``BookStore.load()`` replaces the in-memory list with the
file's content and ``BookStore.save()`` rewrites the file in full; there
is no incremental update, no locking and no transaction. Two requests
that load, mutate and save at the same time can therefore lose one of
the updates (last write wins).
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import List, Optional, Union

from pydantic import ValidationError

from .models import Book


logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the backing file cannot be read, parsed or written."""


class BookStore:
    """In-memory books collection mirrored to a JSON file.

    Parameters
    ----------
    path : str or Path
        Location of the backing file. It is created (as ``[]``) on the
        first ``load()`` if it does not exist yet.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)
        self.books: List[Book] = []

    # ------------------------------------------------------------------
    # Persistence

    def load(self) -> List[Book]:
        """Replace the in-memory collection with the content of the file.

        Returns
        -------
        List[Book]
            The freshly loaded collection.

        Raises
        ------
        StoreError
            If the file exists but cannot be read, is not valid JSON, is
            not a JSON array or holds a record that is not a book.
        """
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("Backing file %s not found, initialising it", self.path)
            self._write_text("[]")
            self.books = []
            return self.books
        except OSError as exc:
            logger.debug("Error reading books file %s: %s", self.path, exc)
            raise StoreError(f"Cannot read {self.path}: {exc}") from exc

        try:
            raw = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.debug("Error parsing books file %s: %s", self.path, exc)
            raise StoreError(f"Invalid JSON in {self.path}: {exc}") from exc
        if not isinstance(raw, list):
            logger.debug("Books file %s does not hold a JSON array", self.path)
            raise StoreError(f"Expected a JSON array in {self.path}")

        try:
            self.books = [Book.model_validate(entry) for entry in raw]
        except ValidationError as exc:
            logger.debug("Invalid book record in %s: %s", self.path, exc)
            raise StoreError(f"Invalid book record in {self.path}") from exc
        return self.books

    def save(self) -> None:
        """Serialise the whole collection and overwrite the backing file."""
        data = [book.model_dump(by_alias=True) for book in self.books]
        self._write_text(json.dumps(data, ensure_ascii=False, indent=2))

    def _write_text(self, text: str) -> None:
        # Sibling temp file, then os.replace over the backing file.
        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                f.write(text)
            os.replace(tmp_name, self.path)
        except OSError as exc:
            logger.debug("Error writing books file %s: %s", self.path, exc)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise StoreError(f"Cannot write {self.path}: {exc}") from exc

    # ------------------------------------------------------------------
    # In-memory operations

    def find(self, isbn: str) -> Optional[Book]:
        """Return the first book whose ISBN matches, or ``None``."""
        return next((b for b in self.books if b.isbn == isbn), None)

    def index_of(self, isbn: str) -> int:
        for index, book in enumerate(self.books):
            if book.isbn == isbn:
                return index
        return -1

    def add(self, book: Book) -> Book:
        # No uniqueness check; lookups act on the first match.
        self.books.append(book)
        return book

    def remove_at(self, index: int) -> Book:
        return self.books.pop(index)
