# bookshelf/models.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Book(BaseModel):
    """A single record of the books collection.

    ``isbn`` is the lookup key but is treated as an opaque string: it is
    neither validated nor guaranteed unique. ``published_date`` travels
    as ``publishedDate`` both on the wire and in the backing file. Keys
    the file carries beyond the five fields are kept and written back.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    title: str
    author: str
    publisher: str
    published_date: str = Field(alias="publishedDate")
    isbn: str


class CreateBookRequest(BaseModel):
    # Every field is optional here so that the handler, not the parser,
    # decides what "missing" means (absent and empty both count).
    title: Optional[str] = None
    author: Optional[str] = None
    publisher: Optional[str] = None
    published_date: Optional[str] = Field(default=None, alias="publishedDate")
    isbn: Optional[str] = None

    def is_complete(self) -> bool:
        return all(
            (self.title, self.author, self.publisher, self.published_date, self.isbn)
        )


class UpdateBookRequest(BaseModel):
    title: Optional[str] = None
    author: Optional[str] = None
    publisher: Optional[str] = None
    published_date: Optional[str] = Field(default=None, alias="publishedDate")


class BookMessage(BaseModel):
    message: str
    book: Book


class DeletedBook(BaseModel):
    message: str
    isbn: str
