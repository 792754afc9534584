import json

import pytest

from bookshelf.models import Book
from bookshelf.storage import BookStore, StoreError


def make_book(isbn="111", title="A", **overrides):
    fields = {
        "title": title,
        "author": "B",
        "publisher": "C",
        "published_date": "2020",
        "isbn": isbn,
    }
    fields.update(overrides)
    return Book(**fields)


def test_load_creates_missing_file(store, data_file):
    assert not data_file.exists()

    assert store.load() == []
    assert data_file.exists()
    assert json.loads(data_file.read_text(encoding="utf-8")) == []


def test_load_creates_missing_parent_directories(tmp_path):
    path = tmp_path / "nested" / "dir" / "books.json"
    store = BookStore(path)

    assert store.load() == []
    assert path.read_text(encoding="utf-8") == "[]"


def test_load_reads_existing_records(store, data_file):
    data_file.write_text(
        json.dumps(
            [
                {
                    "title": "Dune",
                    "author": "Frank Herbert",
                    "publisher": "Chilton",
                    "publishedDate": "1965",
                    "isbn": "9780441013593",
                }
            ]
        ),
        encoding="utf-8",
    )

    books = store.load()
    assert len(books) == 1
    assert books[0].title == "Dune"
    assert books[0].published_date == "1965"


def test_load_replaces_in_memory_collection(store, data_file):
    store.books.append(make_book(isbn="stale"))
    data_file.write_text("[]", encoding="utf-8")

    store.load()
    assert store.books == []


def test_save_writes_pretty_printed_array(store, data_file):
    store.load()
    store.add(make_book())
    store.save()

    text = data_file.read_text(encoding="utf-8")
    assert text == json.dumps(
        [
            {
                "title": "A",
                "author": "B",
                "publisher": "C",
                "publishedDate": "2020",
                "isbn": "111",
            }
        ],
        indent=2,
    )


def test_save_keeps_non_ascii_text(store, data_file):
    store.load()
    store.add(make_book(title="Les Misérables"))
    store.save()

    assert "Les Misérables" in data_file.read_text(encoding="utf-8")


def test_save_then_load_round_trip(data_file):
    first = BookStore(data_file)
    first.load()
    first.add(make_book(isbn="1"))
    first.add(make_book(isbn="2", title="Second"))
    first.save()

    second = BookStore(data_file)
    assert second.load() == first.books


def test_save_leaves_no_temp_files(store, data_file):
    store.load()
    store.add(make_book())
    store.save()

    assert [p.name for p in data_file.parent.iterdir()] == ["books.json"]


@pytest.mark.parametrize(
    "content",
    [
        "{not json",
        '{"title": "object, not array"}',
        '[{"title": "missing the other fields"}]',
        '[{"title": 1, "author": "B", "publisher": "C", "publishedDate": "2020", "isbn": "1"}]',
    ],
)
def test_load_rejects_invalid_content(store, data_file, content):
    data_file.write_text(content, encoding="utf-8")

    with pytest.raises(StoreError):
        store.load()
    # The broken file is left untouched
    assert data_file.read_text(encoding="utf-8") == content


def test_load_propagates_read_errors(tmp_path):
    # A directory in place of the file cannot be read
    path = tmp_path / "books.json"
    path.mkdir()

    with pytest.raises(StoreError):
        BookStore(path).load()


def test_save_propagates_write_errors(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("", encoding="utf-8")
    store = BookStore(blocker / "books.json")

    with pytest.raises(StoreError):
        store.save()


def test_find_and_index_of_use_first_match(store):
    first = make_book(isbn="dup", title="First")
    second = make_book(isbn="dup", title="Second")
    store.add(first)
    store.add(second)

    assert store.find("dup") is first
    assert store.index_of("dup") == 0
    assert store.find("missing") is None
    assert store.index_of("missing") == -1


def test_remove_at_removes_single_record(store):
    store.add(make_book(isbn="dup", title="First"))
    store.add(make_book(isbn="dup", title="Second"))

    removed = store.remove_at(store.index_of("dup"))
    assert removed.title == "First"
    assert [b.title for b in store.books] == ["Second"]


def test_concurrent_stores_lose_updates(data_file):
    # Two request cycles that overlap: both load before either saves.
    BookStore(data_file).load()
    a = BookStore(data_file)
    b = BookStore(data_file)
    a.load()
    b.load()

    a.add(make_book(isbn="from-a"))
    a.save()
    b.add(make_book(isbn="from-b"))
    b.save()

    final = BookStore(data_file).load()
    assert [book.isbn for book in final] == ["from-b"]


def test_extra_keys_survive_round_trip(store, data_file):
    record = {
        "title": "A",
        "author": "B",
        "publisher": "C",
        "publishedDate": "2020",
        "isbn": "111",
        "pages": 320,
        "tags": ["classic"],
    }
    data_file.write_text(json.dumps([record]), encoding="utf-8")

    store.load()
    store.save()
    assert json.loads(data_file.read_text(encoding="utf-8")) == [record]
