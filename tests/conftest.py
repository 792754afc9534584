import pytest
from fastapi.testclient import TestClient

from bookshelf.config import Settings
from bookshelf.main import create_app
from bookshelf.storage import BookStore


@pytest.fixture
def data_file(tmp_path):
    # One backing file per test
    return tmp_path / "books.json"


@pytest.fixture
def store(data_file):
    return BookStore(data_file)


@pytest.fixture
def app(data_file):
    return create_app(Settings(data_file=str(data_file)))


@pytest.fixture
def client(app):
    # Entering the context runs the lifespan, which loads (or creates) the file
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def book_payload():
    return {
        "title": "A",
        "author": "B",
        "publisher": "C",
        "publishedDate": "2020",
        "isbn": "111",
    }
