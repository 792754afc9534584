# bookshelf/main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse

from .catalog import books_router
from .config import Settings, settings as default_settings
from .storage import BookStore, StoreError


logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # A StoreError here aborts startup before any connection is accepted.
    store = BookStore(app.state.settings.data_file)
    try:
        books = store.load()
    except StoreError:
        logger.error("Cannot load books from %s, aborting startup", store.path)
        raise
    logger.info("Loaded %d book(s) from %s", len(books), store.path)
    yield


async def require_json_content_type(request: Request, call_next):
    """Reject POST and PUT requests that do not declare a JSON body."""
    if request.method in ("POST", "PUT"):
        content_type = request.headers.get("content-type")
        if not content_type or JSON_MEDIA_TYPE not in content_type:
            return PlainTextResponse(
                "Content-Type must be application/json", status_code=400
            )
    return await call_next(request)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if any(err.get("type") == "json_invalid" for err in errors):
        detail = "; ".join(
            str(err.get("ctx", {}).get("error") or err.get("msg")) for err in errors
        )
        return PlainTextResponse(f"Invalid JSON body: {detail}", status_code=400)

    detail = "; ".join(
        "{}: {}".format(".".join(str(part) for part in err.get("loc", ())), err.get("msg"))
        for err in errors
    )
    return PlainTextResponse(f"Invalid request body: {detail}", status_code=400)


async def store_error_handler(request: Request, exc: StoreError):
    logger.error(
        "Storage failure while handling %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )
    return PlainTextResponse("Internal server error", status_code=500)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or default_settings

    app = FastAPI(
        title="Bookshelf",
        description="CRUD service for a books collection stored in a JSON file.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.middleware("http")(require_json_content_type)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StoreError, store_error_handler)

    app.include_router(books_router)
    return app


app = create_app()
