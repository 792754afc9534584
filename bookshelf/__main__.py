import logging

import uvicorn

from .config import settings


def main() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logging.getLogger(__name__).info(
        "Starting bookshelf on http://%s:%s", settings.host, settings.port
    )
    uvicorn.run("bookshelf.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
