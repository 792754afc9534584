"""
Catalog package for the books API.

Holds the route definitions that expose the books collection over HTTP.
The routes never own any state themselves: each request receives its
own ``BookStore`` over the application's backing file through the
``get_store`` dependency.
"""

from .router import get_store, router as books_router  # noqa: F401
