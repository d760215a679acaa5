"""FastAPI HTTP layer package.

Public re-export so callers can write::

    from deepscrape.api import app

    uvicorn deepscrape.api:app --reload
"""

from deepscrape.api.app import app

__all__ = ["app"]
