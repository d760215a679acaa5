"""Deep-scrape endpoint.

Routes
------
POST /deep-scrape    Body: {"query": "..."}

Responses
---------
200  ``ScrapeOutcome`` as JSON — also when nothing relevant was found
     (``found: false``).
400  ``{"error": "..."}`` when the query is missing, not a string or blank.
500  ``{"error": "..."}`` for unexpected internal faults; no partial result.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from deepscrape.errors import InternalScrapeError, InvalidQueryError
from deepscrape.orchestrator import run_deep_scrape

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class DeepScrapeRequest(BaseModel):
    # Typed loosely so a non-string query maps to our 400, not a 422.
    query: Any = None


# ---------------------------------------------------------------------------
# Route
# ---------------------------------------------------------------------------

@router.post("")
async def deep_scrape(body: DeepScrapeRequest) -> Any:
    """Search, crawl and analyse live pages until one answers ``query``."""
    try:
        outcome = await run_deep_scrape(body.query)
    except InvalidQueryError as exc:
        return JSONResponse(status_code=400, content={"error": str(exc)})
    except InternalScrapeError as exc:
        return JSONResponse(status_code=500, content={"error": str(exc)})
    return outcome.to_dict()
