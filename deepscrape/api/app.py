"""FastAPI application factory.

Routers
-------
    /deep-scrape  — run one deep-scrape orchestration for a query
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from deepscrape.api.routers import scrape as scrape_router


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Deep Scrape API",
        description=(
            "Answers a natural-language query by searching the web, fetching "
            "candidate pages through layered strategies (direct, rendered, "
            "embedded data, same-domain links) and summarising the first "
            "relevant result.  Every response carries the run's debug trace."
        ),
        version="0.1.0",
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(scrape_router.router, prefix="/deep-scrape", tags=["deep-scrape"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn deepscrape.api.app:app --reload
app = create_app()
