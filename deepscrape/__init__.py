"""Deep Scrape — answer a query by crawling live pages until one is relevant.

Public API::

    from deepscrape import run_deep_scrape
    outcome = await run_deep_scrape("current stock price of AAPL")
"""

from deepscrape.errors import DeepScrapeError, InternalScrapeError, InvalidQueryError
from deepscrape.orchestrator import DeepScraper, run_deep_scrape, validate_query
from deepscrape.scraper.models import ScrapeOutcome

__all__ = [
    "run_deep_scrape",
    "validate_query",
    "DeepScraper",
    "ScrapeOutcome",
    "DeepScrapeError",
    "InvalidQueryError",
    "InternalScrapeError",
]
