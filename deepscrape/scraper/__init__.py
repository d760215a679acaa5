"""Scraper package — fetch strategies, relevance analysis and link discovery."""

from deepscrape.scraper.analyzer import analyze_html_for_query
from deepscrape.scraper.embedded import inspect_embedded_state
from deepscrape.scraper.fetcher import fetch_direct, fetch_rendered
from deepscrape.scraper.links import extract_same_domain_links
from deepscrape.scraper.models import AnalysisResult, DebugTrace, PageContent, ScrapeOutcome

__all__ = [
    "analyze_html_for_query",
    "inspect_embedded_state",
    "fetch_direct",
    "fetch_rendered",
    "extract_same_domain_links",
    "AnalysisResult",
    "DebugTrace",
    "PageContent",
    "ScrapeOutcome",
]
