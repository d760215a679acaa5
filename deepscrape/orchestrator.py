"""Deep-scrape orchestrator: search, then try each URL through ranked tiers.

Run lifecycle::

    SEARCHING → PER_URL_TRIAL → (PER_LINK_TRIAL) → DONE(found | not-found)

For every candidate URL the tiers below run strictly in order, cheapest
first, and the first relevant result ends the run:

    fast fetch → web scraper (rendered) → runtime data → internal crawling

Internal crawling re-runs the first three tiers on up to
``settings.max_links_per_page`` same-domain links of the page.  The search
is satisficing: nothing is compared across tiers or URLs.

Every decision is appended to the run's :class:`DebugTrace`; no strategy
failure aborts a run.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, List, Optional

import httpx

from deepscrape.config import Settings, settings as default_settings
from deepscrape.errors import DeepScrapeError, InternalScrapeError, InvalidQueryError
from deepscrape.scraper.analyzer import analyze_html_for_query
from deepscrape.scraper.context import CrawlContext, TrialContext
from deepscrape.scraper.embedded import inspect_embedded_state
from deepscrape.scraper.fetcher import fetch_direct, fetch_rendered
from deepscrape.scraper.links import extract_same_domain_links
from deepscrape.scraper.models import AnalysisResult, DebugTrace, PageContent, ScrapeOutcome
from deepscrape.search_providers import build_default_chain
from deepscrape.synthesizer import synthesize_answer

SearchFn = Callable[[str, int], Awaitable[List[str]]]
SynthesizeFn = Callable[[str, str, DebugTrace], Awaitable[Optional[str]]]
StrategyFn = Callable[[TrialContext], Awaitable[Optional[AnalysisResult]]]


@dataclass(frozen=True)
class Tier:
    label: str
    strategy: StrategyFn


def validate_query(query: Any) -> str:
    """Return the trimmed query or raise :class:`InvalidQueryError`."""
    if not isinstance(query, str) or not query.strip():
        raise InvalidQueryError()
    return query.strip()


class DeepScraper:
    """Drives one or more deep-scrape runs with injectable collaborators.

    Args:
        settings: Tunables; defaults to the module-level ``settings``.
        search: ``async (query, max_results) -> list[str]``.  Defaults to the
            provider chain from :func:`build_default_chain`.
        synthesize: ``async (query, context, trace) -> str | None``.
        client: Optional shared ``httpx.AsyncClient``.  When omitted each run
            opens (and closes) its own.

    Runs share no mutable state, so one instance can serve concurrent runs.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        search: Optional[SearchFn] = None,
        synthesize: Optional[SynthesizeFn] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.settings = settings or default_settings
        self._search = search or build_default_chain().search
        self._synthesize = synthesize or synthesize_answer
        self._client = client

        self.url_tiers: List[Tier] = [
            Tier("fast fetch", self._try_direct),
            Tier("web scraper", self._try_rendered),
            Tier("runtime data", self._try_embedded),
            Tier("internal crawling", self._try_internal_links),
        ]
        # Internal links get every tier except another round of crawling.
        self.link_tiers: List[Tier] = self.url_tiers[:3]

    # ------------------------------------------------------------------
    # Entry
    # ------------------------------------------------------------------

    async def run(self, query: str) -> ScrapeOutcome:
        query = validate_query(query)
        if self._client is not None:
            return await self._orchestrate(query, self._client)
        async with httpx.AsyncClient() as client:
            return await self._orchestrate(query, client)

    async def _orchestrate(self, query: str, client: httpx.AsyncClient) -> ScrapeOutcome:
        ctx = CrawlContext(query=query, settings=self.settings, client=client)
        ctx.log("Starting deep scrape orchestration...")

        urls = await self._perform_search(ctx)
        ctx.trace.search_results = list(urls)
        if not urls:
            ctx.log("No search results found")
            return ScrapeOutcome.not_found(ctx.trace)

        for url in urls:
            if not ctx.claim(url):
                ctx.log(f"Skipping {url}: already visited")
                continue

            ctx.log(f"Processing {url} with multi-layer extraction")
            print(f"[SCRAPING] {url}")
            result = await self._run_tiers(TrialContext(run=ctx, url=url), self.url_tiers)
            if result is not None:
                return await self._succeed(ctx, result)

        ctx.log("No relevant content found in any source")
        return ScrapeOutcome.not_found(ctx.trace)

    # ------------------------------------------------------------------
    # Collaborators
    # ------------------------------------------------------------------

    async def _perform_search(self, ctx: CrawlContext) -> List[str]:
        ctx.log("Searching for relevant URLs...")
        limit = self.settings.max_search_results
        print(f"[SEARCHING] Query: {ctx.query!r}")
        try:
            found = await asyncio.wait_for(
                self._search(ctx.query, limit),
                timeout=self.settings.collaborator_timeout,
            )
        except asyncio.TimeoutError:
            ctx.log("Search timed out")
            print("[SEARCHING] search timed out.")
            return []
        except Exception as exc:  # noqa: BLE001
            ctx.log(f"Search error: {exc}")
            print(f"[SEARCHING] search failed: {exc}")
            return []

        urls = list(found or [])[:limit]
        ctx.log(f"Found {len(urls)} search results")
        print(f"[SEARCHING] Found {len(urls)} URL(s).")
        return urls

    async def _succeed(self, ctx: CrawlContext, result: AnalysisResult) -> ScrapeOutcome:
        context = result.snippet[: self.settings.max_context_chars]
        try:
            answer = await asyncio.wait_for(
                self._synthesize(ctx.query, context, ctx.trace),
                timeout=self.settings.collaborator_timeout,
            )
        except asyncio.TimeoutError:
            ctx.log("AI analysis timed out")
            answer = None
        except Exception as exc:  # noqa: BLE001
            ctx.log(f"AI analysis failed: {exc}")
            answer = None
        return ScrapeOutcome.success(result, answer, ctx.trace)

    # ------------------------------------------------------------------
    # Tier iteration
    # ------------------------------------------------------------------

    async def _run_tiers(
        self,
        trial: TrialContext,
        tiers: List[Tier],
    ) -> Optional[AnalysisResult]:
        """Run *tiers* in order against *trial*; return the first acceptance."""
        for tier in tiers:
            try:
                result = await tier.strategy(trial)
            except Exception as exc:  # noqa: BLE001
                trial.run.log(f"{tier.label} failed for {trial.url}: {exc}")
                continue
            if result is not None:
                trial.run.log(f"Found relevant content via {tier.label}: {result.source}")
                return result
        return None

    def _analyze(self, trial: TrialContext, page: PageContent, label: str) -> Optional[AnalysisResult]:
        ctx = trial.run
        result = analyze_html_for_query(
            page.html, page.url, ctx.query, threshold=self.settings.relevance_threshold
        )
        if result is None:
            ctx.log(f"Content from {page.url} via {label} not relevant enough")
        else:
            ctx.log(f"Content from {page.url} via {label} scored {result.score:.2f}")
        return result

    # ------------------------------------------------------------------
    # Strategies: uniform (TrialContext) -> AnalysisResult | None
    # ------------------------------------------------------------------

    async def _try_direct(self, trial: TrialContext) -> Optional[AnalysisResult]:
        html = await fetch_direct(trial.run, trial.url)
        trial.fast_html = html
        if html is None:
            return None
        return self._analyze(trial, PageContent(trial.url, html, "direct"), "fast fetch")

    async def _try_rendered(self, trial: TrialContext) -> Optional[AnalysisResult]:
        html = await fetch_rendered(trial.run, trial.url)
        trial.rendered_html = html
        if html is None:
            return None
        return self._analyze(trial, PageContent(trial.url, html, "rendered"), "web scraper")

    async def _try_embedded(self, trial: TrialContext) -> Optional[AnalysisResult]:
        ctx = trial.run
        ctx.log(f"Inspecting runtime data for {trial.url}")
        html = trial.rendered_html
        # A re-fetch here is not cached on the trial: link discovery only
        # sees markup from the fetch tiers.
        if html is None:
            html = await fetch_rendered(ctx, trial.url)
        if html is None:
            return None
        return inspect_embedded_state(html, trial.url, ctx.query, ctx.trace)

    async def _try_internal_links(self, trial: TrialContext) -> Optional[AnalysisResult]:
        ctx = trial.run
        html = trial.best_html
        if not self.settings.crawl_enabled or html is None:
            return None

        ctx.log(f"Crawling internal links on {trial.url}")
        links = extract_same_domain_links(
            trial.url, html, ctx.visited, limit=self.settings.max_links_per_page
        )
        ctx.log(f"Found {len(links)} internal links to check")

        for link in links:
            if not ctx.claim(link):
                continue
            ctx.log(f"Checking internal link {link}")
            result = await self._run_tiers(TrialContext(run=ctx, url=link), self.link_tiers)
            if result is not None:
                return result
        return None


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

async def run_deep_scrape(
    query: Any,
    settings: Optional[Settings] = None,
    search: Optional[SearchFn] = None,
    synthesize: Optional[SynthesizeFn] = None,
) -> ScrapeOutcome:
    """Answer *query* from live web pages and return a :class:`ScrapeOutcome`.

    Raises:
        InvalidQueryError: *query* is missing, not a string, or blank.
        InternalScrapeError: an unexpected fault escaped the orchestrator.
            The original exception is chained but no partial result is
            returned.
    """
    trimmed = validate_query(query)
    print(f"[DEEP-SCRAPE] Starting run for {trimmed!r} …")
    try:
        scraper = DeepScraper(settings=settings, search=search, synthesize=synthesize)
        outcome = await scraper.run(trimmed)
    except DeepScrapeError:
        raise
    except Exception as exc:
        print(f"[DEEP-SCRAPE] Internal error: {exc!r}")
        raise InternalScrapeError() from exc

    status = f"found at {outcome.source}" if outcome.found else "no relevant content"
    print(f"[DEEP-SCRAPE] Done: {status} ({len(outcome.debug.steps)} trace steps).")
    return outcome
