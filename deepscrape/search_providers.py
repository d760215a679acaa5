"""Multi-provider web search abstraction with automatic failover.

Provider priority (highest to lowest):
  1. Google Custom Search — requires GOOGLE_API_KEY and GOOGLE_CSE_ID.
  2. Brave Search — fast REST API; requires BRAVE_API_KEY.
  3. SearXNG  — free metasearch, rotates multiple public instances.
  4. DuckDuckGo — free, scraping-based; retried with exponential backoff.

All providers share a common interface:
``await search(query, max_results) -> list[str]``.  The ``SearchProviderChain``
tries each provider in order and returns the first non-empty result set.  If
every provider fails the chain returns ``[]``; a failed search is never fatal
to a scrape run.
"""

from __future__ import annotations

import asyncio
from abc import ABC, abstractmethod

import httpx
from duckduckgo_search import DDGS
from duckduckgo_search.exceptions import DuckDuckGoSearchException, RatelimitException

from deepscrape.config import settings

# ---------------------------------------------------------------------------
# Reliable public SearXNG instances (tried in order on failure)
# ---------------------------------------------------------------------------
_SEARXNG_FALLBACK_INSTANCES = [
    "https://search.bus-hit.me",
    "https://searx.be",
    "https://paulgo.io",
    "https://searx.tiekoetter.com",
]

_GOOGLE_ENDPOINT = "https://www.googleapis.com/customsearch/v1"
_BRAVE_ENDPOINT = "https://api.search.brave.com/res/v1/web/search"


def _dedupe(urls: list[str], max_results: int) -> list[str]:
    """Drop duplicates while preserving order, then cap at *max_results*."""
    unique: list[str] = []
    for url in urls:
        if url and url not in unique:
            unique.append(url)
        if len(unique) >= max_results:
            break
    return unique


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------

class SearchProvider(ABC):
    """Abstract base class for a single search provider."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable provider name."""

    @abstractmethod
    async def search(self, query: str, max_results: int = 8) -> list[str]:
        """Return a ranked list of URLs.  Must return ``[]`` (not raise) on failure."""


# ---------------------------------------------------------------------------
# Google Custom Search provider
# ---------------------------------------------------------------------------

class GoogleSearchProvider(SearchProvider):
    """Google Programmable Search JSON API.

    Skipped if either ``settings.google_api_key`` or ``settings.google_cse_id``
    is empty.  The API caps ``num`` at 10.
    """

    @property
    def name(self) -> str:
        return "Google"

    async def search(self, query: str, max_results: int = 8) -> list[str]:
        if not (settings.google_api_key and settings.google_cse_id):
            return []

        try:
            async with httpx.AsyncClient(timeout=settings.search_provider_timeout) as client:
                resp = await client.get(
                    _GOOGLE_ENDPOINT,
                    params={
                        "key": settings.google_api_key,
                        "cx": settings.google_cse_id,
                        "q": query,
                        "num": min(max_results, 10),
                    },
                )
                resp.raise_for_status()
                data = resp.json()
        except Exception as exc:
            print(f"[Google] request failed: {exc}")
            return []

        results = _dedupe(
            [item.get("link", "") for item in data.get("items", []) or []],
            max_results,
        )
        if results:
            print(f"[Google] ✓ {len(results)} result(s).")
        return results


# ---------------------------------------------------------------------------
# Brave Search provider
# ---------------------------------------------------------------------------

class BraveSearchProvider(SearchProvider):
    """Brave Search REST API (free tier: 2 000 queries/month).

    Skipped if ``settings.brave_api_key`` is empty.
    """

    @property
    def name(self) -> str:
        return "Brave"

    async def search(self, query: str, max_results: int = 8) -> list[str]:
        api_key = settings.brave_api_key
        if not api_key:
            return []

        try:
            async with httpx.AsyncClient(timeout=settings.search_provider_timeout) as client:
                resp = await client.get(
                    _BRAVE_ENDPOINT,
                    params={"q": query, "count": max_results},
                    headers={
                        "Accept": "application/json",
                        "Accept-Encoding": "gzip",
                        "X-Subscription-Token": api_key,
                    },
                )
                resp.raise_for_status()
                data = resp.json()
        except Exception as exc:
            print(f"[Brave] request failed: {exc}")
            return []

        results = _dedupe(
            [item.get("url", "") for item in data.get("web", {}).get("results", [])],
            max_results,
        )
        if results:
            print(f"[Brave] ✓ {len(results)} result(s).")
        return results


# ---------------------------------------------------------------------------
# SearXNG provider
# ---------------------------------------------------------------------------

class SearXNGProvider(SearchProvider):
    """Hit a SearXNG JSON endpoint.

    Tries the configured base URL first (``settings.searxng_base_url``), then
    rotates through ``_SEARXNG_FALLBACK_INSTANCES`` on failure.  Each instance
    gets the short ``searxng_instance_timeout`` so dead nodes fail fast.
    """

    @property
    def name(self) -> str:
        return "SearXNG"

    async def _query_instance(
        self,
        client: httpx.AsyncClient,
        base: str,
        query: str,
        max_results: int,
    ) -> list[str]:
        resp = await client.get(
            f"{base}/search",
            params={
                "q": query,
                "format": "json",
                "engines": "google,bing,brave,duckduckgo",
            },
            headers={
                "Accept": "application/json, text/javascript, */*",
                "User-Agent": settings.user_agent,
            },
        )
        resp.raise_for_status()
        data = resp.json()
        return _dedupe(
            [item.get("url") or item.get("href") or "" for item in data.get("results", [])],
            max_results,
        )

    async def search(self, query: str, max_results: int = 8) -> list[str]:
        primary = settings.searxng_base_url.rstrip("/")
        instances = [primary] + [
            u for u in _SEARXNG_FALLBACK_INSTANCES if u.rstrip("/") != primary
        ]

        async with httpx.AsyncClient(
            timeout=settings.searxng_instance_timeout,
            follow_redirects=True,
        ) as client:
            for base in instances:
                try:
                    urls = await self._query_instance(client, base, query, max_results)
                    if urls:
                        print(f"[SearXNG] ✓ {base} → {len(urls)} result(s).")
                        return urls
                    print(f"[SearXNG] {base} returned 0 results, trying next instance.")
                except Exception as exc:
                    print(f"[SearXNG] {base} failed: {exc!r:.120}, trying next instance.")

        print("[SearXNG] all instances exhausted.")
        return []


# ---------------------------------------------------------------------------
# DuckDuckGo provider (with exponential backoff)
# ---------------------------------------------------------------------------

def _ddg_text(query: str, max_results: int) -> list[dict]:
    with DDGS() as ddgs:
        return list(ddgs.text(query, max_results=max_results) or [])


class DuckDuckGoProvider(SearchProvider):
    """Wrapper around the synchronous ``DDGS`` client with retry on rate-limit.

    The blocking client runs in a worker thread so the event loop stays free.
    """

    @property
    def name(self) -> str:
        return "DuckDuckGo"

    async def search(self, query: str, max_results: int = 8) -> list[str]:
        base_delay = settings.search_retry_base_delay
        max_retries = settings.search_retry_max

        for attempt in range(max_retries + 1):
            try:
                results = await asyncio.to_thread(_ddg_text, query, max_results)
                urls = _dedupe([r["href"] for r in results if "href" in r], max_results)
                if urls:
                    print(f"[DuckDuckGo] ✓ {len(urls)} result(s).")
                return urls
            except RatelimitException:
                if attempt < max_retries:
                    delay = base_delay * (2 ** attempt)
                    print(
                        f"[DuckDuckGo] rate-limited (attempt {attempt + 1}/{max_retries}); "
                        f"retrying in {delay:.0f}s …"
                    )
                    await asyncio.sleep(delay)
                else:
                    print(f"[DuckDuckGo] exhausted {max_retries} retries — rate-limited.")
                    return []
            except DuckDuckGoSearchException as exc:
                print(f"[DuckDuckGo] search error: {exc}")
                return []
            except Exception as exc:
                print(f"[DuckDuckGo] error: {exc}")
                return []

        return []


# ---------------------------------------------------------------------------
# Provider chain
# ---------------------------------------------------------------------------

class SearchProviderChain:
    """Try providers in order; return the first non-empty result list."""

    def __init__(self, providers: list[SearchProvider]) -> None:
        self._providers = providers

    @property
    def providers(self) -> list[SearchProvider]:
        return list(self._providers)

    async def search(self, query: str, max_results: int = 8) -> list[str]:
        for provider in self._providers:
            urls = await provider.search(query, max_results=max_results)
            if urls:
                return urls[:max_results]
        print("[search chain] all providers returned no results.")
        return []


# ---------------------------------------------------------------------------
# Default chain factory
# ---------------------------------------------------------------------------

def build_default_chain() -> SearchProviderChain:
    """Google (if keyed) → Brave (if keyed) → SearXNG → DuckDuckGo."""
    providers: list[SearchProvider] = []
    if settings.google_api_key and settings.google_cse_id:
        providers.append(GoogleSearchProvider())
    if settings.brave_api_key:
        providers.append(BraveSearchProvider())
    providers.append(SearXNGProvider())
    providers.append(DuckDuckGoProvider())
    return SearchProviderChain(providers)
