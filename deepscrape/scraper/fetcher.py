"""Direct and rendered page fetchers.

Both fetchers share the run's ``httpx.AsyncClient`` and never raise: every
failure is written to the run's debug trace and reported as ``None``.
Rendering is delegated to an external render service that executes page
scripts and returns the resulting markup; no browser runs in-process.
"""

from __future__ import annotations

from typing import Optional

import httpx

from deepscrape.scraper.context import CrawlContext
from deepscrape.scraper.markup import is_blocked_page


def _describe(exc: Exception) -> str:
    """Short, human-readable description of a transport failure."""
    if isinstance(exc, httpx.TimeoutException):
        return f"timed out ({type(exc).__name__})"
    return str(exc) or type(exc).__name__


async def fetch_direct(ctx: CrawlContext, url: str) -> Optional[str]:
    """Plain ``GET`` of *url* with a browser User-Agent.

    Returns the body of any 2xx response, otherwise ``None``.  A provider
    block page ("unusual traffic", captcha) counts as a failure.
    """
    ctx.log(f"Fetching {url} via fast HTTP request")
    try:
        response = await ctx.client.get(
            url,
            headers={"User-Agent": ctx.settings.user_agent},
            timeout=ctx.settings.request_timeout,
            follow_redirects=True,
        )
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        ctx.log(f"Fast fetch failed for {url}: {_describe(exc)}")
        return None

    if not response.is_success:
        ctx.log(f"Fast fetch failed for {url}: HTTP {response.status_code}")
        return None

    html = response.text
    if is_blocked_page(html):
        ctx.log(f"Fast fetch for {url} returned a block page")
        return None

    ctx.log(f"Successfully fetched {url} ({len(html)} chars)")
    return html


def _rendered_body(response: httpx.Response) -> str:
    """Pull the markup out of a render-service response.

    Services answer either with the raw markup or with a JSON envelope that
    carries it under ``html`` or ``content``.
    """
    content_type = response.headers.get("content-type", "")
    if "json" in content_type:
        try:
            payload = response.json()
        except ValueError:
            return response.text
        if isinstance(payload, dict):
            for key in ("html", "content"):
                value = payload.get(key)
                if isinstance(value, str):
                    return value
    return response.text


async def fetch_rendered(ctx: CrawlContext, url: str) -> Optional[str]:
    """Ask the render service for the script-executed markup of *url*."""
    ctx.log(f"Scraping {url} with web scraper (JS rendering)")

    endpoint = ctx.settings.render_service_url
    if not endpoint:
        ctx.log(f"Web scraper unavailable for {url}: no render service configured")
        return None

    try:
        response = await ctx.client.post(
            endpoint,
            json={"url": url, "getText": False},
            timeout=ctx.settings.render_timeout,
        )
    except (httpx.HTTPError, httpx.InvalidURL) as exc:
        ctx.log(f"Scraper error for {url}: {_describe(exc)}")
        return None

    if not response.is_success:
        ctx.log(f"Web scraper failed for {url}: {response.status_code}")
        return None

    html = _rendered_body(response)
    if not html:
        ctx.log(f"Web scraper returned empty markup for {url}")
        return None

    ctx.log(f"Successfully scraped {url} with JS rendering ({len(html)} chars)")
    return html
