"""Same-domain link discovery for the bounded internal crawl."""

from __future__ import annotations

import re
from typing import Collection, List
from urllib.parse import urljoin, urlparse

MAX_INTERNAL_LINKS = 6

_ANCHOR_HREF = re.compile(
    r"<a\b[^>]*?\bhref\s*=\s*[\"']([^\"']*)[\"'][^>]*>", re.IGNORECASE
)


def _resolve(base_url: str, href: str) -> str | None:
    """Return an absolute http(s) URL for *href*, or ``None`` to skip it.

    Root-relative and protocol-relative paths are joined to *base_url*;
    absolute http(s) links are kept; everything else (fragments, ``mailto:``,
    ``javascript:`` and document-relative paths) is dropped.
    """
    href = href.strip()
    if href.startswith("/"):
        return urljoin(base_url, href)
    if href.lower().startswith(("http://", "https://")):
        return href
    return None


def extract_same_domain_links(
    base_url: str,
    html: str,
    visited: Collection[str],
    limit: int = MAX_INTERNAL_LINKS,
) -> List[str]:
    """Return up to *limit* unvisited links on the same host as *base_url*.

    Links are returned in document order without duplicates.  Malformed
    hrefs are skipped silently.
    """
    try:
        base_host = urlparse(base_url).hostname
    except ValueError:
        return []
    if not base_host or limit <= 0:
        return []

    links: List[str] = []
    for match in _ANCHOR_HREF.finditer(html):
        try:
            full_url = _resolve(base_url, match.group(1))
            if full_url is None:
                continue
            host = urlparse(full_url).hostname
        except ValueError:
            continue
        if host != base_host or full_url in visited or full_url in links:
            continue
        links.append(full_url)
        if len(links) >= limit:
            break
    return links
