"""Per-run and per-URL context objects threaded through every crawl step.

A :class:`CrawlContext` owns everything that is mutated during one run: the
visited-URL set and the debug trace.  It is created by the orchestrator and
passed explicitly into each strategy, so two concurrent runs never share
state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Set

import httpx

from deepscrape.config import Settings
from deepscrape.scraper.models import DebugTrace


@dataclass
class CrawlContext:
    query: str
    settings: Settings
    client: httpx.AsyncClient
    trace: DebugTrace = field(default_factory=DebugTrace)
    visited: Set[str] = field(default_factory=set)

    def claim(self, url: str) -> bool:
        """Mark *url* as visited.  Returns ``False`` if it was already taken.

        This is the only place the visited set is written, so the
        check-then-insert cannot interleave with another insertion.
        """
        if url in self.visited:
            return False
        self.visited.add(url)
        return True

    def log(self, step: str) -> None:
        self.trace.add(step)


@dataclass
class TrialContext:
    """State for trying one URL through the strategy tiers."""

    run: CrawlContext
    url: str
    fast_html: Optional[str] = None
    rendered_html: Optional[str] = None

    @property
    def best_html(self) -> Optional[str]:
        """Markup to mine for links: rendered output preferred over direct."""
        return self.rendered_html or self.fast_html
