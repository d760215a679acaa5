"""Centralised settings for the Deep Scrape service.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

_CHROME_UA = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/117.0.0.0 Safari/537.36"
)


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Crawl orchestration
    # ------------------------------------------------------------------
    max_search_results: int = field(
        default_factory=lambda: int(os.environ.get("MAX_SEARCH_RESULTS", "8"))
    )
    max_links_per_page: int = field(
        default_factory=lambda: int(os.environ.get("MAX_LINKS_PER_PAGE", "6"))
    )
    # 0 disables internal-link crawling.  Only a single hop is implemented,
    # so any value >= 1 behaves the same.
    crawl_depth: int = field(
        default_factory=lambda: int(os.environ.get("CRAWL_DEPTH", "1"))
    )
    relevance_threshold: float = field(
        default_factory=lambda: float(os.environ.get("RELEVANCE_THRESHOLD", "0.1"))
    )
    max_context_chars: int = field(
        default_factory=lambda: int(os.environ.get("MAX_CONTEXT_CHARS", "12000"))
    )

    # ------------------------------------------------------------------
    # Fetching / rendering
    # ------------------------------------------------------------------
    user_agent: str = field(
        default_factory=lambda: os.environ.get("SCRAPER_USER_AGENT", _CHROME_UA)
    )
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "10.0"))
    )
    render_service_url: str = field(
        default_factory=lambda: os.environ.get("RENDER_SERVICE_URL", "")
    )
    render_timeout: float = field(
        default_factory=lambda: float(os.environ.get("RENDER_TIMEOUT", "30.0"))
    )
    collaborator_timeout: float = field(
        default_factory=lambda: float(os.environ.get("COLLABORATOR_TIMEOUT", "60.0"))
    )

    # ------------------------------------------------------------------
    # Search providers
    # ------------------------------------------------------------------
    google_api_key: str = field(
        default_factory=lambda: os.environ.get("GOOGLE_API_KEY", "")
    )
    google_cse_id: str = field(
        default_factory=lambda: os.environ.get("GOOGLE_CSE_ID", "")
    )
    brave_api_key: str = field(
        default_factory=lambda: os.environ.get("BRAVE_API_KEY", "")
    )
    searxng_base_url: str = field(
        default_factory=lambda: os.environ.get("SEARXNG_BASE_URL", "https://searx.be")
    )
    search_provider_timeout: float = field(
        default_factory=lambda: float(os.environ.get("SEARCH_PROVIDER_TIMEOUT", "15.0"))
    )
    searxng_instance_timeout: float = field(
        default_factory=lambda: float(os.environ.get("SEARXNG_INSTANCE_TIMEOUT", "5.0"))
    )
    search_retry_max: int = field(
        default_factory=lambda: int(os.environ.get("SEARCH_RETRY_MAX", "3"))
    )
    search_retry_base_delay: float = field(
        default_factory=lambda: float(os.environ.get("SEARCH_RETRY_BASE_DELAY", "2.0"))
    )

    # ------------------------------------------------------------------
    # Answer synthesis model
    # ------------------------------------------------------------------
    llm_provider: str = field(
        default_factory=lambda: os.environ.get("LLM_PROVIDER", "ollama")
    )
    ollama_chat_model: str = field(
        default_factory=lambda: os.environ.get("OLLAMA_CHAT_MODEL", "ministral-3:8b")
    )
    openai_chat_model: str = field(
        default_factory=lambda: os.environ.get("OPENAI_CHAT_MODEL", "gpt-4o-mini")
    )

    @property
    def crawl_enabled(self) -> bool:
        """``True`` when same-domain link crawling should run."""
        return self.crawl_depth > 0


# Module-level singleton, import this everywhere:
#   from deepscrape.config import settings
settings = Settings()
