"""Embedded-state inspection of rendered markup.

Pages that hydrate on the client usually ship their data inside the markup:
JSON-LD blocks, ``data-*`` attributes and global state objects assigned in
inline scripts.  Mining those approximates inspecting the page's runtime
without executing any script.

Probes run in order and the first hit wins:

1. JSON-LD mentioning a query word            → score 0.90
2. ``data-price|value|last|current`` attribute → score 0.85
3. Global state object mentioning a query word → score 0.95
"""

from __future__ import annotations

import json
import re
from typing import Any, Iterator, List, Optional

from deepscrape.scraper.markup import (
    clean_text,
    contains_query_word,
    extract_attribute_values,
    extract_json_ld,
    extract_script_blocks,
    query_words,
)
from deepscrape.scraper.models import AnalysisResult, DebugTrace

JSON_LD_SCORE = 0.9
DATA_ATTRIBUTE_SCORE = 0.85
WINDOW_STATE_SCORE = 0.95

JSON_LD_MAX_CHARS = 1200
DATA_ATTRIBUTE_MAX_CHARS = 400
WINDOW_STATE_MAX_CHARS = 1200

# Well-known hydration globals.  Fixed list: new framework conventions need
# adding here by hand.
STATE_VARIABLES = (
    "__INITIAL_STATE__",
    "__PRELOADED_STATE__",
    "__NEXT_DATA__",
    "__NUXT__",
    "__APOLLO_STATE__",
)

_DATA_ATTRIBUTE = re.compile(r"^data-(?:price|value|last|current)", re.IGNORECASE)
_NUMERIC = re.compile(r"\$?\d")

_STATE_ASSIGNMENTS = [
    re.compile(rf"(?:window\.)?{re.escape(name)}\s*=\s*(?=\{{)") for name in STATE_VARIABLES
] + [re.compile(r"window\.[A-Za-z_$][\w$]*\s*=\s*(?=\{)")]

_decoder = json.JSONDecoder()


def _assigned_objects(script: str) -> Iterator[Any]:
    """Yield every JSON object assigned to a known state global in *script*."""
    for pattern in _STATE_ASSIGNMENTS:
        for match in pattern.finditer(script):
            try:
                value, _ = _decoder.raw_decode(script, match.end())
            except ValueError:
                continue
            yield value


def _probe_json_ld(html: str, words: List[str]) -> Optional[str]:
    for data in extract_json_ld(html):
        text = json.dumps(data, ensure_ascii=False)
        if contains_query_word(text, words):
            return clean_text(text, JSON_LD_MAX_CHARS)
    return None


def _probe_data_attributes(html: str, words: List[str]) -> Optional[str]:
    for value in extract_attribute_values(html, _DATA_ATTRIBUTE):
        if not value:
            continue
        if contains_query_word(value, words) or _NUMERIC.search(value):
            return clean_text(value, DATA_ATTRIBUTE_MAX_CHARS)
    return None


def _probe_window_state(html: str, words: List[str]) -> Optional[str]:
    for script in extract_script_blocks(html):
        for value in _assigned_objects(script):
            text = json.dumps(value, ensure_ascii=False)
            if contains_query_word(text, words):
                return clean_text(text, WINDOW_STATE_MAX_CHARS)
    return None


def inspect_embedded_state(
    html: str,
    url: str,
    query: str,
    trace: DebugTrace,
) -> Optional[AnalysisResult]:
    """Run the three embedded-data probes against *html*.

    Never raises; a parsing fault is traced and reported as ``None``.
    """
    words = query_words(query)
    try:
        snippet = _probe_json_ld(html, words)
        if snippet is not None:
            trace.add(f"Found relevant JSON-LD data in {url}")
            return AnalysisResult(snippet=snippet, score=JSON_LD_SCORE, source=url)

        snippet = _probe_data_attributes(html, words)
        if snippet is not None:
            trace.add(f"Found relevant data attribute in {url}: {snippet}")
            return AnalysisResult(snippet=snippet, score=DATA_ATTRIBUTE_SCORE, source=url)

        snippet = _probe_window_state(html, words)
        if snippet is not None:
            trace.add(f"Found relevant window variable data in {url}")
            return AnalysisResult(snippet=snippet, score=WINDOW_STATE_SCORE, source=url)
    except Exception as exc:  # noqa: BLE001
        trace.add(f"Runtime inspection error for {url}: {exc}")
        return None

    trace.add(f"No embedded data relevant to the query in {url}")
    return None
