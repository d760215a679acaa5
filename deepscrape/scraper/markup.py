"""Best-effort HTML helpers used by the analyzer and the extraction probes.

Regex stripping and BeautifulSoup lookups are kept behind these few
functions so a streaming tokenizer can replace them without touching the
orchestrator.  None of them validate markup; malformed input degrades to
partial output, never to an exception.
"""

from __future__ import annotations

import json
import re
from typing import Any, List, Optional, Pattern

from bs4 import BeautifulSoup

_INVISIBLE_BLOCKS = re.compile(
    r"<(script|style|noscript)\b[^>]*>.*?</\1\s*>", re.IGNORECASE | re.DOTALL
)
_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")
_QUERY_WORD = re.compile(r"\b\w{2,}\b")

_BLOCKED_PHRASES = (
    "unusual traffic",
    "we have detected",
    "detected unusual activity",
    "please show you're not a robot",
    "/sorry/index",
)


def strip_tags(html: str) -> str:
    """Return the whitespace-normalised visible text of *html*.

    ``<script>``, ``<style>`` and ``<noscript>`` blocks are dropped entirely;
    every other tag is replaced by a single space.
    """
    without_blocks = _INVISIBLE_BLOCKS.sub(" ", html)
    text = _TAG.sub(" ", without_blocks)
    return _WHITESPACE.sub(" ", text).strip()


def clean_text(text: str, max_len: int = 800) -> str:
    """Collapse whitespace and truncate to *max_len* chars with a ``...`` marker."""
    cleaned = _WHITESPACE.sub(" ", text).strip()
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "..."
    return cleaned


def query_words(query: str) -> List[str]:
    """Lower-cased words of at least two word characters, in query order."""
    return _QUERY_WORD.findall(query.lower())


def contains_query_word(text: str, words: List[str]) -> bool:
    lowered = text.lower()
    return any(word in lowered for word in words)


def _soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html, "html.parser")


def extract_script_blocks(html: str, script_type: Optional[str] = None) -> List[str]:
    """Return the bodies of inline ``<script>`` elements in document order.

    When *script_type* is given only scripts whose ``type`` attribute matches
    it (case-insensitively) are returned.
    """
    blocks: List[str] = []
    for script in _soup(html).find_all("script"):
        if script_type is not None:
            declared = (script.get("type") or "").strip().lower()
            if declared != script_type.lower():
                continue
        body = script.string if script.string is not None else script.get_text()
        if body and body.strip():
            blocks.append(body)
    return blocks


def extract_attribute_values(html: str, name_pattern: Pattern[str]) -> List[str]:
    """Return values of every attribute whose name matches *name_pattern*."""
    values: List[str] = []
    for tag in _soup(html).find_all(True):
        for name, value in tag.attrs.items():
            if not name_pattern.match(name):
                continue
            if isinstance(value, list):
                value = " ".join(value)
            values.append(str(value))
    return values


def extract_json_ld(html: str) -> List[Any]:
    """Parse every ``application/ld+json`` block; malformed ones are skipped."""
    parsed: List[Any] = []
    for block in extract_script_blocks(html, script_type="application/ld+json"):
        try:
            parsed.append(json.loads(block))
        except (json.JSONDecodeError, ValueError):
            continue
    return parsed


def is_blocked_page(html: str) -> bool:
    """Return ``True`` if *html* looks like a provider bot-check / block page."""
    lowered = html.lower()
    return any(phrase in lowered for phrase in _BLOCKED_PHRASES)
