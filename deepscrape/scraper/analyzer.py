"""Keyword-overlap relevance scoring for fetched pages.

This is deliberately not a ranker: a page scores by the fraction of
distinct query words that occur anywhere in its visible text.
"""

from __future__ import annotations

from typing import Optional

from deepscrape.scraper.markup import query_words, strip_tags
from deepscrape.scraper.models import AnalysisResult

# Policy floor below which a page is treated as irrelevant.  Tunable via
# ``settings.relevance_threshold``; not a statistical guarantee.
RELEVANCE_THRESHOLD = 0.1

# Snippet length used when the query has no scorable words.
DEGENERATE_SNIPPET_CHARS = 1500

_EPSILON = 1e-4


def score_relevance(text: str, query: str) -> float:
    """Return the share of distinct query words found in *text*, in ``[0, 1]``.

    Repeated query words count once in both the numerator and the
    denominator, so "price price aapl" against a page mentioning only
    "aapl" scores 0.5, not 0.33.  ``settings.relevance_threshold`` is read
    against this ratio.

    A query without any word of two or more characters scores ``1.0``.
    """
    words = list(dict.fromkeys(query_words(query)))
    if not words:
        return 1.0
    lowered = text.lower()
    matches = sum(1 for word in words if word in lowered)
    return matches / (len(words) + _EPSILON)


def analyze_html_for_query(
    html: str,
    url: str,
    query: str,
    threshold: float = RELEVANCE_THRESHOLD,
) -> Optional[AnalysisResult]:
    """Score *html* against *query* and return an :class:`AnalysisResult`.

    Returns ``None`` when the page falls below *threshold*.  On acceptance
    the snippet is the full visible text so the answer synthesiser sees the
    whole page; degenerate queries get the first 1500 characters instead.
    """
    text = strip_tags(html)

    if not query_words(query):
        return AnalysisResult(
            snippet=text[:DEGENERATE_SNIPPET_CHARS], score=1.0, source=url
        )

    score = score_relevance(text, query)
    if score < threshold:
        return None
    return AnalysisResult(snippet=text, score=score, source=url)
