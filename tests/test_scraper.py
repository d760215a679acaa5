"""Tests for the markup helpers, the relevance analyzer and link discovery.

These are pure functions over strings, so no mocking is needed.
"""

from __future__ import annotations

import re

import pytest

from deepscrape.scraper.analyzer import (
    DEGENERATE_SNIPPET_CHARS,
    RELEVANCE_THRESHOLD,
    analyze_html_for_query,
    score_relevance,
)
from deepscrape.scraper.links import MAX_INTERNAL_LINKS, extract_same_domain_links
from deepscrape.scraper.markup import (
    clean_text,
    extract_attribute_values,
    extract_json_ld,
    extract_script_blocks,
    is_blocked_page,
    query_words,
    strip_tags,
)


# ---------------------------------------------------------------------------
# Fixtures / constants
# ---------------------------------------------------------------------------

_QUOTE_HTML = """\
<!DOCTYPE html>
<html>
<head>
  <title>AAPL Quote</title>
  <style>.price { color: green; }</style>
  <script>var tracking = "secret analytics payload";</script>
</head>
<body>
  <noscript>Please enable JavaScript</noscript>
  <main>
    <h1>Apple Inc. (AAPL)</h1>
    <p>The   current stock
       price is $189.84.</p>
  </main>
</body>
</html>
"""


# ---------------------------------------------------------------------------
# markup helpers
# ---------------------------------------------------------------------------

class TestStripTags:
    def test_removes_script_style_and_noscript(self) -> None:
        text = strip_tags(_QUOTE_HTML)
        assert "analytics" not in text
        assert "color" not in text
        assert "enable JavaScript" not in text

    def test_keeps_visible_text_with_normalised_whitespace(self) -> None:
        text = strip_tags(_QUOTE_HTML)
        assert "The current stock price is $189.84." in text
        assert "  " not in text

    def test_malformed_markup_does_not_raise(self) -> None:
        html = "<div><p>unclosed <b>bold <script>never closed"
        text = strip_tags(html)
        assert "unclosed" in text

    def test_empty_markup(self) -> None:
        assert strip_tags("") == ""


class TestCleanText:
    def test_short_text_unchanged(self) -> None:
        assert clean_text("  a   b  ") == "a b"

    def test_truncates_with_ellipsis(self) -> None:
        out = clean_text("x" * 50, max_len=10)
        assert out == "x" * 10 + "..."


class TestQueryWords:
    def test_lowercases_and_drops_single_chars(self) -> None:
        assert query_words("Price of a AAPL share?") == ["price", "of", "aapl", "share"]

    def test_punctuation_only_query_has_no_words(self) -> None:
        assert query_words("?! -- .") == []


class TestScriptAndAttributeHelpers:
    def test_extract_script_blocks_filters_by_type(self) -> None:
        html = (
            '<script type="application/ld+json">{"a": 1}</script>'
            "<script>var x = 1;</script>"
        )
        assert extract_script_blocks(html, script_type="application/ld+json") == ['{"a": 1}']
        assert len(extract_script_blocks(html)) == 2

    def test_extract_json_ld_skips_malformed_blocks(self) -> None:
        html = (
            '<script type="application/ld+json">{not json}</script>'
            '<script type="application/ld+json">{"@type": "Product"}</script>'
        )
        assert extract_json_ld(html) == [{"@type": "Product"}]

    def test_extract_attribute_values_matches_names(self) -> None:
        html = '<span data-price="12.5" data-other="x"></span><b data-last="9"></b>'
        values = extract_attribute_values(html, re.compile(r"^data-(?:price|last)"))
        assert values == ["12.5", "9"]


class TestIsBlockedPage:
    def test_detects_unusual_traffic_page(self) -> None:
        html = "<html><body>Our systems have detected Unusual Traffic from your network</body></html>"
        assert is_blocked_page(html) is True

    def test_normal_page_not_blocked(self) -> None:
        assert is_blocked_page(_QUOTE_HTML) is False


# ---------------------------------------------------------------------------
# Relevance analyzer
# ---------------------------------------------------------------------------

class TestAnalyzer:
    def test_relevant_page_returns_full_text(self) -> None:
        result = analyze_html_for_query(_QUOTE_HTML, "https://q.test/aapl", "AAPL stock price")
        assert result is not None
        assert result.source == "https://q.test/aapl"
        assert result.snippet == strip_tags(_QUOTE_HTML)
        assert result.score == pytest.approx(1.0, abs=1e-3)

    def test_partial_match_score(self) -> None:
        html = "<p>AAPL stock quote</p>"
        result = analyze_html_for_query(html, "u", "current stock price of AAPL")
        assert result is not None
        assert result.score == pytest.approx(0.4, abs=1e-3)

    def test_irrelevant_page_returns_none(self) -> None:
        html = "<p>Weather forecast for tomorrow</p>"
        assert analyze_html_for_query(html, "u", "AAPL stock price") is None

    def test_below_threshold_returns_none(self) -> None:
        # 1 of 11 distinct words ≈ 0.09 < 0.1
        query = "alpha bravo charlie delta echo foxtrot golf hotel india juliet kilo"
        assert score_relevance("alpha", query) < RELEVANCE_THRESHOLD
        assert analyze_html_for_query("<p>alpha</p>", "u", query) is None

    def test_repeated_query_words_count_once(self) -> None:
        assert score_relevance("aapl", "price price aapl") == pytest.approx(0.5, abs=1e-3)

    def test_custom_threshold(self) -> None:
        html = "<p>AAPL</p>"
        assert analyze_html_for_query(html, "u", "AAPL stock price", threshold=0.5) is None
        assert analyze_html_for_query(html, "u", "AAPL stock price", threshold=0.2) is not None

    @pytest.mark.parametrize("query", ["", "?!", "a b c", "-- ."])
    def test_degenerate_query_is_maximally_relevant(self, query: str) -> None:
        html = "<p>" + "word " * 1000 + "</p>"
        result = analyze_html_for_query(html, "u", query)
        assert result is not None
        assert result.score == 1.0
        assert len(result.snippet) <= DEGENERATE_SNIPPET_CHARS

    def test_empty_markup_is_not_relevant(self) -> None:
        assert analyze_html_for_query("<script>AAPL</script>", "u", "AAPL price") is None

    @pytest.mark.parametrize(
        "text,query",
        [
            ("aapl aapl aapl", "aapl aapl aapl"),
            ("", "stock price"),
            ("stock price stock", "stock stock price price"),
            ("anything", "x"),
        ],
    )
    def test_score_always_in_unit_interval(self, text: str, query: str) -> None:
        assert 0.0 <= score_relevance(text, query) <= 1.0


# ---------------------------------------------------------------------------
# Link discovery
# ---------------------------------------------------------------------------

_LINKS_HTML = """\
<a href="/about">About</a>
<a href="https://site.test/news">News</a>
<a href="https://other.test/x">External</a>
<a href="mailto:me@site.test">Mail</a>
<a href="javascript:void(0)">JS</a>
<a href="#top">Top</a>
<a href="relative/page">Relative</a>
<a href="//cdn.site.test/lib.js">Protocol relative</a>
<a href="//site.test/quote">Same-host protocol relative</a>
<a class="nav" href='/about'>Duplicate</a>
<a href="http://[broken">Broken</a>
"""


class TestExtractSameDomainLinks:
    def test_keeps_only_same_host_http_links(self) -> None:
        links = extract_same_domain_links("https://site.test/home", _LINKS_HTML, set())
        assert links == [
            "https://site.test/about",
            "https://site.test/news",
            "https://site.test/quote",
        ]

    def test_skips_visited_links(self) -> None:
        links = extract_same_domain_links(
            "https://site.test/home", _LINKS_HTML, {"https://site.test/about"}
        )
        assert links == ["https://site.test/news", "https://site.test/quote"]

    def test_caps_at_six_links(self) -> None:
        html = "".join(f'<a href="/p{i}">{i}</a>' for i in range(20))
        links = extract_same_domain_links("https://site.test/", html, set())
        assert len(links) == MAX_INTERNAL_LINKS == 6
        assert links[0] == "https://site.test/p0"

    def test_respects_custom_limit(self) -> None:
        html = "".join(f'<a href="/p{i}">{i}</a>' for i in range(20))
        assert len(extract_same_domain_links("https://site.test/", html, set(), limit=2)) == 2

    def test_protocol_relative_links_resolve_against_base_scheme(self) -> None:
        html = '<a href="//site.test/quote">q</a><a href="//other.test/quote">o</a>'
        links = extract_same_domain_links("https://site.test/", html, set())
        assert links == ["https://site.test/quote"]

    def test_subdomain_is_a_different_host(self) -> None:
        html = '<a href="https://www.site.test/a">x</a>'
        assert extract_same_domain_links("https://site.test/", html, set()) == []

    def test_no_links(self) -> None:
        assert extract_same_domain_links("https://site.test/", "<p>none</p>", set()) == []

    def test_malformed_base_url_returns_empty(self) -> None:
        assert extract_same_domain_links("not a url", _LINKS_HTML, set()) == []
