"""Tests for the 'scrape' CLI command."""

import json
from unittest.mock import AsyncMock, patch

from typer.testing import CliRunner

from cli.main import app
from deepscrape.errors import InternalScrapeError, InvalidQueryError
from deepscrape.scraper.models import AnalysisResult, DebugTrace, ScrapeOutcome

runner = CliRunner()


def _outcome(answer="AAPL trades at $189.84.") -> ScrapeOutcome:
    trace = DebugTrace(search_results=["https://q.test/aapl"])
    trace.add("Starting deep scrape orchestration...")
    result = AnalysisResult(snippet="AAPL 189.84", score=0.5, source="https://q.test/aapl")
    return ScrapeOutcome.success(result, answer, trace)


def test_scrape_prints_answer():
    with patch("cli.main.run_deep_scrape", new=AsyncMock(return_value=_outcome())):
        result = runner.invoke(app, ["scrape", "AAPL price"])

    assert result.exit_code == 0, result.output
    assert "Found relevant content" in result.output
    assert "https://q.test/aapl" in result.output
    assert "AAPL trades at $189.84." in result.output
    assert "--- Trace ---" not in result.output


def test_scrape_without_answer_shows_snippet_preview():
    with patch("cli.main.run_deep_scrape", new=AsyncMock(return_value=_outcome(answer=None))):
        result = runner.invoke(app, ["scrape", "AAPL price"])

    assert result.exit_code == 0, result.output
    assert "(no AI answer)" in result.output
    assert "AAPL 189.84" in result.output


def test_scrape_not_found():
    outcome = ScrapeOutcome.not_found(DebugTrace())
    with patch("cli.main.run_deep_scrape", new=AsyncMock(return_value=outcome)):
        result = runner.invoke(app, ["scrape", "obscure"])

    assert result.exit_code == 0
    assert "No relevant content found" in result.output


def test_scrape_json_output():
    outcome = _outcome()
    with patch("cli.main.run_deep_scrape", new=AsyncMock(return_value=outcome)):
        result = runner.invoke(app, ["scrape", "AAPL price", "--json"])

    assert result.exit_code == 0, result.output
    assert ScrapeOutcome.from_dict(json.loads(result.output)) == outcome


def test_scrape_debug_prints_trace():
    with patch("cli.main.run_deep_scrape", new=AsyncMock(return_value=_outcome())):
        result = runner.invoke(app, ["scrape", "AAPL price", "--debug"])

    assert "--- Trace ---" in result.output
    assert "Starting deep scrape orchestration..." in result.output


def test_scrape_overrides_settings():
    mock_run = AsyncMock(return_value=_outcome())
    with patch("cli.main.run_deep_scrape", new=mock_run):
        result = runner.invoke(app, ["scrape", "AAPL price", "--no-crawl", "--max-results", "3"])

    assert result.exit_code == 0, result.output
    run_settings = mock_run.await_args.kwargs["settings"]
    assert run_settings.crawl_depth == 0
    assert run_settings.max_search_results == 3
    assert run_settings.crawl_enabled is False


def test_scrape_invalid_query_exits_2():
    with patch("cli.main.run_deep_scrape", new=AsyncMock(side_effect=InvalidQueryError())):
        result = runner.invoke(app, ["scrape", "   "])

    assert result.exit_code == 2


def test_scrape_internal_error_exits_1():
    with patch("cli.main.run_deep_scrape", new=AsyncMock(side_effect=InternalScrapeError())):
        result = runner.invoke(app, ["scrape", "AAPL price"])

    assert result.exit_code == 1
