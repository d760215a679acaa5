"""Data models for the deep-scrape pipeline."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, List, Optional


@dataclass
class PageContent:
    """Raw markup obtained for a single URL by one fetch strategy."""

    url: str
    html: str
    strategy: str


@dataclass(frozen=True)
class AnalysisResult:
    """A page (or embedded-data block) judged relevant enough to the query."""

    snippet: str
    score: float
    source: str

    def __post_init__(self) -> None:
        if not 0.0 <= self.score <= 1.0:
            raise ValueError(f"score must be within [0, 1], got {self.score!r}")


@dataclass
class DebugTrace:
    """Ordered, append-only log of orchestrator decisions for one run."""

    steps: List[str] = field(default_factory=list)
    search_results: List[str] = field(default_factory=list)

    def add(self, step: str) -> None:
        self.steps.append(step)

    def snapshot(self) -> DebugTrace:
        """Return an independent copy that later appends cannot affect."""
        return DebugTrace(steps=list(self.steps), search_results=list(self.search_results))

    def to_dict(self) -> dict[str, Any]:
        return {"steps": list(self.steps), "search_results": list(self.search_results)}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DebugTrace:
        return cls(
            steps=list(data.get("steps", [])),
            search_results=list(data.get("search_results", [])),
        )


@dataclass(frozen=True)
class ScrapeOutcome:
    """The sole return value of one orchestration run."""

    found: bool
    snippet: str
    score: float
    source: Optional[str]
    answer: Optional[str]
    debug: DebugTrace

    @classmethod
    def success(
        cls,
        result: AnalysisResult,
        answer: Optional[str],
        trace: DebugTrace,
    ) -> ScrapeOutcome:
        return cls(
            found=True,
            snippet=result.snippet,
            score=result.score,
            source=result.source,
            answer=answer,
            debug=trace.snapshot(),
        )

    @classmethod
    def not_found(cls, trace: DebugTrace) -> ScrapeOutcome:
        return cls(
            found=False,
            snippet="",
            score=0.0,
            source=None,
            answer=None,
            debug=trace.snapshot(),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "found": self.found,
            "snippet": self.snippet,
            "score": self.score,
            "source": self.source,
            "answer": self.answer,
            "debug": self.debug.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ScrapeOutcome:
        return cls(
            found=bool(data["found"]),
            snippet=data.get("snippet", ""),
            score=float(data.get("score", 0.0)),
            source=data.get("source"),
            answer=data.get("answer"),
            debug=DebugTrace.from_dict(data.get("debug", {})),
        )

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, data: str) -> ScrapeOutcome:
        return cls.from_dict(json.loads(data))
