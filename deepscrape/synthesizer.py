"""Answer synthesis from the winning snippet of a deep-scrape run.

``synthesize_answer`` is invoked once, only after the orchestrator has found
relevant content.  It never raises: an LLM failure yields ``None`` and a
trace entry, and the run still reports success.
"""

from __future__ import annotations

from typing import Any, Optional

from deepscrape.config import settings
from deepscrape.scraper.models import DebugTrace


# ---------------------------------------------------------------------------
# LLM helper
# ---------------------------------------------------------------------------

def _get_llm() -> Any:
    """Return a configured LangChain chat model based on ``settings``."""
    if settings.llm_provider == "openai":
        from langchain_openai import ChatOpenAI

        return ChatOpenAI(model=settings.openai_chat_model, temperature=0)

    from langchain_ollama import ChatOllama

    return ChatOllama(model=settings.ollama_chat_model, temperature=0)


def build_prompt(query: str, context: str) -> str:
    return (
        "You are given text extracted from a web page.  Find in it the exact "
        "answer to the question below.\n\n"
        f"Question: {query}\n\n"
        f"Context:\n{context}\n\n"
        "Answer concisely and precisely, giving exactly what the question asks "
        "for without omitting or padding information."
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

async def synthesize_answer(
    query: str,
    context: str,
    trace: Optional[DebugTrace] = None,
) -> Optional[str]:
    """Ask the configured LLM to answer *query* from *context*.

    Args:
        query: The user's question.
        context: The winning snippet.  Callers bound its size.
        trace: Debug trace of the current run; progress is appended to it.

    Returns:
        The stripped answer text, or ``None`` if the model failed or
        returned nothing.
    """
    trace = trace if trace is not None else DebugTrace()
    trace.add("Generating AI analysis of extracted content...")
    try:
        llm = _get_llm()
        response = await llm.ainvoke(build_prompt(query, context))
    except Exception as exc:  # noqa: BLE001
        trace.add(f"AI analysis failed: {exc}")
        print(f"[SYNTHESISING] answer generation failed: {exc}")
        return None

    answer = response.content if hasattr(response, "content") else str(response)
    if isinstance(answer, str) and answer.strip():
        trace.add("AI analysis completed successfully")
        return answer.strip()

    trace.add("AI analysis returned empty result")
    return None
