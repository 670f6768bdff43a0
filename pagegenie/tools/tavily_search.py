from __future__ import annotations

from typing import Any

from tavily import AsyncTavilyClient

from pagegenie.config import settings
from pagegenie.errors import UpstreamCallFailure
from pagegenie.models.search import RawSearchResult

TAVILY_MAX_RESULTS = 20


async def search(
    query: str,
    *,
    count: int = 10,
) -> list[RawSearchResult]:
    """Execute a Tavily web search. Language/region hints are not forwarded."""
    if not settings.tavily_api_key:
        raise UpstreamCallFailure("tavily", "TAVILY_API_KEY is not configured")

    client = AsyncTavilyClient(api_key=settings.tavily_api_key)
    kwargs: dict[str, Any] = {
        "query": query,
        "search_depth": "basic",
        "max_results": max(1, min(count, TAVILY_MAX_RESULTS)),
        "topic": "general",
    }

    try:
        response = await client.search(**kwargs)
    except Exception as e:
        raise UpstreamCallFailure("tavily", str(e) or type(e).__name__) from e

    raw_results = response.get("results", []) if isinstance(response, dict) else None
    if not isinstance(raw_results, list):
        raise UpstreamCallFailure("tavily", "malformed response body")

    return [
        RawSearchResult(
            title=r.get("title", "") or "",
            link=r.get("url", "") or "",
            snippet=r.get("content", "") or "",
        )
        for r in raw_results
        if isinstance(r, dict)
    ]
