from __future__ import annotations

from dataclasses import dataclass

from pagegenie.config import settings
from pagegenie.errors import UpstreamCallFailure
from pagegenie.models.search import RawSearchResult
from pagegenie.tools import brave_search, tavily_search


@dataclass
class SearchResponse:
    results: list[RawSearchResult]
    provider: str
    fallback_from: str | None = None
    fallback_reason: str | None = None


async def search(
    query: str,
    *,
    language: str | None = None,
    region: str | None = None,
    count: int = 10,
) -> SearchResponse:
    """Run one web search with the configured provider.

    Raises ``UpstreamCallFailure`` when the provider (and its fallback, if
    enabled) cannot produce a response.
    """
    provider = settings.search_provider.lower().strip()
    use_fallback = settings.search_fallback_to_tavily

    if provider == "tavily":
        results = await tavily_search.search(query, count=count)
        return SearchResponse(results=results, provider="tavily")

    if provider == "brave":
        try:
            results = await brave_search.search(
                query,
                count=count,
                language=language,
                region=region,
            )
        except UpstreamCallFailure as e:
            if not use_fallback:
                raise
            fallback_results = await tavily_search.search(query, count=count)
            return SearchResponse(
                results=fallback_results,
                provider="tavily",
                fallback_from="brave",
                fallback_reason=e.message,
            )

        if results or not use_fallback:
            return SearchResponse(results=results, provider="brave")

        try:
            fallback_results = await tavily_search.search(query, count=count)
        except UpstreamCallFailure:
            # Brave answered, just with nothing; that is not a failed call.
            return SearchResponse(results=results, provider="brave")
        return SearchResponse(
            results=fallback_results,
            provider="tavily",
            fallback_from="brave",
            fallback_reason="brave returned zero results",
        )

    raise UpstreamCallFailure("search", f"Unsupported SEARCH_PROVIDER: {settings.search_provider}")
