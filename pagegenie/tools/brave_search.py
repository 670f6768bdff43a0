from __future__ import annotations

from typing import Any

import httpx

from pagegenie.config import settings
from pagegenie.errors import UpstreamCallFailure
from pagegenie.models.search import RawSearchResult

BRAVE_SEARCH_URL = "https://api.search.brave.com/res/v1/web/search"
BRAVE_MAX_COUNT = 20


async def search(
    query: str,
    *,
    count: int = 10,
    language: str | None = None,
    region: str | None = None,
) -> list[RawSearchResult]:
    """Execute a Brave web search and map hits to ``RawSearchResult``."""
    if not settings.brave_api_key:
        raise UpstreamCallFailure("brave", "BRAVE_API_KEY is not configured")

    params: dict[str, Any] = {
        "q": query,
        "count": max(1, min(count, BRAVE_MAX_COUNT)),
    }
    if language:
        params["search_lang"] = language
    if region:
        params["country"] = region

    try:
        async with httpx.AsyncClient(timeout=settings.search_timeout_seconds) as client:
            response = await client.get(
                BRAVE_SEARCH_URL,
                params=params,
                headers={
                    "Accept": "application/json",
                    "X-Subscription-Token": settings.brave_api_key,
                },
            )
            response.raise_for_status()
            payload = response.json()
    except httpx.HTTPStatusError as e:
        raise UpstreamCallFailure("brave", f"HTTP {e.response.status_code}") from e
    except (httpx.HTTPError, ValueError) as e:
        raise UpstreamCallFailure("brave", str(e) or type(e).__name__) from e

    if not isinstance(payload, dict):
        raise UpstreamCallFailure("brave", "malformed response body")
    # No "web" section means Brave found nothing.
    web = payload.get("web", {})
    raw_results = web.get("results", []) if isinstance(web, dict) else None
    if not isinstance(raw_results, list):
        raise UpstreamCallFailure("brave", "malformed response body")

    mapped: list[RawSearchResult] = []
    for item in raw_results:
        if not isinstance(item, dict):
            continue
        snippets = item.get("extra_snippets", []) or []
        description = item.get("description", "") or ""
        mapped.append(
            RawSearchResult(
                title=item.get("title", "") or "",
                link=item.get("url", "") or "",
                snippet=description.strip() or " ".join(snippets).strip(),
            )
        )
    return mapped
