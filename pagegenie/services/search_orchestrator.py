from __future__ import annotations

import itertools
import re
import time
from collections.abc import Awaitable, Callable, Iterator

import httpx

from pagegenie.config import settings
from pagegenie.errors import UpstreamCallFailure
from pagegenie.models.search import QueryPlan, RawSearchResult, SearchItem
from pagegenie.services import logger as log_service
from pagegenie.tools import search_provider
from pagegenie.tools.web_utils import clip, collapse_whitespace, is_valid_url, normalize_host

REASON_SNIPPET_CHARS = 180
REASON_ANNOTATION = "Independent coverage of the same topic."

# " - ESPN", " | Reuters", " • BBC", " — Wikipedia" at the end of a title.
# Only the last segment goes: "Bio - ESPN - Live" keys as "bio - espn".
TITLE_SOURCE_SUFFIX = re.compile(r"\s+[-|•–—]\s*[^-|•–—]*$")

Searcher = Callable[..., Awaitable[search_provider.SearchResponse]]

# Failures of a single searcher call; the attempt is skipped.
SEARCH_CALL_ERRORS = (UpstreamCallFailure, httpx.HTTPError, ValueError, KeyError, TypeError)


def normalize_title(title: str) -> str:
    key = collapse_whitespace(title).lower()
    stripped = TITLE_SOURCE_SUFFIX.sub("", key).strip()
    return stripped or key


def dedup_key(title: str, url: str) -> str:
    return f"{normalize_host(url)}|{normalize_title(title)}"


def build_reason(snippet: str | None) -> str:
    text = clip(snippet, REASON_SNIPPET_CHARS)
    if not text:
        return REASON_ANNOTATION
    return f"{text} {REASON_ANNOTATION}"


def merge_results(
    collected: dict[str, SearchItem],
    results: list[RawSearchResult],
) -> int:
    """Insert usable results into ``collected``; first occurrence of a key wins.

    Returns how many new items were added.
    """
    added = 0
    for result in results:
        title = collapse_whitespace(result.title)
        link = (result.link or "").strip()
        if not title or not link or not is_valid_url(link):
            continue
        key = dedup_key(title, link)
        if key in collected:
            continue
        collected[key] = SearchItem(title=title, url=link, reason=build_reason(result.snippet))
        added += 1
    return added


def _last_resort(plan: QueryPlan, collected: dict[str, SearchItem]) -> Iterator[str]:
    # Only consulted once the planned attempts are exhausted.
    if not collected:
        yield from plan.last_resort


async def resolve(
    plan: QueryPlan,
    limit: int,
    *,
    searcher: Searcher | None = None,
    count: int | None = None,
) -> list[SearchItem]:
    """Run planned attempts in order until ``limit`` distinct items are found.

    A failed attempt is logged and skipped. When every attempt fails or finds
    nothing the result is an empty list.
    """
    if limit <= 0:
        return []

    run_search = searcher or search_provider.search
    per_attempt = max(limit, count or settings.search_results_per_attempt)
    collected: dict[str, SearchItem] = {}

    for query in itertools.chain(plan.attempts, _last_resort(plan, collected)):
        t0 = time.monotonic()
        try:
            response = await run_search(
                query,
                language=plan.language_hint,
                region=plan.region_hint,
                count=per_attempt,
            )
        except SEARCH_CALL_ERRORS as e:
            log_service.log_search_attempt(
                query=query,
                provider=getattr(e, "service", None),
                status="error",
                duration_ms=int((time.monotonic() - t0) * 1000),
                error=getattr(e, "message", None) or str(e) or type(e).__name__,
            )
            continue

        try:
            added = merge_results(collected, response.results)
        except (AttributeError, TypeError) as e:
            log_service.log_search_attempt(
                query=query,
                provider=getattr(response, "provider", None),
                status="error",
                duration_ms=int((time.monotonic() - t0) * 1000),
                error=f"malformed search response: {e}",
            )
            continue

        log_service.log_search_attempt(
            query=query,
            provider=response.provider,
            status="success",
            results_count=added,
            duration_ms=int((time.monotonic() - t0) * 1000),
        )
        if len(collected) >= limit:
            break

    return list(collected.values())[:limit]
