from __future__ import annotations

import re
from collections.abc import Iterable, Iterator

from pagegenie.config import settings
from pagegenie.models.search import ClaimTokens, QueryPlan
from pagegenie.services import claim_tokens
from pagegenie.tools.web_utils import collapse_whitespace

FIRST_SENTENCE_WINDOW = 400

# Region code -> keywords that strongly suggest results from that locale.
REGION_KEYWORDS: dict[str, tuple[str, ...]] = {
    "IN": (
        "india",
        "indian",
        "bcci",
        "ipl",
        "ranji",
        "delhi",
        "mumbai",
        "kolkata",
        "chennai",
        "bengaluru",
        "bangalore",
    ),
}


def first_sentence(text: str) -> str:
    """Text up to the first period within the window, else the window itself."""
    cleaned = collapse_whitespace(text)
    period = cleaned.find(".", 0, FIRST_SENTENCE_WINDOW)
    if period >= 0:
        return cleaned[: period + 1]
    return cleaned[:FIRST_SENTENCE_WINDOW].strip()


def detect_region(text: str) -> str | None:
    lowered = (text or "").lower()
    for region, keywords in REGION_KEYWORDS.items():
        for keyword in keywords:
            if re.search(rf"\b{re.escape(keyword)}\b", lowered):
                return region
    return None


def _site_exclusion(origin_host: str) -> str:
    return f"-site:{origin_host}" if origin_host else ""


def _compose(*parts: str) -> str:
    return collapse_whitespace(" ".join(part for part in parts if part and part.strip()))


def _lead_tier(subject: str, lead: str, exclusion: str) -> Iterator[str]:
    yield _compose(subject, lead, exclusion)
    yield _compose(subject, lead)


def iter_tiers(
    subject: str,
    tokens: ClaimTokens,
    lead: str,
    origin_host: str,
) -> Iterator[str]:
    """Yield candidate queries from most to least specific."""
    exclusion = _site_exclusion(origin_host)
    specific = (subject, tokens.core, tokens.when, tokens.where)

    yield _compose(*specific, exclusion)
    yield _compose(*specific)
    yield _compose(subject, "biography", exclusion)
    yield _compose(subject, "biography")
    yield from _lead_tier(subject, lead, exclusion)


def dedupe_queries(candidates: Iterable[str]) -> list[str]:
    """Drop empty and repeated queries (case/whitespace-insensitive), keep order."""
    deduped: list[str] = []
    seen: set[str] = set()
    for candidate in candidates:
        query = collapse_whitespace(candidate)
        # A bare site exclusion is not a query.
        if not query or (query.startswith("-site:") and " " not in query):
            continue
        key = query.lower()
        if key in seen:
            continue
        seen.add(key)
        deduped.append(query)
    return deduped


def plan(text: str, subject: str, origin_host: str) -> QueryPlan:
    """Build the ordered fallback query plan for ``text`` found on ``origin_host``."""
    subject = collapse_whitespace(subject)
    tokens = claim_tokens.extract(text, subject)
    lead = first_sentence(text)

    return QueryPlan(
        attempts=tuple(dedupe_queries(iter_tiers(subject, tokens, lead, origin_host))),
        language_hint=settings.search_default_language,
        region_hint=detect_region(text),
        last_resort=tuple(
            dedupe_queries(_lead_tier(subject, lead, _site_exclusion(origin_host)))
        ),
    )
