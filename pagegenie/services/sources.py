from __future__ import annotations

from pagegenie.config import settings
from pagegenie.errors import ValidationFailure
from pagegenie.models.search import SearchItem
from pagegenie.services import logger as log_service
from pagegenie.services import query_planner, search_orchestrator
from pagegenie.services.claim_tokens import extract_subject
from pagegenie.tools import content_extractor
from pagegenie.tools.web_utils import normalize_host


def resolve_limit(size: int | None) -> int:
    if size is None:
        return settings.sources_default_limit
    if size <= 0:
        raise ValidationFailure("size must be a positive integer")
    return min(size, settings.sources_max_limit)


async def find_sources(
    text: str | None,
    source_url: str | None,
    persona: str | None = None,
    size: int | None = None,
    *,
    searcher: search_orchestrator.Searcher | None = None,
) -> list[SearchItem]:
    """Find independent web sources that corroborate ``text``."""
    limit = resolve_limit(size)
    subject = extract_subject(source_url)

    if not (text and text.strip()):
        if not source_url:
            raise ValidationFailure("text or sourceUrl is required")
        page = await content_extractor.fetch_and_extract(source_url)
        text = page.text
        subject = subject or page.title

    plan = query_planner.plan(text, subject, normalize_host(source_url))
    items = await search_orchestrator.resolve(plan, limit, searcher=searcher)

    log_service.log_event(
        event_type="sources_resolved",
        message="Source search finished",
        subject=subject,
        persona=persona,
        attempts_planned=len(plan.attempts),
        items=len(items),
        limit=limit,
    )
    return items
