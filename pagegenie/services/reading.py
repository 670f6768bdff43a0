from __future__ import annotations

from typing import Any, Sequence

from pagegenie.errors import ValidationFailure
from pagegenie.services.directive_pipeline import DirectiveOptions, PromptDirectivePipeline, Task

MAX_SUGGESTIONS = 3


def build_candidates(notes: Sequence[dict[str, Any]], base_url: str) -> list[dict[str, str]]:
    """Distinct note sources other than ``base_url``, first seen wins."""
    candidates: dict[str, str] = {}
    for note in notes:
        url = (note.get("sourceUrl") or note.get("source_url") or "").strip()
        if not url or url == base_url or url in candidates:
            continue
        # Notes carry no page title; fall back to the URL itself.
        candidates[url] = (note.get("title") or "").strip() or url
    return [{"url": url, "title": title} for url, title in candidates.items()]


async def suggest_reading(
    base_url: str,
    base_summary: str,
    notes: Sequence[dict[str, Any]],
    *,
    pipeline: PromptDirectivePipeline | None = None,
) -> list[dict[str, Any]]:
    if not base_url or not base_url.strip():
        raise ValidationFailure("baseUrl is required")

    candidates = build_candidates(notes, base_url.strip())
    if not candidates:
        return []

    pipeline = pipeline or PromptDirectivePipeline()
    payload = await pipeline.run(
        Task.SELECT_SUGGESTIONS,
        base_summary or "",
        DirectiveOptions(candidates=candidates),
    )
    return payload.get("suggestions", [])[:MAX_SUGGESTIONS]
