from __future__ import annotations

from typing import Any, Sequence

from pagegenie.services.directive_pipeline import DirectiveOptions, PromptDirectivePipeline, Task
from pagegenie.services.knowledge_base import build_knowledge_base


async def compare_concept(
    selection_text: str,
    notes: Sequence[dict[str, Any]] = (),
    suggestions: Sequence[dict[str, Any]] = (),
    *,
    pipeline: PromptDirectivePipeline | None = None,
) -> dict[str, Any]:
    """Contrast a selected passage with the user's recent notes and suggestions."""
    pipeline = pipeline or PromptDirectivePipeline()
    return await pipeline.run(
        Task.COMPARE_CONCEPTS,
        selection_text,
        DirectiveOptions(knowledge_base=build_knowledge_base(notes, suggestions)),
    )
