from __future__ import annotations

from fastapi import APIRouter

from pagegenie.models.schemas import (
    AiRequest,
    AiResponse,
    CompareConceptRequest,
    CompareConceptResponse,
)
from pagegenie.services import concepts
from pagegenie.services.directive_pipeline import DirectiveOptions, PromptDirectivePipeline

router = APIRouter(prefix="/api/v1/ai", tags=["ai"])


@router.post("", response_model=AiResponse)
async def execute(request: AiRequest):
    """Run a free-text transform (or structured summary) over the selected text."""
    pipeline = PromptDirectivePipeline()
    output = await pipeline.run(
        request.action,
        request.text,
        DirectiveOptions(
            persona=request.persona,
            cite_sources=request.cite_sources,
            structured=request.structured,
            target_lang=request.target_lang,
        ),
    )
    return AiResponse(output=output)


@router.post("/compare-concept", response_model=CompareConceptResponse)
async def compare_concept(request: CompareConceptRequest):
    result = await concepts.compare_concept(
        request.selection_text,
        request.notes,
        request.suggestions,
    )
    return CompareConceptResponse(**result)
