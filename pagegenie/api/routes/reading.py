from __future__ import annotations

from fastapi import APIRouter

from pagegenie.models.schemas import ReadingSuggestRequest, ReadingSuggestResponse
from pagegenie.services import reading

router = APIRouter(prefix="/api/v1/reading", tags=["reading"])


@router.post("/suggest", response_model=ReadingSuggestResponse)
async def suggest(request: ReadingSuggestRequest):
    suggestions = await reading.suggest_reading(
        request.base_url,
        request.base_summary,
        request.notes,
    )
    return ReadingSuggestResponse(suggestions=suggestions)
