from __future__ import annotations

from fastapi import APIRouter

from pagegenie.models.schemas import FindSourcesRequest, FindSourcesResponse, SearchItemResponse
from pagegenie.services import sources

router = APIRouter(prefix="/api/v1/sources", tags=["sources"])


@router.post("/find", response_model=FindSourcesResponse)
async def find(request: FindSourcesRequest):
    """Find independent sources corroborating the passage."""
    items = await sources.find_sources(
        request.text,
        request.source_url,
        request.persona,
        request.size,
    )
    return FindSourcesResponse(items=[SearchItemResponse(**item.to_dict()) for item in items])
