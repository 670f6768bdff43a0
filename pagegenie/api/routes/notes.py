from __future__ import annotations

from fastapi import APIRouter

from pagegenie.models.schemas import NoteCategorizeRequest
from pagegenie.services.directive_pipeline import PromptDirectivePipeline, Task

router = APIRouter(prefix="/api/v1/notes", tags=["notes"])


@router.post("/categorize")
async def categorize(request: NoteCategorizeRequest):
    """Tag a note with a topic, related subjects and a one-line summary."""
    categories = await PromptDirectivePipeline().run(Task.CATEGORIZE_NOTE, request.content)
    return {"sourceUrl": request.source_url, "categories": categories}
