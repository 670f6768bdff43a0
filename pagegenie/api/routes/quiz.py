from __future__ import annotations

from fastapi import APIRouter

from pagegenie.models.schemas import QuizGenerateRequest, QuizGradeRequest, QuizGradeResponse
from pagegenie.services import quiz

router = APIRouter(prefix="/api/v1/quiz", tags=["quiz"])


@router.post("/generate")
async def generate(request: QuizGenerateRequest):
    return await quiz.generate_quiz(
        text=request.text,
        title=request.title,
        source_url=request.source_url,
    )


@router.post("/grade", response_model=QuizGradeResponse)
async def grade(request: QuizGradeRequest):
    return QuizGradeResponse(**quiz.grade_quiz(request.questions, request.answers).to_dict())
