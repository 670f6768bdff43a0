from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from pagegenie.errors import ValidationFailure
from pagegenie.services.directive_pipeline import DirectiveOptions, PromptDirectivePipeline, Task, quiz_title
from pagegenie.tools import content_extractor


@dataclass(slots=True)
class QuizGrade:
    score: int
    total: int
    answers: list[int] = field(default_factory=list)
    correct: list[int] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "total": self.total,
            "answers": self.answers,
            "correct": self.correct,
        }


def grade_quiz(questions: Sequence[dict[str, Any]], answers: Sequence[int]) -> QuizGrade:
    """Score ``answers`` against each question's ``correctIndex``.

    Unanswered questions count as wrong; a question without a usable
    ``correctIndex`` is recorded as -1 and can never be answered correctly.
    """
    correct: list[int] = []
    score = 0
    for position, question in enumerate(questions):
        expected = question.get("correctIndex", -1)
        if not isinstance(expected, int) or isinstance(expected, bool):
            expected = -1
        correct.append(expected)
        if expected >= 0 and position < len(answers) and answers[position] == expected:
            score += 1
    return QuizGrade(score=score, total=len(questions), answers=list(answers), correct=correct)


async def generate_quiz(
    *,
    text: str | None = None,
    title: str | None = None,
    source_url: str | None = None,
    pipeline: PromptDirectivePipeline | None = None,
) -> dict[str, Any]:
    """Generate a multiple-choice quiz from ``text`` or, failing that, the page at ``source_url``."""
    if not (text and text.strip()):
        if not source_url:
            raise ValidationFailure("text or sourceUrl is required")
        page = await content_extractor.fetch_and_extract(source_url)
        text = page.text
        title = title or page.title

    pipeline = pipeline or PromptDirectivePipeline()
    final_title = quiz_title(title)
    payload = await pipeline.run(
        Task.GENERATE_QUIZ,
        text,
        DirectiveOptions(title=final_title),
    )
    return {"title": final_title, "sourceUrl": source_url, **payload}
