from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


@dataclass(frozen=True, slots=True)
class ParseFailure:
    """Explicit "no structured value" result of the model output parser."""

    reason: str = "no valid structured output found"


ParsedOutput = dict[str, Any] | ParseFailure


# --- Structured task payloads ---


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class NoteCategories(_Payload):
    topic: str
    related_to: list[str] = Field(default_factory=list, alias="relatedTo")
    tags: list[str] = Field(default_factory=list)
    summary: str = ""


class QuizQuestion(_Payload):
    question: str
    options: list[str]
    correct_index: int = Field(alias="correctIndex")
    explanation: str = ""

    @model_validator(mode="after")
    def _correct_index_in_range(self) -> "QuizQuestion":
        if not 0 <= self.correct_index < len(self.options):
            raise ValueError("correctIndex must point at one of the options")
        return self


class Quiz(_Payload):
    questions: list[QuizQuestion] = Field(min_length=1)


class ReadingSuggestion(_Payload):
    url: str
    title: str = ""
    reason: str = ""


class SuggestionSelection(_Payload):
    suggestions: list[ReadingSuggestion] = Field(default_factory=list)


class ConceptComparison(_Payload):
    key_claim: str
    agreement: str
    drift_analysis: str


class Citation(_Payload):
    url: str
    title: str = ""
    note: str | None = None


class StructuredSummary(_Payload):
    bullets: list[str] = Field(min_length=1)
    citations: list[Citation] = Field(default_factory=list)
