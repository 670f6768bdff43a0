from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


# --- Requests ---


class AiRequest(_CamelModel):
    action: str
    text: str = ""
    target_lang: str = Field(default="", alias="targetLang")
    persona: str | None = None
    cite_sources: bool = Field(default=False, alias="citeSources")
    structured: bool = False


class CompareConceptRequest(BaseModel):
    selection_text: str = ""
    page_url: str | None = None
    notes: list[dict[str, Any]] = Field(default_factory=list)
    suggestions: list[dict[str, Any]] = Field(default_factory=list)


class FindSourcesRequest(_CamelModel):
    text: str = ""
    source_url: str | None = Field(default=None, alias="sourceUrl")
    persona: str | None = None
    size: int | None = None


class QuizGenerateRequest(_CamelModel):
    text: str | None = None
    title: str | None = None
    source_url: str | None = Field(default=None, alias="sourceUrl")


class QuizGradeRequest(BaseModel):
    questions: list[dict[str, Any]]
    answers: list[int] = Field(default_factory=list)


class NoteCategorizeRequest(_CamelModel):
    content: str = ""
    source_url: str | None = Field(default=None, alias="sourceUrl")


class ReadingSuggestRequest(_CamelModel):
    base_url: str = Field(default="", alias="baseUrl")
    base_summary: str = Field(default="", alias="baseSummary")
    notes: list[dict[str, Any]] = Field(default_factory=list)


# --- Responses ---


class AiResponse(BaseModel):
    output: str | dict[str, Any]


class CompareConceptResponse(BaseModel):
    key_claim: str
    agreement: str
    drift_analysis: str


class SearchItemResponse(BaseModel):
    title: str
    url: str
    reason: str


class FindSourcesResponse(BaseModel):
    items: list[SearchItemResponse]


class QuizGradeResponse(BaseModel):
    score: int
    total: int
    answers: list[int]
    correct: list[int]


class ReadingSuggestResponse(BaseModel):
    suggestions: list[dict[str, Any]]


class ErrorBody(BaseModel):
    code: str
    message: str
