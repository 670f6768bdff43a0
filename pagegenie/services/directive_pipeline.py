"""Prompt composition and model invocation for every AI-backed task.

Each prompt is assembled from the catalog in ``prompts/prompts.json``:
a persona directive, the universal preservation rules, a citation directive,
the task instruction (with schema for JSON tasks) and the task body. JSON
tasks run the model text through ``output_parser`` and then validate it
against the task's pydantic model; a failure at either step is raised as
``ParseFailureError`` and never replaced with an empty structure.
"""
from __future__ import annotations

import json
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ValidationError

from pagegenie import llm_client
from pagegenie.errors import ParseFailureError, ValidationFailure
from pagegenie.models.outputs import (
    ConceptComparison,
    NoteCategories,
    ParseFailure,
    Quiz,
    StructuredSummary,
    SuggestionSelection,
)
from pagegenie.services import logger as log_service
from pagegenie.services import output_parser
from pagegenie.services.prompt_store import render_prompt
from pagegenie.tools.web_utils import clip

QUIZ_TEXT_CHARS = 5000
QUIZ_TITLE_CHARS = 200
DEFAULT_QUIZ_TITLE = "Quick Quiz (Selection)"
SELECTION_CHARS = 1200
KNOWLEDGE_BASE_CHARS = 4000

PERSONAS = ("student", "researcher", "editor", "general")
DEFAULT_PERSONA = "general"


class Task(str, Enum):
    SUMMARIZE = "summarize"
    EXPLAIN = "explain"
    REWRITE = "rewrite"
    TRANSLATE = "translate"
    PROOFREAD = "proofread"
    COMMENT_CODE = "comment_code"
    CATEGORIZE_NOTE = "categorize_note"
    GENERATE_QUIZ = "generate_quiz"
    SELECT_SUGGESTIONS = "select_suggestions"
    COMPARE_CONCEPTS = "compare_concepts"

    @classmethod
    def from_name(cls, name: "str | Task | None") -> "Task":
        if isinstance(name, Task):
            return name
        normalized = (name or "").strip().lower().replace("-", "_")
        try:
            return cls(normalized)
        except ValueError:
            raise ValidationFailure(f"Unsupported operation: {name}") from None


SUMMARY_TASKS = frozenset({Task.SUMMARIZE, Task.EXPLAIN})

TASK_SCHEMAS: dict[Task, type[BaseModel]] = {
    Task.CATEGORIZE_NOTE: NoteCategories,
    Task.GENERATE_QUIZ: Quiz,
    Task.SELECT_SUGGESTIONS: SuggestionSelection,
    Task.COMPARE_CONCEPTS: ConceptComparison,
}


@dataclass(slots=True)
class DirectiveOptions:
    persona: str | None = None
    cite_sources: bool = False
    # summarize/explain only: return {bullets, citations} JSON instead of prose
    structured: bool = False
    target_lang: str = ""
    title: str = ""
    candidates: list[dict[str, Any]] = field(default_factory=list)
    knowledge_base: str = ""


def normalize_persona(persona: str | None) -> str:
    value = (persona or "").strip().lower()
    return value if value in PERSONAS else DEFAULT_PERSONA


def quiz_title(title: str | None) -> str:
    cleaned = (title or "").strip()
    if not cleaned:
        return DEFAULT_QUIZ_TITLE
    return cleaned[:QUIZ_TITLE_CHARS]


def expects_json(task: Task, options: DirectiveOptions) -> bool:
    if task in TASK_SCHEMAS:
        return True
    return options.structured and task in SUMMARY_TASKS


def _schema_for(task: Task) -> type[BaseModel]:
    return TASK_SCHEMAS.get(task, StructuredSummary)


def validate_request(task: Task, text: str | None, options: DirectiveOptions) -> None:
    if task is Task.SELECT_SUGGESTIONS:
        if not options.candidates:
            raise ValidationFailure("candidates are required to select suggestions")
        return
    if not text or not text.strip():
        raise ValidationFailure("text is required")
    if task is Task.TRANSLATE and not options.target_lang.strip():
        raise ValidationFailure("targetLang is required for translate")


def _citation_directive(task: Task, options: DirectiveOptions) -> str:
    if task in SUMMARY_TASKS or task in TASK_SCHEMAS:
        key = "directives.cite_allowed" if options.cite_sources else "directives.cite_forbidden"
        return render_prompt(key)
    return render_prompt("directives.no_external_refs")


def _task_instruction(task: Task, options: DirectiveOptions) -> str:
    json_only = render_prompt("directives.json_only")
    if task in SUMMARY_TASKS and options.structured:
        return render_prompt(f"tasks.{task.value}_structured", json_only=json_only)
    if task is Task.TRANSLATE:
        return render_prompt("tasks.translate", target_lang=options.target_lang.strip())
    return render_prompt(f"tasks.{task.value}", json_only=json_only)


def _task_body(task: Task, text: str, options: DirectiveOptions) -> str:
    if task is Task.GENERATE_QUIZ:
        return render_prompt(
            "bodies.article",
            title=quiz_title(options.title),
            text=clip(text, QUIZ_TEXT_CHARS),
        )
    if task is Task.SELECT_SUGGESTIONS:
        return render_prompt(
            "bodies.suggestions",
            text=text or "",
            candidates=json.dumps(options.candidates, ensure_ascii=False),
        )
    if task is Task.COMPARE_CONCEPTS:
        return render_prompt(
            "bodies.comparison",
            text=clip(text, SELECTION_CHARS),
            knowledge_base=clip(options.knowledge_base, KNOWLEDGE_BASE_CHARS),
        )
    return render_prompt("bodies.text", text=text)


def build_prompt(task: Task, text: str, options: DirectiveOptions) -> str:
    return render_prompt(
        "frame",
        persona=render_prompt(f"personas.{normalize_persona(options.persona)}"),
        universal=render_prompt("directives.universal"),
        citations=_citation_directive(task, options),
        task=_task_instruction(task, options),
        body=_task_body(task, text, options),
    )


def parse_structured(task: Task, raw: str) -> dict[str, Any]:
    parsed = output_parser.parse(raw)
    if isinstance(parsed, ParseFailure):
        log_service.log_event(
            event_type="parse_failure",
            message=parsed.reason,
            task=task.value,
            raw_preview=raw[:200],
        )
        raise ParseFailureError(parsed)

    try:
        payload = _schema_for(task).model_validate(parsed)
    except ValidationError as e:
        failure = ParseFailure(
            f"structured output did not match schema: {e.error_count()} error(s)"
        )
        log_service.log_event(
            event_type="parse_failure",
            message=failure.reason,
            task=task.value,
        )
        raise ParseFailureError(failure) from e
    return payload.model_dump(by_alias=True, exclude_none=True)


class PromptDirectivePipeline:
    """Build a task prompt, call the model once, and shape the reply."""

    def __init__(self, complete: Callable[[str], Awaitable[str]] | None = None):
        self._complete = complete or llm_client.complete

    async def run(
        self,
        task: str | Task,
        text: str | None,
        options: DirectiveOptions | None = None,
    ) -> dict[str, Any] | str:
        task = Task.from_name(task)
        options = options or DirectiveOptions()
        validate_request(task, text, options)

        prompt = build_prompt(task, text or "", options)
        raw = await self._complete(prompt)

        if not expects_json(task, options):
            return raw
        return parse_structured(task, raw)
