from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from pagegenie.errors import ParseFailureError, UpstreamCallFailure, ValidationFailure
from pagegenie.services import directive_pipeline
from pagegenie.services.directive_pipeline import DirectiveOptions, PromptDirectivePipeline, Task

QUIZ_PAYLOAD = {
    "questions": [
        {
            "question": "When was he born?",
            "options": ["1986", "1988", "1990", "1992"],
            "correctIndex": 1,
            "explanation": "The article says 1988.",
        }
    ]
}


def test_task_from_name_accepts_dashes_and_case():
    assert Task.from_name("Generate-Quiz") is Task.GENERATE_QUIZ
    assert Task.from_name(" comment_code ") is Task.COMMENT_CODE
    with pytest.raises(ValidationFailure):
        Task.from_name("dance")


def test_normalize_persona_defaults_to_general():
    assert directive_pipeline.normalize_persona(" Researcher ") == "researcher"
    assert directive_pipeline.normalize_persona("pirate") == "general"
    assert directive_pipeline.normalize_persona(None) == "general"


def test_build_prompt_includes_persona_rules_and_text():
    prompt = directive_pipeline.build_prompt(
        Task.SUMMARIZE,
        "Some passage.",
        DirectiveOptions(persona="student", cite_sources=True),
    )

    assert "Persona: Student" in prompt
    assert "Preserve original meaning and intent." in prompt
    assert "Do NOT fabricate sources." in prompt
    assert "Summarize the following text in concise bullet points." in prompt
    assert prompt.rstrip().endswith("Some passage.")


def test_build_prompt_for_rewrite_forbids_external_references():
    prompt = directive_pipeline.build_prompt(Task.REWRITE, "text", DirectiveOptions(cite_sources=True))
    assert "Do not add external references beyond what appears in the text." in prompt
    assert "Do NOT fabricate sources." not in prompt


def test_build_prompt_for_json_task_includes_schema_and_constraint():
    prompt = directive_pipeline.build_prompt(
        Task.GENERATE_QUIZ,
        "word " * 3000,
        DirectiveOptions(title=""),
    )

    assert '"correctIndex": 0' in prompt
    assert "Output STRICT JSON only." in prompt
    assert "Title: Quick Quiz (Selection)" in prompt
    article = prompt.split("Article:\n", 1)[1].strip()
    assert len(article) <= directive_pipeline.QUIZ_TEXT_CHARS + 1


def test_build_prompt_for_translate_names_target_language():
    prompt = directive_pipeline.build_prompt(Task.TRANSLATE, "Hola", DirectiveOptions(target_lang="English"))
    assert "Translate the following text to English." in prompt


def test_build_prompt_for_suggestions_serializes_candidates():
    candidates = [{"url": "https://a.com", "title": "A"}]
    prompt = directive_pipeline.build_prompt(
        Task.SELECT_SUGGESTIONS,
        "base summary",
        DirectiveOptions(candidates=candidates),
    )
    assert json.dumps(candidates) in prompt
    assert "Base Summary:\nbase summary" in prompt


@pytest.mark.asyncio
async def test_free_text_task_returns_raw_output_unparsed():
    complete = AsyncMock(return_value="  {not json} just prose  ")
    pipeline = PromptDirectivePipeline(complete=complete)

    output = await pipeline.run("rewrite", "Fix this sentence.")

    assert output == "  {not json} just prose  "
    complete.assert_awaited_once()


@pytest.mark.asyncio
async def test_json_task_recovers_object_from_prose():
    raw = "Here you go:\n```json\n" + json.dumps(QUIZ_PAYLOAD) + "\n```"
    pipeline = PromptDirectivePipeline(complete=AsyncMock(return_value=raw))

    output = await pipeline.run(Task.GENERATE_QUIZ, "Virat Kohli was born in 1988.")

    assert output == QUIZ_PAYLOAD


@pytest.mark.asyncio
async def test_structured_summary_returns_bullets_and_citations():
    raw = '{"bullets": ["a", "b"], "citations": [{"url": "https://x.com", "title": "X"}]}'
    pipeline = PromptDirectivePipeline(complete=AsyncMock(return_value=raw))

    output = await pipeline.run(Task.SUMMARIZE, "text", DirectiveOptions(structured=True))

    assert output == {"bullets": ["a", "b"], "citations": [{"url": "https://x.com", "title": "X"}]}


@pytest.mark.asyncio
async def test_parse_failure_is_surfaced_not_defaulted():
    pipeline = PromptDirectivePipeline(complete=AsyncMock(return_value="Sorry, I cannot help."))

    with pytest.raises(ParseFailureError) as excinfo:
        await pipeline.run(Task.CATEGORIZE_NOTE, "note text")

    assert excinfo.value.failure.reason == "no valid structured output found"


@pytest.mark.asyncio
async def test_schema_mismatch_is_a_parse_failure():
    bad_quiz = {"questions": [{"question": "Q", "options": ["a", "b"], "correctIndex": 7}]}
    pipeline = PromptDirectivePipeline(complete=AsyncMock(return_value=json.dumps(bad_quiz)))

    with pytest.raises(ParseFailureError) as excinfo:
        await pipeline.run(Task.GENERATE_QUIZ, "article")

    assert "did not match schema" in excinfo.value.failure.reason


@pytest.mark.asyncio
async def test_upstream_failure_propagates_without_retry():
    complete = AsyncMock(side_effect=UpstreamCallFailure("llm", "HTTP 500"))
    pipeline = PromptDirectivePipeline(complete=complete)

    with pytest.raises(UpstreamCallFailure):
        await pipeline.run(Task.SUMMARIZE, "text")

    assert complete.await_count == 1


@pytest.mark.asyncio
async def test_validation_happens_before_model_call():
    complete = AsyncMock()
    pipeline = PromptDirectivePipeline(complete=complete)

    with pytest.raises(ValidationFailure):
        await pipeline.run(Task.SUMMARIZE, "   ")
    with pytest.raises(ValidationFailure):
        await pipeline.run(Task.TRANSLATE, "Hola", DirectiveOptions(target_lang=""))
    with pytest.raises(ValidationFailure):
        await pipeline.run(Task.SELECT_SUGGESTIONS, "summary", DirectiveOptions(candidates=[]))

    complete.assert_not_awaited()


@pytest.mark.asyncio
async def test_categorize_note_keeps_camel_case_keys():
    raw = '{"topic": "Cricket", "relatedTo": ["India"], "tags": ["sport"], "summary": "A profile."}'
    pipeline = PromptDirectivePipeline(complete=AsyncMock(return_value=raw))

    output = await pipeline.run(Task.CATEGORIZE_NOTE, "note")

    assert output == {"topic": "Cricket", "relatedTo": ["India"], "tags": ["sport"], "summary": "A profile."}
