"""Tests for API routes."""
from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from pagegenie.errors import ParseFailureError, UpstreamCallFailure
from pagegenie.main import app
from pagegenie.models.outputs import ParseFailure
from pagegenie.models.search import SearchItem


@pytest.fixture
def client():
    return TestClient(app)


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "pagegenie"


def test_execute_returns_model_output(client):
    with patch(
        "pagegenie.api.routes.ai.PromptDirectivePipeline.run",
        new=AsyncMock(return_value="Rewritten."),
    ) as run:
        response = client.post(
            "/api/v1/ai",
            json={"action": "rewrite", "text": "rewrite me", "persona": "editor"},
        )

    assert response.status_code == 200
    assert response.json() == {"output": "Rewritten."}
    args = run.await_args.args
    assert args[0] == "rewrite"
    assert args[2].persona == "editor"


def test_execute_rejects_unknown_action_as_bad_request(client):
    response = client.post("/api/v1/ai", json={"action": "dance", "text": "x"})

    assert response.status_code == 400
    assert response.json()["code"] == "bad_request"


def test_execute_rejects_empty_text(client):
    response = client.post("/api/v1/ai", json={"action": "summarize", "text": ""})

    assert response.status_code == 400
    assert response.json()["code"] == "bad_request"


def test_missing_required_field_is_validation_error(client):
    response = client.post("/api/v1/ai", json={"text": "no action"})

    assert response.status_code == 422
    assert response.json()["code"] == "validation_error"


def test_parse_failure_has_its_own_error_code(client):
    with patch(
        "pagegenie.api.routes.notes.PromptDirectivePipeline.run",
        new=AsyncMock(side_effect=ParseFailureError(ParseFailure())),
    ):
        response = client.post("/api/v1/notes/categorize", json={"content": "a note"})

    assert response.status_code == 502
    assert response.json() == {"code": "parse_error", "message": "no valid structured output found"}


def test_upstream_failure_in_pipeline_is_reported(client):
    with patch(
        "pagegenie.api.routes.ai.PromptDirectivePipeline.run",
        new=AsyncMock(side_effect=UpstreamCallFailure("llm", "HTTP 503")),
    ):
        response = client.post("/api/v1/ai", json={"action": "summarize", "text": "x"})

    assert response.status_code == 502
    assert response.json()["code"] == "upstream_error"


def test_find_sources_returns_items(client):
    items = [SearchItem(title="Bio", url="https://espn.com/a", reason="Snippet.")]
    with patch(
        "pagegenie.api.routes.sources.sources.find_sources",
        new=AsyncMock(return_value=items),
    ) as find_sources:
        response = client.post(
            "/api/v1/sources/find",
            json={"text": "Virat Kohli was born in 1988.", "sourceUrl": "https://en.wikipedia.org/wiki/Virat_Kohli", "size": 3},
        )

    assert response.status_code == 200
    assert response.json() == {"items": [{"title": "Bio", "url": "https://espn.com/a", "reason": "Snippet."}]}
    find_sources.assert_awaited_once_with(
        "Virat Kohli was born in 1988.",
        "https://en.wikipedia.org/wiki/Virat_Kohli",
        None,
        3,
    )


def test_find_sources_with_empty_results_is_not_an_error(client):
    with patch("pagegenie.api.routes.sources.sources.find_sources", new=AsyncMock(return_value=[])):
        response = client.post("/api/v1/sources/find", json={"text": "anything"})

    assert response.status_code == 200
    assert response.json() == {"items": []}


def test_grade_quiz(client):
    questions = [{"correctIndex": 1}, {"correctIndex": 2}]
    response = client.post("/api/v1/quiz/grade", json={"questions": questions, "answers": [1, 0]})

    assert response.status_code == 200
    assert response.json() == {"score": 1, "total": 2, "answers": [1, 0], "correct": [1, 2]}


def test_compare_concept(client):
    result = {"key_claim": "K", "agreement": "A", "drift_analysis": "D"}
    with patch(
        "pagegenie.api.routes.ai.concepts.compare_concept",
        new=AsyncMock(return_value=result),
    ):
        response = client.post(
            "/api/v1/ai/compare-concept",
            json={"selection_text": "Selected", "page_url": "https://x.com"},
        )

    assert response.status_code == 200
    assert response.json() == result


def test_reading_suggest_requires_base_url(client):
    response = client.post("/api/v1/reading/suggest", json={"baseUrl": "", "baseSummary": "s"})

    assert response.status_code == 400
