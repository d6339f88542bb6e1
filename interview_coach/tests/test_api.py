"""
API tests for the interview endpoints.

Runs the FastAPI app in-process with TestClient; the session store is
replaced so every session uses the mocked LLMService.
"""

import pytest
from fastapi.testclient import TestClient

from interview_coach.api.deps import get_session_store
from interview_coach.core.constants import APP_TITLE, DEFAULT_NUM_QUESTIONS, NUM_QUESTIONS_OPTIONS
from interview_coach.core.exceptions import AIServiceError
from interview_coach.main import app

JOB_DESCRIPTION = "Platform engineer working on Kubernetes and Python services."


@pytest.fixture
def client(session_store):
    app.dependency_overrides[get_session_store] = lambda: session_store
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def session_id(client):
    response = client.post("/api/v1/sessions")
    assert response.status_code == 201
    return response.json()["session_id"]


def _start(client, session_id, num_questions=3):
    return client.post(
        f"/api/v1/sessions/{session_id}/start",
        json={"job_description": JOB_DESCRIPTION, "num_questions": num_questions},
    )


def _finish(client, session_id, video_data_url=None):
    _start(client, session_id)
    response = None
    for answer in ["First", "Second", "Third"]:
        response = client.post(
            f"/api/v1/sessions/{session_id}/answers",
            json={"answer": answer, "video_data_url": video_data_url},
        )
    return response


class TestConfigAndPages:
    """Tests for static configuration and the index page."""

    def test_config(self, client):
        data = client.get("/api/v1/config").json()

        assert data["title"] == APP_TITLE
        assert data["num_questions_options"] == NUM_QUESTIONS_OPTIONS
        assert data["default_num_questions"] == DEFAULT_NUM_QUESTIONS
        assert data["placeholder_job_description"]
        assert isinstance(data["api_key_configured"], bool)

    def test_index_page(self, client):
        response = client.get("/")

        assert response.status_code == 200
        assert "text/html" in response.headers["content-type"]
        assert "app.js?v=" in response.text


class TestSessionLifecycle:
    """Tests for the full interview flow over HTTP."""

    def test_new_session_state(self, client, session_id):
        data = client.get(f"/api/v1/sessions/{session_id}").json()

        assert data["phase"] == "JOB_INPUT"
        assert data["selected_num_questions"] == 3
        assert data["error"] is None

    def test_start_interview(self, client, session_id, sample_questions):
        data = _start(client, session_id).json()

        assert data["phase"] == "INTERVIEWING"
        assert data["current_question"] == sample_questions[0]
        assert data["question_number"] == 1
        assert data["total_questions"] == 3

    def test_answer_flow_to_feedback(self, client, session_id, video_data_url):
        data = _finish(client, session_id, video_data_url).json()

        assert data["phase"] == "FEEDBACK_READY"
        assert [e["answer"] for e in data["entries"]] == ["First", "Second", "Third"]
        assert all(e["has_video"] for e in data["entries"])
        assert "video_data_url" not in data["entries"][0]

    def test_feedback_view(self, client, session_id):
        _finish(client, session_id)

        data = client.get(f"/api/v1/sessions/{session_id}/feedback").json()

        assert data["overall_score"] == {"value": 82, "max": 100, "percentage": 82.0, "tier": "good"}
        assert len(data["sub_scores"]) == 5
        assert data["sub_scores"][3]["tier"] == "poor"
        assert "Overall Score" not in data["remaining_feedback"]
        assert data["blocks"][0]["kind"] == "highlight"
        assert data["blocks"][0]["heading"] == "Overall Impression"

    def test_report_download(self, client, session_id):
        _finish(client, session_id)

        response = client.get(f"/api/v1/sessions/{session_id}/report")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="interview_')
        assert disposition.endswith('_feedback.txt"')
        assert "Q1. " in response.text
        assert "Overall: 82/100" in response.text

    def test_reset(self, client, session_id):
        _finish(client, session_id)

        data = client.post(f"/api/v1/sessions/{session_id}/reset").json()

        assert data["phase"] == "JOB_INPUT"
        assert data["entries"] == []

    def test_delete(self, client, session_id):
        assert client.delete(f"/api/v1/sessions/{session_id}").status_code == 204
        assert client.get(f"/api/v1/sessions/{session_id}").status_code == 404


class TestErrors:
    """Tests for error responses and the error phase."""

    def test_unknown_session(self, client):
        response = client.get("/api/v1/sessions/does-not-exist")

        assert response.status_code == 404
        assert response.json()["error"] == "SessionNotFoundError"

    def test_answer_before_start_conflicts(self, client, session_id):
        response = client.post(f"/api/v1/sessions/{session_id}/answers", json={"answer": "hi"})

        assert response.status_code == 409
        assert response.json()["error"] == "PhaseTransitionError"
        assert response.json()["details"]["phase"] == "JOB_INPUT"

    def test_feedback_not_ready(self, client, session_id):
        _start(client, session_id)

        response = client.get(f"/api/v1/sessions/{session_id}/feedback")

        assert response.status_code == 409
        assert "Feedback is not ready" in response.json()["detail"]
        assert client.get(f"/api/v1/sessions/{session_id}/report").status_code == 409

    @pytest.mark.parametrize("payload", [
        {"job_description": "   ", "num_questions": 3},
        {"job_description": JOB_DESCRIPTION, "num_questions": 4},
        {"num_questions": 3},
    ])
    def test_invalid_start_request(self, client, session_id, payload):
        response = client.post(f"/api/v1/sessions/{session_id}/start", json=payload)

        assert response.status_code == 422
        assert client.get(f"/api/v1/sessions/{session_id}").json()["phase"] == "JOB_INPUT"

    def test_question_failure_shows_error_phase(self, client, session_id, fake_llm_service):
        fake_llm_service.generate_questions.side_effect = AIServiceError("Failed to generate questions: 503")

        data = _start(client, session_id).json()

        assert data["phase"] == "ERROR"
        assert data["error"] == "Failed to generate questions: 503"

        data = client.post(f"/api/v1/sessions/{session_id}/reset").json()
        assert data["phase"] == "JOB_INPUT"
        assert data["error"] is None
