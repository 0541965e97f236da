"""Tests for the AI insights payload, response parsing and OpenAI client."""

import json
from datetime import datetime
from unittest.mock import Mock

import pytest
from openai import APIError

from factories import make_log

from chronosflow.engine.insights import build_insight_payload, parse_insight_response
from chronosflow.integrations.openai_client import OpenAIClient, InsightError
from chronosflow.models.task import Task, TaskStatus, Priority


def _completion(content):
    """Minimal stand-in for a chat completion response."""
    response = Mock()
    response.choices = [Mock()]
    response.choices[0].message.content = content
    return response


def _api_error(status_code=None, code=None):
    error = APIError("boom", request=Mock(), body=None)
    error.status_code = status_code
    error.code = code
    return error


class TestBuildInsightPayload:
    """Only a compact summary leaves the process."""

    def test_task_summary(self, sample_task_base):
        task = Task(**{**sample_task_base, "title": "Deep work", "status": TaskStatus.PARTIAL, "priority": Priority.HIGH})
        payload = build_insight_payload([task], [])
        assert payload == {"tasks": [{"t": "Deep work", "s": "partial", "p": "HIGH"}], "logs": []}

    def test_enum_members_are_serialized_as_values(self, sample_task):
        """Tasks updated through model_copy still carry enum members."""
        task = sample_task.model_copy(update={"status": TaskStatus.DONE})
        payload = build_insight_payload([task], [])
        assert payload["tasks"][0]["s"] == "done"
        json.dumps(payload)

    def test_log_summary(self):
        start = datetime(2024, 1, 1, 9, 0, 0)
        payload = build_insight_payload([], [make_log(600, start=start)])
        assert payload["logs"] == [{
            "task": "Test Task",
            "start": "2024-01-01T09:00:00",
            "end": "2024-01-01T09:00:00",
            "seconds": 600,
        }]

    def test_only_recent_logs(self):
        logs = [make_log(i + 1, task_id=f"t{i}") for i in range(20)]
        payload = build_insight_payload([], logs)
        assert len(payload["logs"]) == 15
        assert payload["logs"][0]["seconds"] == 1


class TestParseInsightResponse:
    """Tests for parse_insight_response()."""

    def test_valid_json(self):
        result = parse_insight_response('{"score": 80, "summary": "Good day", "recommendations": ["Sleep"]}')
        assert result.score == 80
        assert result.summary == "Good day"
        assert result.recommendations == ["Sleep"]

    def test_code_fence_is_stripped(self):
        content = '```json\n{"score": 55.5, "summary": "Okay", "recommendations": []}\n```'
        assert parse_insight_response(content).score == 55.5

    @pytest.mark.parametrize("content", [
        None,
        "",
        "   ",
        "not json",
        '{"summary": "no score"}',
        '{"score": "high", "summary": "x", "recommendations": []}',
        '{"score": 1, "summary": "x", "recommendations": "not a list"}',
    ])
    def test_invalid_content(self, content):
        assert parse_insight_response(content) is None


class TestOpenAIClient:
    """OpenAI client with the network call mocked out."""

    @pytest.fixture
    def client(self):
        client = OpenAIClient(api_key="test-key", model="test-model")
        client.client = Mock()
        return client

    def test_successful_request(self, client):
        client.client.chat.completions.create.return_value = _completion(
            '{"score": 70, "summary": "Fine", "recommendations": ["Walk"]}'
        )

        result = client.generate_insights({"tasks": [], "logs": []})

        assert result.score == 70
        kwargs = client.client.chat.completions.create.call_args.kwargs
        assert kwargs["model"] == "test-model"
        assert kwargs["response_format"] == {"type": "json_object"}

    def test_payload_is_in_prompt(self, client):
        client.client.chat.completions.create.return_value = _completion(
            '{"score": 70, "summary": "Fine", "recommendations": []}'
        )
        client.generate_insights({"tasks": [{"t": "Training", "s": "done", "p": "MEDIUM"}], "logs": []})

        messages = client.client.chat.completions.create.call_args.kwargs["messages"]
        assert '"t": "Training"' in messages[-1]["content"]

    def test_missing_api_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        client = OpenAIClient()
        assert client.client is None
        with pytest.raises(InsightError):
            client.generate_insights({"tasks": [], "logs": []})

    def test_unparseable_response(self, client):
        client.client.chat.completions.create.return_value = _completion("I think you did great!")
        with pytest.raises(InsightError, match="could not be parsed"):
            client.generate_insights({"tasks": [], "logs": []})

    def test_rate_limit(self, client):
        client.client.chat.completions.create.side_effect = _api_error(status_code=429)
        with pytest.raises(InsightError, match="rate limit"):
            client.generate_insights({"tasks": [], "logs": []})

    def test_quota(self, client):
        client.client.chat.completions.create.side_effect = _api_error(code="insufficient_quota")
        with pytest.raises(InsightError, match="quota"):
            client.generate_insights({"tasks": [], "logs": []})

    def test_network_error(self, client):
        client.client.chat.completions.create.side_effect = ConnectionError("offline")
        with pytest.raises(InsightError, match="ConnectionError"):
            client.generate_insights({"tasks": [], "logs": []})
