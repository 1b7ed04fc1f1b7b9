from datetime import datetime
from types import SimpleNamespace

import anthropic
import httpx
import pytest
from fastapi.testclient import TestClient

import api_server

NOW = datetime.fromisoformat("2025-01-10T08:00:00")


class FakeMessages:
    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        block = SimpleNamespace(type="tool_use", input=self.result)
        return SimpleNamespace(content=[block], stop_reason="tool_use")


class FakeClient:
    def __init__(self, result=None, error=None):
        self.messages = FakeMessages(result, error)


@pytest.fixture
def fake():
    return FakeClient()


@pytest.fixture
def client(fake, monkeypatch):
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")
    monkeypatch.setenv("APP_ENV", "production")
    api_server.app.dependency_overrides[api_server.get_now] = lambda: NOW
    api_server.app.dependency_overrides[api_server.get_client_factory] = lambda: (lambda settings: fake)
    yield TestClient(api_server.app)
    api_server.app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["claude_configured"] is True
    assert "test-key" not in response.text


def test_parse_todo_repairs_model_output(client, fake):
    fake.messages.result = {
        "title": "  Submit report  ",
        "due_date": "2025-01-10",
        "priority": "high",
        "category": "work",
    }
    response = client.post("/api/ai/parse-todo", json={"text": "  submit the report   today!  "})
    assert response.status_code == 200
    assert response.json() == {
        "title": "Submit report",
        "description": "",
        "due_date": "2025-01-10T09:00:00",
        "priority": "high",
        "category": "work",
        "completed": False,
    }

    call = fake.messages.calls[0]
    assert call["tool_choice"] == {"type": "tool", "name": "todo_draft"}
    assert '"submit the report today!"' in call["messages"][0]["content"]
    assert "2025-01-10" in call["messages"][0]["content"]


@pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": 42}, {"text": "a"}, {"text": "x" * 501}])
def test_parse_todo_rejects_bad_input_without_calling_model(client, fake, payload):
    response = client.post("/api/ai/parse-todo", json=payload)
    assert response.status_code == 400
    assert "error" in response.json()
    assert fake.messages.calls == []


def test_parse_todo_rejects_non_object_body(client, fake):
    response = client.post("/api/ai/parse-todo", content=b"not json", headers={"Content-Type": "application/json"})
    assert response.status_code == 400
    assert fake.messages.calls == []


def test_missing_api_key_is_server_error(client, monkeypatch):
    monkeypatch.delenv("ANTHROPIC_API_KEY")
    api_server.app.dependency_overrides[api_server.get_client_factory] = lambda: api_server.build_client
    response = client.post("/api/ai/parse-todo", json={"text": "buy milk"})
    assert response.status_code == 500
    assert "not configured" in response.json()["error"]


def test_invalid_model_output_is_bad_gateway(client, fake):
    fake.messages.result = {"description": "no title here"}
    response = client.post("/api/ai/parse-todo", json={"text": "buy milk"})
    assert response.status_code == 502


def test_rate_limit_maps_to_429(client, fake):
    request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    fake.messages.error = anthropic.RateLimitError(
        "rate limited", response=httpx.Response(429, request=request), body=None
    )
    response = client.post("/api/ai/parse-todo", json={"text": "buy milk"})
    assert response.status_code == 429


def test_unclassified_detail_only_in_development(client, fake, monkeypatch):
    fake.messages.error = RuntimeError("kaboom")
    response = client.post("/api/ai/parse-todo", json={"text": "buy milk"})
    assert response.status_code == 500
    assert "details" not in response.json()

    monkeypatch.setenv("APP_ENV", "development")
    response = client.post("/api/ai/parse-todo", json={"text": "buy milk"})
    assert response.json()["details"] == "kaboom"


SUMMARY = {
    "summary": "You finished 1 of 2 tasks.",
    "urgentTasks": ["Ship release"],
    "insights": ["High priority work is getting done."],
    "recommendations": ["Start with the release."],
}

TODOS = [
    {
        "id": 1, "title": "Ship release", "description": "", "priority": "high",
        "category": "work", "completed": False, "due_date": "2025-01-09T09:00:00",
        "created_date": "2025-01-01T10:00:00", "updated_at": "2025-01-01T10:00:00",
    },
    {
        "id": 2, "title": "Yoga", "priority": "low", "category": None,
        "completed": True, "due_date": "2025-01-10T19:00:00",
        "updated_at": "2025-01-10T07:00:00",
    },
]


def test_summarize_passes_model_output_through(client, fake):
    fake.messages.result = SUMMARY
    response = client.post("/api/ai/summarize-todos", json={"todos": TODOS, "period": "week"})
    assert response.status_code == 200
    assert response.json() == SUMMARY

    prompt = fake.messages.calls[0]["messages"][0]["content"]
    assert "Total tasks: 2" in prompt
    assert "Completed: 1 (50.0%)" in prompt
    assert "Currently overdue: 1 (Ship release)" in prompt
    assert "Friday" in prompt and "Thursday" in prompt


def test_summarize_tolerates_null_priority_and_blank_due_date(client, fake):
    fake.messages.result = SUMMARY
    todos = [
        {"id": "a1", "title": "Water plants", "priority": None, "due_date": "", "completed": False},
        {"id": "a2", "title": "Call bank", "priority": "high", "due_date": None, "completed": False},
    ]
    response = client.post("/api/ai/summarize-todos", json={"todos": todos, "period": "today"})
    assert response.status_code == 200

    prompt = fake.messages.calls[0]["messages"][0]["content"]
    assert "Medium priority: 1 total" in prompt
    assert "Tasks with a due date: 0" in prompt


def test_summarize_rejects_unknown_period(client, fake):
    response = client.post("/api/ai/summarize-todos", json={"todos": TODOS, "period": "tomorrow"})
    assert response.status_code == 400
    assert "period" in response.json()["error"]
    assert fake.messages.calls == []


@pytest.mark.parametrize("todos", [None, "nope", [{"title": "x", "priority": "urgent"}]])
def test_summarize_rejects_bad_todos(client, fake, todos):
    response = client.post("/api/ai/summarize-todos", json={"todos": todos, "period": "today"})
    assert response.status_code == 400
    assert fake.messages.calls == []
