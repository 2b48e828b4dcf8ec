"""
Integration tests for the HTTP surface.
Runs the full app (lifespan, middleware, routers) with a scripted provider.
"""

import json

import pytest
from fastapi.testclient import TestClient

from supportchat.api.deps import get_llm_provider
from supportchat.config import settings
from supportchat.core import STREAM_ERROR_MESSAGE
from supportchat.knowledge import KnowledgeBase
from supportchat.main import app
from supportchat.prompts import KNOWLEDGE_BASE_MARKER
from supportchat.sessions import SessionStore
from supportchat.storage import LocalStorage

COOKIE = settings.session_cookie_name


@pytest.fixture
def client(tmp_path, clock):
    with TestClient(app) as client:
        app.state.session_store = SessionStore(clock=clock)
        app.state.knowledge_base = KnowledgeBase(LocalStorage(str(tmp_path)), "knowledge_base.md")
        yield client
    app.dependency_overrides.clear()


def use_provider(provider):
    app.dependency_overrides[get_llm_provider] = lambda: provider
    return provider


def parse_events(body: str):
    frames = [frame for frame in body.split("\n\n") if frame]
    assert all(frame.startswith("data: ") for frame in frames)
    return [json.loads(frame[len("data: "):]) for frame in frames]


class TestRootEndpoints:

    def test_root(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert response.json()["status"] == "running"

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestStreamingChat:
    """End-to-end conversations over the event stream."""

    def test_first_message_streams_and_sets_cookie(self, client, scripted_provider):
        client.post("/api/knowledge/update", json={"content": "Pro costs $20 per month."})
        provider = use_provider(scripted_provider(deltas=["Pro is ", "$20 ", "per month."]))

        response = client.post("/api/chat/message/stream", json={"message": "How much is Pro?"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        assert response.headers["cache-control"] == "no-cache"
        assert response.headers["x-accel-buffering"] == "no"

        set_cookie = response.headers["set-cookie"].lower()
        assert f"{COOKIE.lower()}=" in set_cookie
        assert "httponly" in set_cookie
        assert "samesite=lax" in set_cookie

        events = parse_events(response.text)
        assert [e["type"] for e in events] == ["start", "chunk", "chunk", "chunk", "end"]
        chunks = "".join(e["content"] for e in events if e["type"] == "chunk")
        assert events[-1]["fullContent"] == chunks == "Pro is $20 per month."
        assert KNOWLEDGE_BASE_MARKER in provider.calls[0][0].content

    def test_follow_up_omits_knowledge_base(self, client, scripted_provider):
        client.post("/api/knowledge/update", json={"content": "Pro costs $20 per month."})
        provider = use_provider(scripted_provider(deltas=["Sure."]))

        client.post("/api/chat/message/stream", json={"message": "How much is Pro?"})
        second = client.post("/api/chat/message/stream", json={"message": "And Enterprise?"})

        assert "set-cookie" not in second.headers
        follow_up = provider.calls[1]
        assert KNOWLEDGE_BASE_MARKER not in follow_up[0].content
        assert [(m.role, m.content) for m in follow_up[1:]] == [
            ("user", "How much is Pro?"),
            ("assistant", "Sure."),
            ("user", "And Enterprise?"),
        ]

    def test_upstream_failure_emits_error_event(self, client, scripted_provider):
        use_provider(scripted_provider(deltas=["Partial"], fail_after=1))

        response = client.post("/api/chat/message/stream", json={"message": "Hello"})

        events = parse_events(response.text)
        assert [e["type"] for e in events] == ["start", "chunk", "error"]
        assert events[-1]["error"] == STREAM_ERROR_MESSAGE

        history = client.get("/api/chat/history").json()["messages"]
        assert [(m["sender"], m["text"]) for m in history] == [("user", "Hello")]

    def test_get_variant(self, client, scripted_provider):
        use_provider(scripted_provider(deltas=["Hi", "!"]))

        response = client.get("/api/chat/message/stream", params={"message": "Hello"})

        events = parse_events(response.text)
        assert [e["type"] for e in events] == ["start", "chunk", "chunk", "end"]
        assert events[-1]["fullContent"] == "Hi!"

    def test_get_variant_requires_message(self, client, scripted_provider):
        use_provider(scripted_provider())
        response = client.get("/api/chat/message/stream")
        assert response.status_code == 400
        assert response.json() == {"message": "Message parameter is required"}

    def test_get_variant_too_long(self, client, scripted_provider):
        use_provider(scripted_provider())
        response = client.get("/api/chat/message/stream", params={"message": "x" * 1001})
        assert response.status_code == 400
        assert response.json() == {"message": "Message is too long"}

    def test_expired_session_gets_new_cookie(self, client, scripted_provider, clock):
        use_provider(scripted_provider(deltas=["Hi"]))
        client.post("/api/chat/message/stream", json={"message": "Hello"})

        clock.advance(minutes=31)
        response = client.post("/api/chat/message/stream", json={"message": "Still there?"})

        assert "set-cookie" in response.headers
        history = client.get("/api/chat/history").json()["messages"]
        assert [m["text"] for m in history] == ["Still there?", "Hi"]


class TestMessageValidation:

    @pytest.mark.parametrize("path", ["/api/chat/message", "/api/chat/message/stream"])
    def test_empty_message(self, client, scripted_provider, path):
        use_provider(scripted_provider())
        response = client.post(path, json={"message": ""})
        assert response.status_code == 400
        assert response.json() == {"message": "Message cannot be empty"}

    @pytest.mark.parametrize("path", ["/api/chat/message", "/api/chat/message/stream"])
    def test_message_too_long(self, client, scripted_provider, path):
        use_provider(scripted_provider())
        response = client.post(path, json={"message": "x" * 1001})
        assert response.status_code == 400
        assert response.json() == {"message": "Message is too long"}

    def test_message_at_limit_is_accepted(self, client, scripted_provider):
        use_provider(scripted_provider())
        response = client.post("/api/chat/message", json={"message": "x" * 1000})
        assert response.status_code == 200


class TestSingleShotChat:

    def test_send_message(self, client, scripted_provider):
        use_provider(scripted_provider(answer="We offer three plans."))

        response = client.post("/api/chat/message", json={"message": "Plans?"})

        assert response.status_code == 200
        data = response.json()
        assert data["answer"] == "We offer three plans."
        assert data["id"].isdigit()
        assert COOKIE in response.cookies

    def test_upstream_failure(self, client, scripted_provider):
        use_provider(scripted_provider(fail_after=0))

        response = client.post("/api/chat/message", json={"message": "Plans?"})

        assert response.status_code == 500
        assert response.json() == {"message": "Failed to process your message"}

    def test_provider_not_configured(self, client):
        app.state.llm_provider = None
        response = client.post("/api/chat/message", json={"message": "Plans?"})
        assert response.status_code == 503


class TestSessionEndpoints:

    def test_history_without_cookie(self, client):
        response = client.get("/api/chat/history")
        assert response.status_code == 200
        assert response.json() == {"messages": []}

    def test_add_message_and_history(self, client):
        first = client.post("/api/chat/add-message", json={"message": "Hello"})
        assert first.status_code == 200
        session_id = first.json()["sessionId"]
        assert first.json()["success"] is True

        second = client.post("/api/chat/add-message", json={"message": "Welcome!", "role": "assistant"})
        assert second.json()["sessionId"] == session_id

        history = client.get("/api/chat/history").json()["messages"]
        assert [(m["id"], m["sender"], m["text"]) for m in history] == [
            ("history-0", "user", "Hello"),
            ("history-1", "assistant", "Welcome!"),
        ]

    def test_add_message_requires_text(self, client):
        response = client.post("/api/chat/add-message", json={"message": ""})
        assert response.status_code == 400
        assert response.json() == {"message": "Message is required"}

    def test_clear_session(self, client):
        old_id = client.post("/api/chat/add-message", json={"message": "Hello"}).json()["sessionId"]

        response = client.post("/api/chat/clear-session")

        assert response.status_code == 200
        new_id = response.json()["sessionId"]
        assert new_id != old_id
        assert response.cookies[COOKIE] == new_id
        assert client.get("/api/chat/history").json() == {"messages": []}

    def test_settings(self, client):
        response = client.get("/api/chat/settings")
        assert response.status_code == 200
        data = response.json()
        assert data["maxTokens"] == settings.max_tokens
        assert data["projectName"] == settings.project_name
        assert len(data["suggestions"]) == 5


class TestKnowledgeEndpoints:

    def test_read_update_append(self, client):
        assert client.get("/api/knowledge").json() == {"content": ""}

        response = client.post("/api/knowledge/update", json={"content": "# FAQ"})
        assert response.status_code == 200
        assert "updated" in response.json()["message"]

        client.post("/api/knowledge/append", json={"content": "## Billing"})
        assert client.get("/api/knowledge").json() == {"content": "# FAQ\n\n## Billing"}

    def test_empty_content_rejected(self, client):
        response = client.post("/api/knowledge/update", json={"content": ""})
        assert response.status_code == 400
        assert response.json() == {"message": "Content cannot be empty"}


class TestDocumentAnalysis:

    def test_analyze(self, client, scripted_provider):
        provider = use_provider(scripted_provider(answer="This report covers storage quotas."))

        response = client.post("/api/documents/analyze", json={"text": "Quarterly storage report"})

        assert response.status_code == 200
        assert response.json() == {"analysis": "This report covers storage quotas."}
        assert provider.calls[0][1].content == "Quarterly storage report"
        assert len(app.state.session_store) == 0

    def test_empty_document(self, client, scripted_provider):
        use_provider(scripted_provider())
        response = client.post("/api/documents/analyze", json={"text": ""})
        assert response.status_code == 400
