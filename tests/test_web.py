"""Tests for the FastAPI SSE adapter."""

from __future__ import annotations

import asyncio
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from agent_samples.adapters.web_fastapi.app import create_app
from agent_samples.session.models import BackendTurn


def _frames(body: str) -> list[tuple[str, dict]]:
    frames = []
    for block in body.strip().split("\n\n"):
        lines = dict(line.split(": ", 1) for line in block.splitlines())
        frames.append((lines["event"], json.loads(lines["data"])))
    return frames


@pytest.fixture
def http(make_client):
    def _make(responses):
        agent_client = make_client(responses)
        return agent_client, TestClient(create_app(agent_client))

    return _make


def test_chat_streams_events_until_idle(http):
    agent_client, client = http([BackendTurn(content="Hello over SSE")])
    with client:
        response = client.post("/chat", json={"prompt": "hi"})

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/event-stream")
    frames = _frames(response.text)
    names = [name for name, _ in frames]
    assert names[-2:] == ["assistant.message", "session.idle"]
    assert "".join(d["delta_content"] for n, d in frames if n == "assistant.message_delta") == "Hello over SSE"
    assert frames[-2][1]["content"] == "Hello over SSE"
    assert not agent_client.started


def test_session_id_reuses_history(http):
    agent_client, client = http([BackendTurn(content="first"), BackendTurn(content="second")])
    with client:
        first = client.post("/chat", json={"prompt": "one"})
        session_id = first.headers["x-session-id"]
        client.post("/chat", json={"prompt": "two", "session_id": session_id})
        assert client.get("/health").json() == {"status": "ok", "sessions": 1}

    second_call = agent_client.backend.calls[1]["messages"]
    assert [m["role"] for m in second_call] == ["system", "user", "assistant", "user"]


def test_backend_error_is_streamed_as_error_event(http):
    _, client = http([RuntimeError("upstream unavailable")])
    with client:
        response = client.post("/chat", json={"prompt": "hi"})
    frames = _frames(response.text)
    assert frames == [("session.error", frames[0][1])]
    assert frames[0][1]["message"] == "upstream unavailable"


def test_blank_prompt_rejected(http):
    _, client = http([])
    with client:
        assert client.post("/chat", json={"prompt": "  "}).status_code == 422
        assert client.post("/chat", json={}).status_code == 422
        assert client.get("/health").json()["sessions"] == 0


def test_clear_session(http):
    _, client = http([BackendTurn(content="ok")])
    with client:
        session_id = client.post("/chat", json={"prompt": "hi"}).headers["x-session-id"]
        assert client.delete(f"/sessions/{session_id}").json() == {"status": "cleared", "session_id": session_id}
        assert client.delete(f"/sessions/{session_id}").status_code == 404
        assert client.get("/health").json()["sessions"] == 0


async def test_concurrent_prompts_on_one_session_get_409(make_client):
    agent_client = make_client(
        [BackendTurn(content="first"), BackendTurn(content="second"), BackendTurn(content="third")],
        delay=0.1,
    )
    app = create_app(agent_client)
    async with agent_client:
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http:
            first = await http.post("/chat", json={"prompt": "hi"})
            session_id = first.headers["x-session-id"]
            responses = await asyncio.gather(
                http.post("/chat", json={"prompt": "a", "session_id": session_id}),
                http.post("/chat", json={"prompt": "b", "session_id": session_id}),
            )

    assert sorted(r.status_code for r in responses) == [200, 409]
    accepted = next(r for r in responses if r.status_code == 200)
    assert _frames(accepted.text)[-1][0] == "session.idle"
    assert agent_client.backend.call_count == 2
