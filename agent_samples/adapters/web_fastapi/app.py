"""FastAPI SSE adapter — exposes streaming sessions over HTTP, no business logic."""

from __future__ import annotations

import contextlib
import logging
import uuid

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel

from agent_samples import create_client
from agent_samples.session.errors import ExchangeInProgressError
from agent_samples.session.models import SessionConfig
from agent_samples.session.session import AgentClient, AgentSession

logger = logging.getLogger(__name__)


class ChatRequest(BaseModel):
    prompt: str
    session_id: str | None = None
    model: str | None = None


def create_app(client: AgentClient | None = None) -> FastAPI:
    client = client or create_client()
    sessions: dict[str, AgentSession] = {}

    @contextlib.asynccontextmanager
    async def lifespan(_: FastAPI):
        async with client:
            yield
        sessions.clear()

    app = FastAPI(title="Agent Samples API", version="0.1.0", lifespan=lifespan)

    async def _session_for(request: ChatRequest) -> tuple[str, AgentSession]:
        session_id = request.session_id or str(uuid.uuid4())
        session = sessions.get(session_id)
        if session is None or session.closed:
            session = await client.create_session(SessionConfig(model=request.model, streaming=True))
            sessions[session_id] = session
        return session_id, session

    @app.post("/chat")
    async def chat(request: ChatRequest) -> StreamingResponse:
        if not request.prompt.strip():
            raise HTTPException(status_code=422, detail="prompt must not be empty")
        session_id, session = await _session_for(request)
        # Sent here, not in the body generator, so a concurrent prompt sees a busy session
        try:
            events = session.stream(request.prompt)
        except ExchangeInProgressError:
            raise HTTPException(status_code=409, detail=f"Session {session_id} is busy") from None

        async def sse_stream():
            async for event in events:
                payload = event.model_dump_json()
                yield f"event: {event.type.value}\ndata: {payload}\n\n"

        return StreamingResponse(
            sse_stream(),
            media_type="text/event-stream",
            headers={
                "Cache-Control": "no-cache",
                "X-Accel-Buffering": "no",
                "X-Session-Id": session_id,
            },
        )

    @app.delete("/sessions/{session_id}")
    async def clear_session(session_id: str) -> JSONResponse:
        session = sessions.pop(session_id, None)
        if session is None:
            raise HTTPException(status_code=404, detail=f"Unknown session {session_id}")
        await session.aclose()
        return JSONResponse({"status": "cleared", "session_id": session_id})

    @app.get("/health")
    async def health() -> JSONResponse:
        return JSONResponse({"status": "ok", "sessions": len(sessions)})

    return app


def serve() -> None:
    """Entry-point for ``agent-web`` console script."""
    import uvicorn

    uvicorn.run(
        "agent_samples.adapters.web_fastapi.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_level="info",
    )
