"""
weather-agent handler — AgentCore Runtime HTTP protocol contract.

Endpoints:
    GET  /ping         Health check, returns {"status": "Healthy"}
    POST /invocations  Runs the agent on one prompt, returns text/plain.

Request body for /invocations (JSON is only parsed for application/json), either:
    raw text                              — the whole body is the prompt
    {"input": {"prompt": "<prompt>"}}     — structured envelope
    "<prompt>"                            — JSON string

Responses:
    200 text/plain  agent result
    400 text/plain  "No prompt provided" (agent is not called)
    500 text/plain  "Error: <message>" when the agent raises

AgentCore requires the container to listen on 0.0.0.0:8080.
"""

import json
import os
import threading
from collections.abc import Callable
from typing import Any

import uvicorn
from aws_lambda_powertools import Logger
from fastapi import FastAPI, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse

from agent import build_agent

logger = Logger(service="weather-agent")

HOST = "0.0.0.0"  # noqa: S104  (container contract)
PORT = int(os.environ.get("PORT", "8080"))
NO_PROMPT_MESSAGE = "No prompt provided"


def _is_json(content_type: str | None) -> bool:
    media_type = (content_type or "").split(";", 1)[0].strip().lower()
    return media_type == "application/json" or media_type.endswith("+json")


def extract_prompt(raw_body: bytes, content_type: str | None = None) -> str | None:
    """Return the prompt carried by an /invocations body, or None.

    Only JSON content types are parsed; any other body is the prompt verbatim.
    """
    text = raw_body.decode("utf-8", errors="replace")
    if not text.strip():
        return None
    if not _is_json(content_type):
        return text
    try:
        body = json.loads(text)
    except json.JSONDecodeError:
        return text

    if isinstance(body, str):
        return body if body.strip() else None
    if isinstance(body, dict):
        envelope = body.get("input")
        if not isinstance(envelope, dict):
            return None
        prompt = envelope.get("prompt")
        if prompt is None or not str(prompt).strip():
            return None
        return str(prompt)
    # Bare JSON scalars (numbers, booleans) are treated as raw text.
    return text


class _SharedAgent:
    """Builds the agent on first use; every request then shares the same instance."""

    def __init__(self, provider: Callable[[], Any]) -> None:
        self._provider = provider
        self._agent: Any = None
        self._lock = threading.Lock()

    def get(self) -> Any:
        if self._agent is None:
            with self._lock:
                if self._agent is None:
                    self._agent = self._provider()
        return self._agent

    def run(self, prompt: str) -> str:
        return str(self.get()(prompt))


def create_app(agent_provider: Callable[[], Any] = build_agent) -> FastAPI:
    app = FastAPI(title="weather-agent")
    shared_agent = _SharedAgent(agent_provider)

    @app.get("/ping")
    def ping() -> dict[str, str]:
        """AgentCore Runtime health check."""
        return {"status": "Healthy"}

    @app.post("/invocations")
    async def invocations(request: Request) -> PlainTextResponse:
        prompt = extract_prompt(await request.body(), request.headers.get("content-type"))
        if prompt is None:
            logger.warning("Invocation rejected: no prompt in request body")
            return PlainTextResponse(NO_PROMPT_MESSAGE, status_code=400)

        logger.info("Invocation received", prompt_len=len(prompt))
        try:
            result = await run_in_threadpool(shared_agent.run, prompt)
        except Exception as exc:
            logger.exception("Agent invocation failed")
            return PlainTextResponse(f"Error: {exc}", status_code=500)
        return PlainTextResponse(result)

    return app


# ASGI application; the container entrypoint runs `uvicorn handler:app`
app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=HOST, port=PORT)
