"""
runtime_deploy.invocation — Send one prompt to a deployed runtime.

Every call opens a fresh runtime session; session ids are never reused, so
each invocation runs in isolation.
"""

from __future__ import annotations

import json
import secrets
from collections.abc import Callable, Iterable
from typing import Any

import boto3
import requests
from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from runtime_deploy.exceptions import TransportError
from runtime_deploy.logs import SERVICE_NAME

logger = Logger(service=SERVICE_NAME)

DATA_PLANE_SERVICE = "bedrock-agentcore"
DEFAULT_QUALIFIER = "DEFAULT"
DEFAULT_LOCAL_TIMEOUT_SECONDS = 900
# 17 random bytes -> 34 hex chars; AgentCore requires session ids of 33+ chars.
_SESSION_ID_BYTES = 17


def new_session_id() -> str:
    return secrets.token_hex(_SESSION_ID_BYTES)


def _join_event_stream(lines: Iterable[bytes | str]) -> str:
    """Reassemble an SSE body into text, one data: payload per chunk."""
    parts: list[str] = []
    for line in lines:
        decoded = line.decode("utf-8") if isinstance(line, bytes) else line
        if not decoded.startswith("data:"):
            continue
        data = decoded[5:].strip()
        if data == "[DONE]":
            break
        try:
            chunk = json.loads(data)
        except json.JSONDecodeError:
            parts.append(data)
            continue
        parts.append(chunk if isinstance(chunk, str) else json.dumps(chunk))
    return "".join(parts)


class InvocationClient:
    """
    bedrock-agentcore data-plane client for a single request/response exchange.

    Pass agentcore_client to inject a preconfigured boto3 client (or a fake in
    tests) and session_id_factory to control session id generation.
    """

    def __init__(
        self,
        *,
        region: str | None = None,
        agentcore_client: Any = None,
        qualifier: str = DEFAULT_QUALIFIER,
        session_id_factory: Callable[[], str] = new_session_id,
    ) -> None:
        self._client: Any = agentcore_client or boto3.client(DATA_PLANE_SERVICE, region_name=region)
        self._qualifier = qualifier
        self._session_id_factory = session_id_factory

    def invoke(self, runtime_arn: str, prompt: str) -> str:
        session_id = self._session_id_factory()
        logger.info(
            "Invoking runtime",
            runtime_arn=runtime_arn,
            session_id=session_id,
            prompt_len=len(prompt),
        )
        try:
            response = self._client.invoke_agent_runtime(
                agentRuntimeArn=runtime_arn,
                runtimeSessionId=session_id,
                payload=prompt.encode("utf-8"),
                qualifier=self._qualifier,
            )
        except ClientError as exc:
            code = str(exc.response.get("Error", {}).get("Code", "Unknown"))
            raise TransportError(
                f"InvokeAgentRuntime failed ({code}): {exc}",
                operation="InvokeAgentRuntime",
                code=code,
            ) from exc
        except BotoCoreError as exc:
            raise TransportError(
                f"InvokeAgentRuntime failed: {exc}",
                operation="InvokeAgentRuntime",
                code=type(exc).__name__,
            ) from exc

        body = response["response"]
        if "text/event-stream" in str(response.get("contentType", "")):
            return _join_event_stream(body.iter_lines())
        return body.read().decode("utf-8")


class LocalInvocationClient:
    """POST a prompt straight to a locally running agent container.

    Used to smoke-test the image before deploying it.
    """

    def __init__(self, base_url: str, *, timeout: float = DEFAULT_LOCAL_TIMEOUT_SECONDS) -> None:
        self._url = f"{base_url.rstrip('/')}/invocations"
        self._timeout = timeout

    def invoke(self, prompt: str) -> str:
        try:
            response = requests.post(
                self._url,
                data=prompt.encode("utf-8"),
                headers={"Content-Type": "text/plain; charset=utf-8"},
                timeout=self._timeout,
            )
            response.raise_for_status()
        except requests.HTTPError as exc:
            raise TransportError(
                f"Local invocation failed ({exc.response.status_code}): {exc.response.text}",
                operation="LocalInvocation",
                code=str(exc.response.status_code),
            ) from exc
        except requests.RequestException as exc:
            raise TransportError(
                f"Local invocation failed: {exc}",
                operation="LocalInvocation",
                code=type(exc).__name__,
            ) from exc
        return response.text
