"""
runtime_deploy.client — Typed adapter over the AgentCore control plane.

Four operations: list, get, create, update. Pure I/O: no retries, no
decisions. botocore failures are translated into the runtime_deploy error
taxonomy so callers never handle raw ClientError.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

import boto3
from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from runtime_deploy.exceptions import ConflictError, ControlPlaneError, NotFoundError, TransportError
from runtime_deploy.logs import SERVICE_NAME
from runtime_deploy.models import NetworkMode, RuntimeDescriptor

logger = Logger(service=SERVICE_NAME)

CONTROL_PLANE_SERVICE = "bedrock-agentcore-control"
_LIST_PAGE_SIZE = 100


def _translate_error(exc: ClientError | BotoCoreError, *, operation: str) -> ControlPlaneError:
    if isinstance(exc, ClientError):
        error = exc.response.get("Error", {})
        code = str(error.get("Code", "Unknown"))
        message = f"{operation} failed ({code}): {error.get('Message', str(exc))}"
        if code == "ResourceNotFoundException":
            return NotFoundError(message, operation=operation, code=code)
        if code == "ConflictException":
            return ConflictError(message, operation=operation, code=code)
        return TransportError(message, operation=operation, code=code)
    return TransportError(
        f"{operation} failed: {exc}", operation=operation, code=type(exc).__name__
    )


def _artifact(container_reference: str) -> dict[str, Any]:
    return {"containerConfiguration": {"containerUri": container_reference}}


class RuntimeControlPlaneClient:
    """
    bedrock-agentcore-control client restricted to the calls deployment needs.

    Pass control_client to inject a preconfigured boto3 client (or a fake in
    tests); otherwise one is created for region.
    """

    def __init__(self, *, region: str | None = None, control_client: Any = None) -> None:
        self._client: Any = control_client or boto3.client(
            CONTROL_PLANE_SERVICE, region_name=region
        )

    def _call(self, operation: str, method: str, **kwargs: Any) -> dict[str, Any]:
        try:
            return getattr(self._client, method)(**kwargs)
        except (ClientError, BotoCoreError) as exc:
            error = _translate_error(exc, operation=operation)
            logger.warning(
                "Control-plane call failed",
                operation=operation,
                error_code=error.code,
                error_type=type(error).__name__,
            )
            raise error from exc

    def list_runtimes(self) -> list[RuntimeDescriptor]:
        """Return every runtime in the account/region (name, id, arn, status).

        Follows nextToken until the listing is exhausted.
        """
        runtimes: list[RuntimeDescriptor] = []
        kwargs: dict[str, Any] = {"maxResults": _LIST_PAGE_SIZE}
        while True:
            response = self._call("ListAgentRuntimes", "list_agent_runtimes", **kwargs)
            runtimes.extend(
                RuntimeDescriptor.from_api(item) for item in response.get("agentRuntimes", [])
            )
            next_token = response.get("nextToken")
            if not next_token:
                return runtimes
            kwargs["nextToken"] = next_token

    def get_runtime(self, runtime_id: str) -> RuntimeDescriptor:
        """Full descriptor including status and failure reason."""
        response = self._call("GetAgentRuntime", "get_agent_runtime", agentRuntimeId=runtime_id)
        return RuntimeDescriptor.from_api(response)

    def create_runtime(
        self,
        name: str,
        container_reference: str,
        role_reference: str,
        network_mode: NetworkMode = NetworkMode.PUBLIC,
    ) -> RuntimeDescriptor:
        """Create a runtime. Raises ConflictError if name is already taken."""
        response = self._call(
            "CreateAgentRuntime",
            "create_agent_runtime",
            agentRuntimeName=name,
            agentRuntimeArtifact=_artifact(container_reference),
            roleArn=role_reference,
            networkConfiguration={"networkMode": str(network_mode)},
        )
        descriptor = RuntimeDescriptor.from_api(response)
        return _with_submitted_fields(
            descriptor,
            name=name,
            container_reference=container_reference,
            role_reference=role_reference,
            network_mode=network_mode,
        )

    def update_runtime(
        self,
        runtime_id: str,
        container_reference: str,
        role_reference: str,
        network_mode: NetworkMode = NetworkMode.PUBLIC,
    ) -> RuntimeDescriptor:
        """Point an existing runtime at a new container/role."""
        response = self._call(
            "UpdateAgentRuntime",
            "update_agent_runtime",
            agentRuntimeId=runtime_id,
            agentRuntimeArtifact=_artifact(container_reference),
            roleArn=role_reference,
            networkConfiguration={"networkMode": str(network_mode)},
        )
        descriptor = RuntimeDescriptor.from_api(response)
        return _with_submitted_fields(
            descriptor,
            id=descriptor.id or runtime_id,
            container_reference=container_reference,
            role_reference=role_reference,
            network_mode=network_mode,
        )


def _with_submitted_fields(descriptor: RuntimeDescriptor, **fields: Any) -> RuntimeDescriptor:
    """Fill fields the create/update responses do not echo back."""
    missing = {key: value for key, value in fields.items() if getattr(descriptor, key) is None}
    return replace(descriptor, **missing) if missing else descriptor
