"""
runtime_deploy.orchestrator — Create-or-update deployment of one named runtime.

Idempotency is keyed on the logical runtime name: the listing is scanned for
that name, an existing runtime is updated in place, otherwise a new one is
created. Either way the call blocks until the control plane reports a
terminal status.

Concurrent deployments of the same name are not arbitrated here; they race
at the control plane.
"""

from __future__ import annotations

import re
from dataclasses import replace
from typing import Any

from aws_lambda_powertools import Logger

from runtime_deploy.exceptions import ConfigurationError, TransportError
from runtime_deploy.logs import SERVICE_NAME
from runtime_deploy.models import NetworkMode, RuntimeDescriptor
from runtime_deploy.poller import ReadinessPoller

logger = Logger(service=SERVICE_NAME)

# AgentCore runtime names: letter first, then letters/digits/underscores, max 48.
_RUNTIME_NAME_PATTERN = re.compile(r"^[a-zA-Z][a-zA-Z0-9_]{0,47}$")


def validate_deployment_inputs(name: str, container_reference: str, role_reference: str) -> None:
    """Raise ConfigurationError for anything the control plane would reject outright."""
    missing = [
        label
        for label, value in (
            ("runtime name", name),
            ("container reference", container_reference),
            ("execution role reference", role_reference),
        )
        if not (value or "").strip()
    ]
    if missing:
        raise ConfigurationError(f"Missing required deployment input: {', '.join(missing)}")
    if not _RUNTIME_NAME_PATTERN.match(name):
        raise ConfigurationError(
            f"Invalid runtime name {name!r}: must start with a letter and contain only "
            "letters, digits and underscores (max 48 characters)"
        )


class DeploymentOrchestrator:
    """
    Find-or-create-or-update for a single AgentCore runtime.

    client must provide list_runtimes / create_runtime / update_runtime /
    get_runtime (see RuntimeControlPlaneClient). poller defaults to a
    ReadinessPoller over the same client.
    """

    def __init__(
        self,
        client: Any,
        poller: ReadinessPoller | None = None,
        *,
        network_mode: NetworkMode = NetworkMode.PUBLIC,
    ) -> None:
        self._client = client
        self._poller = poller or ReadinessPoller(client)
        self._network_mode = network_mode

    def find_existing(self, name: str) -> RuntimeDescriptor | None:
        matches = [runtime for runtime in self._client.list_runtimes() if runtime.name == name]
        if not matches:
            return None
        if len(matches) > 1:
            logger.warning(
                "Multiple runtimes share the same name; using the first",
                runtime_name=name,
                match_count=len(matches),
                runtime_ids=[runtime.id for runtime in matches],
            )
        return matches[0]

    def deploy(self, name: str, container_reference: str, role_reference: str) -> RuntimeDescriptor:
        """Deploy container_reference under name and wait for a terminal status.

        Returns the READY descriptor. Raises DeploymentFailedError on a failure
        status, DeploymentTimeoutError when the poller's bound is exceeded, and
        any ControlPlaneError from the underlying calls unchanged.
        """
        validate_deployment_inputs(name, container_reference, role_reference)

        existing = self.find_existing(name)
        if existing is not None and not existing.id:
            raise TransportError(
                f"ListAgentRuntimes returned {name!r} without a runtime id",
                operation="ListAgentRuntimes",
                code="MissingRuntimeId",
            )

        if existing is not None:
            logger.info(
                "Updating existing runtime",
                runtime_name=name,
                runtime_id=existing.id,
                container_reference=container_reference,
            )
            operation = "UpdateAgentRuntime"
            submitted = self._client.update_runtime(
                existing.id, container_reference, role_reference, self._network_mode
            )
        else:
            logger.info(
                "Creating runtime", runtime_name=name, container_reference=container_reference
            )
            operation = "CreateAgentRuntime"
            submitted = self._client.create_runtime(
                name, container_reference, role_reference, self._network_mode
            )

        runtime_id = submitted.id
        if not runtime_id:
            raise TransportError(
                f"{operation} returned no runtime id for {name!r}",
                operation=operation,
                code="MissingRuntimeId",
            )

        logger.info("Waiting for runtime to be ready", runtime_name=name, runtime_id=runtime_id)
        final = self._poller.wait_until_terminal(runtime_id)
        return replace(
            final,
            name=final.name or name,
            arn=final.arn or submitted.arn,
        )
