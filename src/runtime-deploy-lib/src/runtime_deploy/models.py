"""
runtime_deploy.models — Runtime descriptor and lifecycle vocabulary.

The AgentCore control plane is the system of record; these types are a typed
view over its GetAgentRuntime / ListAgentRuntimes / Create / Update responses.

Lifecycle (driven by the control plane, observed by the poller):
    CREATING ─┬─> READY
              └─> CREATE_FAILED
    UPDATING ─┬─> READY
              └─> UPDATE_FAILED
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

# ---------------------------------------------------------------------------
# Enums — constrained vocabulary for status/network fields
# ---------------------------------------------------------------------------


class RuntimeStatus(StrEnum):
    CREATING = "CREATING"
    UPDATING = "UPDATING"
    DELETING = "DELETING"
    CREATE_FAILED = "CREATE_FAILED"
    UPDATE_FAILED = "UPDATE_FAILED"
    READY = "READY"
    # Any value this version does not recognise. Never terminal.
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: Any) -> RuntimeStatus:
        """Map a control-plane status string onto the enum; never raises."""
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return cls.UNKNOWN

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL_STATUSES

    @property
    def is_failure(self) -> bool:
        return self in _FAILURE_STATUSES


_FAILURE_STATUSES = frozenset({RuntimeStatus.CREATE_FAILED, RuntimeStatus.UPDATE_FAILED})
_TERMINAL_STATUSES = _FAILURE_STATUSES | {RuntimeStatus.READY}


class NetworkMode(StrEnum):
    PUBLIC = "PUBLIC"
    VPC = "VPC"


# ---------------------------------------------------------------------------
# RuntimeDescriptor
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuntimeDescriptor:
    """One deployable runtime as known to the control plane.

    List responses only populate name/id/arn/status; create and update
    responses add id/arn/status; get responses carry everything including
    failure_reason.
    """

    name: str | None = None
    id: str | None = None
    arn: str | None = None
    container_reference: str | None = None
    role_reference: str | None = None
    network_mode: NetworkMode | None = None
    status: RuntimeStatus = RuntimeStatus.UNKNOWN
    failure_reason: str | None = None
    version: str | None = None
    raw_status: str | None = None

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> RuntimeDescriptor:
        """Build a descriptor from a bedrock-agentcore-control response dict."""
        artifact = item.get("agentRuntimeArtifact") or {}
        container = artifact.get("containerConfiguration") or {}
        network = item.get("networkConfiguration") or {}
        raw_status = item.get("status")
        network_mode = network.get("networkMode")

        return cls(
            name=_str_or_none(item.get("agentRuntimeName")),
            id=_str_or_none(item.get("agentRuntimeId")),
            arn=_str_or_none(item.get("agentRuntimeArn")),
            container_reference=_str_or_none(container.get("containerUri")),
            role_reference=_str_or_none(item.get("roleArn")),
            network_mode=NetworkMode(network_mode) if network_mode in set(NetworkMode) else None,
            status=RuntimeStatus.parse(raw_status),
            failure_reason=_str_or_none(item.get("failureReason")),
            version=_str_or_none(item.get("agentRuntimeVersion")),
            raw_status=_str_or_none(raw_status),
        )


def _str_or_none(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
