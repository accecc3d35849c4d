"""
runtime_deploy.exceptions — Error taxonomy for runtime deployment.

Every remote failure is surfaced to the caller with its kind and message;
nothing in the core swallows or downgrades a control-plane error.
"""

from __future__ import annotations


class RuntimeDeployError(Exception):
    """Base class for all runtime deployment errors."""


class ConfigurationError(RuntimeDeployError):
    """Required deployment input is missing or malformed.

    Raised before any remote call is attempted.
    """


class ControlPlaneError(RuntimeDeployError):
    """
    A remote call to the AgentCore control plane failed.

    Attributes:
        operation: Control-plane operation name (e.g. "GetAgentRuntime").
        code:      Service error code, or the botocore exception class name
                   for client-side failures.
    """

    def __init__(self, message: str, *, operation: str, code: str | None = None) -> None:
        self.operation = operation
        self.code = code
        super().__init__(message)


class TransportError(ControlPlaneError):
    """Network, credential or service failure on a remote call."""


class NotFoundError(ControlPlaneError):
    """The addressed runtime does not exist."""


class ConflictError(ControlPlaneError):
    """A runtime with the requested name already exists."""


class DeploymentFailedError(RuntimeDeployError):
    """
    The control plane reported a terminal failure status.

    Attributes:
        runtime_id: Runtime that failed to provision.
        status:     Terminal failure status (CREATE_FAILED / UPDATE_FAILED).
        reason:     Control-plane failure reason, "Unknown" when absent.
    """

    def __init__(self, *, runtime_id: str, status: str, reason: str) -> None:
        self.runtime_id = runtime_id
        self.status = status
        self.reason = reason
        super().__init__(f"Deployment failed ({status}) for runtime {runtime_id!r}: {reason}")


class DeploymentTimeoutError(RuntimeDeployError, TimeoutError):
    """
    The runtime did not reach a terminal status within the configured bound.

    Attributes:
        runtime_id:     Runtime being polled.
        last_status:    Last status observed before giving up.
        waited_seconds: Elapsed time when the bound was hit.
    """

    def __init__(self, *, runtime_id: str, last_status: str, waited_seconds: float) -> None:
        self.runtime_id = runtime_id
        self.last_status = last_status
        self.waited_seconds = waited_seconds
        super().__init__(
            f"Runtime {runtime_id!r} still {last_status} after {waited_seconds:.0f}s; "
            "giving up waiting for a terminal status"
        )
