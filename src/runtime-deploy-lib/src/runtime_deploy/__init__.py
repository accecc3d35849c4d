"""
runtime_deploy — Create-or-update deployment of an AgentCore runtime.

The orchestrator finds a runtime by its logical name, creates or updates it,
and polls the control plane until the runtime is READY or has failed.
"""

from runtime_deploy.client import RuntimeControlPlaneClient
from runtime_deploy.config import DeploymentSettings
from runtime_deploy.exceptions import (
    ConfigurationError,
    ConflictError,
    ControlPlaneError,
    DeploymentFailedError,
    DeploymentTimeoutError,
    NotFoundError,
    RuntimeDeployError,
    TransportError,
)
from runtime_deploy.invocation import InvocationClient, LocalInvocationClient
from runtime_deploy.models import NetworkMode, RuntimeDescriptor, RuntimeStatus
from runtime_deploy.orchestrator import DeploymentOrchestrator
from runtime_deploy.poller import ReadinessPoller

__all__ = [
    "ConfigurationError",
    "ConflictError",
    "ControlPlaneError",
    "DeploymentFailedError",
    "DeploymentOrchestrator",
    "DeploymentSettings",
    "DeploymentTimeoutError",
    "InvocationClient",
    "LocalInvocationClient",
    "NetworkMode",
    "NotFoundError",
    "ReadinessPoller",
    "RuntimeControlPlaneClient",
    "RuntimeDeployError",
    "RuntimeDescriptor",
    "RuntimeStatus",
    "TransportError",
]
