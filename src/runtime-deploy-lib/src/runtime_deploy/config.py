"""
runtime_deploy.config — Deployment settings read from the process environment.

Environment variables:
    AWS_REGION              control-plane region (default us-east-1)
    AGENT_RUNTIME_NAME      logical runtime name (default agentcore_deployment)
    REPO_URI                ECR repository URI of the agent image
    IMAGE_TAG               tag appended to REPO_URI (default latest)
    ROLE_ARN                execution role ARN granted to the runtime
    ROLE_NAME               role looked up in IAM when ROLE_ARN is unset
    ECR_REPO_NAME           repository looked up in ECR when REPO_URI is unset
    POLL_INTERVAL_SECONDS   readiness poll interval (default 10)
    DEPLOY_TIMEOUT_SECONDS  readiness wait bound, 0 disables (default 1800)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from runtime_deploy.exceptions import ConfigurationError
from runtime_deploy.poller import DEFAULT_MAX_WAIT_SECONDS, DEFAULT_POLL_INTERVAL_SECONDS

DEFAULT_REGION = "us-east-1"
DEFAULT_RUNTIME_NAME = "agentcore_deployment"
DEFAULT_IMAGE_TAG = "latest"


def _env_str(env: Mapping[str, str], name: str) -> str | None:
    value = env.get(name, "").strip()
    return value or None


def _env_float(env: Mapping[str, str], name: str, default: float) -> float:
    raw = _env_str(env, name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc
    if value < 0:
        raise ConfigurationError(f"{name} must be >= 0, got {raw!r}")
    return value


def with_image_tag(repo_uri: str, image_tag: str) -> str:
    """Append :image_tag unless repo_uri already pins a tag or digest."""
    last_segment = repo_uri.rsplit("/", 1)[-1]
    if ":" in last_segment or "@" in last_segment:
        return repo_uri
    return f"{repo_uri}:{image_tag}"


@dataclass(frozen=True)
class DeploymentSettings:
    region: str = DEFAULT_REGION
    runtime_name: str = DEFAULT_RUNTIME_NAME
    repo_uri: str | None = None
    image_tag: str = DEFAULT_IMAGE_TAG
    role_arn: str | None = None
    role_name: str | None = None
    ecr_repo_name: str | None = None
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS
    max_wait_seconds: float | None = DEFAULT_MAX_WAIT_SECONDS

    @classmethod
    def from_env(cls, env: Mapping[str, str] | None = None) -> DeploymentSettings:
        source = os.environ if env is None else env
        timeout = _env_float(source, "DEPLOY_TIMEOUT_SECONDS", DEFAULT_MAX_WAIT_SECONDS)
        return cls(
            region=_env_str(source, "AWS_REGION") or DEFAULT_REGION,
            runtime_name=_env_str(source, "AGENT_RUNTIME_NAME") or DEFAULT_RUNTIME_NAME,
            repo_uri=_env_str(source, "REPO_URI"),
            image_tag=_env_str(source, "IMAGE_TAG") or DEFAULT_IMAGE_TAG,
            role_arn=_env_str(source, "ROLE_ARN"),
            role_name=_env_str(source, "ROLE_NAME"),
            ecr_repo_name=_env_str(source, "ECR_REPO_NAME"),
            poll_interval_seconds=_env_float(
                source, "POLL_INTERVAL_SECONDS", DEFAULT_POLL_INTERVAL_SECONDS
            ),
            max_wait_seconds=timeout or None,
        )

    @property
    def container_reference(self) -> str | None:
        if not self.repo_uri:
            return None
        return with_image_tag(self.repo_uri, self.image_tag)

    def require_deployment_inputs(self) -> tuple[str, str]:
        """Return (container_reference, role_arn) or raise ConfigurationError."""
        container_reference = self.container_reference
        if not container_reference or not self.role_arn:
            raise ConfigurationError(
                "Missing required configuration: set ROLE_ARN and REPO_URI "
                "(or ROLE_NAME and ECR_REPO_NAME to look them up)."
            )
        return container_reference, self.role_arn
