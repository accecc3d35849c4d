"""
runtime_deploy.prerequisites — Read-only lookup of the execution role and image repository.

Resolves ROLE_NAME / ECR_REPO_NAME into the ARN and URI the deployment needs.
Nothing here creates or modifies IAM or ECR resources; a missing resource is
a configuration error for the operator to fix.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import BotoCoreError, ClientError

from runtime_deploy.config import DeploymentSettings
from runtime_deploy.exceptions import ConfigurationError, TransportError
from runtime_deploy.logs import SERVICE_NAME

logger = Logger(service=SERVICE_NAME)


def _error_code(error: ClientError) -> str:
    return str(error.response.get("Error", {}).get("Code", ""))


def resolve_role_arn(iam_client: Any, role_name: str) -> str:
    try:
        response = iam_client.get_role(RoleName=role_name)
    except ClientError as exc:
        if _error_code(exc) == "NoSuchEntity":
            raise ConfigurationError(f"IAM role not found: {role_name}") from exc
        raise TransportError(
            f"GetRole failed for {role_name}: {exc}", operation="GetRole", code=_error_code(exc)
        ) from exc
    except BotoCoreError as exc:
        raise TransportError(
            f"GetRole failed for {role_name}: {exc}", operation="GetRole", code=type(exc).__name__
        ) from exc
    return str(response["Role"]["Arn"])


def resolve_repository_uri(ecr_client: Any, repository_name: str) -> str:
    try:
        response = ecr_client.describe_repositories(repositoryNames=[repository_name])
    except ClientError as exc:
        if _error_code(exc) == "RepositoryNotFoundException":
            raise ConfigurationError(f"ECR repository not found: {repository_name}") from exc
        raise TransportError(
            f"DescribeRepositories failed for {repository_name}: {exc}",
            operation="DescribeRepositories",
            code=_error_code(exc),
        ) from exc
    except BotoCoreError as exc:
        raise TransportError(
            f"DescribeRepositories failed for {repository_name}: {exc}",
            operation="DescribeRepositories",
            code=type(exc).__name__,
        ) from exc
    repositories = response.get("repositories", [])
    if not repositories:
        raise ConfigurationError(f"ECR repository not found: {repository_name}")
    return str(repositories[0]["repositoryUri"])


def resolve_missing_inputs(
    settings: DeploymentSettings,
    *,
    iam_client: Any = None,
    ecr_client: Any = None,
) -> DeploymentSettings:
    """Fill role_arn / repo_uri from their name-based fallbacks when unset.

    Clients are only needed (and only called) for the values that are missing.
    """
    updates: dict[str, str] = {}
    if not settings.role_arn and settings.role_name:
        if iam_client is None:
            raise ConfigurationError("ROLE_ARN is unset and no IAM client was provided")
        updates["role_arn"] = resolve_role_arn(iam_client, settings.role_name)
        logger.info("Resolved execution role", role_name=settings.role_name)
    if not settings.repo_uri and settings.ecr_repo_name:
        if ecr_client is None:
            raise ConfigurationError("REPO_URI is unset and no ECR client was provided")
        updates["repo_uri"] = resolve_repository_uri(ecr_client, settings.ecr_repo_name)
        logger.info("Resolved image repository", repository_name=settings.ecr_repo_name)
    return replace(settings, **updates) if updates else settings
