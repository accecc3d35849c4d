#!/usr/bin/env python3
"""
deploy_agent.py — Create or update the agent's AgentCore Runtime from a container image.

Looks up the runtime by name: updates it in place when it exists, creates it
otherwise, then waits until the control plane reports READY or a failure.

Configuration comes from the environment (see runtime_deploy.config);
command-line flags override it.

Usage:
    export ROLE_ARN=... REPO_URI=...
    uv run python scripts/deploy_agent.py [--name agentcore_deployment] [--image-tag latest]

Exit codes:
    0  runtime READY
    1  deployment failed or control-plane error
    2  configuration error
    3  timed out waiting for a terminal status
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from typing import Any

import boto3

from runtime_deploy import (
    ConfigurationError,
    ControlPlaneError,
    DeploymentFailedError,
    DeploymentOrchestrator,
    DeploymentSettings,
    DeploymentTimeoutError,
    ReadinessPoller,
    RuntimeControlPlaneClient,
    RuntimeDescriptor,
)
from runtime_deploy.logs import send_logs_to_stderr
from runtime_deploy.prerequisites import resolve_missing_inputs

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2
EXIT_TIMEOUT = 3


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("--name", default=None, help="Logical runtime name (AGENT_RUNTIME_NAME)")
    parser.add_argument("--repo-uri", default=None, help="ECR repository URI (REPO_URI)")
    parser.add_argument("--image-tag", default=None, help="Image tag (IMAGE_TAG, default latest)")
    parser.add_argument("--role-arn", default=None, help="Execution role ARN (ROLE_ARN)")
    parser.add_argument("--region", default=None, help="AWS region (AWS_REGION)")
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=None,
        help="Seconds between status checks (POLL_INTERVAL_SECONDS, default 10)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Give up after this many seconds, 0 waits forever (DEPLOY_TIMEOUT_SECONDS)",
    )
    return parser.parse_args(argv)


def settings_from_args(args: argparse.Namespace, base: DeploymentSettings) -> DeploymentSettings:
    for flag, value in (("--poll-interval", args.poll_interval), ("--timeout", args.timeout)):
        if value is not None and value < 0:
            raise ConfigurationError(f"{flag} must be >= 0, got {value!r}")
    overrides: dict[str, Any] = {
        "runtime_name": args.name,
        "repo_uri": args.repo_uri,
        "image_tag": args.image_tag,
        "role_arn": args.role_arn,
        "region": args.region,
        "poll_interval_seconds": args.poll_interval,
    }
    updates = {key: value for key, value in overrides.items() if value is not None}
    if args.timeout is not None:
        updates["max_wait_seconds"] = args.timeout or None
    return replace(base, **updates) if updates else base


def build_orchestrator(
    settings: DeploymentSettings, *, control_client: Any = None
) -> DeploymentOrchestrator:
    client = RuntimeControlPlaneClient(region=settings.region, control_client=control_client)
    poller = ReadinessPoller(
        client,
        interval_seconds=settings.poll_interval_seconds,
        max_wait_seconds=settings.max_wait_seconds,
    )
    return DeploymentOrchestrator(client, poller)


def resolve_settings(settings: DeploymentSettings) -> DeploymentSettings:
    """Look up ROLE_NAME / ECR_REPO_NAME fallbacks, creating only the clients needed."""
    iam_client = None
    ecr_client = None
    if not settings.role_arn and settings.role_name:
        iam_client = boto3.client("iam", region_name=settings.region)
    if not settings.repo_uri and settings.ecr_repo_name:
        ecr_client = boto3.client("ecr", region_name=settings.region)
    return resolve_missing_inputs(settings, iam_client=iam_client, ecr_client=ecr_client)


def print_success(runtime: RuntimeDescriptor) -> None:
    print(f"\nAgent Runtime {runtime.name} is {runtime.status}")
    print(f"Agent Runtime ARN: {runtime.arn}")
    print("\nTo invoke:")
    print(f'AGENT_RUNTIME_ARN={runtime.arn} uv run python scripts/invoke_agent.py "your prompt"')


def run(settings: DeploymentSettings, orchestrator: DeploymentOrchestrator | None = None) -> int:
    try:
        settings = resolve_settings(settings)
        container_reference, role_arn = settings.require_deployment_inputs()
        print(f"Role ARN: {role_arn}")
        print(f"Container: {container_reference}")
        print(f"Runtime name: {settings.runtime_name} (region {settings.region})")

        orchestrator = orchestrator or build_orchestrator(settings)
        runtime = orchestrator.deploy(settings.runtime_name, container_reference, role_arn)
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG
    except DeploymentTimeoutError as exc:
        print(f"Deployment timed out: {exc}", file=sys.stderr)
        return EXIT_TIMEOUT
    except DeploymentFailedError as exc:
        print(f"Deployment failed: {exc.reason} (status {exc.status})", file=sys.stderr)
        return EXIT_FAILED
    except ControlPlaneError as exc:
        print(f"Deployment failed: {type(exc).__name__}: {exc}", file=sys.stderr)
        return EXIT_FAILED

    print_success(runtime)
    return EXIT_OK


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    send_logs_to_stderr()
    try:
        settings = settings_from_args(args, DeploymentSettings.from_env())
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return EXIT_CONFIG
    return run(settings)


if __name__ == "__main__":
    raise SystemExit(main())
