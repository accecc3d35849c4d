#!/usr/bin/env python3
"""
invoke_agent.py — Send one prompt to the deployed agent and print the reply.

Each call opens a new runtime session. With --local-url the prompt goes
straight to a locally running container instead (e.g. docker run -p 8080:8080).

Usage:
    AGENT_RUNTIME_ARN=<arn> uv run python scripts/invoke_agent.py "your prompt"
    uv run python scripts/invoke_agent.py --local-url http://localhost:8080 "your prompt"
"""

from __future__ import annotations

import argparse
import os
import sys

from runtime_deploy import InvocationClient, LocalInvocationClient, RuntimeDeployError
from runtime_deploy.config import DEFAULT_REGION
from runtime_deploy.invocation import DEFAULT_QUALIFIER
from runtime_deploy.logs import send_logs_to_stderr

DEFAULT_PROMPT = "What is the weather now?"


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument("prompt", nargs="?", default=DEFAULT_PROMPT, help="Prompt to send")
    parser.add_argument(
        "--arn",
        default=os.environ.get("AGENT_RUNTIME_ARN"),
        help="Agent runtime ARN (default AGENT_RUNTIME_ARN)",
    )
    parser.add_argument(
        "--region",
        default=os.environ.get("AWS_REGION", DEFAULT_REGION),
        help="AWS region (default AWS_REGION or us-east-1)",
    )
    parser.add_argument("--qualifier", default=DEFAULT_QUALIFIER, help="Endpoint qualifier")
    parser.add_argument(
        "--local-url",
        default=None,
        help="Invoke a local container at this base URL instead of AgentCore",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    send_logs_to_stderr()

    try:
        if args.local_url:
            reply = LocalInvocationClient(args.local_url).invoke(args.prompt)
        else:
            if not args.arn:
                print("AGENT_RUNTIME_ARN environment variable is required", file=sys.stderr)
                return 2
            client = InvocationClient(region=args.region, qualifier=args.qualifier)
            reply = client.invoke(args.arn, args.prompt)
    except RuntimeDeployError as exc:
        print(f"Invocation failed: {exc}", file=sys.stderr)
        return 1

    print(f"Agent Response: {reply}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
