"""
runtime_deploy.logs — Shared powertools service name and CLI log routing.

Every module logs through Logger(service=SERVICE_NAME); powertools backs those
instances with one stdlib logger of the same name, writing JSON to stdout.
"""

from __future__ import annotations

import logging
import sys

SERVICE_NAME = "runtime-deploy"


def send_logs_to_stderr() -> None:
    """Route the library's structured logs to stderr, leaving stdout to the caller."""
    for handler in logging.getLogger(SERVICE_NAME).handlers:
        if isinstance(handler, logging.StreamHandler):
            handler.setStream(sys.stderr)
