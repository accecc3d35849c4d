"""
runtime_deploy.poller — Fixed-interval readiness polling.

Sleeps, reads the runtime, inspects its status; repeats until READY or a
failure status. No backoff, no jitter. The wait is bounded by
max_wait_seconds (None disables the bound).
"""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from aws_lambda_powertools import Logger

from runtime_deploy.exceptions import DeploymentFailedError, DeploymentTimeoutError, TransportError
from runtime_deploy.logs import SERVICE_NAME
from runtime_deploy.models import RuntimeDescriptor, RuntimeStatus

logger = Logger(service=SERVICE_NAME)

DEFAULT_POLL_INTERVAL_SECONDS: float = 10.0
DEFAULT_MAX_WAIT_SECONDS: float = 30 * 60  # 30 minutes
UNKNOWN_FAILURE_REASON = "Unknown"


class ReadinessPoller:
    """
    Blocks until a runtime reaches a terminal status.

    READY returns the descriptor. CREATE_FAILED / UPDATE_FAILED raise
    DeploymentFailedError with the control-plane reason. Every other status,
    including ones this version does not recognise, keeps the loop going.

    max_transport_retries=0 propagates the first TransportError raised while
    polling; a positive value tolerates that many consecutive failures.
    """

    def __init__(
        self,
        client: Any,
        *,
        interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
        max_wait_seconds: float | None = DEFAULT_MAX_WAIT_SECONDS,
        max_transport_retries: int = 0,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval_seconds < 0:
            raise ValueError(f"interval_seconds must be >= 0, got {interval_seconds!r}")
        if max_transport_retries < 0:
            raise ValueError(f"max_transport_retries must be >= 0, got {max_transport_retries!r}")
        self._client = client
        self._interval = interval_seconds
        self._max_wait = max_wait_seconds
        self._max_transport_retries = max_transport_retries
        self._sleep = sleep
        self._clock = clock

    def wait_until_terminal(self, runtime_id: str) -> RuntimeDescriptor:
        started = self._clock()
        consecutive_failures = 0

        while True:
            self._sleep(self._interval)
            try:
                runtime = self._client.get_runtime(runtime_id)
            except TransportError:
                consecutive_failures += 1
                if consecutive_failures > self._max_transport_retries:
                    raise
                logger.warning(
                    "Transient error while polling runtime; retrying",
                    runtime_id=runtime_id,
                    attempt=consecutive_failures,
                    max_retries=self._max_transport_retries,
                )
                self._check_deadline(runtime_id, started, last_status="UNAVAILABLE")
                continue

            consecutive_failures = 0
            logger.info(
                "Runtime status",
                runtime_id=runtime_id,
                status=str(runtime.status),
                raw_status=runtime.raw_status,
            )

            if runtime.status == RuntimeStatus.READY:
                return runtime
            if runtime.status.is_failure:
                raise DeploymentFailedError(
                    runtime_id=runtime_id,
                    status=str(runtime.status),
                    reason=runtime.failure_reason or UNKNOWN_FAILURE_REASON,
                )
            if runtime.status == RuntimeStatus.UNKNOWN:
                logger.warning(
                    "Unrecognised runtime status; continuing to poll",
                    runtime_id=runtime_id,
                    raw_status=runtime.raw_status,
                )
            self._check_deadline(
                runtime_id, started, last_status=runtime.raw_status or str(runtime.status)
            )

    def _check_deadline(self, runtime_id: str, started: float, *, last_status: str) -> None:
        if self._max_wait is None:
            return
        waited = self._clock() - started
        if waited >= self._max_wait:
            raise DeploymentTimeoutError(
                runtime_id=runtime_id, last_status=last_status, waited_seconds=waited
            )
