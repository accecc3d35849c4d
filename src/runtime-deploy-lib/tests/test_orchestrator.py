"""
tests/test_orchestrator.py — DeploymentOrchestrator create-vs-update decisions.

Key assertions:
  - Absent name  -> exactly one create, zero updates.
  - Present name -> exactly one update, zero creates.
  - Invalid input -> ConfigurationError before any remote call.
  - Control-plane errors and failure statuses surface unchanged.
"""

from __future__ import annotations

from typing import Any

import pytest
from runtime_deploy.exceptions import (
    ConfigurationError,
    ConflictError,
    DeploymentFailedError,
    NotFoundError,
    TransportError,
)
from runtime_deploy.models import NetworkMode, RuntimeDescriptor, RuntimeStatus
from runtime_deploy.orchestrator import DeploymentOrchestrator, validate_deployment_inputs
from runtime_deploy.poller import ReadinessPoller

NAME = "agentcore_deployment"
CONTAINER = "111122223333.dkr.ecr.us-east-1.amazonaws.com/agentcore-deployment:latest"
ROLE = "arn:aws:iam::111122223333:role/AgentCoreRuntimeRole"


def _arn(runtime_id: str) -> str:
    return f"arn:aws:bedrock-agentcore:us-east-1:111122223333:runtime/{runtime_id}"


class FakeControlPlane:
    """In-memory control plane recording every call.

    statuses: sequence replayed by get_runtime() after a create/update.
    """

    def __init__(
        self,
        existing: list[RuntimeDescriptor] | None = None,
        statuses: list[str] | None = None,
        failure_reason: str | None = None,
    ) -> None:
        self.existing = list(existing or [])
        self.statuses = list(statuses or ["READY"])
        self.failure_reason = failure_reason
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def _count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

    @property
    def create_count(self) -> int:
        return self._count("create_runtime")

    @property
    def update_count(self) -> int:
        return self._count("update_runtime")

    @property
    def get_count(self) -> int:
        return self._count("get_runtime")

    def list_runtimes(self) -> list[RuntimeDescriptor]:
        self.calls.append(("list_runtimes", ()))
        return list(self.existing)

    def create_runtime(self, *args: Any) -> RuntimeDescriptor:
        self.calls.append(("create_runtime", args))
        name = args[0]
        return RuntimeDescriptor(
            name=name,
            id=f"{name}-new",
            arn=_arn(f"{name}-new"),
            status=RuntimeStatus.CREATING,
        )

    def update_runtime(self, *args: Any) -> RuntimeDescriptor:
        self.calls.append(("update_runtime", args))
        runtime_id = args[0]
        return RuntimeDescriptor(id=runtime_id, arn=_arn(runtime_id), status=RuntimeStatus.UPDATING)

    def get_runtime(self, runtime_id: str) -> RuntimeDescriptor:
        self.calls.append(("get_runtime", (runtime_id,)))
        status = RuntimeStatus.parse(self.statuses.pop(0))
        return RuntimeDescriptor(
            name=NAME,
            id=runtime_id,
            arn=_arn(runtime_id),
            status=status,
            failure_reason=self.failure_reason if status.is_failure else None,
        )


def _orchestrator(plane: Any) -> DeploymentOrchestrator:
    poller = ReadinessPoller(plane, interval_seconds=0, sleep=lambda _seconds: None)
    return DeploymentOrchestrator(plane, poller)


def _existing(runtime_id: str = "agentcore_deployment-AbC123") -> RuntimeDescriptor:
    return RuntimeDescriptor(name=NAME, id=runtime_id, status=RuntimeStatus.READY)


# ===========================================================================
# Idempotent targeting
# ===========================================================================


class TestTargeting:
    def test_absent_name_creates_once(self) -> None:
        plane = FakeControlPlane(
            existing=[RuntimeDescriptor(name="someone_else", id="x-1")],
            statuses=["CREATING", "READY"],
        )

        runtime = _orchestrator(plane).deploy(NAME, CONTAINER, ROLE)

        assert plane.create_count == 1
        assert plane.update_count == 0
        assert plane.calls[1] == ("create_runtime", (NAME, CONTAINER, ROLE, NetworkMode.PUBLIC))
        assert runtime.status is RuntimeStatus.READY
        assert runtime.arn == _arn(f"{NAME}-new")

    def test_present_name_updates_once(self) -> None:
        plane = FakeControlPlane(existing=[_existing()], statuses=["UPDATING", "READY"])

        runtime = _orchestrator(plane).deploy(NAME, CONTAINER, ROLE)

        assert plane.create_count == 0
        assert plane.update_count == 1
        assert plane.calls[1] == (
            "update_runtime",
            ("agentcore_deployment-AbC123", CONTAINER, ROLE, NetworkMode.PUBLIC),
        )
        assert runtime.id == "agentcore_deployment-AbC123"
        assert runtime.status is RuntimeStatus.READY

    def test_call_sequence_is_list_submit_poll(self) -> None:
        plane = FakeControlPlane(statuses=["CREATING", "CREATING", "READY"])

        _orchestrator(plane).deploy(NAME, CONTAINER, ROLE)

        assert [name for name, _ in plane.calls] == [
            "list_runtimes",
            "create_runtime",
            "get_runtime",
            "get_runtime",
            "get_runtime",
        ]

    def test_duplicate_names_pick_first_without_failing(self) -> None:
        plane = FakeControlPlane(existing=[_existing("first-1"), _existing("second-2")])

        runtime = _orchestrator(plane).deploy(NAME, CONTAINER, ROLE)

        assert plane.update_count == 1
        assert plane.calls[1][1][0] == "first-1"
        assert runtime.status is RuntimeStatus.READY

    def test_find_existing_matches_exact_name(self) -> None:
        plane = FakeControlPlane(
            existing=[
                RuntimeDescriptor(name=f"{NAME}_v2", id="v2"),
                RuntimeDescriptor(name=NAME, id="exact"),
            ]
        )
        found = DeploymentOrchestrator(plane).find_existing(NAME)
        assert found is not None
        assert found.id == "exact"

    def test_find_existing_returns_none_when_absent(self) -> None:
        assert DeploymentOrchestrator(FakeControlPlane()).find_existing(NAME) is None

    def test_arn_backfilled_from_submit_response(self) -> None:
        class NoArnOnRead(FakeControlPlane):
            def get_runtime(self, runtime_id: str) -> RuntimeDescriptor:
                self.calls.append(("get_runtime", (runtime_id,)))
                return RuntimeDescriptor(id=runtime_id, status=RuntimeStatus.READY)

        plane = NoArnOnRead()
        runtime = _orchestrator(plane).deploy(NAME, CONTAINER, ROLE)
        assert runtime.arn == _arn(f"{NAME}-new")
        assert runtime.name == NAME


# ===========================================================================
# Input validation
# ===========================================================================


class TestValidation:
    @pytest.mark.parametrize(
        ("container", "role"),
        [("", ROLE), ("   ", ROLE), (CONTAINER, ""), ("", "")],
    )
    def test_missing_inputs_make_no_remote_calls(self, container: str, role: str) -> None:
        plane = FakeControlPlane()

        with pytest.raises(ConfigurationError):
            _orchestrator(plane).deploy(NAME, container, role)

        assert plane.calls == []

    def test_message_names_missing_input(self) -> None:
        with pytest.raises(ConfigurationError, match="container reference"):
            validate_deployment_inputs(NAME, "", ROLE)

    @pytest.mark.parametrize("name", ["", "1starts_with_digit", "has-hyphen", "x" * 49])
    def test_invalid_names_rejected(self, name: str) -> None:
        plane = FakeControlPlane()
        with pytest.raises(ConfigurationError):
            _orchestrator(plane).deploy(name, CONTAINER, ROLE)
        assert plane.calls == []

    @pytest.mark.parametrize("name", ["a", NAME, "Agent_01", "x" * 48])
    def test_valid_names_accepted(self, name: str) -> None:
        validate_deployment_inputs(name, CONTAINER, ROLE)


# ===========================================================================
# Error surfacing
# ===========================================================================


class TestErrorSurfacing:
    def test_update_failed_reason_surfaces(self) -> None:
        plane = FakeControlPlane(
            existing=[_existing()],
            statuses=["UPDATING", "UPDATE_FAILED"],
            failure_reason="image pull failed",
        )

        with pytest.raises(DeploymentFailedError) as excinfo:
            _orchestrator(plane).deploy(NAME, CONTAINER, ROLE)

        assert "image pull failed" in str(excinfo.value)

    def test_failure_without_reason_reports_unknown(self) -> None:
        plane = FakeControlPlane(statuses=["CREATE_FAILED"])

        with pytest.raises(DeploymentFailedError, match="Unknown"):
            _orchestrator(plane).deploy(NAME, CONTAINER, ROLE)

    def test_list_transport_error_propagates(self) -> None:
        class Unreachable(FakeControlPlane):
            def list_runtimes(self) -> list[RuntimeDescriptor]:
                raise TransportError(
                    "no route", operation="ListAgentRuntimes", code="EndpointConnectionError"
                )

        plane = Unreachable()
        with pytest.raises(TransportError):
            _orchestrator(plane).deploy(NAME, CONTAINER, ROLE)
        assert plane.create_count == 0

    def test_conflict_on_create_propagates(self) -> None:
        class RacedCreate(FakeControlPlane):
            def create_runtime(self, *args: Any) -> RuntimeDescriptor:
                raise ConflictError(
                    "exists", operation="CreateAgentRuntime", code="ConflictException"
                )

        with pytest.raises(ConflictError):
            _orchestrator(RacedCreate()).deploy(NAME, CONTAINER, ROLE)

    def test_not_found_on_update_propagates(self) -> None:
        class VanishedRuntime(FakeControlPlane):
            def update_runtime(self, *args: Any) -> RuntimeDescriptor:
                raise NotFoundError(
                    "gone", operation="UpdateAgentRuntime", code="ResourceNotFoundException"
                )

        with pytest.raises(NotFoundError):
            _orchestrator(VanishedRuntime(existing=[_existing()])).deploy(NAME, CONTAINER, ROLE)

    def test_create_response_without_id_is_transport_error(self) -> None:
        class NoId(FakeControlPlane):
            def create_runtime(self, *args: Any) -> RuntimeDescriptor:
                return RuntimeDescriptor(status=RuntimeStatus.CREATING)

        plane = NoId()
        with pytest.raises(TransportError) as excinfo:
            _orchestrator(plane).deploy(NAME, CONTAINER, ROLE)
        assert excinfo.value.operation == "CreateAgentRuntime"
        assert excinfo.value.code == "MissingRuntimeId"
        assert plane.get_count == 0

    def test_update_response_without_id_names_update(self) -> None:
        class NoIdOnUpdate(FakeControlPlane):
            def update_runtime(self, *args: Any) -> RuntimeDescriptor:
                self.calls.append(("update_runtime", args))
                return RuntimeDescriptor(status=RuntimeStatus.UPDATING)

        plane = NoIdOnUpdate(existing=[_existing()])
        with pytest.raises(TransportError) as excinfo:
            _orchestrator(plane).deploy(NAME, CONTAINER, ROLE)
        assert excinfo.value.operation == "UpdateAgentRuntime"
        assert "UpdateAgentRuntime" in str(excinfo.value)
        assert plane.get_count == 0

    def test_listing_entry_without_id_is_transport_error(self) -> None:
        unidentified = RuntimeDescriptor(name=NAME, status=RuntimeStatus.READY)
        plane = FakeControlPlane(existing=[unidentified])

        with pytest.raises(TransportError) as excinfo:
            _orchestrator(plane).deploy(NAME, CONTAINER, ROLE)

        assert excinfo.value.operation == "ListAgentRuntimes"
        assert plane.create_count == 0
        assert plane.update_count == 0
