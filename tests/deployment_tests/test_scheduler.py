"""Tests for cluster creation, task definition registration and the service."""

from typing import Any
from unittest.mock import MagicMock

import pytest

from ecs_launch.core.deployments.aws_ecs import (
    PreconditionFailed,
    RegistrationFailed,
    ResourceKind,
    ResourceLedger,
    RunConfig,
    ServiceCreateFailed,
    cluster_status,
    create_cluster,
    create_service,
    register_task_definition,
)
from tests.deployment_tests.fakes import (
    ABSENT_CLUSTER,
    CLUSTER_ARN,
    SERVICE_ARN,
    TASK_DEFINITION_ARN,
    FakeSession,
    client_error,
    cluster_response,
)

RUN_CONFIG = RunConfig(app_name="store-demo", region="us-east-1", image_id="ami-1", task_count=2)


def test_cluster_status_reports_absent() -> None:
    session = FakeSession()
    session.ecs.describe_clusters.return_value = ABSENT_CLUSTER
    assert cluster_status(session, "store-demo-cluster") == "ABSENT"

    session.ecs.describe_clusters.return_value = cluster_response(status="inactive")
    assert cluster_status(session, "store-demo-cluster") == "INACTIVE"


def test_create_cluster_records_it(session: FakeSession, reporter: MagicMock) -> None:
    ledger = ResourceLedger()

    assert create_cluster(session, "store-demo-cluster", ledger, reporter) == CLUSTER_ARN

    session.ecs.create_cluster.assert_called_once_with(clusterName="store-demo-cluster")
    assert ledger.kinds() == [ResourceKind.CLUSTER]


def test_task_definition_payload_is_sent_verbatim(
    session: FakeSession, reporter: MagicMock, task_definition: dict[str, Any]
) -> None:
    arn = register_task_definition(session, task_definition, ResourceLedger(), reporter)

    assert arn == TASK_DEFINITION_ARN
    session.ecs.register_task_definition.assert_called_once_with(**task_definition)


def test_task_definition_without_family_is_rejected(
    session: FakeSession, reporter: MagicMock
) -> None:
    with pytest.raises(RegistrationFailed):
        register_task_definition(session, {"containerDefinitions": []}, ResourceLedger(), reporter)

    session.ecs.register_task_definition.assert_not_called()


def test_registration_error_is_typed(
    session: FakeSession, reporter: MagicMock, task_definition: dict[str, Any]
) -> None:
    session.ecs.register_task_definition.side_effect = client_error("ClientException")

    with pytest.raises(RegistrationFailed):
        register_task_definition(session, task_definition, ResourceLedger(), reporter)


def test_service_binds_task_definition(session: FakeSession, reporter: MagicMock) -> None:
    ledger = ResourceLedger()

    service = create_service(session, RUN_CONFIG, TASK_DEFINITION_ARN, 1, ledger, reporter)

    session.ecs.create_service.assert_called_once_with(
        cluster="store-demo-cluster",
        serviceName="store-demo-service",
        taskDefinition=TASK_DEFINITION_ARN,
        desiredCount=2,
    )
    assert service.service_arn == SERVICE_ARN
    assert service.desired_count == 2
    assert ledger.last().parent_id == "store-demo-cluster"


def test_service_requires_registered_compute(session: FakeSession, reporter: MagicMock) -> None:
    with pytest.raises(PreconditionFailed):
        create_service(session, RUN_CONFIG, TASK_DEFINITION_ARN, 0, ResourceLedger(), reporter)

    session.ecs.create_service.assert_not_called()


def test_service_error_is_typed(session: FakeSession, reporter: MagicMock) -> None:
    session.ecs.create_service.side_effect = client_error("InvalidParameterException")

    with pytest.raises(ServiceCreateFailed) as excinfo:
        create_service(session, RUN_CONFIG, TASK_DEFINITION_ARN, 1, ResourceLedger(), reporter)

    assert excinfo.value.step == "create service"
