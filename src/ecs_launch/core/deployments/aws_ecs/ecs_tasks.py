"""ECS cluster, task definition and service helpers."""

import logging
from collections.abc import Callable
from typing import Any, cast

from ecs_launch.core.deployments.aws_ecs.errors import (
    PreconditionFailed,
    ProvisionFailed,
    RegistrationFailed,
    ServiceCreateFailed,
    provider_step,
)
from ecs_launch.core.deployments.aws_ecs.models import (
    ResourceKind,
    ResourceLedger,
    RunConfig,
    ServiceInfo,
)

logger = logging.getLogger(__name__)

CLUSTER_ABSENT = "ABSENT"
CLUSTER_INACTIVE = "INACTIVE"


def describe_cluster(session: Any, cluster_name: str) -> dict[str, Any] | None:
    """Return the cluster description, or None when ECS does not know it."""
    ecs = session.client("ecs")
    with provider_step(f"describe cluster {cluster_name}"):
        response = ecs.describe_clusters(clusters=[cluster_name])
    clusters = response.get("clusters", [])
    if not clusters:
        return None
    return cast(dict[str, Any], clusters[0])


def cluster_status(session: Any, cluster_name: str) -> str:
    """Return the cluster status, or `ABSENT` when it does not exist."""
    cluster = describe_cluster(session, cluster_name)
    if cluster is None:
        return CLUSTER_ABSENT
    return str(cluster.get("status", "")).upper() or CLUSTER_ABSENT


def create_cluster(
    session: Any,
    cluster_name: str,
    ledger: ResourceLedger,
    reporter: Callable[[str], None],
) -> str:
    """Create the ECS cluster and return its ARN."""
    ecs = session.client("ecs")
    reporter(f"Creating AWS ECS cluster ({cluster_name})")
    with provider_step("create cluster"):
        response = ecs.create_cluster(clusterName=cluster_name)
    cluster_arn = cast(str, response["cluster"]["clusterArn"])
    ledger.record(ResourceKind.CLUSTER, cluster_name)
    return cluster_arn


def registered_instance_count(session: Any, cluster_name: str) -> int:
    """Return how many container instances joined the cluster."""
    return _cluster_count(session, cluster_name, "registeredContainerInstancesCount")


def running_task_count(session: Any, cluster_name: str) -> int:
    """Return how many tasks are running in the cluster."""
    return _cluster_count(session, cluster_name, "runningTasksCount")


def _cluster_count(session: Any, cluster_name: str, key: str) -> int:
    cluster = describe_cluster(session, cluster_name)
    if cluster is None:
        raise ProvisionFailed(f"describe cluster {cluster_name}", "cluster not found")
    return int(cluster.get(key, 0))


def register_task_definition(
    session: Any,
    payload: dict[str, Any],
    ledger: ResourceLedger,
    reporter: Callable[[str], None],
) -> str:
    """Register the task definition payload verbatim and return its ARN."""
    family = payload.get("family")
    if not family:
        raise RegistrationFailed("register task definition", "payload has no 'family'")

    ecs = session.client("ecs")
    reporter(f"Registering AWS ECS task definition ({family})")
    with provider_step("register task definition", RegistrationFailed):
        response = ecs.register_task_definition(**payload)
    task_definition_arn = cast(str, response["taskDefinition"]["taskDefinitionArn"])
    ledger.record(ResourceKind.TASK_DEFINITION, task_definition_arn)
    logger.info("Registered task definition %s", task_definition_arn)
    return task_definition_arn


def create_service(
    session: Any,
    run_config: RunConfig,
    task_definition_arn: str,
    registered_instances: int,
    ledger: ResourceLedger,
    reporter: Callable[[str], None],
) -> ServiceInfo:
    """Create a long-running service for the task definition.

    Compute must already be registered with the cluster.
    """
    if registered_instances < 1:
        raise PreconditionFailed(
            f"No container instances are registered with {run_config.cluster_name}; "
            "the service cannot be created yet."
        )

    ecs = session.client("ecs")
    reporter(
        f"Creating AWS ECS service with {run_config.task_count} tasks "
        f"({run_config.service_name})"
    )
    with provider_step("create service", ServiceCreateFailed):
        response = ecs.create_service(
            cluster=run_config.cluster_name,
            serviceName=run_config.service_name,
            taskDefinition=task_definition_arn,
            desiredCount=run_config.task_count,
        )
    service_arn = cast(str, response["service"]["serviceArn"])
    ledger.record(ResourceKind.SERVICE, run_config.service_name, run_config.cluster_name)
    return ServiceInfo(
        service_name=run_config.service_name,
        service_arn=service_arn,
        task_definition_arn=task_definition_arn,
        desired_count=run_config.task_count,
    )
