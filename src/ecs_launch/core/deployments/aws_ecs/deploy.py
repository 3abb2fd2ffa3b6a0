"""End-to-end provisioning run."""

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any

from ecs_launch.core.deployments.aws_ecs.convergence import (
    WaitPolicy,
    wait_for_container_instances,
    wait_for_running_tasks,
)
from ecs_launch.core.deployments.aws_ecs.ecs_tasks import (
    create_cluster,
    create_service,
    register_task_definition,
)
from ecs_launch.core.deployments.aws_ecs.endpoints import resolve_endpoints
from ecs_launch.core.deployments.aws_ecs.errors import DeploymentError, OperationCancelled
from ecs_launch.core.deployments.aws_ecs.keys import create_key_pair
from ecs_launch.core.deployments.aws_ecs.launch_templates import create_launch_template
from ecs_launch.core.deployments.aws_ecs.models import (
    DeploymentOptions,
    DeploymentResult,
    ResourceLedger,
)
from ecs_launch.core.deployments.aws_ecs.network import create_network
from ecs_launch.core.deployments.aws_ecs.preflight import run_preflight
from ecs_launch.core.deployments.aws_ecs.scaling import create_scaling_group

logger = logging.getLogger(__name__)

STAGE_PREFLIGHT = "preflight"
STAGE_CLUSTER = "cluster"
STAGE_NETWORK = "network"
STAGE_ACCESS = "access"
STAGE_LAUNCH_TEMPLATE = "launch template"
STAGE_SCALING_GROUP = "scaling group"
STAGE_INSTANCE_CONVERGENCE = "instance registration"
STAGE_SCHEDULER = "scheduler"
STAGE_TASK_CONVERGENCE = "task startup"
STAGE_ENDPOINTS = "endpoints"


def provision_environment(
    session: Any,
    options: DeploymentOptions,
    reporter: Callable[[str], None],
    ledger: ResourceLedger | None = None,
    cancel: threading.Event | None = None,
) -> DeploymentResult:
    """Provision the cluster, network, compute and service, in order.

    Each stage must succeed before the next starts. Nothing is rolled back on
    failure: created resources stay in `ledger` for the caller to inspect or
    clean up.
    """
    ledger = ledger if ledger is not None else ResourceLedger()

    with _stage(STAGE_PREFLIGHT, ledger):
        run_config = run_preflight(session, options, reporter)

    with _stage(STAGE_CLUSTER, ledger):
        cluster_arn = create_cluster(session, run_config.cluster_name, ledger, reporter)

    with _stage(STAGE_NETWORK, ledger):
        network = create_network(
            session,
            run_config,
            ledger,
            reporter,
            security_group_timeout_seconds=options.security_group_timeout_seconds,
        )

    with _stage(STAGE_ACCESS, ledger):
        key_path = run_config.key_path(options.key_directory)
        credential = create_key_pair(session, run_config.key_name, key_path, ledger, reporter)

    with _stage(STAGE_LAUNCH_TEMPLATE, ledger):
        template = create_launch_template(
            session, run_config, network, credential, options.user_data, ledger, reporter
        )

    with _stage(STAGE_SCALING_GROUP, ledger):
        scaling_group = create_scaling_group(
            session, run_config, template, network.subnet_id, ledger, reporter
        )

    with _stage(STAGE_INSTANCE_CONVERGENCE, ledger):
        registered = wait_for_container_instances(
            session,
            run_config,
            WaitPolicy(options.poll_interval_seconds, options.instance_timeout_seconds),
            reporter,
            cancel,
        )

    with _stage(STAGE_SCHEDULER, ledger):
        task_definition_arn = register_task_definition(
            session, options.task_definition, ledger, reporter
        )
        service = create_service(
            session, run_config, task_definition_arn, registered, ledger, reporter
        )

    with _stage(STAGE_TASK_CONVERGENCE, ledger):
        wait_for_running_tasks(
            session,
            run_config,
            WaitPolicy(options.poll_interval_seconds, options.task_timeout_seconds),
            reporter,
            cancel,
        )

    with _stage(STAGE_ENDPOINTS, ledger):
        endpoints = resolve_endpoints(session, scaling_group.name, reporter)

    return DeploymentResult(
        run_config=run_config,
        cluster_arn=cluster_arn,
        network=network,
        credential=credential,
        launch_template=template,
        scaling_group=scaling_group,
        service=service,
        endpoints=endpoints,
    )


@contextmanager
def _stage(name: str, ledger: ResourceLedger) -> Iterator[None]:
    """Tag errors escaping a stage with the stage name and last created resource."""
    logger.info("Starting stage: %s", name)
    try:
        yield
    except DeploymentError as exc:
        exc.annotate(name, ledger.last())
        raise
    except KeyboardInterrupt as exc:
        cancelled = OperationCancelled(f"Interrupted during {name}.")
        cancelled.annotate(name, ledger.last())
        raise cancelled from exc
    logger.info("Finished stage: %s", name)
