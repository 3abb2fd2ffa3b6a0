"""Checks that run before anything is created."""

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from ecs_launch.core.deployments.aws_ecs.ecs_tasks import (
    CLUSTER_ABSENT,
    CLUSTER_INACTIVE,
    cluster_status,
)
from ecs_launch.core.deployments.aws_ecs.errors import (
    ClusterAlreadyExists,
    KeyFileUnavailable,
    TaskDefinitionMismatch,
)
from ecs_launch.core.deployments.aws_ecs.images import resolve_image_id
from ecs_launch.core.deployments.aws_ecs.models import DeploymentOptions, RunConfig
from ecs_launch.core.deployments.aws_ecs.session import check_credentials, resolve_region

logger = logging.getLogger(__name__)

PROVISIONABLE_CLUSTER_STATUSES = frozenset({CLUSTER_ABSENT, CLUSTER_INACTIVE})


def run_preflight(
    session: Any,
    options: DeploymentOptions,
    reporter: Callable[[str], None],
) -> RunConfig:
    """Resolve the run configuration or fail before any resource exists.

    Local checks (task definition family, key file path) run before the
    cluster lookup so a rerun after a clean-up fails without touching AWS.
    """
    check_credentials(session)
    region = resolve_region(session)
    image_id = resolve_image_id(region, options.image_id)
    logger.info("Using image %s in %s", image_id, region)

    run_config = RunConfig(
        app_name=options.app_name,
        region=region,
        image_id=image_id,
        instance_count=options.instance_count,
        task_count=options.task_count,
        app_description=options.app_description,
        instance_type=options.instance_type,
        instance_profile=options.instance_profile,
    )

    guard_task_definition_family(options.task_definition, run_config.task_definition_name)
    guard_key_file(run_config.key_path(options.key_directory))

    reporter(f"Checking that ECS cluster {run_config.cluster_name} does not exist")
    guard_cluster_absent(session, run_config.cluster_name)
    return run_config


def guard_cluster_absent(session: Any, cluster_name: str) -> None:
    """Refuse to provision into an existing cluster."""
    status = cluster_status(session, cluster_name)
    if status not in PROVISIONABLE_CLUSTER_STATUSES:
        raise ClusterAlreadyExists(cluster_name, status)


def guard_task_definition_family(payload: dict[str, Any], expected: str) -> None:
    """The service references the task definition by its derived name."""
    family = payload.get("family")
    if family != expected:
        raise TaskDefinitionMismatch(family, expected)


def guard_key_file(key_path: Path) -> None:
    """Refuse to run when the private key could not be written later."""
    if key_path.exists():
        raise KeyFileUnavailable(key_path, "file already exists")
    directory = key_path.parent
    if not directory.is_dir():
        raise KeyFileUnavailable(key_path, "directory does not exist")
    if not os.access(directory, os.W_OK | os.X_OK):
        raise KeyFileUnavailable(key_path, "directory is not writable")
