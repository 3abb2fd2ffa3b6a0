"""ECS Launch - provision an ECS cluster, its network and a service in one run."""

from ecs_launch.core.deployments.aws_ecs import (
    DeploymentError,
    DeploymentOptions,
    DeploymentResult,
    provision_environment,
)

__all__ = [
    "DeploymentError",
    "DeploymentOptions",
    "DeploymentResult",
    "provision_environment",
]
