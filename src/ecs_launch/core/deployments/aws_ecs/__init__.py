"""AWS ECS provisioning helpers."""

from ecs_launch.core.deployments.aws_ecs.cleanup import cleanup_resources
from ecs_launch.core.deployments.aws_ecs.convergence import (
    WaitPolicy,
    wait_for_container_instances,
    wait_for_running_tasks,
    wait_until,
)
from ecs_launch.core.deployments.aws_ecs.deploy import provision_environment
from ecs_launch.core.deployments.aws_ecs.ecs_tasks import (
    cluster_status,
    create_cluster,
    create_service,
    register_task_definition,
)
from ecs_launch.core.deployments.aws_ecs.endpoints import resolve_endpoints
from ecs_launch.core.deployments.aws_ecs.errors import (
    ClusterAlreadyExists,
    ConvergenceCancelled,
    ConvergenceTimedOut,
    CredentialPersistFailed,
    DeploymentError,
    KeyFileUnavailable,
    OperationCancelled,
    PreconditionFailed,
    ProvisionFailed,
    RegionUnresolved,
    RegistrationFailed,
    ServiceCreateFailed,
    TaskDefinitionMismatch,
    TemplateCreateFailed,
    ToolingMissing,
    UnsupportedRegion,
)
from ecs_launch.core.deployments.aws_ecs.images import REGION_IMAGES, resolve_image_id
from ecs_launch.core.deployments.aws_ecs.keys import create_key_pair
from ecs_launch.core.deployments.aws_ecs.launch_templates import create_launch_template
from ecs_launch.core.deployments.aws_ecs.models import (
    CreatedResource,
    Credential,
    DeploymentOptions,
    DeploymentResult,
    Endpoint,
    EndpointSet,
    LaunchTemplateInfo,
    NetworkContext,
    ResourceKind,
    ResourceLedger,
    RunConfig,
    ScalingGroupInfo,
    SecurityGroupInfo,
    ServiceInfo,
)
from ecs_launch.core.deployments.aws_ecs.network import create_network
from ecs_launch.core.deployments.aws_ecs.preflight import run_preflight
from ecs_launch.core.deployments.aws_ecs.scaling import create_scaling_group
from ecs_launch.core.deployments.aws_ecs.security_groups import create_security_group
from ecs_launch.core.deployments.aws_ecs.session import create_session

__all__ = [
    "REGION_IMAGES",
    "ClusterAlreadyExists",
    "ConvergenceCancelled",
    "ConvergenceTimedOut",
    "CreatedResource",
    "Credential",
    "CredentialPersistFailed",
    "DeploymentError",
    "DeploymentOptions",
    "DeploymentResult",
    "Endpoint",
    "EndpointSet",
    "KeyFileUnavailable",
    "LaunchTemplateInfo",
    "NetworkContext",
    "OperationCancelled",
    "PreconditionFailed",
    "ProvisionFailed",
    "RegionUnresolved",
    "RegistrationFailed",
    "ResourceKind",
    "ResourceLedger",
    "RunConfig",
    "ScalingGroupInfo",
    "SecurityGroupInfo",
    "ServiceCreateFailed",
    "ServiceInfo",
    "TaskDefinitionMismatch",
    "TemplateCreateFailed",
    "ToolingMissing",
    "UnsupportedRegion",
    "WaitPolicy",
    "cleanup_resources",
    "cluster_status",
    "create_cluster",
    "create_key_pair",
    "create_launch_template",
    "create_network",
    "create_scaling_group",
    "create_security_group",
    "create_service",
    "create_session",
    "provision_environment",
    "register_task_definition",
    "resolve_endpoints",
    "resolve_image_id",
    "run_preflight",
    "wait_for_container_instances",
    "wait_for_running_tasks",
    "wait_until",
]
