"""Data models for ECS provisioning."""

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from typing import Any

DEFAULT_INSTANCE_TYPE = "t2.micro"
DEFAULT_INSTANCE_PROFILE = "ecsInstanceRole"
VPC_CIDR = "172.31.0.0/16"
SUBNET_CIDR = "172.31.0.0/28"


@dataclass(frozen=True)
class DeploymentOptions:
    """Operator inputs for a provisioning run."""

    app_name: str
    task_definition: dict[str, Any]
    app_description: str = ""
    instance_count: int = 1
    task_count: int = 1
    instance_type: str = DEFAULT_INSTANCE_TYPE
    instance_profile: str = DEFAULT_INSTANCE_PROFILE
    image_id: str | None = None
    user_data: str | None = None
    key_directory: Path = Path(".")
    poll_interval_seconds: float = 2.0
    instance_timeout_seconds: float = 900.0
    task_timeout_seconds: float = 600.0
    security_group_timeout_seconds: float = 60.0


@dataclass(frozen=True)
class RunConfig:
    """Resolved configuration for a single run.

    Every resource name is derived from the application name.
    """

    app_name: str
    region: str
    image_id: str
    instance_count: int = 1
    task_count: int = 1
    app_description: str = ""
    instance_type: str = DEFAULT_INSTANCE_TYPE
    instance_profile: str = DEFAULT_INSTANCE_PROFILE

    @property
    def cluster_name(self) -> str:
        return f"{self.app_name}-cluster"

    @property
    def service_name(self) -> str:
        return f"{self.app_name}-service"

    @property
    def task_definition_name(self) -> str:
        return f"{self.app_name}-containers"

    @property
    def vpc_name(self) -> str:
        return f"{self.app_name}-vpc"

    @property
    def subnet_name(self) -> str:
        return f"{self.app_name}-subnet"

    @property
    def gateway_name(self) -> str:
        return self.app_name

    @property
    def security_group_name(self) -> str:
        return self.app_name

    @property
    def key_name(self) -> str:
        return f"{self.app_name}-key"

    @property
    def key_filename(self) -> str:
        return f"{self.app_name}-key.pem"

    def key_path(self, directory: Path) -> Path:
        return directory / self.key_filename

    @property
    def launch_template_name(self) -> str:
        return f"{self.app_name}-launch-template"

    @property
    def scaling_group_name(self) -> str:
        return f"{self.app_name}-group"


@dataclass(frozen=True)
class NetworkContext:
    """Identifiers of the provisioned network."""

    vpc_id: str
    subnet_id: str
    gateway_id: str
    route_table_id: str
    security_group_id: str


@dataclass(frozen=True)
class SecurityGroupInfo:
    """Representation of a security group."""

    group_id: str
    name: str
    description: str
    ports: tuple[int, ...] = ()


@dataclass(frozen=True)
class Credential:
    """A key pair whose private material was written to disk."""

    key_name: str
    key_path: Path
    file_mode: int


@dataclass(frozen=True)
class LaunchTemplateInfo:
    """A created launch template."""

    name: str
    template_id: str
    image_id: str
    key_name: str
    security_group_id: str
    instance_type: str
    instance_profile: str


@dataclass(frozen=True)
class ScalingGroupInfo:
    """A fixed-size auto scaling group."""

    name: str
    launch_template_name: str
    min_size: int
    max_size: int
    desired_capacity: int
    subnet_id: str


@dataclass(frozen=True)
class ServiceInfo:
    """A long-running ECS service and its task definition."""

    service_name: str
    service_arn: str
    task_definition_arn: str
    desired_count: int


@dataclass(frozen=True)
class Endpoint:
    """A running instance reachable from the internet."""

    instance_id: str
    address: str

    @property
    def url(self) -> str:
        return f"http://{self.address}"


@dataclass(frozen=True)
class EndpointSet:
    """Ordered public endpoints of the scaling group instances."""

    endpoints: tuple[Endpoint, ...] = ()

    def __iter__(self) -> Iterator[Endpoint]:
        return iter(self.endpoints)

    def __len__(self) -> int:
        return len(self.endpoints)


class ResourceKind(StrEnum):
    """Kinds of resources recorded while provisioning."""

    CLUSTER = "cluster"
    VPC = "vpc"
    SUBNET = "subnet"
    INTERNET_GATEWAY = "internet-gateway"
    GATEWAY_ATTACHMENT = "gateway-attachment"
    ROUTE = "route"
    SECURITY_GROUP = "security-group"
    KEY_PAIR = "key-pair"
    LAUNCH_TEMPLATE = "launch-template"
    SCALING_GROUP = "scaling-group"
    TASK_DEFINITION = "task-definition"
    SERVICE = "service"


@dataclass(frozen=True)
class CreatedResource:
    """A resource confirmed as created by the provider."""

    kind: ResourceKind
    resource_id: str
    parent_id: str | None = None

    def __str__(self) -> str:
        return f"{self.kind} {self.resource_id}"


@dataclass
class ResourceLedger:
    """Append-only record of created resources, in creation order."""

    resources: list[CreatedResource] = field(default_factory=list)

    def record(
        self,
        kind: ResourceKind,
        resource_id: str,
        parent_id: str | None = None,
    ) -> CreatedResource:
        """Record a newly created resource."""
        resource = CreatedResource(kind=kind, resource_id=resource_id, parent_id=parent_id)
        self.resources.append(resource)
        return resource

    def last(self) -> CreatedResource | None:
        """Return the most recently confirmed resource."""
        return self.resources[-1] if self.resources else None

    def kinds(self) -> list[ResourceKind]:
        return [resource.kind for resource in self.resources]

    def __iter__(self) -> Iterator[CreatedResource]:
        return iter(self.resources)

    def __len__(self) -> int:
        return len(self.resources)

    def __reversed__(self) -> Iterator[CreatedResource]:
        return reversed(self.resources)


@dataclass(frozen=True)
class DeploymentResult:
    """Everything a successful run produced."""

    run_config: RunConfig
    cluster_arn: str
    network: NetworkContext
    credential: Credential
    launch_template: LaunchTemplateInfo
    scaling_group: ScalingGroupInfo
    service: ServiceInfo
    endpoints: EndpointSet
