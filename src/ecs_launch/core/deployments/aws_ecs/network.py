"""VPC, subnet, gateway and routing for the cluster instances."""

from collections.abc import Callable
from typing import Any

from ecs_launch.core.deployments.aws_ecs.errors import ProvisionFailed, provider_step
from ecs_launch.core.deployments.aws_ecs.models import (
    SUBNET_CIDR,
    VPC_CIDR,
    NetworkContext,
    ResourceKind,
    ResourceLedger,
    RunConfig,
)
from ecs_launch.core.deployments.aws_ecs.security_groups import (
    INGRESS_PORTS,
    create_security_group,
)

DEFAULT_ROUTE_CIDR = "0.0.0.0/0"


def create_network(
    session: Any,
    run_config: RunConfig,
    ledger: ResourceLedger,
    reporter: Callable[[str], None],
    security_group_timeout_seconds: float = 60.0,
) -> NetworkContext:
    """Create a public VPC with one subnet, an internet gateway and a security group."""
    ec2 = session.client("ec2")

    reporter(f"Creating VPC ({run_config.vpc_name})")
    with provider_step("create VPC"):
        vpc_id = ec2.create_vpc(CidrBlock=VPC_CIDR)["Vpc"]["VpcId"]
    ledger.record(ResourceKind.VPC, vpc_id)
    with provider_step("configure VPC DNS"):
        ec2.modify_vpc_attribute(VpcId=vpc_id, EnableDnsSupport={"Value": True})
        ec2.modify_vpc_attribute(VpcId=vpc_id, EnableDnsHostnames={"Value": True})
    _tag_resource(ec2, vpc_id, run_config.vpc_name)

    reporter(f"Creating subnet ({run_config.subnet_name})")
    with provider_step("create subnet"):
        subnet = ec2.create_subnet(VpcId=vpc_id, CidrBlock=SUBNET_CIDR)["Subnet"]
    subnet_id = subnet["SubnetId"]
    ledger.record(ResourceKind.SUBNET, subnet_id, vpc_id)
    if subnet.get("VpcId", vpc_id) != vpc_id:
        raise ProvisionFailed("create subnet", f"subnet {subnet_id} is not in {vpc_id}")
    _tag_resource(ec2, subnet_id, run_config.subnet_name)

    reporter(f"Creating internet gateway ({run_config.gateway_name})")
    with provider_step("create internet gateway"):
        gateway_id = ec2.create_internet_gateway()["InternetGateway"]["InternetGatewayId"]
    ledger.record(ResourceKind.INTERNET_GATEWAY, gateway_id)
    _tag_resource(ec2, gateway_id, run_config.gateway_name)

    with provider_step("attach internet gateway"):
        ec2.attach_internet_gateway(InternetGatewayId=gateway_id, VpcId=vpc_id)
    ledger.record(ResourceKind.GATEWAY_ATTACHMENT, gateway_id, vpc_id)

    route_table_id = _main_route_table(ec2, vpc_id)
    with provider_step("create default route"):
        ec2.create_route(
            RouteTableId=route_table_id,
            DestinationCidrBlock=DEFAULT_ROUTE_CIDR,
            GatewayId=gateway_id,
        )
    ledger.record(ResourceKind.ROUTE, DEFAULT_ROUTE_CIDR, route_table_id)

    reporter(f"Creating security group ({run_config.security_group_name})")
    group = create_security_group(
        session,
        vpc_id,
        run_config.security_group_name,
        run_config.app_description or run_config.app_name,
        ledger,
        ports=INGRESS_PORTS,
        settle_timeout_seconds=security_group_timeout_seconds,
    )

    return NetworkContext(
        vpc_id=vpc_id,
        subnet_id=subnet_id,
        gateway_id=gateway_id,
        route_table_id=route_table_id,
        security_group_id=group.group_id,
    )


def _tag_resource(ec2: Any, resource_id: str, name: str) -> None:
    """Apply a Name tag to a resource."""
    with provider_step(f"tag {resource_id}"):
        ec2.create_tags(Resources=[resource_id], Tags=[{"Key": "Name", "Value": name}])


def _main_route_table(ec2: Any, vpc_id: str) -> str:
    """Return the route table AWS created with the VPC."""
    with provider_step("describe route tables"):
        response = ec2.describe_route_tables(
            Filters=[
                {"Name": "vpc-id", "Values": [vpc_id]},
                {"Name": "association.main", "Values": ["true"]},
            ]
        )
    tables = response.get("RouteTables", [])
    if not tables:
        raise ProvisionFailed("describe route tables", f"no main route table found for {vpc_id}")
    return str(tables[0]["RouteTableId"])
