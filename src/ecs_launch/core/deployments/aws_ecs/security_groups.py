"""Security group management for the cluster instances."""

import logging
import math
from typing import Any

from ecs_launch.core.deployments.aws_ecs.errors import provider_step
from ecs_launch.core.deployments.aws_ecs.models import (
    ResourceKind,
    ResourceLedger,
    SecurityGroupInfo,
)

logger = logging.getLogger(__name__)

# SSH, HTTP and the application port.
INGRESS_PORTS = (22, 80, 3000)
ANY_SOURCE_CIDR = "0.0.0.0/0"
SETTLE_POLL_SECONDS = 2


def create_security_group(
    session: Any,
    vpc_id: str,
    name: str,
    description: str,
    ledger: ResourceLedger,
    ports: tuple[int, ...] = INGRESS_PORTS,
    settle_timeout_seconds: float = 60.0,
) -> SecurityGroupInfo:
    """Create a security group open to the world on `ports`."""
    ec2 = session.client("ec2")
    with provider_step("create security group"):
        response = ec2.create_security_group(
            VpcId=vpc_id,
            GroupName=name,
            Description=description,
        )
    group_id = response["GroupId"]
    ledger.record(ResourceKind.SECURITY_GROUP, group_id, vpc_id)

    wait_for_security_group(ec2, group_id, settle_timeout_seconds)

    with provider_step("tag security group"):
        ec2.create_tags(Resources=[group_id], Tags=[{"Key": "Name", "Value": name}])
    with provider_step("authorize security group ingress"):
        ec2.authorize_security_group_ingress(
            GroupId=group_id,
            IpPermissions=[_tcp_ingress(port) for port in ports],
        )

    return SecurityGroupInfo(
        group_id=group_id,
        name=name,
        description=description,
        ports=tuple(ports),
    )


def wait_for_security_group(ec2: Any, group_id: str, timeout_seconds: float) -> None:
    """Block until a new group is visible to the EC2 read path.

    Rules authorised against a group EC2 cannot see yet are rejected with
    InvalidGroup.NotFound.
    """
    max_attempts = max(1, math.ceil(timeout_seconds / SETTLE_POLL_SECONDS))
    logger.debug("Waiting for security group %s to become visible", group_id)
    with provider_step(f"wait for security group {group_id}"):
        ec2.get_waiter("security_group_exists").wait(
            GroupIds=[group_id],
            WaiterConfig={"Delay": SETTLE_POLL_SECONDS, "MaxAttempts": max_attempts},
        )


def _tcp_ingress(port: int) -> dict[str, Any]:
    return {
        "IpProtocol": "tcp",
        "FromPort": port,
        "ToPort": port,
        "IpRanges": [{"CidrIp": ANY_SOURCE_CIDR}],
    }
