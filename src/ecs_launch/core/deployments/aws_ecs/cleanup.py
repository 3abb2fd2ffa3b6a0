"""Best-effort removal of resources created by a failed run."""

from collections.abc import Callable
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from ecs_launch.core.deployments.aws_ecs.models import (
    CreatedResource,
    ResourceKind,
    ResourceLedger,
)


def cleanup_resources(
    session: Any,
    ledger: ResourceLedger,
    reporter: Callable[[str], None],
) -> list[CreatedResource]:
    """Delete recorded resources, newest first.

    Failures are reported and skipped so one stuck resource does not keep the
    rest around.

    Returns:
        Resources that could not be deleted.
    """
    remaining: list[CreatedResource] = []
    for resource in reversed(ledger):
        handler = _HANDLERS[resource.kind]
        reporter(f"Deleting {resource}")
        try:
            handler(session, resource, reporter)
        except (ClientError, BotoCoreError) as exc:
            reporter(f"Failed to delete {resource}: {exc}")
            remaining.append(resource)
    return remaining


def _delete_service(session: Any, resource: CreatedResource, _: Callable[[str], None]) -> None:
    ecs = session.client("ecs")
    ecs.update_service(cluster=resource.parent_id, service=resource.resource_id, desiredCount=0)
    ecs.delete_service(cluster=resource.parent_id, service=resource.resource_id, force=True)


def _deregister_task_definition(
    session: Any, resource: CreatedResource, _: Callable[[str], None]
) -> None:
    session.client("ecs").deregister_task_definition(taskDefinition=resource.resource_id)


def _delete_scaling_group(
    session: Any, resource: CreatedResource, reporter: Callable[[str], None]
) -> None:
    autoscaling = session.client("autoscaling")
    response = autoscaling.describe_auto_scaling_groups(
        AutoScalingGroupNames=[resource.resource_id]
    )
    instance_ids = [
        instance["InstanceId"]
        for group in response.get("AutoScalingGroups", [])
        for instance in group.get("Instances", [])
    ]
    autoscaling.delete_auto_scaling_group(
        AutoScalingGroupName=resource.resource_id,
        ForceDelete=True,
    )
    if instance_ids:
        # Subnet and security group deletion fail while instances still hold ENIs.
        reporter(f"Waiting for {len(instance_ids)} instances to terminate")
        session.client("ec2").get_waiter("instance_terminated").wait(InstanceIds=instance_ids)


def _delete_launch_template(
    session: Any, resource: CreatedResource, _: Callable[[str], None]
) -> None:
    session.client("ec2").delete_launch_template(LaunchTemplateId=resource.resource_id)


def _delete_key_pair(
    session: Any, resource: CreatedResource, reporter: Callable[[str], None]
) -> None:
    session.client("ec2").delete_key_pair(KeyName=resource.resource_id)
    reporter(f"The private key file for {resource.resource_id} was left on disk")


def _delete_security_group(
    session: Any, resource: CreatedResource, _: Callable[[str], None]
) -> None:
    session.client("ec2").delete_security_group(GroupId=resource.resource_id)


def _delete_route(session: Any, resource: CreatedResource, _: Callable[[str], None]) -> None:
    session.client("ec2").delete_route(
        RouteTableId=resource.parent_id,
        DestinationCidrBlock=resource.resource_id,
    )


def _detach_gateway(session: Any, resource: CreatedResource, _: Callable[[str], None]) -> None:
    session.client("ec2").detach_internet_gateway(
        InternetGatewayId=resource.resource_id,
        VpcId=resource.parent_id,
    )


def _delete_gateway(session: Any, resource: CreatedResource, _: Callable[[str], None]) -> None:
    session.client("ec2").delete_internet_gateway(InternetGatewayId=resource.resource_id)


def _delete_subnet(session: Any, resource: CreatedResource, _: Callable[[str], None]) -> None:
    session.client("ec2").delete_subnet(SubnetId=resource.resource_id)


def _delete_vpc(session: Any, resource: CreatedResource, _: Callable[[str], None]) -> None:
    session.client("ec2").delete_vpc(VpcId=resource.resource_id)


def _delete_cluster(session: Any, resource: CreatedResource, _: Callable[[str], None]) -> None:
    session.client("ecs").delete_cluster(cluster=resource.resource_id)


_HANDLERS: dict[ResourceKind, Callable[[Any, CreatedResource, Callable[[str], None]], None]] = {
    ResourceKind.SERVICE: _delete_service,
    ResourceKind.TASK_DEFINITION: _deregister_task_definition,
    ResourceKind.SCALING_GROUP: _delete_scaling_group,
    ResourceKind.LAUNCH_TEMPLATE: _delete_launch_template,
    ResourceKind.KEY_PAIR: _delete_key_pair,
    ResourceKind.SECURITY_GROUP: _delete_security_group,
    ResourceKind.ROUTE: _delete_route,
    ResourceKind.GATEWAY_ATTACHMENT: _detach_gateway,
    ResourceKind.INTERNET_GATEWAY: _delete_gateway,
    ResourceKind.SUBNET: _delete_subnet,
    ResourceKind.VPC: _delete_vpc,
    ResourceKind.CLUSTER: _delete_cluster,
}
