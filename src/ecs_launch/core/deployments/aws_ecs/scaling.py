"""Fixed-size auto scaling group."""

from collections.abc import Callable
from typing import Any

from ecs_launch.core.deployments.aws_ecs.errors import provider_step
from ecs_launch.core.deployments.aws_ecs.models import (
    LaunchTemplateInfo,
    ResourceKind,
    ResourceLedger,
    RunConfig,
    ScalingGroupInfo,
)

LATEST_TEMPLATE_VERSION = "$Latest"


def create_scaling_group(
    session: Any,
    run_config: RunConfig,
    template: LaunchTemplateInfo,
    subnet_id: str,
    ledger: ResourceLedger,
    reporter: Callable[[str], None],
) -> ScalingGroupInfo:
    """Create a scaling group pinned to `run_config.instance_count` instances."""
    size = run_config.instance_count
    name = run_config.scaling_group_name
    autoscaling = session.client("autoscaling")

    reporter(f"Creating auto scaling group ({name}) with {size} instances")
    with provider_step("create auto scaling group"):
        autoscaling.create_auto_scaling_group(
            AutoScalingGroupName=name,
            LaunchTemplate={
                "LaunchTemplateName": template.name,
                "Version": LATEST_TEMPLATE_VERSION,
            },
            MinSize=size,
            MaxSize=size,
            DesiredCapacity=size,
            VPCZoneIdentifier=subnet_id,
            Tags=[
                {
                    "Key": "Name",
                    "Value": run_config.app_name,
                    "PropagateAtLaunch": True,
                }
            ],
        )
    ledger.record(ResourceKind.SCALING_GROUP, name)

    return ScalingGroupInfo(
        name=name,
        launch_template_name=template.name,
        min_size=size,
        max_size=size,
        desired_capacity=size,
        subnet_id=subnet_id,
    )


def scaling_group_instance_ids(session: Any, group_name: str) -> list[str]:
    """Return the instance ids currently in the group."""
    autoscaling = session.client("autoscaling")
    with provider_step("describe auto scaling group"):
        response = autoscaling.describe_auto_scaling_groups(AutoScalingGroupNames=[group_name])
    groups = response.get("AutoScalingGroups", [])
    if not groups:
        return []
    return [str(instance["InstanceId"]) for instance in groups[0].get("Instances", [])]
