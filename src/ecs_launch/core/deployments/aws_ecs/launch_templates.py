"""Launch template for the cluster instances."""

import base64
from collections.abc import Callable
from typing import Any, cast

from ecs_launch.core.deployments.aws_ecs.errors import TemplateCreateFailed, provider_step
from ecs_launch.core.deployments.aws_ecs.models import (
    Credential,
    LaunchTemplateInfo,
    NetworkContext,
    ResourceKind,
    ResourceLedger,
    RunConfig,
)


def default_user_data(cluster_name: str) -> str:
    """Return a bootstrap script that joins the ECS agent to `cluster_name`."""
    return f"#!/bin/bash\necho ECS_CLUSTER={cluster_name} >> /etc/ecs/ecs.config\n"


def build_launch_template_data(
    run_config: RunConfig,
    network: NetworkContext,
    credential: Credential,
    user_data: str,
) -> dict[str, Any]:
    """Return the LaunchTemplateData request body."""
    return {
        "ImageId": run_config.image_id,
        "InstanceType": run_config.instance_type,
        "KeyName": credential.key_name,
        "IamInstanceProfile": {"Name": run_config.instance_profile},
        "UserData": base64.b64encode(user_data.encode("utf-8")).decode("ascii"),
        "Monitoring": {"Enabled": False},
        "NetworkInterfaces": [
            {
                "DeviceIndex": 0,
                "AssociatePublicIpAddress": True,
                "Groups": [network.security_group_id],
            }
        ],
    }


def create_launch_template(
    session: Any,
    run_config: RunConfig,
    network: NetworkContext,
    credential: Credential,
    user_data: str | None,
    ledger: ResourceLedger,
    reporter: Callable[[str], None],
) -> LaunchTemplateInfo:
    """Create the launch template used by the scaling group."""
    payload = user_data if user_data is not None else default_user_data(run_config.cluster_name)
    data = build_launch_template_data(run_config, network, credential, payload)

    ec2 = session.client("ec2")
    reporter(f"Creating launch template ({run_config.launch_template_name})")
    with provider_step("create launch template", TemplateCreateFailed):
        response = ec2.create_launch_template(
            LaunchTemplateName=run_config.launch_template_name,
            LaunchTemplateData=data,
        )
    template_id = cast(str, response["LaunchTemplate"]["LaunchTemplateId"])
    ledger.record(ResourceKind.LAUNCH_TEMPLATE, template_id)

    return LaunchTemplateInfo(
        name=run_config.launch_template_name,
        template_id=template_id,
        image_id=run_config.image_id,
        key_name=credential.key_name,
        security_group_id=network.security_group_id,
        instance_type=run_config.instance_type,
        instance_profile=run_config.instance_profile,
    )
