"""Public endpoint discovery for the scaling group instances."""

import logging
from collections.abc import Callable
from typing import Any

from ecs_launch.core.deployments.aws_ecs.errors import ProvisionFailed, provider_step
from ecs_launch.core.deployments.aws_ecs.models import Endpoint, EndpointSet
from ecs_launch.core.deployments.aws_ecs.scaling import scaling_group_instance_ids

logger = logging.getLogger(__name__)


def resolve_endpoints(
    session: Any,
    group_name: str,
    reporter: Callable[[str], None],
) -> EndpointSet:
    """Return the public DNS names of the group instances.

    Instances without a public name yet are left out. Lookup failures only
    shrink the result: the environment is already running at this point.
    """
    reporter("Searching the public hostnames of the created instances")
    try:
        instance_ids = scaling_group_instance_ids(session, group_name)
    except ProvisionFailed as exc:
        logger.warning("Could not list instances of %s: %s", group_name, exc)
        reporter(f"Could not list the instances of {group_name}")
        return EndpointSet()
    if not instance_ids:
        return EndpointSet()

    try:
        addresses = _public_addresses(session, instance_ids)
    except ProvisionFailed as exc:
        # One replaced instance fails the whole batch; keep the others.
        logger.warning("Could not describe instances %s: %s", instance_ids, exc)
        addresses = {}
        for instance_id in instance_ids:
            try:
                addresses.update(_public_addresses(session, [instance_id]))
            except ProvisionFailed as item_exc:
                logger.warning("Skipping instance %s: %s", instance_id, item_exc)

    endpoints = []
    for instance_id in instance_ids:
        address = addresses.get(instance_id)
        if address is None:
            logger.warning("Instance %s has no public address yet", instance_id)
            continue
        endpoints.append(Endpoint(instance_id=instance_id, address=address))
    return EndpointSet(endpoints=tuple(endpoints))


def _public_addresses(session: Any, instance_ids: list[str]) -> dict[str, str]:
    ec2 = session.client("ec2")
    with provider_step("describe instances"):
        response = ec2.describe_instances(InstanceIds=instance_ids)

    addresses: dict[str, str] = {}
    for reservation in response.get("Reservations", []):
        for instance in reservation.get("Instances", []):
            address = str(instance.get("PublicDnsName") or "").strip()
            if address:
                addresses[instance["InstanceId"]] = address
    return addresses
