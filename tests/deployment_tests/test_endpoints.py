"""Tests for public endpoint discovery."""

from unittest.mock import MagicMock

from ecs_launch.core.deployments.aws_ecs import Endpoint, resolve_endpoints
from tests.deployment_tests.fakes import FakeSession, client_error


def _group(*instance_ids: str) -> dict[str, list[dict[str, object]]]:
    return {
        "AutoScalingGroups": [{"Instances": [{"InstanceId": i} for i in instance_ids]}]
    }


def test_instances_without_address_are_omitted(reporter: MagicMock) -> None:
    session = FakeSession()
    session.autoscaling.describe_auto_scaling_groups.return_value = _group("i-1", "i-2", "i-3")
    session.ec2.describe_instances.return_value = {
        "Reservations": [
            {
                "Instances": [
                    {"InstanceId": "i-1", "PublicDnsName": "a.example.com"},
                    {"InstanceId": "i-2", "PublicDnsName": ""},
                ]
            },
            {"Instances": [{"InstanceId": "i-3", "PublicDnsName": "c.example.com"}]},
        ]
    }

    endpoints = resolve_endpoints(session, "store-demo-group", reporter)

    assert list(endpoints) == [
        Endpoint(instance_id="i-1", address="a.example.com"),
        Endpoint(instance_id="i-3", address="c.example.com"),
    ]
    assert [endpoint.url for endpoint in endpoints] == [
        "http://a.example.com",
        "http://c.example.com",
    ]
    session.ec2.describe_instances.assert_called_once_with(InstanceIds=["i-1", "i-2", "i-3"])


def test_empty_group_does_not_describe_every_instance(reporter: MagicMock) -> None:
    """An empty id list would make EC2 describe all instances in the account."""
    session = FakeSession()
    session.autoscaling.describe_auto_scaling_groups.return_value = _group()

    endpoints = resolve_endpoints(session, "store-demo-group", reporter)

    assert len(endpoints) == 0
    session.ec2.describe_instances.assert_not_called()


def test_one_missing_instance_does_not_hide_the_others(reporter: MagicMock) -> None:
    """A replaced instance fails the batch lookup; the rest are still reported."""
    session = FakeSession()
    session.autoscaling.describe_auto_scaling_groups.return_value = _group("i-1", "i-2")

    def describe_instances(InstanceIds: list[str]) -> dict[str, object]:
        if "i-1" in InstanceIds:
            raise client_error("InvalidInstanceID.NotFound", "DescribeInstances")
        return {"Reservations": [{"Instances": [{"InstanceId": "i-2", "PublicDnsName": "b.com"}]}]}

    session.ec2.describe_instances.side_effect = describe_instances

    endpoints = resolve_endpoints(session, "store-demo-group", reporter)

    assert list(endpoints) == [Endpoint(instance_id="i-2", address="b.com")]
    assert session.ec2.describe_instances.call_count == 3


def test_group_lookup_failure_yields_no_endpoints(reporter: MagicMock) -> None:
    session = FakeSession()
    session.autoscaling.describe_auto_scaling_groups.side_effect = client_error("Throttling")

    endpoints = resolve_endpoints(session, "store-demo-group", reporter)

    assert len(endpoints) == 0
    session.ec2.describe_instances.assert_not_called()
