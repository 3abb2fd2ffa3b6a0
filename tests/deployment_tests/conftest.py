"""Shared fixtures for provisioning tests."""

from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from ecs_launch.core.deployments.aws_ecs import DeploymentOptions
from tests.deployment_tests.fakes import FakeSession, configure_happy_path


@pytest.fixture
def session() -> FakeSession:
    fake = FakeSession()
    configure_happy_path(fake)
    return fake


@pytest.fixture
def task_definition() -> dict[str, Any]:
    return {
        "family": "store-demo-containers",
        "containerDefinitions": [
            {
                "name": "store",
                "image": "store-demo:latest",
                "memory": 300,
                "essential": True,
                "portMappings": [{"containerPort": 3000, "hostPort": 80}],
            }
        ],
    }


@pytest.fixture
def options(tmp_path: Path, task_definition: dict[str, Any]) -> DeploymentOptions:
    return DeploymentOptions(
        app_name="store-demo",
        task_definition=task_definition,
        app_description="Store demo",
        key_directory=tmp_path,
        poll_interval_seconds=0.001,
        instance_timeout_seconds=5.0,
        task_timeout_seconds=5.0,
    )


@pytest.fixture
def reporter() -> MagicMock:
    return MagicMock()
