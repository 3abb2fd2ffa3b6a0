"""Static inputs and settings translation for the CLI."""

import json
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from ecs_launch.core.deployments.aws_ecs import DeploymentOptions
from ecs_launch.core.settings import DeploySettings, get_settings


def load_settings(overrides: dict[str, Any]) -> DeploySettings:
    """Load settings with CLI values taking precedence.

    Args:
        overrides: Flag values; None means the flag was not given.

    Returns:
        The validated settings.
    """
    try:
        return get_settings(**overrides)
    except ValidationError as exc:
        raise click.ClickException(f"Invalid configuration values: {exc}") from exc


def load_task_definition(path: Path) -> dict[str, Any]:
    """Read the task definition payload.

    Args:
        path: JSON file in `register-task-definition` input format.

    Returns:
        The parsed payload.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise click.ClickException(f"Cannot read task definition {path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"Invalid task definition {path}: {exc}") from exc

    if not isinstance(data, dict):
        raise click.ClickException("Task definition file must contain a JSON object.")
    return data


def load_user_data(path: Path | None) -> str | None:
    """Read the bootstrap script, if one was given."""
    if path is None:
        return None
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise click.ClickException(f"Cannot read user data {path}: {exc}") from exc


def deployment_options_from_settings(
    settings: DeploySettings,
    task_definition: dict[str, Any],
    user_data: str | None,
) -> DeploymentOptions:
    """Build provisioning options from settings and loaded inputs.

    Args:
        settings: Validated settings.
        task_definition: Parsed task definition payload.
        user_data: Bootstrap script contents, or None for the default.

    Returns:
        The provisioning options.
    """
    return DeploymentOptions(
        app_name=settings.app_name,
        task_definition=task_definition,
        app_description=settings.app_description,
        instance_count=settings.instance_count,
        task_count=settings.task_count,
        instance_type=settings.instance_type,
        instance_profile=settings.instance_profile,
        image_id=settings.image_id,
        user_data=user_data,
        key_directory=settings.key_directory,
        poll_interval_seconds=settings.poll_interval_seconds,
        instance_timeout_seconds=settings.instance_timeout_seconds,
        task_timeout_seconds=settings.task_timeout_seconds,
        security_group_timeout_seconds=settings.security_group_timeout_seconds,
    )
