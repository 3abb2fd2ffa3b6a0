"""Runtime settings for ECS Launch."""

from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from ecs_launch.config.paths import env_path


class AWSSettings(BaseSettings):
    """AWS credentials selection.

    Both values are optional: when unset, boto3 falls back to its own
    discovery (environment, shared config files, instance metadata).
    """

    model_config = SettingsConfigDict(env_prefix="AWS_", extra="ignore")

    profile: str | None = Field(default=None, description="AWS named profile")
    region: str | None = Field(default=None, description="AWS region")


class DeploySettings(BaseSettings):
    """Provisioning configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ECS_LAUNCH_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = Field(default="store-demo", min_length=1)
    app_description: str = Field(default="A simple store demo using AWS ECS")
    instance_count: int = Field(default=1, ge=1, description="Fixed size of the scaling group")
    task_count: int = Field(default=1, ge=1, description="Desired running tasks")
    instance_type: str = "t2.micro"
    instance_profile: str = "ecsInstanceRole"
    image_id: str | None = Field(default=None, description="Overrides the region image table")

    task_definition_path: Path = Path("task-definition.json")
    user_data_path: Path | None = None
    key_directory: Path = Path(".")

    poll_interval_seconds: float = Field(default=2.0, gt=0)
    instance_timeout_seconds: float = Field(default=900.0, gt=0)
    task_timeout_seconds: float = Field(default=600.0, gt=0)
    security_group_timeout_seconds: float = Field(default=60.0, gt=0)

    aws: AWSSettings = Field(default_factory=AWSSettings)


def get_settings(**overrides: Any) -> DeploySettings:
    """Load the provisioning configuration.

    Keyword values win over `ECS_LAUNCH_*` / `AWS_*` environment variables,
    which win over the env file. `aws_profile` and `aws_region` go to the
    nested AWS settings.

    Raises:
        ValidationError: If a value is out of range.
    """
    env_file = env_path()
    aws_values = {
        key: overrides.pop(f"aws_{key}")
        for key in ("profile", "region")
        if overrides.get(f"aws_{key}") is not None
    }
    values = {key: value for key, value in overrides.items() if value is not None}
    values["aws"] = AWSSettings(_env_file=env_file, **aws_values)
    return DeploySettings(_env_file=env_file, **values)
