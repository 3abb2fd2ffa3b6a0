"""AWS session helpers."""

import boto3
from botocore.exceptions import ProfileNotFound

from ecs_launch.core.deployments.aws_ecs.errors import RegionUnresolved, ToolingMissing


def create_session(profile: str | None = None, region: str | None = None) -> boto3.session.Session:
    """Create a boto3 session."""
    if profile:
        try:
            return boto3.session.Session(profile_name=profile, region_name=region)
        except ProfileNotFound as exc:
            raise ToolingMissing(f"AWS profile '{profile}' was not found.") from exc

    return boto3.session.Session(region_name=region)


def check_credentials(session: boto3.session.Session) -> None:
    """Fail unless the session can sign requests."""
    if session.get_credentials() is None:
        raise ToolingMissing(
            "AWS credentials were not found. Run 'aws configure' or set AWS_PROFILE."
        )


def resolve_region(session: boto3.session.Session) -> str:
    """Return the session region."""
    region = session.region_name
    if not region:
        raise RegionUnresolved(
            "No default AWS region is configured. Run 'aws configure' or set AWS_REGION."
        )
    return str(region)
