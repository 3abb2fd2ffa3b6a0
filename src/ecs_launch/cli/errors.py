"""Provisioning error rendering for the CLI."""

from collections.abc import Iterator

from botocore.exceptions import (
    ClientError,
    EndpointConnectionError,
    NoCredentialsError,
    ProfileNotFound,
)

from ecs_launch.cli.ui import err_console
from ecs_launch.core.deployments.aws_ecs import (
    DeploymentError,
    KeyFileUnavailable,
    TaskDefinitionMismatch,
)

AUTH_ERROR_CODES = frozenset(
    {
        "AccessDenied",
        "AccessDeniedException",
        "AuthFailure",
        "ExpiredToken",
        "ExpiredTokenException",
        "InvalidClientTokenId",
        "UnauthorizedOperation",
        "UnrecognizedClientException",
    }
)

AUTH_HINT = (
    "AWS credentials are missing, invalid, expired or lack permission. "
    "With a profile or SSO, run: aws sso login --profile <profile>."
)
ENDPOINT_HINT = "Could not reach AWS. Check network connectivity and the region."
KEY_FILE_HINT = "Move the old key file away or pass --key-dir."
FAMILY_HINT = 'Set "family" in the task definition to <app-name>-containers.'


def describe_failure(exc: DeploymentError) -> str:
    """Return the one-line failure summary for an aborted run.

    Args:
        exc: Error raised by the provisioning run.

    Returns:
        The stage, the cause and the last confirmed resource.
    """
    stage = exc.stage or "unknown stage"
    line = f"Error during {stage}: {exc}"
    if exc.last_resource is not None:
        line += f" (last created: {exc.last_resource})"
    return line


def failure_hint(exc: DeploymentError) -> str | None:
    """Return what the operator can do about a failure, when it is known."""
    if isinstance(exc, KeyFileUnavailable):
        return KEY_FILE_HINT
    if isinstance(exc, TaskDefinitionMismatch):
        return FAMILY_HINT
    for item in _causes(exc):
        if isinstance(item, (NoCredentialsError, ProfileNotFound)):
            return AUTH_HINT
        if isinstance(item, ClientError):
            if item.response.get("Error", {}).get("Code") in AUTH_ERROR_CODES:
                return AUTH_HINT
        if isinstance(item, EndpointConnectionError):
            return ENDPOINT_HINT
    return None


def report_deployment_error(exc: DeploymentError) -> None:
    """Print the failure summary and, when known, a hint."""
    err_console.print(f"[red]{describe_failure(exc)}[/red]", highlight=False)
    hint = failure_hint(exc)
    if hint:
        err_console.print(f"[dim]{hint}[/dim]", highlight=False)


def _causes(exc: BaseException) -> Iterator[BaseException]:
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__
