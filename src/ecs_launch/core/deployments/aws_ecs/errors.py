"""Error types raised while provisioning."""

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from botocore.exceptions import BotoCoreError, ClientError

from ecs_launch.core.deployments.aws_ecs.models import CreatedResource


class DeploymentError(RuntimeError):
    """Base class for provisioning failures.

    The orchestrator fills in `stage` and `last_resource` before the error
    leaves it, so callers can tell the operator where to resume.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message
        self.stage: str | None = None
        self.last_resource: CreatedResource | None = None

    def annotate(self, stage: str, last_resource: CreatedResource | None) -> None:
        """Attach the stage in flight and the last confirmed resource."""
        if self.stage is None:
            self.stage = stage
        self.last_resource = last_resource


class PreconditionFailed(DeploymentError):
    """A check that must hold before anything is created did not hold."""


class ToolingMissing(PreconditionFailed):
    """The provider client cannot be used (e.g. no credentials)."""


class RegionUnresolved(PreconditionFailed):
    """No default region is configured."""


class UnsupportedRegion(PreconditionFailed):
    """The region has no machine image entry."""

    def __init__(self, region: str) -> None:
        super().__init__(f"No machine image is known for region '{region}'.")
        self.region = region


class ClusterAlreadyExists(PreconditionFailed):
    """The target cluster exists and is not inactive."""

    def __init__(self, cluster_name: str, status: str) -> None:
        super().__init__(f'ECS cluster "{cluster_name}" is already created (status {status}).')
        self.cluster_name = cluster_name
        self.status = status


class KeyFileUnavailable(PreconditionFailed):
    """The private key file cannot be created at its expected path."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot write private key to {path}: {reason}.")
        self.path = path
        self.reason = reason


class TaskDefinitionMismatch(PreconditionFailed):
    """The task definition family is not the one the service will reference."""

    def __init__(self, family: object, expected: str) -> None:
        super().__init__(f'Task definition family is "{family}", expected "{expected}".')
        self.family = family
        self.expected = expected


class ProvisionFailed(DeploymentError):
    """A resource-creation call failed."""

    def __init__(self, step: str, cause: object) -> None:
        super().__init__(f"{step} failed: {cause}")
        self.step = step
        self.cause = cause


class TemplateCreateFailed(ProvisionFailed):
    """The launch template could not be created."""


class RegistrationFailed(ProvisionFailed):
    """The task definition could not be registered."""


class ServiceCreateFailed(ProvisionFailed):
    """The ECS service could not be created."""


class CredentialPersistFailed(DeploymentError):
    """The private key could not be written with owner-only permissions."""

    def __init__(self, path: Path, cause: object) -> None:
        super().__init__(f"Could not persist private key to {path}: {cause}")
        self.path = path
        self.cause = cause


class ConvergenceTimedOut(DeploymentError):
    """A polled count did not reach its expected value in time."""

    def __init__(self, resource: str, expected: int, observed: int | None) -> None:
        super().__init__(
            f"Timed out waiting for {resource}: expected {expected}, observed {observed}."
        )
        self.resource = resource
        self.expected = expected
        self.observed = observed


class OperationCancelled(DeploymentError):
    """The operator interrupted the run."""


class ConvergenceCancelled(OperationCancelled):
    """Polling was cancelled before the expected count was observed."""

    def __init__(self, resource: str, expected: int, observed: int | None) -> None:
        super().__init__(
            f"Cancelled while waiting for {resource}: expected {expected}, observed {observed}."
        )
        self.resource = resource
        self.expected = expected
        self.observed = observed


@contextmanager
def provider_step(
    step: str,
    error_cls: type[ProvisionFailed] = ProvisionFailed,
) -> Iterator[None]:
    """Convert provider exceptions raised inside the block into `error_cls`."""
    try:
        yield
    except (ClientError, BotoCoreError) as exc:
        raise error_cls(step, exc) from exc
