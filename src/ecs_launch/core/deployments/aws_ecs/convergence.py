"""Bounded polling until an observed count reaches its target."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from ecs_launch.core.deployments.aws_ecs.ecs_tasks import (
    registered_instance_count,
    running_task_count,
)
from ecs_launch.core.deployments.aws_ecs.errors import ConvergenceCancelled, ConvergenceTimedOut
from ecs_launch.core.deployments.aws_ecs.models import RunConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WaitPolicy:
    """Fixed-interval polling with a hard deadline."""

    interval_seconds: float = 2.0
    timeout_seconds: float = 600.0


def wait_until(
    probe: Callable[[], int],
    expected: int,
    *,
    resource: str,
    policy: WaitPolicy,
    cancel: threading.Event | None = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    """Poll `probe` until it returns `expected`.

    The probe runs immediately and then every `policy.interval_seconds`. The
    last sleep is shortened so the final probe lands on the deadline.

    Returns:
        The observed count, equal to `expected`.

    Raises:
        ConvergenceTimedOut: The deadline passed with a different count.
        ConvergenceCancelled: `cancel` was set or the operator interrupted.
    """
    deadline = clock() + policy.timeout_seconds
    observed: int | None = None
    attempts = 0

    try:
        while True:
            if cancel is not None and cancel.is_set():
                raise ConvergenceCancelled(resource, expected, observed)

            observed = probe()
            attempts += 1
            logger.debug(
                "%s: observed %s of %s (attempt %d)", resource, observed, expected, attempts
            )
            if observed == expected:
                return observed

            remaining = deadline - clock()
            if remaining <= 0:
                raise ConvergenceTimedOut(resource, expected, observed)

            delay = min(policy.interval_seconds, remaining)
            if cancel is not None:
                if cancel.wait(delay):
                    raise ConvergenceCancelled(resource, expected, observed)
            else:
                sleep(delay)
    except KeyboardInterrupt as exc:
        raise ConvergenceCancelled(resource, expected, observed) from exc


def wait_for_container_instances(
    session: Any,
    run_config: RunConfig,
    policy: WaitPolicy,
    reporter: Callable[[str], None],
    cancel: threading.Event | None = None,
) -> int:
    """Wait until every scaling group instance joined the cluster."""
    reporter(
        "Waiting for instances to be attached to cluster (this may take a few minutes)"
    )
    return wait_until(
        lambda: registered_instance_count(session, run_config.cluster_name),
        run_config.instance_count,
        resource=f"container instances in {run_config.cluster_name}",
        policy=policy,
        cancel=cancel,
    )


def wait_for_running_tasks(
    session: Any,
    run_config: RunConfig,
    policy: WaitPolicy,
    reporter: Callable[[str], None],
    cancel: threading.Event | None = None,
) -> int:
    """Wait until the service runs its desired number of tasks."""
    reporter("Waiting for tasks to be executed")
    return wait_until(
        lambda: running_task_count(session, run_config.cluster_name),
        run_config.task_count,
        resource=f"running tasks in {run_config.cluster_name}",
        policy=policy,
        cancel=cancel,
    )
