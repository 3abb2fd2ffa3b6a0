"""Tests for the bounded polling engine."""

import threading
from unittest.mock import MagicMock

import pytest

from ecs_launch.core.deployments.aws_ecs import (
    ConvergenceCancelled,
    ConvergenceTimedOut,
    RunConfig,
    WaitPolicy,
    wait_for_container_instances,
    wait_for_running_tasks,
    wait_until,
)
from tests.deployment_tests.fakes import FakeSession, cluster_response


class FakeClock:
    """Monotonic clock that only moves when the waiter sleeps."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class CountingProbe:
    """Returns `expected` from the k-th call on, `before` until then."""

    def __init__(self, k: int, expected: int = 1, before: int = 0) -> None:
        self.k = k
        self.expected = expected
        self.before = before
        self.calls = 0

    def __call__(self) -> int:
        self.calls += 1
        return self.expected if self.calls >= self.k else self.before


@pytest.mark.parametrize("k", [1, 2, 3, 7])
def test_succeeds_on_the_kth_poll(k: int) -> None:
    clock = FakeClock()
    probe = CountingProbe(k)

    observed = wait_until(
        probe,
        1,
        resource="instances",
        policy=WaitPolicy(interval_seconds=2, timeout_seconds=60),
        clock=clock,
        sleep=clock.sleep,
    )

    assert observed == 1
    assert probe.calls == k
    assert clock.sleeps == [2] * (k - 1)


def test_times_out_exactly_at_the_deadline() -> None:
    clock = FakeClock()
    probe = CountingProbe(k=1_000)

    with pytest.raises(ConvergenceTimedOut) as excinfo:
        wait_until(
            probe,
            1,
            resource="instances",
            policy=WaitPolicy(interval_seconds=2, timeout_seconds=10),
            clock=clock,
            sleep=clock.sleep,
        )

    # Polls at t=0, 2, 4, 6, 8 and 10.
    assert clock.now == 10
    assert probe.calls == 6
    assert excinfo.value.resource == "instances"
    assert excinfo.value.expected == 1
    assert excinfo.value.observed == 0


def test_last_sleep_is_shortened_to_the_deadline() -> None:
    clock = FakeClock()

    with pytest.raises(ConvergenceTimedOut):
        wait_until(
            CountingProbe(k=1_000),
            1,
            resource="tasks",
            policy=WaitPolicy(interval_seconds=3, timeout_seconds=10),
            clock=clock,
            sleep=clock.sleep,
        )

    assert clock.sleeps == [3, 3, 3, 1]
    assert clock.now == 10


def test_count_above_expected_is_not_convergence() -> None:
    """Only an exact match counts, matching the desired capacity."""
    clock = FakeClock()

    with pytest.raises(ConvergenceTimedOut) as excinfo:
        wait_until(
            lambda: 2,
            1,
            resource="instances",
            policy=WaitPolicy(interval_seconds=1, timeout_seconds=3),
            clock=clock,
            sleep=clock.sleep,
        )

    assert excinfo.value.observed == 2


def test_cancel_event_stops_polling() -> None:
    cancel = threading.Event()
    probe = CountingProbe(k=1_000)

    def probe_then_cancel() -> int:
        value = probe()
        cancel.set()
        return value

    with pytest.raises(ConvergenceCancelled) as excinfo:
        wait_until(
            probe_then_cancel,
            1,
            resource="instances",
            policy=WaitPolicy(interval_seconds=30, timeout_seconds=600),
            cancel=cancel,
        )

    assert probe.calls == 1
    assert excinfo.value.observed == 0


def test_keyboard_interrupt_becomes_cancellation() -> None:
    def interrupted_sleep(_: float) -> None:
        raise KeyboardInterrupt

    with pytest.raises(ConvergenceCancelled) as excinfo:
        wait_until(
            lambda: 0,
            1,
            resource="running tasks",
            policy=WaitPolicy(interval_seconds=1, timeout_seconds=10),
            sleep=interrupted_sleep,
        )

    assert excinfo.value.resource == "running tasks"
    assert isinstance(excinfo.value.__cause__, KeyboardInterrupt)


def test_container_instance_wait_reads_registered_count() -> None:
    session = FakeSession()
    session.ecs.describe_clusters.side_effect = [
        cluster_response(registered=0),
        cluster_response(registered=2),
    ]
    run_config = RunConfig(
        app_name="store-demo", region="us-east-1", image_id="ami-1", instance_count=2
    )

    observed = wait_for_container_instances(
        session, run_config, WaitPolicy(0.001, 5), MagicMock()
    )

    assert observed == 2
    assert session.ecs.describe_clusters.call_count == 2


def test_running_task_wait_reads_running_count() -> None:
    session = FakeSession()
    session.ecs.describe_clusters.side_effect = [
        cluster_response(registered=1, running=0),
        cluster_response(registered=1, running=0),
        cluster_response(registered=1, running=1),
    ]
    run_config = RunConfig(app_name="store-demo", region="us-east-1", image_id="ami-1")

    observed = wait_for_running_tasks(session, run_config, WaitPolicy(0.001, 5), MagicMock())

    assert observed == 1
    assert session.ecs.describe_clusters.call_count == 3
