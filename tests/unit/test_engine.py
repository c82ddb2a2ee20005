"""Unit tests for the progress simulation engine."""

import random
from datetime import datetime, timedelta

import pytest

from opsboard.core.models import Step, Task, TaskStatus
from opsboard.simulation.engine import (
    ProgressSimulator,
    clamp_progress,
    elapsed_seconds,
    format_duration,
    tick,
)


def make_task(start_time: datetime, progress: float = 50, steps: list[Step] | None = None, **kwargs) -> Task:
    """Build a running task for the simulator."""
    if steps is None:
        steps = [
            Step(name="Parse", status=TaskStatus.RUNNING, llm="GPT-4", progress=20),
            Step(name="Match", llm="Claude Sonnet 4.5"),
            Step(name="Report", llm="Kimi K2"),
        ]
    fields = {
        "id": 1,
        "name": "Reconcile",
        "user": "You",
        "status": TaskStatus.RUNNING,
        "progress": progress,
        "llm": "GPT-4",
        "start_time": start_time,
        "duration": "0s",
        "steps": steps,
    }
    fields.update(kwargs)
    return Task(**fields)


# =============================================================================
# DURATION FORMATTING
# =============================================================================


class TestFormatDuration:
    """Tests for elapsed-duration rendering."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0, "0s"),
            (42, "42s"),
            (59, "59s"),
            (60, "1m 0s"),
            (125, "2m 5s"),
            (3725, "62m 5s"),
        ],
    )
    def test_formats(self, start_time, seconds, expected) -> None:
        """Test seconds under a minute and minute/remainder rendering."""
        assert format_duration(start_time, start_time + timedelta(seconds=seconds)) == expected

    def test_rounds_half_up(self, start_time) -> None:
        """Test fractional seconds round half up."""
        assert elapsed_seconds(start_time, start_time + timedelta(seconds=59.5)) == 60
        assert elapsed_seconds(start_time, start_time + timedelta(seconds=2.4)) == 2

    def test_never_negative(self, start_time) -> None:
        """Test a start time in the future renders as zero."""
        assert format_duration(start_time, start_time - timedelta(seconds=30)) == "0s"


class TestClampProgress:
    """Tests for clamp_progress."""

    def test_clamps(self) -> None:
        """Test values are clamped into [0, 100]."""
        assert clamp_progress(-3) == 0
        assert clamp_progress(42.5) == 42.5
        assert clamp_progress(140) == 100


# =============================================================================
# TICK BEHAVIOUR
# =============================================================================


class TestProgressSimulator:
    """Tests for a single tick over one task."""

    def test_skips_non_running_tasks(self, start_time, scripted_random) -> None:
        """Test queued and complete tasks come back as the same object without draws."""
        rng = scripted_random([0.9, 0.9])
        simulator = ProgressSimulator(rng=rng, clock=lambda: start_time)
        queued = make_task(start_time, progress=0, status=TaskStatus.QUEUED)
        complete = make_task(start_time, progress=100, status=TaskStatus.COMPLETE, id=2)

        result = simulator.tick([queued, complete])

        assert result[0] is queued
        assert result[1] is complete
        assert rng.calls == 0

    def test_advances_task_and_steps(self, start_time, scripted_random) -> None:
        """Test exact increments with a scripted random source."""
        rng = scripted_random([0.5, 0.5, 0.8, 0.1])
        now = start_time + timedelta(seconds=125)
        simulator = ProgressSimulator(rng=rng, clock=lambda: now)

        (task,) = simulator.tick([make_task(start_time)])

        assert task.progress == pytest.approx(53.0)
        assert task.status == TaskStatus.RUNNING
        assert task.duration == "2m 5s"

        parse, match, report = task.steps
        assert parse.progress == pytest.approx(25.0)
        assert parse.status == TaskStatus.RUNNING
        assert parse.duration == "2m 5s"

        assert match.status == TaskStatus.RUNNING
        assert match.progress == 5
        assert match.duration == "2m 5s"

        assert report.status == TaskStatus.QUEUED
        assert report.progress is None
        assert report.duration is None
        assert rng.calls == 4

    def test_does_not_mutate_input(self, start_time, scripted_random) -> None:
        """Test ticks build new snapshots instead of editing the old one."""
        original = make_task(start_time)
        simulator = ProgressSimulator(rng=scripted_random([0.5, 0.5, 0.8, 0.8]), clock=lambda: start_time)

        (advanced,) = simulator.tick([original])

        assert advanced is not original
        assert original.progress == 50
        assert original.steps[0].progress == 20
        assert original.steps[1].status == TaskStatus.QUEUED
        assert advanced == original  # same identity (id)

    def test_no_promotion_until_past_ten_percent(self, start_time, scripted_random) -> None:
        """Test queued steps are not considered (no draw) while progress <= 10."""
        rng = scripted_random([0.5])
        steps = [Step(name="Wait", llm="GPT-4"), Step(name="Later", llm="GPT-4")]
        simulator = ProgressSimulator(rng=rng, clock=lambda: start_time)

        (task,) = simulator.tick([make_task(start_time, progress=2, steps=steps)])

        assert task.progress == pytest.approx(5.0)
        assert all(step.status == TaskStatus.QUEUED for step in task.steps)
        assert rng.calls == 1

    def test_promotion_threshold_is_exclusive(self, start_time, scripted_random) -> None:
        """Test a draw of exactly 0.7 does not promote."""
        steps = [Step(name="Wait", llm="GPT-4")]
        simulator = ProgressSimulator(rng=scripted_random([0.0, 0.7]), clock=lambda: start_time)

        (task,) = simulator.tick([make_task(start_time, progress=50, steps=steps)])

        assert task.steps[0].status == TaskStatus.QUEUED

    def test_promotion_keeps_prior_progress(self, start_time, scripted_random) -> None:
        """Test a promoted step keeps progress it already had."""
        steps = [Step(name="Resume", llm="GPT-4", progress=30)]
        simulator = ProgressSimulator(rng=scripted_random([0.0, 0.95]), clock=lambda: start_time)

        (task,) = simulator.tick([make_task(start_time, progress=50, steps=steps)])

        assert task.steps[0].status == TaskStatus.RUNNING
        assert task.steps[0].progress == 30

    def test_later_step_may_start_first(self, start_time, scripted_random) -> None:
        """Test queued steps promote independently of their order."""
        steps = [
            Step(name="First", status=TaskStatus.RUNNING, llm="GPT-4", progress=10),
            Step(name="Second", llm="GPT-4"),
            Step(name="Third", llm="GPT-4"),
        ]
        simulator = ProgressSimulator(rng=scripted_random([0.0, 0.0, 0.2, 0.9]), clock=lambda: start_time)

        (task,) = simulator.tick([make_task(start_time, progress=50, steps=steps)])

        statuses = [step.status for step in task.steps]
        assert statuses == [TaskStatus.RUNNING, TaskStatus.QUEUED, TaskStatus.RUNNING]

    def test_step_completes_at_100(self, start_time, scripted_random) -> None:
        """Test a step reaching 100 is clamped and marked complete."""
        steps = [
            Step(name="Almost", status=TaskStatus.RUNNING, llm="GPT-4", progress=95),
            Step(name="Next", llm="GPT-4"),
        ]
        simulator = ProgressSimulator(rng=scripted_random([0.0, 0.6, 0.0]), clock=lambda: start_time)

        (task,) = simulator.tick([make_task(start_time, progress=50, steps=steps)])

        assert task.steps[0].progress == 100
        assert task.steps[0].status == TaskStatus.COMPLETE
        assert task.status == TaskStatus.RUNNING

    def test_task_at_97_clamps_and_completes(self, start_time, scripted_random) -> None:
        """Test overshooting 100 clamps and completes in the same tick."""
        simulator = ProgressSimulator(rng=scripted_random([0.9], fallback=0.0), clock=lambda: start_time)

        (task,) = simulator.tick([make_task(start_time, progress=97)])

        assert task.progress == 100
        assert task.status == TaskStatus.COMPLETE

    def test_task_at_97_below_cap_keeps_running(self, start_time, scripted_random) -> None:
        """Test a small increment near the cap leaves the task running."""
        simulator = ProgressSimulator(rng=scripted_random([0.1], fallback=0.0), clock=lambda: start_time)

        (task,) = simulator.tick([make_task(start_time, progress=97)])

        assert task.progress == pytest.approx(97.6)
        assert task.status == TaskStatus.RUNNING

    def test_all_steps_complete_completes_task(self, start_time, scripted_random) -> None:
        """Test a task whose steps are all complete finishes within one tick."""
        steps = [
            Step(name="A", status=TaskStatus.COMPLETE, llm="GPT-4", progress=100, duration="1m 0s"),
            Step(name="B", status=TaskStatus.COMPLETE, llm="Kimi K2", progress=100, duration="2m 0s"),
        ]
        simulator = ProgressSimulator(rng=scripted_random([0.0]), clock=lambda: start_time)

        (task,) = simulator.tick([make_task(start_time, progress=40, steps=steps)])

        assert task.status == TaskStatus.COMPLETE
        assert task.progress == 100
        assert [s.duration for s in task.steps] == ["1m 0s", "2m 0s"]

    def test_last_step_finishing_completes_task(self, start_time, scripted_random) -> None:
        """Test a task completes in the tick its final running step reaches 100."""
        steps = [
            Step(name="Done", status=TaskStatus.COMPLETE, llm="GPT-4", progress=100, duration="1m 0s"),
            Step(name="Finishing", status=TaskStatus.RUNNING, llm="Kimi K2", progress=99),
        ]
        simulator = ProgressSimulator(rng=scripted_random([0.0, 0.5]), clock=lambda: start_time)

        (task,) = simulator.tick([make_task(start_time, progress=40, steps=steps)])

        assert task.steps[1].status == TaskStatus.COMPLETE
        assert task.all_steps_complete()
        assert task.status == TaskStatus.COMPLETE
        assert task.progress == 100

    def test_task_without_steps_completes(self, start_time, scripted_random) -> None:
        """Test an empty pipeline counts as all steps complete."""
        simulator = ProgressSimulator(rng=scripted_random([0.0]), clock=lambda: start_time)

        (task,) = simulator.tick([make_task(start_time, progress=5, steps=[])])

        assert task.is_complete

    def test_module_level_tick(self, start_time, scripted_random) -> None:
        """Test the convenience tick uses the given time and random source."""
        now = start_time + timedelta(seconds=30)
        (task,) = tick([make_task(start_time)], rng=scripted_random(), now=now)

        assert task.duration == "30s"
        assert task.progress == 50


# =============================================================================
# PROPERTIES OVER MANY TICKS
# =============================================================================


class TestSimulationProperties:
    """Invariants that hold for any number of ticks."""

    @pytest.mark.parametrize("seed", [0, 1, 7, 42])
    def test_progress_bounded_and_complete_is_terminal(self, start_time, seed) -> None:
        """Test progress stays in [0, 100] and complete tasks never change again."""
        elapsed = [0]

        def clock() -> datetime:
            elapsed[0] += 1
            return start_time + timedelta(seconds=elapsed[0])

        simulator = ProgressSimulator(rng=random.Random(seed), clock=clock)
        tasks = [make_task(start_time, progress=p, id=i) for i, p in enumerate([5, 50, 97], start=1)]
        finished: dict[int, Task] = {}

        for _ in range(300):
            tasks = simulator.tick(tasks)
            for task in tasks:
                assert 0 <= task.progress <= 100
                for step in task.steps:
                    if step.progress is not None:
                        assert 0 <= step.progress <= 100
                    if step.status == TaskStatus.QUEUED:
                        assert step.progress is None
                        assert step.duration is None
                if task.id in finished:
                    assert task is finished[task.id]
                elif task.is_complete:
                    assert task.progress == 100
                    finished[task.id] = task

        assert len(finished) == 3

    def test_running_step_progress_never_decreases(self, start_time) -> None:
        """Test step progress is monotonically non-decreasing."""
        simulator = ProgressSimulator(rng=random.Random(3), clock=lambda: start_time)
        tasks = [make_task(start_time, progress=11)]
        previous = [s.progress or 0 for s in tasks[0].steps]

        for _ in range(50):
            tasks = simulator.tick(tasks)
            current = [s.progress or 0 for s in tasks[0].steps]
            assert all(c >= p for c, p in zip(current, previous, strict=True))
            previous = current
