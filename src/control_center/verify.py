"""End-to-end lifecycle check against a real orchestrator.

Drives one task through add -> start -> complete (and optionally stop and
remove) and checks after every step that the task has exactly the
expected status and that no other task changed.
"""

from dataclasses import dataclass, field

from .logging import get_logger
from .orchestrator import Orchestrator
from .task import Snapshot, Task, TaskStatus

logger = get_logger("verify")

DEFAULT_DESCRIPTION = "Integration Test Task"


class ScenarioError(Exception):
    """A lifecycle step did not produce the expected task state."""


@dataclass
class ScenarioReport:
    """What the scenario observed."""

    task_id: int | None = None
    steps: list[str] = field(default_factory=list)

    def record(self, step: str) -> None:
        self.steps.append(step)
        logger.info(step, task_id=self.task_id)


def _others(snapshot: Snapshot, task_id: int) -> dict[int, TaskStatus]:
    return {t.id: t.status for t in snapshot if t.id != task_id}


def _expect(
    snapshot: Snapshot,
    task_id: int,
    status: TaskStatus,
    before: dict[int, TaskStatus],
) -> Task:
    task = snapshot.get(task_id)
    if task is None:
        raise ScenarioError(f"task #{task_id} lost, expected status {status.value!r}")
    if task.status is not status:
        raise ScenarioError(
            f"task #{task_id}: expected status {status.value!r}, got {task.status.value!r}"
        )
    after = _others(snapshot, task_id)
    if after != before:
        changed = sorted(i for i in before.keys() | after.keys() if before.get(i) != after.get(i))
        raise ScenarioError(f"unrelated tasks changed: {changed}")
    return task


def find_new_task(before: Snapshot, after: Snapshot, description: str) -> Task | None:
    """The pending task matching `description` that was not in `before`."""
    known = {t.id for t in before}
    for task in after:
        if (
            task.id not in known
            and task.status is TaskStatus.PENDING
            and task.description.casefold() == description.casefold()
        ):
            return task
    return None


def run_scenario(
    orchestrator: Orchestrator,
    description: str = DEFAULT_DESCRIPTION,
    full: bool = False,
) -> ScenarioReport:
    """Run the lifecycle scenario.

    Args:
        orchestrator: Gateway to exercise.
        description: Description of the throwaway task.
        full: Stop the task instead of completing it, then remove it and
            check it is gone from the snapshot.

    Returns:
        ScenarioReport listing the passed steps.

    Raises:
        ScenarioError: A check failed.
        GatewayError: The store or the orchestrator failed.
    """
    report = ScenarioReport()

    before = orchestrator.fetch()
    after = orchestrator.add(description)
    task = find_new_task(before, after, description)
    if task is None:
        raise ScenarioError(f"task {description!r} not found after adding")
    report.task_id = task.id
    report.record(f"Task added (#{task.id})")

    baseline = _others(after, task.id)
    snapshot = orchestrator.start(task.id)
    _expect(snapshot, task.id, TaskStatus.IN_PROGRESS, baseline)
    report.record("Task started (in_progress)")

    if not full:
        snapshot = orchestrator.complete(task.id)
        _expect(snapshot, task.id, TaskStatus.COMPLETED, baseline)
        report.record("Task completed (completed)")
        return report

    snapshot = orchestrator.stop(task.id)
    stopped = snapshot.get(task.id)
    if stopped is None:
        raise ScenarioError(f"task #{task.id} lost after stopping")
    report.record(f"Task stopped ({stopped.status.value})")

    snapshot = orchestrator.remove(task.id)
    if snapshot.get(task.id) is not None:
        raise ScenarioError(f"task #{task.id} still exists after removal")
    if _others(snapshot, task.id) != baseline:
        raise ScenarioError("unrelated tasks changed during removal")
    report.record("Task removed")
    return report
