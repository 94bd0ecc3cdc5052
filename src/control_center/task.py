"""Task records as published by the orchestrator's task document.

A Snapshot is the whole task list read at one instant. It is never patched
in place; the next fetch replaces it.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum


class TaskStatus(str, Enum):
    """Lifecycle status of a task, as written by the orchestrator."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


# Statuses listed in each dashboard projection
PENDING_STATUSES = frozenset({TaskStatus.PENDING})
ACTIVE_STATUSES = frozenset({TaskStatus.IN_PROGRESS, TaskStatus.FAILED})


class SnapshotError(ValueError):
    """Raised when task records violate the document invariants."""


@dataclass(frozen=True)
class Task:
    """A single orchestrator task."""

    id: int
    description: str
    status: TaskStatus
    agent: str = ""
    priority: str = ""

    @classmethod
    def from_dict(cls, data: object) -> "Task":
        """Build a Task from one JSON record.

        Raises:
            SnapshotError: If a field is missing or has the wrong type.
        """
        if not isinstance(data, dict):
            raise SnapshotError(f"task record must be an object, got {type(data).__name__}")

        task_id = data.get("id")
        # bool is an int subclass; "id": true is not an id
        if not isinstance(task_id, int) or isinstance(task_id, bool):
            raise SnapshotError(f"task id must be an integer, got {task_id!r}")

        raw_status = data.get("status")
        try:
            status = TaskStatus(raw_status)
        except ValueError:
            raise SnapshotError(f"task #{task_id} has unknown status {raw_status!r}") from None

        fields = {}
        for name in ("description", "agent", "priority"):
            value = data.get(name)
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise SnapshotError(f"task #{task_id} field {name!r} must be a string")
            fields[name] = value

        return cls(id=task_id, status=status, **fields)


@dataclass(frozen=True)
class Snapshot:
    """Ordered, immutable set of tasks read atomically from the store."""

    tasks: tuple[Task, ...] = ()

    def __post_init__(self):
        seen: set[int] = set()
        for task in self.tasks:
            if task.id in seen:
                raise SnapshotError(f"duplicate task id #{task.id}")
            seen.add(task.id)

    def __iter__(self):
        return iter(self.tasks)

    def __len__(self) -> int:
        return len(self.tasks)

    @classmethod
    def from_records(cls, records: Iterable[object]) -> "Snapshot":
        return cls(tuple(Task.from_dict(r) for r in records))

    def get(self, task_id: int) -> Task | None:
        """Return the task with the given id, or None."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def with_status(self, statuses: Iterable[TaskStatus]) -> list[Task]:
        """Tasks whose status is in `statuses`, in snapshot order."""
        wanted = frozenset(statuses)
        return [t for t in self.tasks if t.status in wanted]

    def pending(self) -> list[Task]:
        return self.with_status(PENDING_STATUSES)

    def active(self) -> list[Task]:
        return self.with_status(ACTIVE_STATUSES)


@dataclass(frozen=True)
class TaskItem:
    """A row in one of the dashboard lists.

    The task id travels next to the label so selection never has to parse it
    back out of display text.
    """

    task_id: int
    title: str
    description: str
    failed: bool = False


def task_item(task: Task) -> TaskItem:
    """Build the list row for a task."""
    prefix = "[FAILED] " if task.status is TaskStatus.FAILED else ""
    title = f"{prefix}#{task.id} {task.agent}".rstrip()
    return TaskItem(
        task_id=task.id,
        title=title,
        description=task.description,
        failed=task.status is TaskStatus.FAILED,
    )


def project(snapshot: Snapshot | None) -> tuple[list[TaskItem], list[TaskItem]]:
    """Compute the (pending, active) list rows for a snapshot."""
    if snapshot is None:
        return [], []
    return (
        [task_item(t) for t in snapshot.pending()],
        [task_item(t) for t in snapshot.active()],
    )
