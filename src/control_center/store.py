"""Read-only access to the orchestrator's task document."""

import json
from pathlib import Path

from .errors import Diagnostic, StoreMalformedError, StoreMissingError
from .logging import get_logger
from .task import Snapshot, SnapshotError

logger = get_logger("store")


class TaskStore:
    """Reads the task document. Every fetch re-reads the file."""

    def __init__(self, path: Path):
        self.path = path

    def fetch(self) -> Snapshot:
        """Read and validate the current task list.

        Returns:
            Snapshot of all tasks in document order.

        Raises:
            StoreMissingError: The document is absent or unreadable.
            StoreMalformedError: The document is not a valid task list.
        """
        try:
            raw = self.path.read_bytes()
        except OSError as e:
            raise StoreMissingError(
                Diagnostic(f"failed to read {self.path.name}: {e.strerror or e}")
            ) from e

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise StoreMalformedError(Diagnostic(f"failed to list tasks: {e}")) from e

        if not isinstance(data, dict) or not isinstance(data.get("tasks", []), list):
            raise StoreMalformedError(
                Diagnostic("failed to list tasks: expected an object with a 'tasks' list")
            )

        try:
            snapshot = Snapshot.from_records(data.get("tasks") or [])
        except SnapshotError as e:
            raise StoreMalformedError(Diagnostic(f"failed to list tasks: {e}")) from e

        logger.debug("Tasks read", path=str(self.path), count=len(snapshot))
        return snapshot
