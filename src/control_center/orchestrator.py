"""Orchestrator script gateway.

Every task mutation goes through the external orchestrator script. A
successful call re-reads the task document so callers always get the
post-mutation snapshot.
"""

import os
import subprocess
from enum import Enum
from pathlib import Path

from .config import CenterConfig
from .errors import CommandError, Diagnostic
from .logging import get_logger
from .store import TaskStore
from .task import Snapshot

logger = get_logger("orchestrator")


class Verb(str, Enum):
    """Orchestrator subcommands used by the dashboard."""

    ADD = "add"
    START = "start"
    STOP = "stop"
    COMPLETE = "complete"
    REMOVE = "remove-task"
    LOGS = "logs-tui"

    @property
    def label(self) -> str:
        """Human name used in failure messages ("remove task failed")."""
        return "remove" if self is Verb.REMOVE else self.value


def build_command(
    interpreter: str,
    script: Path,
    verb: Verb,
    *args: str,
) -> list[str]:
    """Build the argv for one orchestrator call.

    Args:
        interpreter: Program that runs the script (usually "bash").
        script: Path to the orchestrator script.
        verb: Subcommand.
        *args: Positional arguments (description or task id).

    Returns:
        List of command arguments ready for subprocess.
    """
    return [interpreter, str(script), verb.value, *args]


class Orchestrator:
    """Runs orchestrator subcommands and returns refreshed snapshots."""

    def __init__(self, config: CenterConfig, store: TaskStore | None = None):
        self.config = config
        self.script = config.resolve_script()
        self.store = store or TaskStore(config.resolve_tasks_file())

    # === Queries ===

    def fetch(self) -> Snapshot:
        return self.store.fetch()

    # === Mutations ===

    def add(self, description: str) -> Snapshot:
        return self._mutate(Verb.ADD, description)

    def start(self, task_id: int) -> Snapshot:
        return self._mutate(Verb.START, str(task_id))

    def stop(self, task_id: int) -> Snapshot:
        return self._mutate(Verb.STOP, str(task_id))

    def complete(self, task_id: int) -> Snapshot:
        return self._mutate(Verb.COMPLETE, str(task_id))

    def remove(self, task_id: int) -> Snapshot:
        return self._mutate(Verb.REMOVE, str(task_id))

    def log_viewer_command(self) -> list[str]:
        """Argv for the interactive log viewer (needs the real terminal)."""
        return build_command(self.config.interpreter, self.script, Verb.LOGS, "-f")

    # === Internals ===

    def _mutate(self, verb: Verb, *args: str) -> Snapshot:
        self.run(verb, *args)
        return self.fetch()

    def run(self, verb: Verb, *args: str) -> str:
        """Run one subcommand and return its combined output.

        Raises:
            CommandError: Non-zero exit, launch failure or timeout.
        """
        cmd = build_command(self.config.interpreter, self.script, verb, *args)
        env = dict(os.environ)
        if verb is Verb.ADD:
            # Toggles only steer add; other verbs keep the script defaults
            env.update(self.config.tool_env())
        failure = f"{verb.label} task failed"

        logger.info("Running orchestrator", verb=verb.value, args=list(args))
        try:
            result = subprocess.run(
                cmd,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                errors="replace",
                cwd=self.config.project_root,
                env=env,
                timeout=self.config.command_timeout_seconds,
            )
        except subprocess.TimeoutExpired as e:
            output = e.output or ""
            if isinstance(output, bytes):
                output = output.decode(errors="replace")
            logger.error("Orchestrator timed out", verb=verb.value, timeout=e.timeout)
            raise CommandError(
                Diagnostic(f"{failure}: timed out after {e.timeout}s", output=output)
            ) from e
        except OSError as e:
            logger.error("Orchestrator could not be launched", verb=verb.value, error=str(e))
            raise CommandError(Diagnostic(f"{failure}: {e}")) from e

        if result.returncode != 0:
            logger.error(
                "Orchestrator failed",
                verb=verb.value,
                returncode=result.returncode,
                output=result.stdout,
            )
            raise CommandError(
                Diagnostic(
                    f"{failure}: exit status {result.returncode}",
                    output=result.stdout or "",
                    returncode=result.returncode,
                )
            )

        logger.debug("Orchestrator finished", verb=verb.value, output=result.stdout)
        return result.stdout or ""
