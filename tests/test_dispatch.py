"""Tests for control_center.dispatch module."""

from unittest.mock import MagicMock

import pytest

from control_center.config import CenterConfig
from control_center.dispatch import execute
from control_center.errors import CommandError, Diagnostic, StoreMissingError
from control_center.orchestrator import Orchestrator, Verb
from control_center.state import CommandFailed, FetchTasks, RunCommand, SnapshotLoaded
from control_center.task import Snapshot


@pytest.fixture
def orchestrator():
    orch = MagicMock(spec=Orchestrator)
    snapshot = Snapshot.from_records([{"id": 1, "status": "pending"}])
    for name in ("fetch", "add", "start", "stop", "complete", "remove"):
        getattr(orch, name).return_value = snapshot
    return orch


class TestExecute:
    def test_fetch(self, orchestrator):
        result = execute(FetchTasks(), orchestrator)
        assert isinstance(result, SnapshotLoaded)
        assert result.snapshot.get(1) is not None
        orchestrator.fetch.assert_called_once_with()

    def test_add_passes_description(self, orchestrator):
        execute(RunCommand(Verb.ADD, "Write docs"), orchestrator)
        orchestrator.add.assert_called_once_with("Write docs")

    @pytest.mark.parametrize(
        "verb,method",
        [
            (Verb.START, "start"),
            (Verb.STOP, "stop"),
            (Verb.COMPLETE, "complete"),
            (Verb.REMOVE, "remove"),
        ],
    )
    def test_task_verbs_pass_integer_id(self, orchestrator, verb, method):
        result = execute(RunCommand(verb, "12"), orchestrator)
        assert isinstance(result, SnapshotLoaded)
        getattr(orchestrator, method).assert_called_once_with(12)

    def test_command_error_becomes_failure(self, orchestrator):
        diag = Diagnostic("start task failed: exit status 1", output="nope", returncode=1)
        orchestrator.start.side_effect = CommandError(diag)
        result = execute(RunCommand(Verb.START, "1"), orchestrator)
        assert result == CommandFailed(diag)

    def test_store_error_becomes_failure(self, orchestrator):
        diag = Diagnostic("failed to read tasks.json: No such file or directory")
        orchestrator.fetch.side_effect = StoreMissingError(diag)
        result = execute(FetchTasks(), orchestrator)
        assert isinstance(result, CommandFailed)
        assert result.diagnostic.summary.startswith("failed to read")

    def test_log_viewer_verb_is_not_dispatchable(self, orchestrator):
        with pytest.raises(ValueError):
            execute(RunCommand(Verb.LOGS, ""), orchestrator)

    def test_undecodable_document_becomes_failure(self, tmp_path):
        path = tmp_path / ".claude" / "tasks.json"
        path.parent.mkdir()
        path.write_bytes(b'{"tasks": [{"id": 1, "description": "\xff\xfe", "status": "pending"}]}')
        orch = Orchestrator(CenterConfig(project_root=tmp_path))
        result = execute(FetchTasks(), orch)
        assert isinstance(result, CommandFailed)
        assert result.diagnostic.summary.startswith("failed to list tasks")
