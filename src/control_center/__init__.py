"""
control-center — terminal dashboard for the agent orchestrator.

Usage as library:
    from control_center import CenterConfig, Orchestrator
    from control_center import Dashboard, KeyPressed

Usage as CLI:
    control-center                 # Launch the dashboard
    control-center verify          # add -> start -> complete scenario
    control-center verify --full   # add -> start -> stop -> remove scenario
"""

from importlib.metadata import PackageNotFoundError, version

from .config import CenterConfig, build_config, load_config_from_yaml, resolve_path
from .dispatch import execute
from .errors import (
    CommandError,
    Diagnostic,
    GatewayError,
    StoreError,
    StoreMalformedError,
    StoreMissingError,
)
from .logging import get_logger, setup_logging
from .orchestrator import Orchestrator, Verb, build_command
from .state import (
    CommandFailed,
    Dashboard,
    FetchTasks,
    InputChanged,
    InputSubmitted,
    Intent,
    KeyPressed,
    LogViewerClosed,
    OpenLogViewer,
    Quit,
    RunCommand,
    SelectionMoved,
    SnapshotLoaded,
    Tab,
    Tick,
    ViewState,
)
from .store import TaskStore
from .task import Snapshot, Task, TaskItem, TaskStatus, project
from .verify import ScenarioError, ScenarioReport, run_scenario

try:
    __version__ = version("control-center")
except PackageNotFoundError:
    __version__ = "0.0.0.dev"  # Fallback for development without install
__all__ = [
    # Tasks
    "Task",
    "TaskStatus",
    "TaskItem",
    "Snapshot",
    "project",
    # Gateways
    "TaskStore",
    "Orchestrator",
    "Verb",
    "build_command",
    "execute",
    # Errors
    "Diagnostic",
    "GatewayError",
    "StoreError",
    "StoreMissingError",
    "StoreMalformedError",
    "CommandError",
    # Dashboard state
    "Dashboard",
    "ViewState",
    "Tab",
    "Intent",
    "KeyPressed",
    "InputChanged",
    "InputSubmitted",
    "SelectionMoved",
    "SnapshotLoaded",
    "CommandFailed",
    "Tick",
    "LogViewerClosed",
    "FetchTasks",
    "RunCommand",
    "OpenLogViewer",
    "Quit",
    # Config
    "CenterConfig",
    "build_config",
    "load_config_from_yaml",
    "resolve_path",
    # Verification
    "run_scenario",
    "ScenarioReport",
    "ScenarioError",
    # Logging
    "get_logger",
    "setup_logging",
]
