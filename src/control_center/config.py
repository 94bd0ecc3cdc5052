"""Configuration module for control-center.

Contains the CenterConfig dataclass, collaborator path resolution,
config loading from YAML, and config building from CLI arguments.
"""

import argparse
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

import yaml

# === Constants ===

# Configuration file path (relative to project root)
CONFIG_FILE = Path(".claude/control-center.yaml")

# Number of events shown in the event panel
EVENT_DISPLAY_COUNT = 5


# === Path Resolution ===


def resolve_path(
    candidates: Sequence[Path],
    exists: Callable[[Path], bool] = Path.exists,
) -> Path:
    """Return the first candidate that exists, else the last one.

    Args:
        candidates: Paths to probe, in priority order. Must not be empty.
        exists: Existence predicate (injected in tests).

    Returns:
        The resolved path.
    """
    if not candidates:
        raise ValueError("resolve_path needs at least one candidate")
    for candidate in candidates:
        if exists(candidate):
            return candidate
    return candidates[-1]


# === CenterConfig ===


@dataclass
class CenterConfig:
    """Dashboard configuration"""

    # Paths
    project_root: Path = Path(".")
    orchestrator_script: Path | None = None  # None = probe default locations
    tasks_file: Path | None = None  # None = probe default locations
    logs_dir: Path = Path(".claude/logs")

    # Orchestrator invocation
    interpreter: str = "bash"
    command_timeout_seconds: int = 120
    auto_confirm: bool = True  # ORCH_AUTO_CONFIRM=yes
    use_ai: bool = False  # USE_AI=true|false
    auto_launch_on_add: bool = False  # ORCH_NO_AUTO_LAUNCH=yes when False

    # Dashboard
    event_log_limit: int = 100  # Retained events (display shows EVENT_DISPLAY_COUNT)
    tick_seconds: float = 0.1  # Spinner tick interval

    log_level: str = "info"

    def __post_init__(self):
        """Resolve project_root and make relative paths absolute."""
        self.project_root = self.project_root.resolve()
        if not self.logs_dir.is_absolute():
            self.logs_dir = self.project_root / self.logs_dir
        if self.orchestrator_script is not None and not self.orchestrator_script.is_absolute():
            self.orchestrator_script = self.project_root / self.orchestrator_script
        if self.tasks_file is not None and not self.tasks_file.is_absolute():
            self.tasks_file = self.project_root / self.tasks_file

    def script_candidates(self) -> list[Path]:
        """Orchestrator script locations in probe order."""
        return [
            self.project_root / ".claude" / "scripts" / "orchestrator.sh",
            # Binary installed in .claude/bin, scripts are adjacent
            self.project_root.parent / "scripts" / "orchestrator.sh",
        ]

    def tasks_candidates(self) -> list[Path]:
        """Task document locations in probe order."""
        return [
            self.project_root / ".claude" / "tasks.json",
            self.project_root.parent / "tasks.json",
        ]

    def resolve_script(self, exists: Callable[[Path], bool] = Path.exists) -> Path:
        if self.orchestrator_script is not None:
            return self.orchestrator_script
        return resolve_path(self.script_candidates(), exists)

    def resolve_tasks_file(self, exists: Callable[[Path], bool] = Path.exists) -> Path:
        if self.tasks_file is not None:
            return self.tasks_file
        return resolve_path(self.tasks_candidates(), exists)

    def tool_env(self) -> dict[str, str]:
        """Environment toggles understood by the orchestrator script."""
        return {
            "ORCH_AUTO_CONFIRM": "yes" if self.auto_confirm else "no",
            "USE_AI": "true" if self.use_ai else "false",
            "ORCH_NO_AUTO_LAUNCH": "no" if self.auto_launch_on_add else "yes",
        }


# === Config Loading ===


def load_config_from_yaml(config_path: Path = CONFIG_FILE) -> dict:
    """Load configuration from YAML file.

    Args:
        config_path: Path to the configuration file.

    Returns:
        Dictionary with configuration values (None for unset keys).
    """
    if not config_path.exists():
        return {}

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        section = data.get("control_center", {}) or {}
        orchestrator = section.get("orchestrator", {}) or {}
        paths = section.get("paths", {}) or {}

        return {
            "project_root": Path(paths["root"]) if paths.get("root") else None,
            "orchestrator_script": Path(paths["script"]) if paths.get("script") else None,
            "tasks_file": Path(paths["tasks"]) if paths.get("tasks") else None,
            "logs_dir": Path(paths["logs"]) if paths.get("logs") else None,
            "interpreter": orchestrator.get("interpreter"),
            "command_timeout_seconds": orchestrator.get("timeout_seconds"),
            "auto_confirm": orchestrator.get("auto_confirm"),
            "use_ai": orchestrator.get("use_ai"),
            "auto_launch_on_add": orchestrator.get("auto_launch_on_add"),
            "event_log_limit": section.get("event_log_limit"),
            "tick_seconds": section.get("tick_seconds"),
            "log_level": section.get("log_level"),
        }
    except (OSError, yaml.YAMLError, AttributeError) as e:
        print(f"⚠️  Warning: Failed to load config from {config_path}: {e}")
        return {}


def build_config(yaml_config: dict, args: argparse.Namespace) -> CenterConfig:
    """Build CenterConfig from YAML and CLI arguments.

    CLI arguments override YAML config.

    Args:
        yaml_config: Configuration loaded from YAML file.
        args: Parsed CLI arguments.

    Returns:
        CenterConfig instance.
    """
    config_kwargs = {}

    # Apply YAML config (only non-None values)
    for key, value in yaml_config.items():
        if value is not None:
            config_kwargs[key] = value

    # Override with CLI arguments
    if getattr(args, "project_root", None):
        config_kwargs["project_root"] = Path(args.project_root)
    if getattr(args, "script", None):
        config_kwargs["orchestrator_script"] = Path(args.script)
    if getattr(args, "tasks_file", None):
        config_kwargs["tasks_file"] = Path(args.tasks_file)
    if getattr(args, "log_level", None):
        config_kwargs["log_level"] = args.log_level
    if getattr(args, "timeout", None):
        config_kwargs["command_timeout_seconds"] = args.timeout

    return CenterConfig(**config_kwargs)
