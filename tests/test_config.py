"""Tests for control_center.config module."""

from argparse import Namespace
from pathlib import Path

import pytest

from control_center.config import (
    EVENT_DISPLAY_COUNT,
    CenterConfig,
    build_config,
    load_config_from_yaml,
    resolve_path,
)


class TestCenterConfig:
    def test_defaults(self):
        c = CenterConfig()
        assert c.interpreter == "bash"
        assert c.command_timeout_seconds == 120
        assert c.event_log_limit == 100
        assert c.log_level == "info"

    def test_project_root_resolved_to_absolute(self):
        c = CenterConfig(project_root=Path("."))
        assert c.project_root.is_absolute()

    def test_logs_dir_resolved_under_root(self, tmp_path):
        c = CenterConfig(project_root=tmp_path)
        assert c.logs_dir == tmp_path / ".claude" / "logs"

    def test_relative_script_resolved_under_root(self, tmp_path):
        c = CenterConfig(project_root=tmp_path, orchestrator_script=Path("bin/orch.sh"))
        assert c.orchestrator_script == tmp_path / "bin" / "orch.sh"

    def test_display_count_is_five(self):
        assert EVENT_DISPLAY_COUNT == 5


class TestToolEnv:
    def test_default_toggles(self):
        env = CenterConfig().tool_env()
        assert env == {
            "ORCH_AUTO_CONFIRM": "yes",
            "USE_AI": "false",
            "ORCH_NO_AUTO_LAUNCH": "yes",
        }

    def test_auto_launch_enabled(self):
        env = CenterConfig(auto_launch_on_add=True, use_ai=True).tool_env()
        assert env["ORCH_NO_AUTO_LAUNCH"] == "no"
        assert env["USE_AI"] == "true"


class TestResolvePath:
    def test_first_existing_wins(self):
        a, b, c = Path("/a"), Path("/b"), Path("/c")
        assert resolve_path([a, b, c], exists=lambda p: p in {b, c}) == b

    def test_falls_back_to_last(self):
        a, b = Path("/a"), Path("/b")
        assert resolve_path([a, b], exists=lambda p: False) == b

    def test_empty_candidates_rejected(self):
        with pytest.raises(ValueError):
            resolve_path([])

    def test_script_probe_order(self, tmp_path):
        root = tmp_path / "project"
        c = CenterConfig(project_root=root)
        local = root / ".claude" / "scripts" / "orchestrator.sh"
        installed = tmp_path / "scripts" / "orchestrator.sh"
        assert c.script_candidates() == [local, installed]
        assert c.resolve_script(exists=lambda p: True) == local
        assert c.resolve_script(exists=lambda p: p == installed) == installed
        assert c.resolve_script(exists=lambda p: False) == installed

    def test_explicit_script_is_not_probed(self, tmp_path):
        script = tmp_path / "custom.sh"
        c = CenterConfig(project_root=tmp_path, orchestrator_script=script)
        assert c.resolve_script(exists=lambda p: False) == script

    def test_tasks_probe_order(self, tmp_path):
        root = tmp_path / "project"
        c = CenterConfig(project_root=root)
        local = root / ".claude" / "tasks.json"
        installed = tmp_path / "tasks.json"
        assert c.resolve_tasks_file(exists=lambda p: p == local) == local
        assert c.resolve_tasks_file(exists=lambda p: p == installed) == installed

    def test_real_filesystem_probe(self, tmp_path):
        script = tmp_path / ".claude" / "scripts" / "orchestrator.sh"
        script.parent.mkdir(parents=True)
        script.write_text("#!/bin/bash\n")
        assert CenterConfig(project_root=tmp_path).resolve_script() == script


class TestLoadConfigFromYaml:
    def test_returns_empty_dict_for_missing_file(self, tmp_path):
        assert load_config_from_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_loads_yaml_values(self, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text(
            "control_center:\n"
            "  log_level: debug\n"
            "  event_log_limit: 20\n"
            "  orchestrator:\n"
            "    interpreter: sh\n"
            "    timeout_seconds: 30\n"
            "    auto_launch_on_add: true\n"
            "  paths:\n"
            "    script: tools/orch.sh\n"
        )
        result = load_config_from_yaml(cfg)
        assert result["log_level"] == "debug"
        assert result["event_log_limit"] == 20
        assert result["interpreter"] == "sh"
        assert result["command_timeout_seconds"] == 30
        assert result["auto_launch_on_add"] is True
        assert result["orchestrator_script"] == Path("tools/orch.sh")
        assert result["tasks_file"] is None

    def test_returns_empty_dict_for_invalid_yaml(self, tmp_path):
        cfg = tmp_path / "config.yaml"
        cfg.write_text(": invalid: yaml: [")
        assert load_config_from_yaml(cfg) == {}


class TestBuildConfig:
    def _default_args(self, **overrides) -> Namespace:
        """Create a Namespace with default CLI arg values."""
        defaults = {
            "project_root": "",
            "script": "",
            "tasks_file": "",
            "timeout": None,
            "log_level": None,
        }
        defaults.update(overrides)
        return Namespace(**defaults)

    def test_yaml_overrides_defaults(self):
        config = build_config({"event_log_limit": 7, "use_ai": None}, self._default_args())
        assert config.event_log_limit == 7
        assert config.use_ai is False

    def test_cli_overrides_yaml(self):
        config = build_config({"log_level": "warning"}, self._default_args(log_level="debug"))
        assert config.log_level == "debug"

    def test_cli_paths(self, tmp_path):
        args = self._default_args(
            project_root=str(tmp_path),
            script=str(tmp_path / "orch.sh"),
            tasks_file=str(tmp_path / "tasks.json"),
            timeout=5,
        )
        config = build_config({}, args)
        assert config.project_root == tmp_path.resolve()
        assert config.orchestrator_script == tmp_path / "orch.sh"
        assert config.tasks_file == tmp_path / "tasks.json"
        assert config.command_timeout_seconds == 5
