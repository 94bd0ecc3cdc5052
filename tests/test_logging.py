"""Tests for control_center.logging module."""

import logging

from control_center.logging import (
    MAX_FIELD_CHARS,
    clip_long_values,
    get_logger,
    redact_sensitive,
    setup_logging,
)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_setup_returns_none(self):
        assert setup_logging() is None

    def test_setup_with_json_mode(self):
        setup_logging(json_output=True)

    def test_setup_with_log_file(self, tmp_path):
        log_file = tmp_path / "logs" / "test.log"
        setup_logging(log_file=log_file)
        assert log_file.parent.exists()

    def test_console_mode_writes_to_stderr(self):
        setup_logging()
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert type(handlers[0]) is logging.StreamHandler

    def test_tui_mode_logs_to_file_only(self, tmp_path):
        log_file = tmp_path / "tui.log"
        setup_logging(tui_mode=True, log_file=log_file)
        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert isinstance(handlers[0], logging.FileHandler)

    def test_tui_mode_without_file_is_silent(self):
        setup_logging(tui_mode=True)
        handlers = logging.getLogger().handlers
        assert all(isinstance(h, logging.NullHandler) for h in handlers)

    def test_tui_mode_writes_records(self, tmp_path):
        log_file = tmp_path / "tui.log"
        setup_logging(tui_mode=True, log_file=log_file)
        get_logger("test").warning("Something happened", task_id=3)
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "Something happened" in log_file.read_text()


class TestGetLogger:
    """Tests for get_logger."""

    def test_returns_bound_logger(self):
        assert get_logger("test_module") is not None

    def test_logger_can_bind_task_id(self):
        logger = get_logger("orchestrator")
        assert logger.bind(task_id=7) is not None


class TestRedactSensitive:
    """Tests for redact_sensitive processor."""

    def test_redacts_sk_keys(self):
        event_dict = redact_sensitive(None, "info", {"output": "sk-abc123def456"})
        assert event_dict["output"] == "sk-***"

    def test_redacts_github_tokens(self):
        event_dict = redact_sensitive(None, "info", {"output": "push with ghp_abcdef123456"})
        assert "abcdef123456" not in event_dict["output"]

    def test_preserves_normal_values(self):
        event_dict = redact_sensitive(None, "info", {"event": "Tasks refreshed.", "count": 3})
        assert event_dict == {"event": "Tasks refreshed.", "count": 3}


class TestClipLongValues:
    """Tests for clip_long_values processor."""

    def test_keeps_tail_of_long_output(self):
        output = "x" * MAX_FIELD_CHARS + "last line"
        event_dict = clip_long_values(None, "error", {"output": output})
        assert event_dict["output"].endswith("last line")
        assert event_dict["output"].startswith("[9 chars clipped]...")

    def test_short_values_untouched(self):
        event_dict = clip_long_values(None, "info", {"output": "ok", "returncode": 1})
        assert event_dict == {"output": "ok", "returncode": 1}

    def test_event_text_never_clipped(self):
        event = "e" * (MAX_FIELD_CHARS + 1)
        assert clip_long_values(None, "info", {"event": event})["event"] == event
