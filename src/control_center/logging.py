"""Structured logging for control-center.

Configures structlog over stdlib logging. The dashboard owns the terminal,
so in TUI mode records go to a log file only. Orchestrator output is
attached to log records verbatim: it is masked for secrets and clipped
before rendering.
"""

import logging
import re
import sys
from pathlib import Path

import structlog

# API keys and tokens that agent tooling tends to echo
_SENSITIVE_RE = re.compile(r"(sk-|key-|token-|ghp_)[a-zA-Z0-9]{6,}", re.IGNORECASE)

MAX_FIELD_CHARS = 4000


def redact_sensitive(logger: object, method_name: str, event_dict: dict) -> dict:
    """Structlog processor that masks secrets in string values."""
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = _SENSITIVE_RE.sub(lambda m: m.group(1) + "***", value)
    return event_dict


def clip_long_values(logger: object, method_name: str, event_dict: dict) -> dict:
    """Structlog processor that keeps the tail of oversized string values."""
    for key, value in event_dict.items():
        if key != "event" and isinstance(value, str) and len(value) > MAX_FIELD_CHARS:
            dropped = len(value) - MAX_FIELD_CHARS
            event_dict[key] = f"[{dropped} chars clipped]...{value[-MAX_FIELD_CHARS:]}"
    return event_dict


def _handlers(log_file: Path | None, tui_mode: bool) -> list[logging.Handler]:
    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        return [logging.FileHandler(log_file)]
    if tui_mode:
        # Nothing may reach the terminal while the dashboard is on screen
        return [logging.NullHandler()]
    return [logging.StreamHandler(sys.stderr)]


def setup_logging(
    level: str = "info",
    json_output: bool = False,
    log_file: Path | None = None,
    tui_mode: bool = False,
) -> None:
    """Configure structlog for the entire application.

    Args:
        level: Log level (debug, info, warning, error).
        json_output: If True, output JSON lines.
        log_file: Write records here instead of stderr.
        tui_mode: The dashboard is on screen; without a log file records
            are dropped.
    """
    handlers = _handlers(log_file, tui_mode)
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=handlers,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            redact_sensitive,
            clip_long_values,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if json_output:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=log_file is None and not tui_mode)
    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    for handler in handlers:
        handler.setFormatter(formatter)


def get_logger(module: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger bound to a module name."""
    return structlog.get_logger(module=module)
