"""CLI commands and argument parsing for control-center."""

import argparse
import sys
from datetime import datetime
from pathlib import Path
from uuid import uuid4

import structlog

from .config import CONFIG_FILE, CenterConfig, build_config, load_config_from_yaml
from .errors import GatewayError
from .logging import get_logger, setup_logging
from .orchestrator import Orchestrator
from .verify import DEFAULT_DESCRIPTION, ScenarioError, run_scenario

logger = get_logger("cli")


# === CLI Commands ===


def cmd_run(args: argparse.Namespace, config: CenterConfig) -> int:
    """Launch the interactive dashboard."""
    from .tui import ControlCenterApp

    # TUI mode: log to file, TUI owns screen
    stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_file = config.logs_dir / f"control-center-{stamp}.log"
    setup_logging(
        level=config.log_level,
        json_output=getattr(args, "log_json", False),
        log_file=log_file,
        tui_mode=True,
    )
    logger.info(
        "Starting dashboard",
        project_root=str(config.project_root),
        script=str(config.resolve_script()),
        tasks_file=str(config.resolve_tasks_file()),
    )

    try:
        app = ControlCenterApp(config=config)
        app.run()
    except Exception as e:
        logger.exception("Dashboard crashed")
        print(f"Alas, there's been an error: {e}", file=sys.stderr)
        return 1

    return app.return_code or 0


def cmd_verify(args: argparse.Namespace, config: CenterConfig) -> int:
    """Run the lifecycle scenario against the real orchestrator."""
    setup_logging(level=config.log_level, json_output=getattr(args, "log_json", False))

    orchestrator = Orchestrator(config)
    print(f"Running scenario test in {config.project_root}")
    print(f">> Using {orchestrator.script}")
    try:
        report = run_scenario(orchestrator, description=args.description, full=args.full)
    except ScenarioError as e:
        print(f"FAILED: {e}")
        return 1
    except GatewayError as e:
        print(f"Command Failed: {e}")
        return 1

    for step in report.steps:
        print(f">> {step}")
    print(">> FULL VERIFICATION PASSED" if args.full else ">> SCENARIO TEST PASSED")
    return 0


# === Main ===


def build_parser() -> argparse.ArgumentParser:
    # Shared options available to every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--project-root",
        type=str,
        default="",
        help="Project root directory (default: current directory)",
    )
    common.add_argument(
        "--script",
        type=str,
        default="",
        help="Orchestrator script (default: .claude/scripts/orchestrator.sh)",
    )
    common.add_argument(
        "--tasks-file",
        type=str,
        default="",
        help="Task document (default: .claude/tasks.json)",
    )
    common.add_argument(
        "--timeout",
        type=int,
        default=None,
        help="Orchestrator call timeout in seconds (default: 120)",
    )
    common.add_argument(
        "--log-level",
        type=str,
        default=None,
        choices=["debug", "info", "warning", "error"],
        help="Log level (default: info)",
    )
    common.add_argument(
        "--log-json",
        action="store_true",
        help="Output logs as JSON lines",
    )

    parser = argparse.ArgumentParser(
        prog="control-center",
        description="control-center — terminal dashboard for the agent orchestrator",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        parents=[common],
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # run
    subparsers.add_parser("run", parents=[common], help="Launch the dashboard (default)")

    # verify
    verify_parser = subparsers.add_parser(
        "verify", parents=[common], help="Run the task lifecycle scenario"
    )
    verify_parser.add_argument(
        "--full",
        action="store_true",
        help="Start, stop and remove the task instead of completing it",
    )
    verify_parser.add_argument(
        "--description",
        default=DEFAULT_DESCRIPTION,
        help=f'Description of the scenario task (default: "{DEFAULT_DESCRIPTION}")',
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    command = args.command or "run"

    # Load config from YAML file, then override with CLI args
    yaml_config = load_config_from_yaml(Path(args.project_root or ".") / CONFIG_FILE)
    config = build_config(yaml_config, args)

    structlog.contextvars.bind_contextvars(run_id=uuid4().hex[:8])

    commands = {
        "run": cmd_run,
        "verify": cmd_verify,
    }
    sys.exit(commands[command](args, config))


if __name__ == "__main__":
    main()
