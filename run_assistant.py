"""CLI entry point for the task assistant."""

import argparse
import dataclasses
import json
import sys
from datetime import date
from pathlib import Path

from dotenv import load_dotenv

from src.config import STORE_CHOICES, AssistantSettings
from src.logging_config import configure_logging
from src.orchestrator import TaskAssistantOrchestrator


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid date {value!r}, expected YYYY-MM-DD")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Manage tasks with natural-language commands")
    parser.add_argument(
        "command",
        nargs="*",
        help='Command to run, e.g. "Add task: Buy groceries due tomorrow"',
    )
    parser.add_argument(
        "--suggest",
        action="store_true",
        help="Print command suggestions for the current tasks",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the current tasks with dashboard suggestions",
    )
    parser.add_argument(
        "--store",
        choices=STORE_CHOICES,
        default=None,
        help="Task store backend (overrides TASK_STORE env var)",
    )
    parser.add_argument(
        "--tasks-file",
        type=Path,
        default=None,
        help="JSON task file (overrides TASKS_FILE env var)",
    )
    parser.add_argument(
        "--no-model",
        action="store_true",
        help="Interpret with local rules only",
    )
    parser.add_argument(
        "--today",
        type=_parse_date,
        default=None,
        help="Reference date for relative dates (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print machine-readable JSON",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Set logging level (overrides LOG_LEVEL env var)",
    )
    return parser


def _settings_from_args(args: argparse.Namespace) -> AssistantSettings:
    settings = AssistantSettings.from_env()
    overrides = {}
    if args.store:
        overrides["store"] = args.store
    if args.tasks_file:
        overrides["tasks_file"] = args.tasks_file
    if args.no_model:
        overrides["use_model"] = False
    return dataclasses.replace(settings, **overrides)


def _print_dashboard(orchestrator: TaskAssistantOrchestrator, today: date | None, as_json: bool) -> None:
    tasks, suggestions = orchestrator.dashboard(today=today)
    if as_json:
        print(
            json.dumps(
                {"tasks": [t.to_dict() for t in tasks], "suggestions": suggestions},
                indent=2,
            )
        )
        return
    if not tasks:
        print("No tasks.")
    for task in tasks:
        mark = "x" if task.is_completed else " "
        due = f" (due {task.due_date.isoformat()})" if task.due_date else ""
        print(f"[{mark}] {task.title} [{task.priority.value}]{due}  id={task.id}")
    if suggestions:
        print()
        print("Try:")
        for suggestion in suggestions:
            print(f"- {suggestion}")


def main(argv: list[str] | None = None) -> int:
    load_dotenv()

    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(level_override=args.log_level)

    command = " ".join(args.command).strip()
    if not command and not args.suggest and not args.list:
        parser.error("a command, --suggest or --list is required")

    orchestrator = TaskAssistantOrchestrator(settings=_settings_from_args(args))

    if args.list:
        _print_dashboard(orchestrator, args.today, args.json)
        return 0

    if args.suggest:
        suggestions = orchestrator.suggest(today=args.today)
        if args.json:
            print(json.dumps({"suggestions": suggestions}, indent=2))
        else:
            for suggestion in suggestions:
                print(f"- {suggestion}")
        return 0

    run = orchestrator.run_command(command, today=args.today)

    if args.json:
        print(json.dumps(run.to_dict(), indent=2, default=str))
        return 0 if run.success else 1

    print(run.result.message)
    for operation in run.result.operations:
        if operation.message:
            print(f"  - {operation.message}")
    if run.report and run.report.errors:
        for err in run.report.errors:
            print(f"ERROR: {err}", file=sys.stderr)

    return 0 if run.success else 1


if __name__ == "__main__":
    sys.exit(main())
