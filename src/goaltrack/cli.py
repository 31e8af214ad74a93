# src/goaltrack/cli.py
"""
Command-line interface for goaltrack.

Operates on a durable JSON store so that state survives between invocations::

    goaltrack --store ~/goals --as <principal> goal add --title ... --description ... \\
        --start-date 2024-01-01 --target-date 2024-06-01
    goaltrack --store ~/goals milestone add <goal-id> --title ... --description ... --target-date ...
    goaltrack --store ~/goals --as <principal> goal embed <goal-id> <milestone-id>

Records are printed as JSON using the camelCase wire names. Exit codes:
0 on success, 1 when the operation returned an error, 2 on usage errors.
"""

import argparse
import json
import logging
import os
import sys
from typing import Any, List, Optional

from pydantic import BaseModel

from .config import GoalTrackConfig, StorageConfig, load_config
from .exceptions import ConfigError, StorageError
from .identity import Principal
from .logging_config import configure_logging, log_display
from .result import Err, Result
from .service import GoalTracker

logger = logging.getLogger(__name__)

PRINCIPAL_ENV_VAR = "GOALTRACK_PRINCIPAL"


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True)
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    return value


def _emit(result: Result, out=None) -> int:
    """
    Print an operation result and return the matching exit code.

    Records go to stdout as JSON; failures are logged for display on stderr.
    """
    out = out or sys.stdout
    if isinstance(result, Err):
        log_display(logger, logging.ERROR, "✗ %s: %s", result.kind.value, result.message)
        return 1
    print(json.dumps(_to_jsonable(result.value), indent=2), file=out)
    return 0


def _principal(text: str) -> Principal:
    try:
        return Principal.from_text(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _payload(parsed: argparse.Namespace, *fields: str) -> dict:
    return {name: getattr(parsed, name) for name in fields if getattr(parsed, name, None) is not None}


# =============================================================================
# CLI COMMANDS
# =============================================================================

def cmd_goal(tracker: GoalTracker, caller: Principal, parsed: argparse.Namespace) -> int:
    action = parsed.action
    if action == "add":
        return _emit(tracker.add_goal(caller, _payload(parsed, "title", "description", "start_date", "target_date")))
    if action == "update":
        return _emit(tracker.update_goal(
            caller, parsed.id, _payload(parsed, "title", "description", "start_date", "target_date")))
    if action == "delete":
        return _emit(tracker.delete_goal(caller, parsed.id))
    if action == "get":
        return _emit(tracker.get_goal(caller, parsed.id))
    if action == "list":
        return _emit(tracker.get_goals())
    if action == "search":
        return _emit(tracker.search_goal(parsed.text))
    if action == "by-user":
        return _emit(tracker.get_goals_by_user(parsed.owner))
    if action == "embed":
        return _emit(tracker.insert_milestone_into_goal(caller, parsed.goal_id, parsed.milestone_id))
    if action == "unembed":
        return _emit(tracker.remove_milestone_from_goal(caller, parsed.goal_id, parsed.milestone_id))
    raise ValueError(f"Unknown goal action: {action}")


def cmd_milestone(tracker: GoalTracker, caller: Principal, parsed: argparse.Namespace) -> int:
    action = parsed.action
    if action == "add":
        return _emit(tracker.add_milestone(parsed.goal_id, _payload(parsed, "title", "description", "target_date")))
    if action == "update":
        return _emit(tracker.update_milestone(parsed.id, _payload(parsed, "title", "description", "target_date")))
    if action == "delete":
        return _emit(tracker.delete_milestone(caller, parsed.id))
    if action == "get":
        return _emit(tracker.get_milestone(caller, parsed.id))
    if action == "list":
        return _emit(tracker.get_milestones())
    if action == "search":
        return _emit(tracker.search_milestone(parsed.text))
    if action == "by-goal":
        return _emit(tracker.get_milestones_by_goal(parsed.goal_id))
    if action == "complete":
        return _emit(tracker.mark_milestone_as_completed(parsed.id))
    if action == "incomplete":
        return _emit(tracker.mark_milestone_as_incomplete(parsed.id))
    raise ValueError(f"Unknown milestone action: {action}")


def cmd_info(config: GoalTrackConfig, caller: Principal, tracker: GoalTracker) -> int:
    info = {
        "storage": {
            "backend": config.storage.backend,
            "path": config.storage.path,
            "max_key_size": config.storage.max_key_size,
            "max_value_size": config.storage.max_value_size,
        },
        "principal": caller.to_text(),
        "goals": len(tracker.get_goals().unwrap()),
        "milestones": len(tracker.get_milestones().unwrap()),
    }
    print(json.dumps(info, indent=2))
    return 0


# =============================================================================
# MAIN CLI ENTRY POINT
# =============================================================================

def _add_goal_fields(parser: argparse.ArgumentParser, required: bool) -> None:
    parser.add_argument("--title", required=required)
    parser.add_argument("--description", required=required)
    parser.add_argument("--start-date", dest="start_date", required=required)
    parser.add_argument("--target-date", dest="target_date", required=required)


def _add_milestone_fields(parser: argparse.ArgumentParser, required: bool) -> None:
    parser.add_argument("--title", required=required)
    parser.add_argument("--description", required=required)
    parser.add_argument("--target-date", dest="target_date", required=required)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the goaltrack CLI."""
    parser = argparse.ArgumentParser(prog="goaltrack", description="Goal and milestone tracking")
    parser.add_argument("--config", "-c", help="Path to a TOML configuration file", default=None)
    parser.add_argument("--store", help="Directory of the JSON store (overrides storage.path)", default=None)
    parser.add_argument(
        "--as", dest="principal", type=_principal, default=None,
        help=f"Caller principal text (default: ${PRINCIPAL_ENV_VAR}, else anonymous)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log to the console")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # goal commands
    goal_parser = subparsers.add_parser("goal", help="Goal operations")
    goal_actions = goal_parser.add_subparsers(dest="action", required=True)
    _add_goal_fields(goal_actions.add_parser("add", help="Create a goal owned by the caller"), required=True)
    update = goal_actions.add_parser("update", help="Edit a goal's fields")
    update.add_argument("id")
    _add_goal_fields(update, required=False)
    for name in ("delete", "get"):
        goal_actions.add_parser(name).add_argument("id")
    goal_actions.add_parser("list", help="List all goals")
    goal_actions.add_parser("search", help="Search titles and descriptions").add_argument("text")
    goal_actions.add_parser("by-user", help="Goals owned by a principal").add_argument("owner", type=_principal)
    for name in ("embed", "unembed"):
        embed = goal_actions.add_parser(name)
        embed.add_argument("goal_id")
        embed.add_argument("milestone_id")

    # milestone commands
    milestone_parser = subparsers.add_parser("milestone", help="Milestone operations")
    milestone_actions = milestone_parser.add_subparsers(dest="action", required=True)
    add = milestone_actions.add_parser("add", help="Create a milestone for a goal id")
    add.add_argument("goal_id")
    _add_milestone_fields(add, required=True)
    update = milestone_actions.add_parser("update", help="Edit a milestone's fields")
    update.add_argument("id")
    _add_milestone_fields(update, required=False)
    for name in ("delete", "get", "complete", "incomplete"):
        milestone_actions.add_parser(name).add_argument("id")
    milestone_actions.add_parser("list", help="List all milestones")
    milestone_actions.add_parser("search", help="Search titles and descriptions").add_argument("text")
    milestone_actions.add_parser("by-goal", help="Milestones created for a goal id").add_argument("goal_id")

    # principal commands
    principal_parser = subparsers.add_parser("principal", help="Principal helpers")
    principal_actions = principal_parser.add_subparsers(dest="action", required=True)
    principal_actions.add_parser("new", help="Print a fresh random principal")

    subparsers.add_parser("info", help="Show store configuration and record counts")

    return parser


def _resolve_config(parsed: argparse.Namespace) -> GoalTrackConfig:
    config = load_config(config_path=parsed.config)
    storage = config.storage.model_dump()
    storage["backend"] = "json"
    if parsed.store:
        storage["path"] = parsed.store
    logging_settings = config.logging.model_dump()
    if parsed.verbose:
        logging_settings["console_enabled"] = True
        logging_settings["console_level"] = "DEBUG"
        logging_settings["components"] = {**logging_settings["components"], "goaltrack": "DEBUG"}
    return GoalTrackConfig(storage=StorageConfig(**storage), logging=logging_settings)


def main(args: Optional[List[str]] = None) -> int:
    """
    Main entry point for the goaltrack CLI.

    Args:
        args: Command line arguments (defaults to sys.argv)

    Returns:
        Exit code
    """
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.command is None:
        parser.print_help()
        return 0
    if parsed.command == "principal":
        print(Principal.generate().to_text())
        return 0

    caller = parsed.principal
    if caller is None:
        env_text = os.environ.get(PRINCIPAL_ENV_VAR)
        try:
            caller = Principal.from_text(env_text) if env_text else Principal.anonymous()
        except ValueError as e:
            parser.error(f"${PRINCIPAL_ENV_VAR}: {e}")

    try:
        config = _resolve_config(parsed)
    except ConfigError as e:
        print(f"✗ {e}", file=sys.stderr)
        return 2
    configure_logging(app_name="goaltrack", config=config.logging.model_dump())

    try:
        tracker = GoalTracker.create(config=config)
    except StorageError as e:
        log_display(logger, logging.ERROR, "✗ %s", e)
        return 1

    with tracker:
        if parsed.command == "goal":
            return cmd_goal(tracker, caller, parsed)
        if parsed.command == "milestone":
            return cmd_milestone(tracker, caller, parsed)
        return cmd_info(config, caller, tracker)


if __name__ == "__main__":
    sys.exit(main())
