"""Defines the Command Line Interface (CLI) using Typer."""

import sys
from datetime import datetime, timezone
from pathlib import Path

import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from sprint_sync.configuration.exceptions import HostSchemaMismatchError, RequiredConfigurationElementError
from sprint_sync.configuration.models import RuleConfig
from sprint_sync.configuration.reconcile import reconcile_rule_configuration, validate_host_schema
from sprint_sync.host.exceptions import BoardNotFoundError
from sprint_sync.processing.event_processor import ChangeEventProcessor
from sprint_sync.processing.exceptions import EventProcessingError
from sprint_sync.sprints.resolver import SprintWindow
from sprint_sync.synchronize.driver import run_resolve_workflow, run_rule_workflow
from sprint_sync.utils.logging import configure_logging

load_dotenv()

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Keep issue sprints and Discussion Types in sync.")

NOW_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%dT%H:%M:%S%z", "%Y-%m-%d %H:%M:%S"]


def resolve_now(now: datetime | None) -> datetime:
    """Return the given instant as an aware datetime, defaulting to the current time in UTC."""
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def format_sprint_window(sprint_window: SprintWindow) -> list[str]:
    """Render the current and next sprint as output lines."""
    current_sprint, next_sprint = sprint_window
    return [
        f"Current sprint: {current_sprint.name if current_sprint else '(none)'}",
        f"Next sprint: {next_sprint.name if next_sprint else '(none)'}",
    ]


def echo_errors(errors: list[dict[str, object]]) -> None:
    """Print collected processing errors to stderr."""
    for error in errors:
        typer.echo(f"Error in {error.get('file')}: {error.get('error')}", err=True)


@typer_app.callback()
def main_callback(
    ctx: typer.Context,
    board_name: Annotated[str | None, Option(envvar="BOARD_NAME", help="Name of the board whose sprints are synchronized.")] = None,
    policy: Annotated[
        str | None, Option(envvar="SPRINT_RESOLUTION_POLICY", help="Sprint resolution policy (boundary or lookahead-window).")
    ] = None,
    lookahead_days: Annotated[
        int | None, Option(envvar="LOOKAHEAD_DAYS", help="Days ahead of now that the next sprint must cover (lookahead-window policy).")
    ] = None,
    rule_schema: Annotated[
        Path | None, Option(envvar="RULE_SCHEMA_PATH", help="YAML file overriding host field and value names.")
    ] = None,
    debug: Annotated[bool, Option(envvar="DEBUG", help="Enable debug mode.")] = False,
) -> None:
    """Reconcile configuration for the current context."""
    configure_logging(debug)
    try:
        rule_config = reconcile_rule_configuration(
            cli_debug=debug,
            cli_board_name=board_name,
            cli_sprint_resolution_policy=policy,
            cli_lookahead_days=lookahead_days,
            cli_rule_schema_path=rule_schema,
        )
    except (RequiredConfigurationElementError, FileNotFoundError) as e:
        typer.echo(str(e), err=True)
        sys.exit(1)
    ctx.ensure_object(dict)
    ctx.obj["rule_config"] = rule_config


@typer_app.command(name="resolve")
def resolve_cli(
    ctx: typer.Context,
    board_path: Annotated[Path, Argument(envvar="BOARD_PATH", help="Path to YAML file describing boards and sprints.")],
    now: Annotated[datetime | None, Option(formats=NOW_FORMATS, help="Instant to resolve sprints at (defaults to now, UTC).")] = None,
) -> None:
    """Print the current and next sprint of the configured board."""
    rule_config: RuleConfig = ctx.obj["rule_config"]
    if not board_path.exists():
        typer.echo(f"YAML file not found: {board_path.absolute()}", err=True)
        sys.exit(1)
    try:
        sprint_window = run_resolve_workflow(board_path, rule_config, resolve_now(now))
    except EventProcessingError as e:
        echo_errors(e.errors)
        sys.exit(1)
    except BoardNotFoundError as e:
        typer.echo(str(e), err=True)
        sys.exit(1)
    typer.echo(f"Board: {rule_config.board_name}")
    for line in format_sprint_window(sprint_window):
        typer.echo(line)


@typer_app.command(name="evaluate")
def evaluate_cli(
    ctx: typer.Context,
    event_path: Annotated[Path, Argument(envvar="EVENT_PATH", help="Path to YAML file describing the change event.")],
    now: Annotated[datetime | None, Option(formats=NOW_FORMATS, help="Instant to resolve sprints at (defaults to now, UTC).")] = None,
    write: Annotated[bool, Option(help="Write the updated issue back into the change event file.")] = False,
) -> None:
    """Run the synchronization rule on a change event and print the resulting mutations."""
    rule_config: RuleConfig = ctx.obj["rule_config"]
    if not event_path.exists():
        typer.echo(f"YAML file not found: {event_path.absolute()}", err=True)
        sys.exit(1)
    try:
        result = run_rule_workflow(event_path, rule_config, resolve_now(now), write=write)
    except (HostSchemaMismatchError, BoardNotFoundError) as e:
        typer.echo(str(e), err=True)
        sys.exit(1)
    if result.errors or result.evaluation is None:
        echo_errors(result.errors)
        sys.exit(1)

    evaluation = result.evaluation
    typer.echo(f"Issue: {evaluation.issue.id_readable}")
    if evaluation.sprint_window is not None:
        for line in format_sprint_window(evaluation.sprint_window):
            typer.echo(line)
    typer.echo(f"Decision: {evaluation.decision.value}")
    for mutation in evaluation.mutations:
        typer.echo(f"  {mutation.kind.value}: {mutation.old_value!r} -> {mutation.new_value!r}")
    if write and evaluation.mutations:
        typer.echo(f"Wrote updated issue to {event_path}")


@typer_app.command(name="validate-schema")
def validate_schema_cli(
    ctx: typer.Context,
    event_path: Annotated[Path, Argument(envvar="EVENT_PATH", help="Path to YAML file containing a host_schema section.")],
) -> None:
    """Check that a host schema provides every field and value the rule depends on."""
    rule_config: RuleConfig = ctx.obj["rule_config"]
    if not event_path.exists():
        typer.echo(f"YAML file not found: {event_path.absolute()}", err=True)
        sys.exit(1)
    processor = ChangeEventProcessor(rule_config.rule_schema)
    try:
        document = processor.load_document(event_path, require_event=False, require_boards=False)
    except EventProcessingError as e:
        echo_errors(e.errors)
        sys.exit(1)
    if document.host_schema is None:
        typer.echo(f"No host_schema section found in {event_path}", err=True)
        sys.exit(1)
    try:
        validate_host_schema(rule_config.rule_schema, document.host_schema)
    except HostSchemaMismatchError as e:
        typer.echo(str(e), err=True)
        sys.exit(1)
    typer.echo("Host schema matches rule schema")


if __name__ == "__main__":
    typer_app()
