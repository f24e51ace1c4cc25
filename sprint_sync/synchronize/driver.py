"""Orchestrates evaluation of the synchronization rule for change event files."""

import time
from datetime import datetime
from pathlib import Path

import structlog

from sprint_sync.configuration.models import RuleConfig
from sprint_sync.configuration.reconcile import validate_host_schema
from sprint_sync.host.memory import InMemoryRuleHost
from sprint_sync.processing.event_processor import ChangeEventProcessor, EventDocument
from sprint_sync.processing.exceptions import EventProcessingError
from sprint_sync.sprints.resolver import SprintWindow, resolve_board_sprints, resolve_sprints
from sprint_sync.synchronize.results import RunRuleResult
from sprint_sync.synchronize.rule import evaluate_change_event

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def build_host(document: EventDocument) -> InMemoryRuleHost:
    """Build a rule host serving the boards and schema of a change event file."""
    return InMemoryRuleHost(document.boards, document.host_schema)


def run_resolve_workflow(board_path: Path, rule_config: RuleConfig, now: datetime) -> SprintWindow:
    """Load boards from a YAML file and resolve the configured board's current and next sprint."""
    processor = ChangeEventProcessor(rule_config.rule_schema)
    document = processor.load_document(board_path, require_event=False)
    host = build_host(document)
    return resolve_board_sprints(
        host,
        rule_config.board_name,
        now,
        policy=rule_config.sprint_resolution_policy,
        lookahead=rule_config.lookahead,
    )


def run_rule_workflow(
    event_path: Path,
    rule_config: RuleConfig,
    now: datetime,
    write: bool = False,
) -> RunRuleResult:
    """Run the rule workflow: load a change event, resolve sprints, evaluate the rule.

    When `write` is set and the rule mutated the issue, the updated issue is
    written back into the event file.
    """
    processor = ChangeEventProcessor(rule_config.rule_schema)
    try:
        document = processor.load_document(event_path)
    except EventProcessingError as e:
        return RunRuleResult(None, errors=e.errors)
    if document.event is None:
        return RunRuleResult(None, errors=[{"file": str(event_path), "error": "No valid change event found"}])

    host = build_host(document)
    if document.host_schema is not None:
        validate_host_schema(rule_config.rule_schema, host.get_schema())

    start_time = time.time()
    logger.info("Evaluating rule", issue_id=document.event.issue.id_readable, board_name=rule_config.board_name, now=now.isoformat())
    # Sprints are read fresh from the host for every evaluation.
    board = host.get_board(rule_config.board_name)
    sprint_window = resolve_sprints(board.sprints, now, policy=rule_config.sprint_resolution_policy, lookahead=rule_config.lookahead)
    evaluation = evaluate_change_event(document.event, sprint_window, rule_config.rule_schema, known_sprints=board.sprint_names())
    logger.info(
        "Completed rule workflow",
        issue_id=evaluation.issue.id_readable,
        decision=evaluation.decision.value,
        duration=round(time.time() - start_time, 4),
    )

    if write and evaluation.mutations:
        processor.write_issue(event_path, evaluation.issue)
    return RunRuleResult(evaluation)
