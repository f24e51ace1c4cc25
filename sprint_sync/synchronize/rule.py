"""Contains the rule keeping an issue's Sprint and Discussion Type consistent."""

import structlog

from sprint_sync.configuration.models import RuleSchemaConfig
from sprint_sync.schemas.issue import ChangeEventModel, DiscussionType, IssueField
from sprint_sync.sprints.resolver import SprintWindow
from sprint_sync.synchronize.models import RuleDecision
from sprint_sync.synchronize.results import RuleEvaluationResult
from sprint_sync.synchronize.updates import IssueUpdate

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


def should_evaluate(event: ChangeEventModel, rule_schema: RuleSchemaConfig) -> bool:
    """Decide whether the rule runs for this change event.

    The rule runs if:

    1. The Discussion Type changed.
    2. The Sprint changed and the issue is not a bug.
    3. The State changed to done.
    """
    issue = event.issue
    return (
        event.is_changed(IssueField.DISCUSSION_TYPE)
        or (event.is_changed(IssueField.SPRINT) and issue.type != rule_schema.issue_type.bug)
        or (event.is_changed(IssueField.STATE) and issue.state == rule_schema.state.done)
    )


def sync_sprint_to_discussion_type(update: IssueUpdate, sprint_window: SprintWindow) -> None:
    """Assign the sprint matching the issue's Discussion Type, or no sprint at all."""
    discussion_type = update.issue.discussion_type
    target: list[str] = []
    if discussion_type == DiscussionType.THIS_SPRINT and sprint_window.current_sprint is not None:
        target = [sprint_window.current_sprint.name]
    elif discussion_type == DiscussionType.NEXT_SPRINT and sprint_window.next_sprint is not None:
        target = [sprint_window.next_sprint.name]

    if update.issue.sprints == target:
        logger.info("Sprint already matches discussion type", issue_id=update.issue.id_readable, sprints=target)
        return

    update.clear_sprint()
    if target:
        update.set_sprint(target[0])


def sync_discussion_type_to_sprint(update: IssueUpdate, sprint_window: SprintWindow) -> None:
    """Set the Discussion Type matching the sprint(s) the issue is assigned to."""
    assigned = update.issue.sprints
    current_sprint, next_sprint = sprint_window
    if current_sprint is not None and current_sprint.name in assigned:
        update.set_discussion_type(DiscussionType.THIS_SPRINT)
    elif next_sprint is not None and next_sprint.name in assigned:
        update.set_discussion_type(DiscussionType.NEXT_SPRINT)
    else:
        update.set_discussion_type(DiscussionType.LATER)


def evaluate_change_event(
    event: ChangeEventModel,
    sprint_window: SprintWindow,
    rule_schema: RuleSchemaConfig,
    known_sprints: set[str] | None = None,
) -> RuleEvaluationResult:
    """Run the guard and, if it passes, the action of the rule on a change event.

    The event's issue is not modified; the result carries an updated copy.
    When `known_sprints` is omitted only the resolved current and next sprints
    may be assigned.
    """
    issue = event.issue.model_copy(deep=True)
    if not should_evaluate(event, rule_schema):
        logger.debug("Rule guard did not pass", issue_id=issue.id_readable, changed_fields=sorted(field.value for field in event.changed_fields))
        return RuleEvaluationResult(issue, RuleDecision.SKIPPED, sprint_window)

    if known_sprints is None:
        known_sprints = {sprint.name for sprint in sprint_window if sprint is not None}
    update = IssueUpdate(issue, known_sprints)

    if event.is_changed(IssueField.DISCUSSION_TYPE):
        sync_sprint_to_discussion_type(update, sprint_window)
        decision = RuleDecision.SPRINT_UPDATED
    elif event.is_changed(IssueField.SPRINT):
        sync_discussion_type_to_sprint(update, sprint_window)
        decision = RuleDecision.DISCUSSION_TYPE_UPDATED
    else:
        # Only the State moved to done; nothing to synchronize.
        logger.info("State changed to done, no synchronization required", issue_id=issue.id_readable)
        decision = RuleDecision.NOOP

    if not update.has_mutations:
        decision = RuleDecision.NOOP

    logger.info(
        "Evaluated rule",
        issue_id=issue.id_readable,
        decision=decision.value,
        mutation_count=len(update.mutations),
        current_sprint=sprint_window.current_sprint.name if sprint_window.current_sprint else None,
        next_sprint=sprint_window.next_sprint.name if sprint_window.next_sprint else None,
    )
    return RuleEvaluationResult(issue, decision, sprint_window, update.mutations)
