"""Typed mutation interface for the issue fields the rule maintains."""

import structlog

from sprint_sync.schemas.issue import DiscussionType, IssueField, IssueModel
from sprint_sync.synchronize.exceptions import UnknownSprintError
from sprint_sync.synchronize.models import Mutation, MutationKind

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class IssueUpdate:
    """Applies and records mutations to an issue's Sprint and Discussion Type fields.

    Mutations take effect on the wrapped issue immediately. Setting a field to
    the value it already holds records nothing.
    """

    def __init__(self, issue: IssueModel, known_sprints: set[str]) -> None:
        """Initialize the update with the issue to mutate and the sprints it may be assigned to."""
        self.issue = issue
        self.known_sprints = known_sprints
        self.mutations: list[Mutation] = []

    def clear_sprint(self) -> None:
        """Remove every sprint assignment from the issue."""
        if not self.issue.sprints:
            return
        self._record(MutationKind.CLEAR_SPRINT, IssueField.SPRINT, list(self.issue.sprints), [])
        self.issue.sprints = []

    def set_sprint(self, sprint_name: str) -> None:
        """Assign the issue to exactly this sprint.

        Raises:
            UnknownSprintError: If the sprint is not one of the known sprints.
        """
        if sprint_name not in self.known_sprints:
            logger.error("Refusing to assign unknown sprint", issue_id=self.issue.id_readable, sprint_name=sprint_name)
            raise UnknownSprintError(sprint_name, self.known_sprints)
        if self.issue.sprints == [sprint_name]:
            return
        self._record(MutationKind.SET_SPRINT, IssueField.SPRINT, list(self.issue.sprints), [sprint_name])
        self.issue.sprints = [sprint_name]

    def set_discussion_type(self, discussion_type: DiscussionType) -> None:
        """Set the issue's Discussion Type."""
        if self.issue.discussion_type == discussion_type:
            return
        self._record(MutationKind.SET_DISCUSSION_TYPE, IssueField.DISCUSSION_TYPE, self.issue.discussion_type, discussion_type)
        self.issue.discussion_type = discussion_type

    @property
    def has_mutations(self) -> bool:
        """Return whether any mutation has been applied."""
        return bool(self.mutations)

    def _record(self, kind: MutationKind, field: IssueField, old_value: object, new_value: object) -> None:
        logger.info(
            "Mutating issue field",
            issue_id=self.issue.id_readable,
            mutation=kind.value,
            issue_field=field.value,
            current_value=old_value,
            new_value=new_value,
        )
        self.mutations.append(Mutation(kind=kind, field=field, old_value=old_value, new_value=new_value))
