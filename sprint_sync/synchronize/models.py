"""Internal data models for rule decisions and issue mutations."""

from dataclasses import dataclass
from enum import Enum
from typing import Any

from sprint_sync.schemas.issue import IssueField


class RuleDecision(Enum):
    """Enum for the outcome of evaluating the rule on a change event."""

    SKIPPED = "skipped"
    SPRINT_UPDATED = "sprint-updated"
    DISCUSSION_TYPE_UPDATED = "discussion-type-updated"
    NOOP = "noop"


class MutationKind(Enum):
    """Enum for the mutations the rule can apply to an issue."""

    CLEAR_SPRINT = "clear-sprint"
    SET_SPRINT = "set-sprint"
    SET_DISCUSSION_TYPE = "set-discussion-type"


@dataclass(frozen=True)
class Mutation:
    """A single field change applied to an issue."""

    kind: MutationKind
    field: IssueField
    old_value: Any
    new_value: Any
