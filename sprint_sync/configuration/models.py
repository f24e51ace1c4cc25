"""Models for rule configuration and the host schema it depends on."""

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum

from pydantic import BaseModel

from sprint_sync.schemas.issue import DiscussionType, IssueField


class SprintResolutionPolicy(str, Enum):
    """Enum for the ways current and next sprints are determined."""

    BOUNDARY = "boundary"
    LOOKAHEAD_WINDOW = "lookahead-window"


class DiscussionTypeSchema(BaseModel):
    """Host names for the Discussion Type field and its values."""

    field_name: str = "Discussion Type"
    this_sprint: str = "Developers doing THIS SPRINT"
    next_sprint: str = "Push to developers for NEXT SPRINT"
    later: str = "Later > 1 year"
    done: str = "Done"


class IssueTypeSchema(BaseModel):
    """Host names for the issue Type field and the bug value."""

    field_name: str = "Type"
    bug: str = "Bug"


class StateSchema(BaseModel):
    """Host names for the State field and the done value."""

    field_name: str = "State"
    done: str = "Done"


class SprintFieldSchema(BaseModel):
    """Host name for the Sprint field."""

    field_name: str = "Sprint"


class RuleSchemaConfig(BaseModel):
    """Host field and enumeration value names the synchronization rule depends on."""

    discussion_type: DiscussionTypeSchema = DiscussionTypeSchema()
    issue_type: IssueTypeSchema = IssueTypeSchema()
    state: StateSchema = StateSchema()
    sprint: SprintFieldSchema = SprintFieldSchema()

    def field_name(self, issue_field: IssueField) -> str:
        """Return the host name of a watched issue field."""
        return {
            IssueField.DISCUSSION_TYPE: self.discussion_type.field_name,
            IssueField.SPRINT: self.sprint.field_name,
            IssueField.TYPE: self.issue_type.field_name,
            IssueField.STATE: self.state.field_name,
        }[issue_field]

    def field_from_host_name(self, host_field_name: str) -> IssueField | None:
        """Return the watched field with this host name, or None if it is not watched."""
        for issue_field in IssueField:
            if self.field_name(issue_field) == host_field_name:
                return issue_field
        return None

    def discussion_type_value(self, discussion_type: DiscussionType) -> str:
        """Return the host value name of a Discussion Type member."""
        return {
            DiscussionType.THIS_SPRINT: self.discussion_type.this_sprint,
            DiscussionType.NEXT_SPRINT: self.discussion_type.next_sprint,
            DiscussionType.LATER: self.discussion_type.later,
            DiscussionType.DONE: self.discussion_type.done,
        }[discussion_type]

    def discussion_type_from_host_value(self, host_value: str) -> DiscussionType:
        """Return the Discussion Type member with this host value name.

        Raises:
            ValueError: If no member has this host value name.
        """
        for discussion_type in DiscussionType:
            if self.discussion_type_value(discussion_type) == host_value:
                return discussion_type
        raise ValueError(f"Unknown {self.discussion_type.field_name} value: {host_value!r}")

    def required_elements(self) -> dict[str, list[str]]:
        """Return every host field the rule needs, mapped to the enumeration values it needs."""
        return {
            self.discussion_type.field_name: [self.discussion_type_value(discussion_type) for discussion_type in DiscussionType],
            self.issue_type.field_name: [self.issue_type.bug],
            self.state.field_name: [self.state.done],
            self.sprint.field_name: [],
        }


@dataclass
class RuleConfig:
    """Configuration class for running the synchronization rule."""

    debug: bool
    board_name: str
    sprint_resolution_policy: SprintResolutionPolicy
    lookahead: timedelta
    rule_schema: RuleSchemaConfig = field(default_factory=RuleSchemaConfig)
