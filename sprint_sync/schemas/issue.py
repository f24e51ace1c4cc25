"""Pydantic schema for issues and the change events raised on them."""

from enum import Enum

from pydantic import BaseModel, Field


class DiscussionType(str, Enum):
    """Planning horizon an issue is slated for."""

    THIS_SPRINT = "this-sprint"
    NEXT_SPRINT = "next-sprint"
    LATER = "later"
    DONE = "done"


class IssueField(str, Enum):
    """Issue fields watched by the synchronization rule."""

    DISCUSSION_TYPE = "discussion-type"
    SPRINT = "sprint"
    TYPE = "type"
    STATE = "state"


class IssueModel(BaseModel):
    """Pydantic model for the rule's view of an issue.

    `sprints` holds sprint names. Hosts with a single-valued sprint field
    provide at most one entry.
    """

    id_readable: str
    summary: str | None = None
    type: str | None = None
    state: str | None = None
    discussion_type: DiscussionType | None = None
    sprints: list[str] = Field(default_factory=list)


class ChangeEventModel(BaseModel):
    """An issue snapshot after a change, plus the fields that changed."""

    issue: IssueModel
    changed_fields: set[IssueField] = Field(default_factory=set)

    def is_changed(self, field: IssueField) -> bool:
        """Return whether the given field changed in this event."""
        return field in self.changed_fields
