"""Pydantic schema for agile boards and their sprints."""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator


class SprintModel(BaseModel):
    """Pydantic model for a sprint on a board.

    Naive start and finish instants are taken to be UTC.
    """

    name: str
    start: datetime
    finish: datetime | None = None
    archived: bool = False

    @field_validator("start", "finish")
    @classmethod
    def assume_utc(cls, value: datetime | None) -> datetime | None:
        """Attach UTC to naive instants so sprints always compare as aware datetimes."""
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def covers(self, instant: datetime) -> bool:
        """Return whether the instant falls within this sprint's start/finish window.

        A sprint without a finish is open-ended.
        """
        if self.start > instant:
            return False
        return self.finish is None or self.finish >= instant


class BoardModel(BaseModel):
    """Pydantic model for a board and its sprints, in host order."""

    name: str
    sprints: list[SprintModel] = Field(default_factory=list)

    def active_sprints(self) -> list[SprintModel]:
        """Return non-archived sprints, preserving host order."""
        return [sprint for sprint in self.sprints if not sprint.archived]

    def sprint_names(self) -> set[str]:
        """Return the names of every non-archived sprint."""
        return {sprint.name for sprint in self.active_sprints()}
