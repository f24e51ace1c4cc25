"""Handles reading change event YAML files and writing updated issues back.

A change event file describes everything the rule needs from its host: the
boards with their sprints, the issue as it looks after the change, the host
names of the fields that changed, and optionally the host schema. Issue fields
and changed fields use host names, which are mapped through the configured
rule schema. All validation errors are collected before anything is raised.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError
from structlog.stdlib import BoundLogger

from sprint_sync.configuration.models import RuleSchemaConfig
from sprint_sync.processing.exceptions import EventProcessingError
from sprint_sync.schemas.board import BoardModel
from sprint_sync.schemas.host import HostSchemaModel
from sprint_sync.schemas.issue import ChangeEventModel, IssueField, IssueModel
from sprint_sync.utils.yaml import dump_yaml_to_file, load_yaml_file

logger: BoundLogger = structlog.get_logger(__name__)  # type: ignore


@dataclass
class EventDocument:
    """The validated contents of a change event file."""

    boards: list[BoardModel] = field(default_factory=list)
    event: ChangeEventModel | None = None
    host_schema: HostSchemaModel | None = None


class ChangeEventProcessor:
    """Loads and validates boards, change events, and host schemas from YAML files."""

    def __init__(self, rule_schema: RuleSchemaConfig | None = None, raise_on_error: bool = True) -> None:
        """Initialize the processor.

        Args:
            rule_schema (RuleSchemaConfig | None): Host field and value names used to map issue fields.
            raise_on_error (bool): Whether to raise an EventProcessingError on validation errors.
        """
        self.rule_schema = rule_schema or RuleSchemaConfig()
        self.raise_on_error = raise_on_error

    def load_document(self, path: Path, require_event: bool = True, require_boards: bool = True) -> EventDocument:
        """Load and validate a change event file.

        The issue section is only read when `require_event` is set, so board
        and schema lookups are not blocked by an invalid issue.
        """
        errors: list[dict[str, Any]] = []
        document = EventDocument()
        data = self._load_yaml_file(path, errors)
        if data is not None:
            if require_boards or "board" in data or "boards" in data:
                document.boards = self._extract_boards(data, path, errors)
            if "host_schema" in data:
                document.host_schema = self._extract_host_schema(data["host_schema"], path, errors)
            if require_event:
                document.event = self._extract_required_event(data, path, errors)
        if errors:
            logger.error("One or more errors occurred during change event processing", errors=errors)
            if self.raise_on_error:
                raise EventProcessingError(errors)
        return document

    def write_issue(self, path: Path, issue: IssueModel) -> None:
        """Write the issue's field values back into an existing change event file."""
        data = load_yaml_file(path)
        issue_data = data.get("issue") or {}
        fields = issue_data.get("fields") or {}
        data["issue"] = issue_data
        issue_data["fields"] = fields
        fields.update(self.issue_to_host_fields(issue, sprint_as_list=isinstance(fields.get(self.rule_schema.sprint.field_name), list)))
        dump_yaml_to_file(data, path)
        logger.info("Wrote issue to change event file", path=str(path), issue_id=issue.id_readable)

    def issue_to_host_fields(self, issue: IssueModel, sprint_as_list: bool = False) -> dict[str, Any]:
        """Return the rule-maintained issue fields keyed by host field name, with host values."""
        discussion_type = self.rule_schema.discussion_type_value(issue.discussion_type) if issue.discussion_type is not None else None
        if sprint_as_list:
            sprint: Any = list(issue.sprints)
        else:
            sprint = issue.sprints[0] if issue.sprints else None
        return {
            self.rule_schema.discussion_type.field_name: discussion_type,
            self.rule_schema.sprint.field_name: sprint,
        }

    def _load_yaml_file(self, path: Path, errors: list[dict[str, Any]]) -> dict[str, Any] | None:
        try:
            data = load_yaml_file(path)
        except Exception as e:
            logger.error("Failed to parse YAML file", path=str(path), error=str(e))
            errors.append({"file": str(path), "error": str(e)})
            return None
        if not isinstance(data, dict):
            logger.error("YAML file is not a dictionary", path=str(path))
            errors.append({"file": str(path), "error": "YAML file is not a dictionary"})
            return None
        return data

    def _extract_boards(self, data: dict[str, Any], path: Path, errors: list[dict[str, Any]]) -> list[BoardModel]:
        if "boards" in data:
            board_dicts = data["boards"]
        elif "board" in data:
            board_dicts = [data["board"]]
        else:
            logger.error("YAML file missing top-level 'board' or 'boards' key", path=str(path))
            errors.append({"file": str(path), "error": "Missing top-level 'board' or 'boards' key"})
            return []

        if not isinstance(board_dicts, list):
            errors.append({"file": str(path), "error": "'boards' is not a list"})
            return []

        boards: list[BoardModel] = []
        for idx, board_dict in enumerate(board_dicts):
            try:
                boards.append(BoardModel.model_validate(board_dict))
            except ValidationError as ve:
                logger.error("Validation error for board", file=str(path), board_index=idx, error=ve.errors())
                errors.append({"file": str(path), "board_index": idx, "error": ve.errors()})
        return boards

    def _extract_host_schema(self, host_schema: Any, path: Path, errors: list[dict[str, Any]]) -> HostSchemaModel | None:
        try:
            return HostSchemaModel.model_validate({"fields": host_schema})
        except ValidationError as ve:
            logger.error("Validation error for host schema", file=str(path), error=ve.errors())
            errors.append({"file": str(path), "error": ve.errors()})
            return None

    def _extract_required_event(self, data: dict[str, Any], path: Path, errors: list[dict[str, Any]]) -> ChangeEventModel | None:
        if "issue" not in data:
            logger.error("Change event file missing top-level 'issue' key", path=str(path))
            errors.append({"file": str(path), "error": "Missing top-level 'issue' key"})
            return None
        return self._extract_event(data, path, errors)

    def _extract_event(self, data: dict[str, Any], path: Path, errors: list[dict[str, Any]]) -> ChangeEventModel | None:
        issue_dict = data["issue"]
        if not isinstance(issue_dict, dict):
            errors.append({"file": str(path), "error": "'issue' is not a dictionary"})
            return None

        host_field_names = data.get("changed_fields") or []
        if isinstance(host_field_names, str):
            host_field_names = [host_field_names]
        if not isinstance(host_field_names, list):
            errors.append({"file": str(path), "error": "'changed_fields' is not a list"})
            return None

        changed_fields: set[IssueField] = set()
        for host_field_name in host_field_names:
            issue_field = self.rule_schema.field_from_host_name(host_field_name)
            if issue_field is None:
                logger.warning("Changed field is not watched by the rule and will be ignored", file=str(path), field_name=host_field_name)
                continue
            changed_fields.add(issue_field)

        try:
            issue = self._issue_from_host_fields(issue_dict)
            return ChangeEventModel(issue=issue, changed_fields=changed_fields)
        except (ValidationError, ValueError) as e:
            error: Any = e.errors() if isinstance(e, ValidationError) else str(e)
            logger.error("Validation error for issue", file=str(path), error=error)
            errors.append({"file": str(path), "error": error})
            return None

    def _issue_from_host_fields(self, issue_dict: dict[str, Any]) -> IssueModel:
        fields: dict[str, Any] = issue_dict.get("fields") or {}
        extra_fields = set(fields) - set(self.rule_schema.required_elements())
        if extra_fields:
            logger.debug("Issue fields not used by the rule will be ignored", extra_fields=sorted(extra_fields))

        discussion_type_value = fields.get(self.rule_schema.discussion_type.field_name)
        sprint_value = fields.get(self.rule_schema.sprint.field_name)
        if sprint_value is None:
            sprints: list[str] = []
        elif isinstance(sprint_value, list):
            sprints = [str(name) for name in sprint_value]
        else:
            sprints = [str(sprint_value)]

        return IssueModel(
            id_readable=issue_dict.get("id"),
            summary=issue_dict.get("summary"),
            type=fields.get(self.rule_schema.issue_type.field_name),
            state=fields.get(self.rule_schema.state.field_name),
            discussion_type=(
                self.rule_schema.discussion_type_from_host_value(discussion_type_value) if discussion_type_value is not None else None
            ),
            sprints=sprints,
        )
