"""Unit tests for the ChangeEventProcessor class."""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from sprint_sync.configuration.models import RuleSchemaConfig
from sprint_sync.processing.event_processor import ChangeEventProcessor
from sprint_sync.processing.exceptions import EventProcessingError
from sprint_sync.schemas.issue import DiscussionType, IssueField, IssueModel
from sprint_sync.utils.yaml import load_yaml_file

VALID_EVENT_YAML = """
board:
  name: Banda Health
  sprints:
    - name: Sprint 1
      start: "2024-01-01T00:00:00+00:00"
      finish: "2024-01-31T00:00:00+00:00"
    - name: Sprint 2
      start: "2024-02-01T00:00:00"
    - name: Sprint 0
      start: "2023-12-01T00:00:00+00:00"
      archived: true
issue:
  id: BH-12
  summary: Add patient search
  fields:
    Type: Task
    State: Open
    Discussion Type: Developers doing THIS SPRINT
    Sprint: Sprint 2
    Assignee: someone
changed_fields:
  - Discussion Type
  - Assignee
host_schema:
  Discussion Type: [Developers doing THIS SPRINT, Push to developers for NEXT SPRINT, Later > 1 year, Done]
  Type: [Bug, Task]
  State: [Open, Done]
  Sprint: []
"""

MULTI_BOARD_YAML = """
boards:
  - name: Other
    sprints: []
  - name: Banda Health
    sprints:
      - name: Sprint 1
        start: "2024-01-01T00:00:00+00:00"
"""

EVENT_WITH_SPRINT_LIST_YAML = """
board:
  name: Banda Health
  sprints:
    - name: Sprint 1
      start: "2024-01-01T00:00:00+00:00"
issue:
  id: BH-3
  fields:
    Sprint: [Sprint 1, Sprint 0]
changed_fields: [Sprint]
"""

UNKNOWN_DISCUSSION_TYPE_YAML = """
board:
  name: Banda Health
issue:
  id: BH-4
  fields:
    Discussion Type: Someday
changed_fields: [Discussion Type]
"""


def write_yaml(tmp_path: Path, content: str, name: str = "event.yaml") -> Path:
    """Write YAML content to a temporary file."""
    path = tmp_path / name
    path.write_text(content)
    return path


def test_load_valid_document(tmp_path: Path) -> None:
    """Test loading a complete change event file."""
    document = ChangeEventProcessor().load_document(write_yaml(tmp_path, VALID_EVENT_YAML))
    assert [board.name for board in document.boards] == ["Banda Health"]
    board = document.boards[0]
    assert [sprint.name for sprint in board.sprints] == ["Sprint 1", "Sprint 2", "Sprint 0"]
    assert board.sprint_names() == {"Sprint 1", "Sprint 2"}
    assert board.sprints[1].start == datetime(2024, 2, 1, tzinfo=timezone.utc)
    assert document.event is not None
    assert document.event.issue == IssueModel(
        id_readable="BH-12",
        summary="Add patient search",
        type="Task",
        state="Open",
        discussion_type=DiscussionType.THIS_SPRINT,
        sprints=["Sprint 2"],
    )
    # Assignee is not watched by the rule.
    assert document.event.changed_fields == {IssueField.DISCUSSION_TYPE}
    assert document.host_schema is not None
    assert document.host_schema.has_value("Type", "Bug")


def test_load_multiple_boards(tmp_path: Path) -> None:
    """Test loading a boards list without an issue."""
    document = ChangeEventProcessor().load_document(write_yaml(tmp_path, MULTI_BOARD_YAML), require_event=False)
    assert [board.name for board in document.boards] == ["Other", "Banda Health"]
    assert document.event is None


def test_sprint_list_field(tmp_path: Path) -> None:
    """Test that multi-valued sprint fields are kept as lists."""
    document = ChangeEventProcessor().load_document(write_yaml(tmp_path, EVENT_WITH_SPRINT_LIST_YAML))
    assert document.event is not None
    assert document.event.issue.sprints == ["Sprint 1", "Sprint 0"]
    assert document.event.issue.discussion_type is None


def test_custom_rule_schema(tmp_path: Path) -> None:
    """Test that host names are mapped through the rule schema."""
    content = """
board:
  name: Banda Health
issue:
  id: BH-5
  fields:
    Iteration: Sprint 1
    Planning: Backlog
changed_fields: [Iteration]
"""
    rule_schema = RuleSchemaConfig.model_validate({"sprint": {"field_name": "Iteration"}, "discussion_type": {"field_name": "Planning", "later": "Backlog"}})
    document = ChangeEventProcessor(rule_schema).load_document(write_yaml(tmp_path, content))
    assert document.event is not None
    assert document.event.changed_fields == {IssueField.SPRINT}
    assert document.event.issue.sprints == ["Sprint 1"]
    assert document.event.issue.discussion_type == DiscussionType.LATER


def test_missing_issue(tmp_path: Path) -> None:
    """Test that a missing issue is an error when an event is required."""
    with pytest.raises(EventProcessingError) as exc_info:
        ChangeEventProcessor().load_document(write_yaml(tmp_path, MULTI_BOARD_YAML))
    assert exc_info.value.errors[0]["error"] == "Missing top-level 'issue' key"


def test_missing_board(tmp_path: Path) -> None:
    """Test that a missing board is an error."""
    with pytest.raises(EventProcessingError) as exc_info:
        ChangeEventProcessor().load_document(write_yaml(tmp_path, "issue:\n  id: BH-1\n"))
    assert "Missing top-level 'board' or 'boards' key" in [error["error"] for error in exc_info.value.errors]


def test_unknown_discussion_type(tmp_path: Path) -> None:
    """Test that unknown Discussion Type values are reported."""
    with pytest.raises(EventProcessingError) as exc_info:
        ChangeEventProcessor().load_document(write_yaml(tmp_path, UNKNOWN_DISCUSSION_TYPE_YAML))
    assert "Unknown Discussion Type value: 'Someday'" in str(exc_info.value.errors)


def test_invalid_sprint(tmp_path: Path) -> None:
    """Test that invalid sprints are reported with the board index."""
    content = "boards:\n  - name: Banda Health\n    sprints:\n      - name: Sprint 1\n"
    with pytest.raises(EventProcessingError) as exc_info:
        ChangeEventProcessor().load_document(write_yaml(tmp_path, content), require_event=False)
    assert exc_info.value.errors[0]["board_index"] == 0


def test_malformed_yaml(tmp_path: Path) -> None:
    """Test that malformed YAML is reported."""
    with pytest.raises(EventProcessingError):
        ChangeEventProcessor().load_document(write_yaml(tmp_path, "not: [valid: yaml"))


def test_non_dict_yaml(tmp_path: Path) -> None:
    """Test that a YAML list is reported."""
    with pytest.raises(EventProcessingError) as exc_info:
        ChangeEventProcessor().load_document(write_yaml(tmp_path, "- a\n- b\n"))
    assert exc_info.value.errors == [{"file": str(tmp_path / "event.yaml"), "error": "YAML file is not a dictionary"}]


def test_errors_collected_without_raising(tmp_path: Path) -> None:
    """Test that errors do not raise when raise_on_error is False."""
    document = ChangeEventProcessor(raise_on_error=False).load_document(write_yaml(tmp_path, UNKNOWN_DISCUSSION_TYPE_YAML))
    assert document.event is None
    assert [board.name for board in document.boards] == ["Banda Health"]


def test_write_issue_scalar_sprint(tmp_path: Path) -> None:
    """Test writing an issue back keeps a scalar sprint field scalar."""
    path = write_yaml(tmp_path, VALID_EVENT_YAML)
    issue = IssueModel(id_readable="BH-12", discussion_type=DiscussionType.NEXT_SPRINT, sprints=["Sprint 1"])
    ChangeEventProcessor().write_issue(path, issue)
    fields = load_yaml_file(path)["issue"]["fields"]
    assert fields["Sprint"] == "Sprint 1"
    assert fields["Discussion Type"] == "Push to developers for NEXT SPRINT"
    assert fields["Assignee"] == "someone"


def test_write_issue_list_sprint(tmp_path: Path) -> None:
    """Test writing an issue back keeps a list sprint field a list."""
    path = write_yaml(tmp_path, EVENT_WITH_SPRINT_LIST_YAML)
    issue = IssueModel(id_readable="BH-3", discussion_type=DiscussionType.LATER, sprints=[])
    ChangeEventProcessor().write_issue(path, issue)
    fields = load_yaml_file(path)["issue"]["fields"]
    assert fields["Sprint"] == []
    assert fields["Discussion Type"] == "Later > 1 year"


def test_write_issue_null_fields(tmp_path: Path) -> None:
    """Test writing an issue back into a file whose fields are null."""
    path = write_yaml(tmp_path, "board:\n  name: Banda Health\nissue:\n  id: BH-1\n  fields:\nchanged_fields: [Sprint]\n")
    issue = IssueModel(id_readable="BH-1", discussion_type=DiscussionType.THIS_SPRINT, sprints=["Sprint 1"])
    ChangeEventProcessor().write_issue(path, issue)
    fields = load_yaml_file(path)["issue"]["fields"]
    assert fields["Sprint"] == "Sprint 1"
    assert fields["Discussion Type"] == "Developers doing THIS SPRINT"


def test_scalar_changed_field(tmp_path: Path) -> None:
    """Test that a single changed field written as a scalar is read as one field."""
    content = EVENT_WITH_SPRINT_LIST_YAML.replace("changed_fields: [Sprint]", "changed_fields: Sprint")
    document = ChangeEventProcessor().load_document(write_yaml(tmp_path, content))
    assert document.event is not None
    assert document.event.changed_fields == {IssueField.SPRINT}


def test_changed_fields_not_a_list(tmp_path: Path) -> None:
    """Test that a mapping of changed fields is reported."""
    content = EVENT_WITH_SPRINT_LIST_YAML.replace("changed_fields: [Sprint]", "changed_fields: {Sprint: true}")
    with pytest.raises(EventProcessingError) as exc_info:
        ChangeEventProcessor().load_document(write_yaml(tmp_path, content))
    assert "'changed_fields' is not a list" in [error["error"] for error in exc_info.value.errors]


def test_issue_ignored_when_event_not_required(tmp_path: Path) -> None:
    """Test that an invalid issue does not block loading boards."""
    content = UNKNOWN_DISCUSSION_TYPE_YAML.replace("name: Banda Health", "name: Banda Health\n  sprints: []")
    document = ChangeEventProcessor().load_document(write_yaml(tmp_path, content), require_event=False)
    assert document.event is None
    assert [board.name for board in document.boards] == ["Banda Health"]
