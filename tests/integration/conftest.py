"""Fixtures for integration tests."""

from pathlib import Path
from typing import Generator

import pytest
import structlog

EVENT_YAML = """
board:
  name: Banda Health
  sprints:
    - name: Sprint 1
      start: "2024-01-01T00:00:00+00:00"
      finish: "2024-01-31T00:00:00+00:00"
    - name: Sprint 2
      start: "2024-02-01T00:00:00+00:00"
      finish: "2024-02-29T00:00:00+00:00"
issue:
  id: BH-40
  summary: Export visit report
  fields:
    Type: Feature
    State: Open
    Discussion Type: Developers doing THIS SPRINT
changed_fields: [Discussion Type]
host_schema:
  Discussion Type: [Developers doing THIS SPRINT, Push to developers for NEXT SPRINT, Later > 1 year, Done]
  Type: [Bug, Feature]
  State: [Open, Done]
  Sprint: []
"""


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Reset structlog after the CLI reconfigures it."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def event_path(tmp_path: Path) -> Path:
    """A change event putting BH-40 into this sprint."""
    path = tmp_path / "event.yaml"
    path.write_text(EVENT_YAML)
    return path
