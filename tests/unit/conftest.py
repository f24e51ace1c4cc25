"""Fixtures for unit tests."""

from datetime import datetime, timezone
from typing import Generator

import pytest
import structlog

from sprint_sync.configuration.models import RuleSchemaConfig
from sprint_sync.schemas.board import SprintModel


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def rule_schema() -> RuleSchemaConfig:
    """Default rule schema."""
    return RuleSchemaConfig()


@pytest.fixture
def sprint_one() -> SprintModel:
    """Sprint starting on January 1st."""
    return SprintModel(name="Sprint 1", start=datetime(2024, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def sprint_two() -> SprintModel:
    """Sprint starting on February 1st."""
    return SprintModel(name="Sprint 2", start=datetime(2024, 2, 1, tzinfo=timezone.utc))
