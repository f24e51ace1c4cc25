"""Custom exceptions for the processing module."""

from typing import Any


class EventProcessingError(Exception):
    """Raised when errors are encountered while loading a change event file."""

    def __init__(self, errors: list[dict[str, Any]]):
        super().__init__("Errors encountered during change event processing.")
        self.errors = errors
