"""Custom exceptions for the synchronize module."""


class UnknownSprintError(Exception):
    """Raised when assigning a sprint that is not among the board's known sprints."""

    def __init__(self, sprint_name: str, known_sprints: set[str]) -> None:
        super().__init__(f"Sprint '{sprint_name}' is not a known sprint (known sprints: {', '.join(sorted(known_sprints)) or 'none'})")
        self.sprint_name = sprint_name
        self.known_sprints = known_sprints
