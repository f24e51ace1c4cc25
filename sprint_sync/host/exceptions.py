"""Custom exceptions for the host module."""


class BoardNotFoundError(Exception):
    """Raised when the host has no board with the requested name."""

    def __init__(self, board_name: str) -> None:
        super().__init__(f"Board not found: {board_name}")
        self.board_name = board_name
