"""Base ABC for workflow rule hosts."""

from abc import ABC, abstractmethod

from sprint_sync.schemas.board import BoardModel
from sprint_sync.schemas.host import HostSchemaModel


class RuleHostBase(ABC):
    """Base ABC for the issue tracker hosting the synchronization rule."""

    @abstractmethod
    def get_board(self, board_name: str) -> BoardModel:
        """Get a board and its sprints by name.

        Raises:
            BoardNotFoundError: If no board has this name.
        """
        pass

    @abstractmethod
    def get_schema(self) -> HostSchemaModel:
        """Get the issue fields and enumeration values the host exposes."""
        pass
