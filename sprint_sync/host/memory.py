"""In-memory host backed by board and schema snapshots."""

import structlog

from sprint_sync.schemas.board import BoardModel
from sprint_sync.schemas.host import HostSchemaModel

from .abc import RuleHostBase
from .exceptions import BoardNotFoundError

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class InMemoryRuleHost(RuleHostBase):
    """Rule host serving boards and a schema held in memory."""

    def __init__(self, boards: list[BoardModel], schema: HostSchemaModel | None = None) -> None:
        """Initialize the host with its boards and, optionally, its issue schema."""
        self.boards = boards
        self.schema = schema or HostSchemaModel()

    def get_board(self, board_name: str) -> BoardModel:
        """Get the first board with this name."""
        for board in self.boards:
            if board.name == board_name:
                logger.debug("Found board", board_name=board_name, sprint_count=len(board.sprints))
                return board
        logger.error("Board not found", board_name=board_name, known_boards=[board.name for board in self.boards])
        raise BoardNotFoundError(board_name)

    def get_schema(self) -> HostSchemaModel:
        """Get the issue schema snapshot."""
        return self.schema
