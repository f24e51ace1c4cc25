"""Determines the current and next sprint of a board.

Two resolution policies exist and exactly one is used per run:

* ``boundary`` sorts sprints by start (then name) and treats the first sprint
  starting after *now* as the next sprint and the one before it as current.
* ``lookahead-window`` treats the first sprint whose window covers *now* as
  current and the first sprint whose window covers *now + lookahead* as next.
"""

from datetime import datetime, timedelta
from typing import NamedTuple

import structlog

from sprint_sync.configuration.models import SprintResolutionPolicy
from sprint_sync.host.abc import RuleHostBase
from sprint_sync.schemas.board import SprintModel

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

DEFAULT_LOOKAHEAD = timedelta(days=14)


class SprintWindow(NamedTuple):
    """The current and next sprint of a board; either may be absent."""

    current_sprint: SprintModel | None
    next_sprint: SprintModel | None


def sort_sprints(sprints: list[SprintModel]) -> list[SprintModel]:
    """Return non-archived sprints sorted ascending by start, ties broken by name."""
    return sorted((sprint for sprint in sprints if not sprint.archived), key=lambda sprint: (sprint.start, sprint.name))


def resolve_by_boundary(sprints: list[SprintModel], now: datetime) -> SprintWindow:
    """Resolve current and next sprint around the first sprint that starts after now."""
    ordered = sort_sprints(sprints)
    if not ordered:
        return SprintWindow(None, None)

    next_index = next((index for index, sprint in enumerate(ordered) if sprint.start > now), None)
    if next_index is None:
        # Every sprint has started, so the latest one is current.
        return SprintWindow(ordered[-1], None)
    current_sprint = ordered[next_index - 1] if next_index > 0 else None
    return SprintWindow(current_sprint, ordered[next_index])


def resolve_by_lookahead_window(sprints: list[SprintModel], now: datetime, lookahead: timedelta = DEFAULT_LOOKAHEAD) -> SprintWindow:
    """Resolve current and next sprint as the first sprints covering now and now + lookahead.

    Sprints are scanned in board order. Overlapping windows resolve to the first match.
    """
    candidates = [sprint for sprint in sprints if not sprint.archived]
    upcoming = now + lookahead
    current_sprint = next((sprint for sprint in candidates if sprint.covers(now)), None)
    next_sprint = next((sprint for sprint in candidates if sprint.covers(upcoming)), None)
    return SprintWindow(current_sprint, next_sprint)


def resolve_sprints(
    sprints: list[SprintModel],
    now: datetime,
    policy: SprintResolutionPolicy = SprintResolutionPolicy.BOUNDARY,
    lookahead: timedelta = DEFAULT_LOOKAHEAD,
) -> SprintWindow:
    """Resolve the current and next sprint using the given policy."""
    if policy == SprintResolutionPolicy.BOUNDARY:
        window = resolve_by_boundary(sprints, now)
    elif policy == SprintResolutionPolicy.LOOKAHEAD_WINDOW:
        window = resolve_by_lookahead_window(sprints, now, lookahead)
    else:
        raise ValueError(f"Unsupported sprint resolution policy: {policy}")

    logger.debug(
        "Resolved sprints",
        policy=policy.value,
        now=now.isoformat(),
        sprint_count=len(sprints),
        current_sprint=window.current_sprint.name if window.current_sprint else None,
        next_sprint=window.next_sprint.name if window.next_sprint else None,
    )
    return window


def resolve_board_sprints(
    host: RuleHostBase,
    board_name: str,
    now: datetime,
    policy: SprintResolutionPolicy = SprintResolutionPolicy.BOUNDARY,
    lookahead: timedelta = DEFAULT_LOOKAHEAD,
) -> SprintWindow:
    """Fetch a board from the host and resolve its current and next sprint."""
    board = host.get_board(board_name)
    return resolve_sprints(board.sprints, now, policy=policy, lookahead=lookahead)
