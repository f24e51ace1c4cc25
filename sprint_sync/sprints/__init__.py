"""Sprint resolution module."""

from .resolver import (
    DEFAULT_LOOKAHEAD,
    SprintWindow,
    resolve_board_sprints,
    resolve_by_boundary,
    resolve_by_lookahead_window,
    resolve_sprints,
    sort_sprints,
)

__all__ = [
    "DEFAULT_LOOKAHEAD",
    "SprintWindow",
    "resolve_board_sprints",
    "resolve_by_boundary",
    "resolve_by_lookahead_window",
    "resolve_sprints",
    "sort_sprints",
]
