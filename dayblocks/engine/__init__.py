"""Scheduling engine for dayblocks."""

from dayblocks.engine.errors import (
    BlockNotFoundError,
    TemplateNotFoundError,
    InvalidDurationError,
    ConfigurationError,
)
from dayblocks.engine.time_axis import TimeAxis, format_label
from dayblocks.engine.block_store import BlockStore
from dayblocks.engine.drag import DragInteractionController, GesturePhase, Grip
from dayblocks.engine.aggregation import totals_by_goal, goal_summaries, weekly_target_shares, GoalTotal
from dayblocks.engine.session import PlannerSession

__all__ = [
    "BlockNotFoundError",
    "TemplateNotFoundError",
    "InvalidDurationError",
    "ConfigurationError",
    "TimeAxis",
    "format_label",
    "BlockStore",
    "DragInteractionController",
    "GesturePhase",
    "Grip",
    "totals_by_goal",
    "goal_summaries",
    "weekly_target_shares",
    "GoalTotal",
    "PlannerSession",
]
