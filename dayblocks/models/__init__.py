"""Data models for dayblocks."""

from dayblocks.models.goal import Goal, GoalLevel
from dayblocks.models.block_template import BlockTemplate
from dayblocks.models.scheduled_block import ScheduledBlock, BlockSpec, BlockPatch

__all__ = [
    "Goal",
    "GoalLevel",
    "BlockTemplate",
    "ScheduledBlock",
    "BlockSpec",
    "BlockPatch",
]
