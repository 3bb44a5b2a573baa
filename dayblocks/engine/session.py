"""Planner session orchestration for dayblocks.

A PlannerSession owns one day-planning session: the block store, the drag
controller and the active date. It is the only mutable state; nothing is
process-global. Core errors propagate to the caller unchanged.
"""

import datetime
import logging
from typing import Dict, Iterable, List, Mapping, Optional, Union

from dayblocks.engine import aggregation
from dayblocks.engine.aggregation import GoalTotal
from dayblocks.engine.block_store import BlockStore
from dayblocks.engine.drag import DragInteractionController
from dayblocks.engine.errors import TemplateNotFoundError
from dayblocks.engine.time_axis import TimeAxis
from dayblocks.models.block_factory import spec_from_template
from dayblocks.models.block_template import BlockTemplate
from dayblocks.models.constants import DEFAULT_AXIS_EXTENT
from dayblocks.models.goal import Goal
from dayblocks.models.scheduled_block import BlockPatch, BlockSpec, ScheduledBlock

logger = logging.getLogger(__name__)


class PlannerSession:
    """Add/move/resize/query surface for a single active date."""

    def __init__(
        self,
        axis: Optional[TimeAxis] = None,
        goals: Iterable[Goal] = (),
        templates: Iterable[BlockTemplate] = (),
        blocks: Iterable[Union[ScheduledBlock, Mapping]] = (),
        active_date: Optional[datetime.date] = None,
        axis_extent: float = DEFAULT_AXIS_EXTENT,
    ):
        self.axis = axis or TimeAxis()
        self.store = BlockStore(self.axis)
        self.controller = DragInteractionController(self.axis, self.store, axis_extent=axis_extent)
        self.goals: Dict[str, Goal] = {goal.id: goal for goal in goals}
        self.templates: Dict[str, BlockTemplate] = {tpl.id: tpl for tpl in templates}
        self.active_date = active_date or datetime.date.today()
        loaded = self.store.load(blocks)
        logger.debug(f"Session opened on {self.active_date} with {loaded} blocks")

    def set_active_date(self, day: datetime.date) -> None:
        """Switch the visible date. Blocks are untouched."""
        self.controller.cancel()
        self.active_date = day

    def blocks(self) -> List[ScheduledBlock]:
        """Blocks on the active date in display order."""
        return self.store.query_by_date(self.active_date)

    def add_block(self, spec: Union[BlockSpec, Mapping]) -> str:
        return self.store.add(spec)

    def add_from_template(
        self,
        template: Union[BlockTemplate, str],
        start_minute: Optional[int] = None,
    ) -> str:
        """Instantiate a template on the active date.

        Args:
            template: Template or template id
            start_minute: Start override (defaults to day start)

        Returns:
            The new block id
        """
        if isinstance(template, str):
            found = self.templates.get(template)
            if found is None:
                raise TemplateNotFoundError(template)
            template = found
        return self.store.add(spec_from_template(template, self.active_date, start_minute))

    def remove_block(self, block_id: str) -> bool:
        return self.store.remove(block_id)

    def patch_block(self, block_id: str, fields: Union[BlockPatch, Mapping]) -> ScheduledBlock:
        return self.store.patch(block_id, fields)

    def move_block(self, block_id: str, fraction: float) -> ScheduledBlock:
        """Complete a move with the block's start at a pointer fraction."""
        return self.controller.apply_move(block_id, fraction, axis_extent=1.0)

    def resize_block_start(self, block_id: str, fraction: float) -> ScheduledBlock:
        """Complete a start-edge resize at a pointer fraction."""
        return self.controller.apply_resize_start(block_id, fraction, axis_extent=1.0)

    def resize_block_end(self, block_id: str, fraction: float) -> ScheduledBlock:
        """Complete an end-edge resize at a pointer fraction."""
        return self.controller.apply_resize_end(block_id, fraction, axis_extent=1.0)

    def goal_for(self, block: ScheduledBlock) -> Optional[Goal]:
        """Resolve a block's goal; dangling references resolve to None."""
        if block.goal_id is None:
            return None
        return self.goals.get(block.goal_id)

    def current_totals(self) -> Dict[str, int]:
        """Minutes per goal on the active date."""
        # Without a goal collection there is nothing to resolve ids against.
        return aggregation.totals_by_goal(self.blocks(), self.goals or None)

    def goal_summaries(self) -> List[GoalTotal]:
        return aggregation.goal_summaries(self.current_totals(), self.goals.values())

    def weekly_target_shares(self) -> Dict[str, int]:
        return aggregation.weekly_target_shares(self.goals.values())

    def export_snapshot(self) -> List[ScheduledBlock]:
        """Every block of the session, for the persistence layer."""
        return self.store.export_snapshot()
