"""Block creation helpers for dayblocks.

Turns templates into block specs so every creation path fills the same
defaults.
"""

import datetime
from typing import Optional

from dayblocks.models.block_template import BlockTemplate
from dayblocks.models.scheduled_block import BlockSpec


def spec_from_template(
    template: BlockTemplate,
    day: datetime.date,
    start_minute: Optional[int] = None,
) -> BlockSpec:
    """Build a BlockSpec carrying a template's defaults.

    Args:
        template: Template to instantiate
        day: Date the block is placed on
        start_minute: Requested start (None lets the store use day start)

    Returns:
        BlockSpec with duration, goal, template id and note copied over
    """
    return BlockSpec(
        date=day,
        duration_minutes=template.default_duration_minutes,
        start_minute=start_minute,
        goal_id=template.default_goal_id,
        template_id=template.id,
        note=template.title,
    )
