"""Constants for dayblocks.

This module centralizes the day-window defaults, gesture policy values and
the seed goals/templates used when nothing has been saved yet.
"""

from dayblocks.models.goal import Goal, GoalLevel
from dayblocks.models.block_template import BlockTemplate


# Day window
DAY_START_MINUTE = 8 * 60  # 08:00
DAY_END_MINUTE = 24 * 60  # 24:00
SNAP_UNIT_MINUTES = 30
MINUTES_PER_DAY = 24 * 60

# Rendered grid height, one axis unit per minute of the default window
DEFAULT_AXIS_EXTENT = 960.0

# Gesture policy (axis units)
DRAG_ACTIVATION_DISTANCE = 3.0  # below this a press/release is a click
EDGE_HANDLE_SIZE = 4.0  # grab distance either side of a block edge

# Totals bucket for blocks without a (resolvable) goal
UNASSIGNED = "unassigned"


DEFAULT_GOALS = [
    Goal(id="g-identity", title="Identity App", color="bg-indigo-600",
         weekly_target_minutes=20 * 60, level=GoalLevel.YEAR),
    Goal(id="g-fitness", title="Fitness", color="bg-emerald-600",
         weekly_target_minutes=6 * 60, level=GoalLevel.YEAR),
    Goal(id="g-relationships", title="Relationships", color="bg-rose-600",
         weekly_target_minutes=4 * 60, level=GoalLevel.YEAR),
    Goal(id="g-admin", title="Admin", color="bg-amber-600",
         weekly_target_minutes=3 * 60, level=GoalLevel.YEAR),
]

DEFAULT_TEMPLATES = [
    BlockTemplate(id="bt-deep", title="Deep Work", default_duration_minutes=90, default_goal_id="g-identity", icon="🧠"),
    BlockTemplate(id="bt-ex", title="Exercise", default_duration_minutes=60, default_goal_id="g-fitness", icon="🏃"),
    BlockTemplate(id="bt-breakfast", title="Breakfast", default_duration_minutes=20, icon="🍳"),
    BlockTemplate(id="bt-lunch", title="Lunch", default_duration_minutes=30, icon="🥗"),
    BlockTemplate(id="bt-dinner", title="Dinner", default_duration_minutes=30, icon="🍽️"),
    BlockTemplate(id="bt-admin", title="Admin", default_duration_minutes=30, default_goal_id="g-admin", icon="🗂️"),
]
