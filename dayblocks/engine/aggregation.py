"""Per-goal time totals for dayblocks.

Recomputed on demand from a day's blocks; nothing is maintained
incrementally.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, Field

from dayblocks.models.constants import UNASSIGNED
from dayblocks.models.goal import Goal
from dayblocks.models.scheduled_block import ScheduledBlock


def _round_half_up(value: Decimal, places: str) -> Decimal:
    return value.quantize(Decimal(places), rounding=ROUND_HALF_UP)


def _hours(minutes: int) -> float:
    """Minutes as hours to one decimal, halves rounding up."""
    return float(_round_half_up(Decimal(minutes) / Decimal(60), "0.1"))


class GoalTotal(BaseModel):
    """One row of the totals bar."""

    goal_id: str = Field(..., description="Goal id, or the unassigned sentinel")
    title: str = Field(..., description="Goal title")
    minutes: int = Field(0, description="Scheduled minutes")
    hours: float = Field(0.0, description="Scheduled hours, one decimal")


def totals_by_goal(
    blocks: Iterable[ScheduledBlock],
    goals: Optional[Mapping[str, Goal]] = None,
) -> Dict[str, int]:
    """Sum block durations per goal.

    Blocks without a goal land under UNASSIGNED. When goals is given, goal
    ids missing from it (deleted goals) land there too.

    Args:
        blocks: Blocks to total
        goals: Known goals keyed by id, used to resolve dangling references

    Returns:
        Mapping of goal id to summed minutes (empty for no blocks)
    """
    totals: Dict[str, int] = {}
    for block in blocks:
        key = block.goal_id or UNASSIGNED
        if goals is not None and key not in goals:
            key = UNASSIGNED
        totals[key] = totals.get(key, 0) + block.duration_minutes
    return totals


def goal_summaries(totals: Mapping[str, int], goals: Iterable[Goal]) -> List[GoalTotal]:
    """Rows for every goal in order, plus Unassigned when it has time."""
    rows = [
        GoalTotal(
            goal_id=goal.id,
            title=goal.title,
            minutes=totals.get(goal.id, 0),
            hours=_hours(totals.get(goal.id, 0)),
        )
        for goal in goals
    ]
    unassigned = totals.get(UNASSIGNED, 0)
    if unassigned:
        rows.append(GoalTotal(
            goal_id=UNASSIGNED,
            title="Unassigned",
            minutes=unassigned,
            hours=_hours(unassigned),
        ))
    return rows


def weekly_target_shares(goals: Iterable[Goal]) -> Dict[str, int]:
    """Each goal's rounded percentage of the summed weekly targets."""
    goals = list(goals)
    total = sum(goal.weekly_target_minutes for goal in goals) or 1
    return {
        goal.id: int(_round_half_up(Decimal(goal.weekly_target_minutes * 100) / Decimal(total), "1"))
        for goal in goals
    }
