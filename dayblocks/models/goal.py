"""Goal data model for dayblocks."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class GoalLevel(str, Enum):
    """Visual-grouping hierarchy level."""
    YEAR = "YEAR"
    QUARTER = "QUARTER"
    MONTH = "MONTH"


class Goal(BaseModel):
    """A category used to group and budget time across blocks.

    Goals are owned by the surrounding application. Blocks and templates
    refer to them by id only.
    """

    id: str = Field(..., description="Unique goal identifier")
    title: str = Field(..., description="Display label")
    weekly_target_minutes: int = Field(0, ge=0, description="Weekly target duration in minutes")
    level: GoalLevel = Field(GoalLevel.YEAR, description="Hierarchy level for visual grouping")
    parent_id: Optional[str] = Field(None, description="Parent goal id (weak reference)")
    color: Optional[str] = Field(None, description="Display color token")
    end_image_url: Optional[str] = Field(None, description="Optional picture of the end state")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
