"""BlockTemplate data model for dayblocks."""

from typing import Optional
from pydantic import BaseModel, Field


class BlockTemplate(BaseModel):
    """Reusable preset a block can be instantiated from."""

    id: str = Field(..., description="Unique template identifier")
    title: str = Field(..., description="Template title")
    default_duration_minutes: int = Field(..., gt=0, description="Default block duration in minutes")
    default_goal_id: Optional[str] = Field(None, description="Goal assigned to new blocks (weak reference)")
    icon: Optional[str] = Field(None, description="Display icon")
