"""ScheduledBlock data model for dayblocks."""

import datetime
from typing import Optional
from pydantic import BaseModel, Field


class ScheduledBlock(BaseModel):
    """ScheduledBlock is one time allocation on a single calendar date.

    Durations and starts are validated by the block store, not here, so that
    snapshots with bad values can be rejected with a domain error. Instances
    are frozen; the store replaces them with model_copy on every change.
    """

    id: str = Field(..., description="Unique scheduled block identifier")
    date: datetime.date = Field(..., description="Calendar date the block belongs to")
    start_minute: int = Field(..., description="Minutes since 00:00")
    duration_minutes: int = Field(..., description="Block duration in minutes")
    goal_id: Optional[str] = Field(None, description="Goal id (weak reference)")
    template_id: Optional[str] = Field(None, description="Template the block was created from")
    note: Optional[str] = Field(None, description="Free-form note shown on the block")

    class Config:
        """Pydantic configuration."""
        frozen = True

    @property
    def end_minute(self) -> int:
        return self.start_minute + self.duration_minutes


class BlockSpec(BaseModel):
    """Input for creating a block; the store assigns the id."""

    date: datetime.date = Field(..., description="Calendar date")
    duration_minutes: int = Field(..., description="Requested duration in minutes")
    start_minute: Optional[int] = Field(None, description="Requested start (defaults to day start)")
    goal_id: Optional[str] = None
    template_id: Optional[str] = None
    note: Optional[str] = None


class BlockPatch(BaseModel):
    """Merge-update for the non-temporal block fields.

    Only fields explicitly set are applied, so passing None clears a value.
    """

    goal_id: Optional[str] = None
    template_id: Optional[str] = None
    note: Optional[str] = None

    class Config:
        """Pydantic configuration."""
        extra = "forbid"
