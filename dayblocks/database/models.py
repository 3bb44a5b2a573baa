"""SQLAlchemy database models for dayblocks."""

from datetime import datetime
from sqlalchemy import Column, String, Integer, Date, DateTime

from dayblocks.database.database import Base
from dayblocks.models.goal import GoalLevel


def enum_to_value(enum_obj) -> str:
    """Convert enum to string value (handles both enum and string)."""
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class, default):
    """Convert string to enum with fallback to default."""
    if not value:
        return default
    try:
        return enum_class(value.upper())
    except (ValueError, AttributeError):
        return default


class GoalDB(Base):
    """Database model for Goal."""

    __tablename__ = "goals"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    weekly_target_minutes = Column(Integer, nullable=False, default=0)
    level = Column(String, nullable=False, default=GoalLevel.YEAR.value)
    parent_id = Column(String, nullable=True)
    color = Column(String, nullable=True)
    end_image_url = Column(String, nullable=True)
    position = Column(Integer, nullable=False, default=0)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from dayblocks.models.goal import Goal
        return Goal(
            id=self.id,
            title=self.title,
            weekly_target_minutes=self.weekly_target_minutes,
            level=value_to_enum(self.level, GoalLevel, GoalLevel.YEAR),
            parent_id=self.parent_id,
            color=self.color,
            end_image_url=self.end_image_url,
        )

    @classmethod
    def from_pydantic(cls, goal, position: int = 0):
        """Create database model from Pydantic model."""
        return cls(
            id=goal.id,
            title=goal.title,
            weekly_target_minutes=goal.weekly_target_minutes,
            level=enum_to_value(goal.level),
            parent_id=goal.parent_id,
            color=goal.color,
            end_image_url=goal.end_image_url,
            position=position,
        )


class BlockTemplateDB(Base):
    """Database model for BlockTemplate."""

    __tablename__ = "block_templates"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    default_duration_minutes = Column(Integer, nullable=False)
    default_goal_id = Column(String, nullable=True)
    icon = Column(String, nullable=True)
    position = Column(Integer, nullable=False, default=0)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from dayblocks.models.block_template import BlockTemplate
        return BlockTemplate(
            id=self.id,
            title=self.title,
            default_duration_minutes=self.default_duration_minutes,
            default_goal_id=self.default_goal_id,
            icon=self.icon,
        )

    @classmethod
    def from_pydantic(cls, template, position: int = 0):
        """Create database model from Pydantic model."""
        return cls(
            id=template.id,
            title=template.title,
            default_duration_minutes=template.default_duration_minutes,
            default_goal_id=template.default_goal_id,
            icon=template.icon,
            position=position,
        )


class ScheduledBlockDB(Base):
    """Database model for ScheduledBlock."""

    __tablename__ = "scheduled_blocks"

    id = Column(String, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    start_minute = Column(Integer, nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    # Goal and template references are weak: no foreign keys.
    goal_id = Column(String, nullable=True)
    template_id = Column(String, nullable=True)
    note = Column(String, nullable=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from dayblocks.models.scheduled_block import ScheduledBlock
        return ScheduledBlock(
            id=self.id,
            date=self.date,
            start_minute=self.start_minute,
            duration_minutes=self.duration_minutes,
            goal_id=self.goal_id,
            template_id=self.template_id,
            note=self.note,
        )

    @classmethod
    def from_pydantic(cls, block):
        """Create database model from Pydantic model."""
        return cls(
            id=block.id,
            date=block.date,
            start_minute=block.start_minute,
            duration_minutes=block.duration_minutes,
            goal_id=block.goal_id,
            template_id=block.template_id,
            note=block.note,
        )
