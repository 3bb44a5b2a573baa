"""Repository for saving and loading planner state."""

import logging
from typing import List

from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from dayblocks.database.models import GoalDB, BlockTemplateDB, ScheduledBlockDB
from dayblocks.models.block_template import BlockTemplate
from dayblocks.models.constants import DEFAULT_GOALS, DEFAULT_TEMPLATES
from dayblocks.models.goal import Goal
from dayblocks.models.scheduled_block import ScheduledBlock

logger = logging.getLogger(__name__)


class PlannerState(BaseModel):
    """Everything a planner session is opened from."""

    goals: List[Goal] = Field(default_factory=list)
    templates: List[BlockTemplate] = Field(default_factory=list)
    blocks: List[ScheduledBlock] = Field(default_factory=list)


class PlannerStateRepository:
    """Repository for goal, template and block snapshots."""

    def __init__(self, db: Session):
        self.db = db

    def get_goals(self) -> List[Goal]:
        rows = self.db.query(GoalDB).order_by(GoalDB.position, GoalDB.id).all()
        return [row.to_pydantic() for row in rows]

    def get_templates(self) -> List[BlockTemplate]:
        rows = self.db.query(BlockTemplateDB).order_by(BlockTemplateDB.position, BlockTemplateDB.id).all()
        return [row.to_pydantic() for row in rows]

    def get_blocks(self) -> List[ScheduledBlock]:
        """Get all saved blocks sorted by date and start minute."""
        rows = self.db.query(ScheduledBlockDB).order_by(
            ScheduledBlockDB.date, ScheduledBlockDB.start_minute, ScheduledBlockDB.id
        ).all()
        return [row.to_pydantic() for row in rows]

    def load_state(self) -> PlannerState:
        return PlannerState(
            goals=self.get_goals(),
            templates=self.get_templates(),
            blocks=self.get_blocks(),
        )

    def save_goals(self, goals: List[Goal]) -> int:
        """Replace all saved goals, keeping their order."""
        try:
            self.db.query(GoalDB).delete()
            self.db.add_all([GoalDB.from_pydantic(goal, position=i) for i, goal in enumerate(goals)])
            self.db.commit()
            logger.debug(f"Saved {len(goals)} goals")
            return len(goals)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save goals: {type(e).__name__}: {str(e)}")
            raise

    def save_templates(self, templates: List[BlockTemplate]) -> int:
        """Replace all saved templates, keeping their order."""
        try:
            self.db.query(BlockTemplateDB).delete()
            self.db.add_all([
                BlockTemplateDB.from_pydantic(template, position=i) for i, template in enumerate(templates)
            ])
            self.db.commit()
            logger.debug(f"Saved {len(templates)} templates")
            return len(templates)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save templates: {type(e).__name__}: {str(e)}")
            raise

    def save_blocks(self, blocks: List[ScheduledBlock]) -> int:
        """Replace all saved blocks with a session snapshot.

        Returns:
            Number of blocks saved
        """
        try:
            self.db.query(ScheduledBlockDB).delete()
            self.db.add_all([ScheduledBlockDB.from_pydantic(block) for block in blocks])
            self.db.commit()
            logger.debug(f"Saved {len(blocks)} scheduled blocks")
            return len(blocks)
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to save scheduled blocks: {type(e).__name__}: {str(e)}")
            raise

    def seed_defaults(self) -> bool:
        """Store the default goals and templates when none are saved yet.

        Returns:
            True if defaults were written
        """
        if self.db.query(GoalDB).count() or self.db.query(BlockTemplateDB).count():
            return False
        self.save_goals(DEFAULT_GOALS)
        self.save_templates(DEFAULT_TEMPLATES)
        logger.info("Seeded default goals and templates")
        return True
