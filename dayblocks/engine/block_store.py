"""In-memory block collection for dayblocks.

The store owns every ScheduledBlock of a session. It snaps temporal fields
through the TimeAxis but knows nothing about pointers or gestures.

Overlap policy: blocks on the same date may overlap freely. The store never
rejects or resolves overlaps.

Boundary policy: start is clamped so at least one slot fits before day end,
but start + duration may run past day end.
"""

import datetime
import logging
import uuid
from typing import Dict, Iterable, List, Mapping, Union

from dayblocks.engine.errors import BlockNotFoundError, InvalidDurationError
from dayblocks.engine.time_axis import TimeAxis
from dayblocks.models.scheduled_block import BlockPatch, BlockSpec, ScheduledBlock

logger = logging.getLogger(__name__)


def _order_key(block: ScheduledBlock) -> tuple:
    return (block.start_minute, block.id)


class BlockStore:
    """Canonical set of scheduled blocks with snapped mutation primitives."""

    def __init__(self, axis: TimeAxis):
        self.axis = axis
        self._blocks: Dict[str, ScheduledBlock] = {}

    def __len__(self) -> int:
        return len(self._blocks)

    def __contains__(self, block_id: str) -> bool:
        return block_id in self._blocks

    def _new_id(self) -> str:
        block_id = str(uuid.uuid4())
        while block_id in self._blocks:
            block_id = str(uuid.uuid4())
        return block_id

    def _normalize_duration(self, duration: int) -> int:
        return max(self.axis.snap_unit_minutes, self.axis.round_to_unit(duration))

    def get(self, block_id: str) -> ScheduledBlock:
        """Get a block by id, raising BlockNotFoundError if absent."""
        block = self._blocks.get(block_id)
        if block is None:
            raise BlockNotFoundError(block_id)
        return block

    def add(self, spec: Union[BlockSpec, Mapping]) -> str:
        """Insert a new block and return its id.

        The start defaults to day start and is snapped; the duration is
        rounded to the grid with a one-slot minimum.

        Raises:
            InvalidDurationError: If the requested duration is not positive
        """
        if not isinstance(spec, BlockSpec):
            spec = BlockSpec(**spec)
        if spec.duration_minutes <= 0:
            raise InvalidDurationError(f"Duration must be positive, got {spec.duration_minutes}")

        start = spec.start_minute if spec.start_minute is not None else self.axis.day_start_minute
        block = ScheduledBlock(
            id=self._new_id(),
            date=spec.date,
            start_minute=self.axis.snap(start),
            duration_minutes=self._normalize_duration(spec.duration_minutes),
            goal_id=spec.goal_id,
            template_id=spec.template_id,
            note=spec.note,
        )
        self._blocks[block.id] = block
        logger.debug(f"Added block {block.id} on {block.date} at {block.start_minute} for {block.duration_minutes}m")
        return block.id

    def remove(self, block_id: str) -> bool:
        """Delete a block. Absent ids are ignored.

        Returns:
            True if a block was deleted
        """
        removed = self._blocks.pop(block_id, None)
        if removed is None:
            logger.debug(f"Remove ignored, block {block_id} not present")
            return False
        logger.debug(f"Removed block {block_id}")
        return True

    def set_start(self, block_id: str, minute: int) -> ScheduledBlock:
        """Move a block to the snapped start minute."""
        block = self.get(block_id)
        updated = block.model_copy(update={"start_minute": self.axis.snap(minute)})
        self._blocks[block_id] = updated
        logger.debug(f"Block {block_id} start {block.start_minute} -> {updated.start_minute}")
        return updated

    def set_duration(self, block_id: str, duration: int) -> ScheduledBlock:
        """Set a block's duration, rounded to the grid with a one-slot minimum."""
        block = self.get(block_id)
        updated = block.model_copy(update={"duration_minutes": self._normalize_duration(duration)})
        self._blocks[block_id] = updated
        logger.debug(f"Block {block_id} duration {block.duration_minutes} -> {updated.duration_minutes}")
        return updated

    def set_span(self, block_id: str, minute: int, duration: int) -> ScheduledBlock:
        """Set start and duration together; either both change or neither does."""
        block = self.get(block_id)
        updated = block.model_copy(update={
            "start_minute": self.axis.snap(minute),
            "duration_minutes": self._normalize_duration(duration),
        })
        self._blocks[block_id] = updated
        logger.debug(
            f"Block {block_id} span {block.start_minute}+{block.duration_minutes} "
            f"-> {updated.start_minute}+{updated.duration_minutes}"
        )
        return updated

    def patch(self, block_id: str, fields: Union[BlockPatch, Mapping]) -> ScheduledBlock:
        """Merge-update goal_id, note and template_id.

        Raises:
            BlockNotFoundError: If the block is absent
            pydantic.ValidationError: If fields name anything else
        """
        if not isinstance(fields, BlockPatch):
            fields = BlockPatch(**fields)
        block = self.get(block_id)
        changes = fields.model_dump(exclude_unset=True)
        updated = block.model_copy(update=changes)
        self._blocks[block_id] = updated
        logger.debug(f"Patched block {block_id}: {sorted(changes)}")
        return updated

    def query_by_date(self, day: datetime.date) -> List[ScheduledBlock]:
        """Blocks on a date sorted by start minute, ties broken by id."""
        return sorted((b for b in self._blocks.values() if b.date == day), key=_order_key)

    def export_snapshot(self) -> List[ScheduledBlock]:
        """Every block, ordered by date, start minute and id."""
        return sorted(self._blocks.values(), key=lambda b: (b.date, b.start_minute, b.id))

    def load(self, blocks: Iterable[Union[ScheduledBlock, Mapping]]) -> int:
        """Replace the store contents with a saved snapshot.

        Durations must already be positive and grid-aligned; the whole load
        is rejected otherwise. Starts are normalized through snap.

        Returns:
            Number of blocks loaded

        Raises:
            InvalidDurationError: If any block's duration is invalid
        """
        unit = self.axis.snap_unit_minutes
        loaded: Dict[str, ScheduledBlock] = {}
        for item in blocks:
            block = item if isinstance(item, ScheduledBlock) else ScheduledBlock(**item)
            if block.duration_minutes <= 0 or block.duration_minutes % unit != 0:
                raise InvalidDurationError(
                    f"Block {block.id} has duration {block.duration_minutes}, "
                    f"expected a positive multiple of {unit}"
                )
            start = self.axis.snap(block.start_minute)
            if start != block.start_minute:
                logger.warning(f"Block {block.id} start {block.start_minute} normalized to {start}")
                block = block.model_copy(update={"start_minute": start})
            if block.id in loaded:
                logger.warning(f"Duplicate block id {block.id} in snapshot, keeping the last entry")
            loaded[block.id] = block

        self._blocks = loaded
        logger.debug(f"Loaded {len(loaded)} blocks")
        return len(loaded)
