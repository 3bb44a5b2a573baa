"""Drag interaction state machine for dayblocks.

Turns one pointer gesture (press, moves, release) into at most one
grid-snapped mutation of the block store:

    IDLE -> DRAGGING       -> IDLE   (move, duration unchanged)
    IDLE -> RESIZING_START -> IDLE   (start edge moves, end held fixed)
    IDLE -> RESIZING_END   -> IDLE   (end edge moves, start held fixed)

Positions are axis units along the rendered day window of length
axis_extent. Grabbing within EDGE_HANDLE_SIZE of a block edge starts a
resize; anywhere else on the block starts a move. A gesture that never
travels DRAG_ACTIVATION_DISTANCE is a click and mutates nothing.

A body drag shifts the block by the pointer delta: the new start is the
block's start position at press plus (release - press), so grabbing the
middle of a block does not jump its start to the pointer. Edge resizes
use the absolute release position. apply_move, used for gestures the
caller has already resolved, places the start at the given position.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from dayblocks.engine.block_store import BlockStore
from dayblocks.engine.time_axis import TimeAxis
from dayblocks.models.constants import (
    DEFAULT_AXIS_EXTENT,
    DRAG_ACTIVATION_DISTANCE,
    EDGE_HANDLE_SIZE,
)
from dayblocks.models.scheduled_block import ScheduledBlock

logger = logging.getLogger(__name__)


class GesturePhase(str, Enum):
    """Phase of the in-progress gesture."""
    IDLE = "idle"
    DRAGGING = "dragging"
    RESIZING_START = "resizing_start"
    RESIZING_END = "resizing_end"


class Grip(str, Enum):
    """Which part of a block the pointer went down on."""
    BODY = "body"
    START = "start"
    END = "end"


_GRIP_PHASES = {
    Grip.BODY: GesturePhase.DRAGGING,
    Grip.START: GesturePhase.RESIZING_START,
    Grip.END: GesturePhase.RESIZING_END,
}


@dataclass
class _Gesture:
    block_id: str
    phase: GesturePhase
    origin: float
    last: float
    block_start_position: float
    activated: bool = False


class DragInteractionController:
    """Applies completed drag/resize gestures to a BlockStore."""

    def __init__(
        self,
        axis: TimeAxis,
        store: BlockStore,
        axis_extent: float = DEFAULT_AXIS_EXTENT,
        activation_distance: float = DRAG_ACTIVATION_DISTANCE,
        edge_handle_size: float = EDGE_HANDLE_SIZE,
    ):
        if axis_extent <= 0:
            raise ValueError(f"Axis extent must be positive, got {axis_extent}")
        self.axis = axis
        self.store = store
        self.axis_extent = float(axis_extent)
        self.activation_distance = activation_distance
        self.edge_handle_size = edge_handle_size
        self._gesture: Optional[_Gesture] = None

    @property
    def phase(self) -> GesturePhase:
        return self._gesture.phase if self._gesture else GesturePhase.IDLE

    @property
    def active_block_id(self) -> Optional[str]:
        return self._gesture.block_id if self._gesture else None

    def hit_test(self, block: ScheduledBlock, position: float) -> GesturePhase:
        """Phase a press at position on block would start."""
        start_pos = self.axis.minute_to_position(block.start_minute, self.axis_extent)
        end_pos = self.axis.minute_to_position(block.end_minute, self.axis_extent)
        if abs(position - start_pos) <= self.edge_handle_size:
            return GesturePhase.RESIZING_START
        if abs(position - end_pos) <= self.edge_handle_size:
            return GesturePhase.RESIZING_END
        return GesturePhase.DRAGGING

    def press(self, block_id: str, position: float, grip: Optional[Grip] = None) -> GesturePhase:
        """Begin a gesture on a block.

        Args:
            block_id: Block under the pointer
            position: Pointer position in axis units
            grip: Part of the block grabbed; hit-tested from position if None

        Returns:
            The phase entered
        """
        if self._gesture is not None:
            logger.warning(f"Press on {block_id} while a gesture on {self._gesture.block_id} was active; cancelling it")
            self.cancel()

        block = self.store.get(block_id)
        phase = _GRIP_PHASES[Grip(grip)] if grip is not None else self.hit_test(block, position)
        self._gesture = _Gesture(
            block_id=block_id,
            phase=phase,
            origin=position,
            last=position,
            block_start_position=self.axis.minute_to_position(block.start_minute, self.axis_extent),
        )
        logger.debug(f"Gesture {phase.value} started on block {block_id} at {position}")
        return phase

    def move(self, position: float) -> None:
        """Track a pointer move; ignored when no gesture is active."""
        gesture = self._gesture
        if gesture is None:
            return
        gesture.last = position
        if abs(position - gesture.origin) >= self.activation_distance:
            gesture.activated = True

    def release(self, position: Optional[float] = None) -> Optional[ScheduledBlock]:
        """End the gesture and apply its mutation.

        Args:
            position: Final pointer position (defaults to the last move)

        Returns:
            The updated block, or None for idle releases and clicks
        """
        gesture = self._gesture
        if gesture is None:
            return None
        try:
            if position is not None:
                self.move(position)
            if not gesture.activated:
                logger.debug(f"Gesture on block {gesture.block_id} below activation distance, ignored")
                return None
            final = gesture.last
            if gesture.phase == GesturePhase.DRAGGING:
                target = gesture.block_start_position + (final - gesture.origin)
                return self.apply_move(gesture.block_id, target)
            if gesture.phase == GesturePhase.RESIZING_START:
                return self.apply_resize_start(gesture.block_id, final)
            return self.apply_resize_end(gesture.block_id, final)
        finally:
            self._gesture = None

    def cancel(self) -> None:
        """Abort the in-progress gesture without mutating anything."""
        if self._gesture is not None:
            logger.debug(f"Gesture on block {self._gesture.block_id} cancelled")
        self._gesture = None

    def _extent(self, axis_extent: Optional[float]) -> float:
        return self.axis_extent if axis_extent is None else axis_extent

    def apply_move(self, block_id: str, position: float, axis_extent: Optional[float] = None) -> ScheduledBlock:
        """Place a block's start at position; duration is unchanged."""
        new_start = self.axis.fraction_to_minute(position, self._extent(axis_extent))
        return self.store.set_start(block_id, new_start)

    def apply_resize_start(self, block_id: str, position: float, axis_extent: Optional[float] = None) -> ScheduledBlock:
        """Move the start edge to position, keeping the end fixed.

        The start stops one slot short of the end. Start and duration are
        written in one store update.
        """
        block = self.store.get(block_id)
        end = block.end_minute
        new_start = self.axis.fraction_to_minute(position, self._extent(axis_extent))
        new_start = min(new_start, end - self.axis.snap_unit_minutes)
        return self.store.set_span(block_id, new_start, end - new_start)

    def apply_resize_end(self, block_id: str, position: float, axis_extent: Optional[float] = None) -> ScheduledBlock:
        """Move the end edge to position, keeping the start fixed."""
        block = self.store.get(block_id)
        new_end = self.axis.snap_end(self.axis.position_to_minute(position, self._extent(axis_extent)))
        new_duration = max(self.axis.snap_unit_minutes, new_end - block.start_minute)
        return self.store.set_duration(block_id, new_duration)
