"""FastAPI web application for dayblocks.

A thin surface over PlannerSession for the UI layer. Every mutation saves
the session snapshot through the repository.
"""

import datetime
import logging
import threading
from typing import Dict, List, Optional

from fastapi import Depends, FastAPI, HTTPException, Response
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from dayblocks.database.database import get_db, init_db, SessionLocal
from dayblocks.database.planner_state_repository import PlannerStateRepository
from dayblocks.engine.aggregation import GoalTotal
from dayblocks.engine.errors import BlockNotFoundError, InvalidDurationError, TemplateNotFoundError
from dayblocks.engine.session import PlannerSession
from dayblocks.models.block_template import BlockTemplate
from dayblocks.models.goal import Goal
from dayblocks.models.scheduled_block import BlockPatch, BlockSpec, ScheduledBlock

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="dayblocks API",
    description="Plan a day in goal-tagged time blocks on a 30-minute grid",
    version="0.1.0"
)

# One planner session per process, opened lazily from the database
_session: Optional[PlannerSession] = None

# Held for session creation and for each mutation plus its save
_mutation_lock = threading.Lock()


def open_session(db: Session) -> PlannerSession:
    """Open a planner session from saved state, seeding defaults first."""
    repository = PlannerStateRepository(db)
    repository.seed_defaults()
    state = repository.load_state()
    logger.info(f"Opening planner session with {len(state.blocks)} saved blocks")
    return PlannerSession(goals=state.goals, templates=state.templates, blocks=state.blocks)


def get_session() -> PlannerSession:
    """Get the process planner session (dependency for FastAPI)."""
    global _session
    with _mutation_lock:
        if _session is None:
            init_db()
            db = SessionLocal()
            try:
                _session = open_session(db)
            finally:
                db.close()
    return _session


# Request/response models
class GridSlot(BaseModel):
    """One grid line."""
    minute: int
    label: str
    fraction: float


class GridResponse(BaseModel):
    """Response for the grid layout."""
    day_start_minute: int
    day_end_minute: int
    snap_unit_minutes: int
    slots: List[GridSlot]


class BlockResponse(BaseModel):
    """Response wrapping one block."""
    block: ScheduledBlock
    start_label: str
    end_label: str


class BlocksResponse(BaseModel):
    """Response for a day's blocks."""
    date: datetime.date
    blocks: List[ScheduledBlock]


class ActiveDateRequest(BaseModel):
    """Request to switch the visible date."""
    date: datetime.date


class FromTemplateRequest(BaseModel):
    """Request to instantiate a template."""
    start_minute: Optional[int] = Field(None, description="Start override (defaults to day start)")


class PointerRequest(BaseModel):
    """Completed gesture position."""
    fraction: float = Field(..., ge=0.0, le=1.0, description="Pointer position as a fraction of the day window")


class TotalsResponse(BaseModel):
    """Response for the totals bar."""
    date: datetime.date
    totals: Dict[str, int]
    summaries: List[GoalTotal]
    weekly_target_shares: Dict[str, int]


def _persist(session: PlannerSession, db: Session, previous: List[ScheduledBlock]) -> None:
    """Save the session blocks, restoring previous in memory if the save fails."""
    try:
        PlannerStateRepository(db).save_blocks(session.export_snapshot())
    except Exception as e:
        session.store.load(previous)
        logger.error(f"Saving blocks failed, restored {len(previous)} blocks in memory: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to save blocks: {e}")


def _block_response(session: PlannerSession, block: ScheduledBlock) -> BlockResponse:
    return BlockResponse(
        block=block,
        start_label=session.axis.format_label(block.start_minute),
        end_label=session.axis.format_label(block.end_minute),
    )


@app.get("/grid", response_model=GridResponse)
async def view_grid(session: PlannerSession = Depends(get_session)):
    """Grid slots with their labels."""
    axis = session.axis
    return GridResponse(
        day_start_minute=axis.day_start_minute,
        day_end_minute=axis.day_end_minute,
        snap_unit_minutes=axis.snap_unit_minutes,
        slots=[
            GridSlot(minute=minute, label=axis.format_label(minute), fraction=axis.minute_to_fraction(minute))
            for minute in axis.slot_starts()
        ],
    )


@app.get("/goals", response_model=List[Goal])
async def list_goals(session: PlannerSession = Depends(get_session)):
    return list(session.goals.values())


@app.get("/templates", response_model=List[BlockTemplate])
async def list_templates(session: PlannerSession = Depends(get_session)):
    return list(session.templates.values())


@app.get("/blocks", response_model=BlocksResponse)
async def list_blocks(date: Optional[datetime.date] = None, session: PlannerSession = Depends(get_session)):
    """Blocks for a date (the active date by default)."""
    day = date or session.active_date
    return BlocksResponse(date=day, blocks=session.store.query_by_date(day))


@app.put("/active-date", response_model=BlocksResponse)
async def set_active_date(request: ActiveDateRequest, session: PlannerSession = Depends(get_session)):
    session.set_active_date(request.date)
    return BlocksResponse(date=session.active_date, blocks=session.blocks())


@app.post("/blocks", response_model=BlockResponse, status_code=201)
def create_block(
    spec: BlockSpec,
    session: PlannerSession = Depends(get_session),
    db: Session = Depends(get_db),
):
    """Create an ad hoc block."""
    with _mutation_lock:
        previous = session.export_snapshot()
        try:
            block_id = session.add_block(spec)
        except InvalidDurationError as e:
            raise HTTPException(status_code=422, detail=str(e))
        _persist(session, db, previous)
        return _block_response(session, session.store.get(block_id))


@app.post("/blocks/from-template/{template_id}", response_model=BlockResponse, status_code=201)
def create_block_from_template(
    template_id: str,
    request: Optional[FromTemplateRequest] = None,
    session: PlannerSession = Depends(get_session),
    db: Session = Depends(get_db),
):
    """Add a template's block to the active date."""
    start_minute = request.start_minute if request else None
    with _mutation_lock:
        previous = session.export_snapshot()
        try:
            block_id = session.add_from_template(template_id, start_minute=start_minute)
        except TemplateNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        _persist(session, db, previous)
        return _block_response(session, session.store.get(block_id))


@app.post("/blocks/{block_id}/move", response_model=BlockResponse)
def move_block(
    block_id: str,
    request: PointerRequest,
    session: PlannerSession = Depends(get_session),
    db: Session = Depends(get_db),
):
    with _mutation_lock:
        previous = session.export_snapshot()
        try:
            block = session.move_block(block_id, request.fraction)
        except BlockNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        _persist(session, db, previous)
        return _block_response(session, block)


@app.post("/blocks/{block_id}/resize-start", response_model=BlockResponse)
def resize_block_start(
    block_id: str,
    request: PointerRequest,
    session: PlannerSession = Depends(get_session),
    db: Session = Depends(get_db),
):
    with _mutation_lock:
        previous = session.export_snapshot()
        try:
            block = session.resize_block_start(block_id, request.fraction)
        except BlockNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        _persist(session, db, previous)
        return _block_response(session, block)


@app.post("/blocks/{block_id}/resize-end", response_model=BlockResponse)
def resize_block_end(
    block_id: str,
    request: PointerRequest,
    session: PlannerSession = Depends(get_session),
    db: Session = Depends(get_db),
):
    with _mutation_lock:
        previous = session.export_snapshot()
        try:
            block = session.resize_block_end(block_id, request.fraction)
        except BlockNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        _persist(session, db, previous)
        return _block_response(session, block)


@app.patch("/blocks/{block_id}", response_model=BlockResponse)
def patch_block(
    block_id: str,
    fields: BlockPatch,
    session: PlannerSession = Depends(get_session),
    db: Session = Depends(get_db),
):
    """Reassign goal, note or template."""
    with _mutation_lock:
        previous = session.export_snapshot()
        try:
            block = session.patch_block(block_id, fields)
        except BlockNotFoundError as e:
            raise HTTPException(status_code=404, detail=str(e))
        _persist(session, db, previous)
        return _block_response(session, block)


@app.delete("/blocks/{block_id}", status_code=204)
def delete_block(
    block_id: str,
    session: PlannerSession = Depends(get_session),
    db: Session = Depends(get_db),
):
    """Delete a block; deleting an absent block is not an error."""
    with _mutation_lock:
        previous = session.export_snapshot()
        if session.remove_block(block_id):
            _persist(session, db, previous)
    return Response(status_code=204)


@app.get("/totals", response_model=TotalsResponse)
async def view_totals(session: PlannerSession = Depends(get_session)):
    """Time per goal on the active date."""
    return TotalsResponse(
        date=session.active_date,
        totals=session.current_totals(),
        summaries=session.goal_summaries(),
        weekly_target_shares=session.weekly_target_shares(),
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
