import logging
from itertools import groupby

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import SessionData, get_current_session
from models.staybacks import DateGroup as DateGroupModel, Stayback as StaybackModel
from schemas.staybacks import (
    DateGroup as DateGroupSchema, Stayback as StaybackSchema, StaybackCreate, StaybackGroup,
    StaybackStudentsPatch,
)
from services.report_service import report_service
from services.submissions import resolve_students, validate_team
from utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Staybacks"])


def serialize_stayback(s: StaybackModel) -> StaybackSchema:
    return StaybackSchema(
        id=s.id,
        team=s.team,
        title=s.title,
        dateGroup=DateGroupSchema(id=s.date_group.id, date=s.date_group.date),
        students=[u.email for u in s.students],
    )


def get_stayback_or_404(db: Session, stayback_id: int) -> StaybackModel:
    stayback = db.get(StaybackModel, stayback_id)
    if stayback is None:
        raise NotFoundError("Stayback not found")
    return stayback


def _commit(db: Session, what: str):
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error while {what}")
        raise


# ==========================================================
# [1] /staybacks: create + list grouped by date
# ==========================================================

# ✅ [READ] staybacks grouped by day, newest day first
@router.get("/staybacks")
def read_staybacks(db: Session = Depends(get_db), session: SessionData = Depends(get_current_session)):
    records = (
        db.query(StaybackModel)
        .join(StaybackModel.date_group)
        .order_by(DateGroupModel.date.desc(), StaybackModel.id)
        .all()
    )
    groups = [
        StaybackGroup(date=day, items=[serialize_stayback(s) for s in items]).model_dump(mode="json")
        for day, items in groupby(records, key=lambda s: s.date_group.date)
    ]
    return {
        "success": True,
        "data": groups,
        "message": f"{len(records)} stayback(s) in {len(groups)} day(s)"
    }


# ✅ [CREATE] stayback; the day's DateGroup is created on first use
@router.post("/staybacks", status_code=201)
def create_stayback(
    payload: StaybackCreate,
    db: Session = Depends(get_db),
    session: SessionData = Depends(get_current_session),
):
    validate_team(payload.team)
    students = resolve_students(db, payload.students)

    date_group = db.query(DateGroupModel).filter(DateGroupModel.date == payload.date).first()
    if date_group is None:
        date_group = DateGroupModel(date=payload.date)
        db.add(date_group)

    stayback = StaybackModel(team=payload.team, title=payload.title.strip(), date_group=date_group, students=students)
    db.add(stayback)
    _commit(db, "creating stayback")
    db.refresh(stayback)
    logger.info(f"Stayback {stayback.id} created by user {session['user_id']} for {payload.date}")
    return {
        "success": True,
        "data": serialize_stayback(stayback).model_dump(mode="json"),
        "message": "Stayback request submitted successfully"
    }


# ==========================================================
# [2] /staybacklogs/{id}: detail, delete, students, print
# ==========================================================

# ✅ [READ] one stayback with its date group (session required)
@router.get("/staybacklogs/{stayback_id}")
def read_stayback(stayback_id: int, db: Session = Depends(get_db), session: SessionData = Depends(get_current_session)):
    stayback = get_stayback_or_404(db, stayback_id)
    return serialize_stayback(stayback).model_dump(mode="json")


# ✅ [DELETE] stayback
@router.delete("/staybacklogs/{stayback_id}")
def delete_stayback(stayback_id: int, db: Session = Depends(get_db), session: SessionData = Depends(get_current_session)):
    stayback = get_stayback_or_404(db, stayback_id)
    deleted = serialize_stayback(stayback).model_dump(mode="json")
    db.delete(stayback)
    _commit(db, f"deleting stayback {stayback_id}")
    logger.info(f"Stayback {stayback_id} deleted by user {session['user_id']}")
    return deleted


# ✅ [UPDATE] add/remove participants by email
@router.patch("/staybacklogs/{stayback_id}/students")
def update_stayback_students(
    stayback_id: int,
    payload: StaybackStudentsPatch,
    db: Session = Depends(get_db),
    session: SessionData = Depends(get_current_session),
):
    stayback = get_stayback_or_404(db, stayback_id)
    users = resolve_students(db, payload.emails)

    if payload.action == "add":
        current = {u.id for u in stayback.students}
        stayback.students.extend(u for u in users if u.id not in current)
    else:
        removed = {u.id for u in users}
        stayback.students = [u for u in stayback.students if u.id not in removed]

    _commit(db, f"updating students of stayback {stayback_id}")
    db.refresh(stayback)
    return serialize_stayback(stayback).model_dump(mode="json")


# ✅ [PRINT] appreciation page + participant table
@router.get("/staybacklogs/{stayback_id}/print", response_class=HTMLResponse)
def print_stayback(stayback_id: int, db: Session = Depends(get_db), session: SessionData = Depends(get_current_session)):
    stayback = get_stayback_or_404(db, stayback_id)
    return HTMLResponse(report_service.render_stayback(stayback))
