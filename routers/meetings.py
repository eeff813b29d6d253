import logging

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import SessionData, get_current_session
from models.meetings import Meeting as MeetingModel
from schemas.meetings import Meeting as MeetingSchema, MeetingCreate
from services.submissions import combine, resolve_students, validate_meeting_form
from utils.exceptions import NotFoundError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/meetings", tags=["Meetings"])


def serialize_meeting(m: MeetingModel) -> dict:
    return MeetingSchema(
        id=m.id,
        team=m.team,
        title=m.title,
        date=m.date,
        from_time=m.from_time,
        to_time=m.to_time,
        students=[s.email for s in m.students],
    ).model_dump(mode="json")


# ==========================================================
# [1] CRUD
# ==========================================================

# ✅ [CREATE] meeting request
@router.post("", status_code=201)
def create_meeting(
    meeting: MeetingCreate,
    db: Session = Depends(get_db),
    session: SessionData = Depends(get_current_session),
):
    validate_meeting_form(meeting)
    students = resolve_students(db, meeting.students)

    db_meeting = MeetingModel(
        team=meeting.team,
        title=meeting.title.strip(),
        date=meeting.date,
        from_time=combine(meeting.date, meeting.from_time, meeting.from_time_modifier),
        to_time=combine(meeting.date, meeting.to_time, meeting.to_time_modifier),
        students=students,
    )
    try:
        db.add(db_meeting)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating meeting")
        raise
    db.refresh(db_meeting)
    logger.info(f"Meeting {db_meeting.id} created by user {session['user_id']} with {len(students)} attendee(s)")
    return {
        "success": True,
        "data": serialize_meeting(db_meeting),
        "message": "Meeting request submitted successfully"
    }


# ✅ [READ] all meetings, newest first
@router.get("")
def read_meetings(db: Session = Depends(get_db), session: SessionData = Depends(get_current_session)):
    records = db.query(MeetingModel).order_by(MeetingModel.date.desc(), MeetingModel.from_time.desc()).all()
    return {
        "success": True,
        "data": [serialize_meeting(m) for m in records],
        "message": "Meetings loaded"
    }


# ✅ [READ] one meeting
@router.get("/{meeting_id}")
def read_meeting(meeting_id: int, db: Session = Depends(get_db), session: SessionData = Depends(get_current_session)):
    meeting = db.get(MeetingModel, meeting_id)
    if meeting is None:
        raise NotFoundError("Meeting not found")
    return {
        "success": True,
        "data": serialize_meeting(meeting),
        "message": "Meeting loaded"
    }
