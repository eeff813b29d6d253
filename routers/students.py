from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import SessionData, get_current_session
from models.meetings import meeting_attendees
from models.staybacks import stayback_students
from models.users import ROLE_STUDENT, User as UserModel
from schemas.users import Student as StudentSchema, StudentCounts
from utils.exceptions import NotFoundError, ValidationError

router = APIRouter(prefix="/api", tags=["Students"])

ALL = "all"


def serialize_student(u: UserModel) -> dict:
    return StudentSchema(user_id=u.id, name=u.name, email=u.email, sec=u.sec, year=u.year, role=u.role).model_dump()


# ✅ [SEARCH] roster search by name/email, section, year ("all" disables a filter)
@router.get("/students")
def read_students(
    search: str = Query(""),
    section: str = Query(ALL),
    year: str = Query(ALL),
    db: Session = Depends(get_db),
    session: SessionData = Depends(get_current_session),
):
    query = db.query(UserModel).filter(UserModel.role == ROLE_STUDENT)
    if search:
        like = f"%{search.strip()}%"
        query = query.filter(or_(UserModel.name.ilike(like), UserModel.email.ilike(like)))
    if section and section.lower() != ALL:
        query = query.filter(UserModel.sec == section)
    if year and year.lower() != ALL:
        if not year.strip().isdigit():
            raise ValidationError("year must be a number or \"all\"")
        query = query.filter(UserModel.year == int(year))
    return [serialize_student(u) for u in query.order_by(UserModel.name).all()]


# ✅ [STATS] stayback / meeting participation per student
@router.get("/counts")
def read_counts(db: Session = Depends(get_db), session: SessionData = Depends(get_current_session)):
    stayback_counts = dict(
        db.query(stayback_students.c.user_id, func.count(stayback_students.c.stayback_id))
        .group_by(stayback_students.c.user_id).all()
    )
    meeting_counts = dict(
        db.query(meeting_attendees.c.user_id, func.count(meeting_attendees.c.meeting_id))
        .group_by(meeting_attendees.c.user_id).all()
    )
    students = db.query(UserModel).filter(UserModel.role == ROLE_STUDENT).order_by(UserModel.email).all()
    return [
        StudentCounts(
            email=u.email,
            stayback_cnt=stayback_counts.get(u.id, 0),
            meeting_cnt=meeting_counts.get(u.id, 0),
        ).model_dump()
        for u in students
    ]


# ✅ [READ] one roster entry
@router.get("/students/{user_id}")
def read_student(user_id: int, db: Session = Depends(get_db), session: SessionData = Depends(get_current_session)):
    user = db.get(UserModel, user_id)
    if user is None:
        raise NotFoundError("Student not found")
    return serialize_student(user)
