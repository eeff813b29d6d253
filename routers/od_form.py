import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import SessionData, require_role
from models.od_requests import ODRequest as ODRequestModel
from models.users import ROLE_ADMIN, ROLE_TEAMLEAD, User as UserModel
from routers.od_requests import query_requests
from schemas.od_requests import ODFormSubmit, ODRequest as ODRequestSchema
from services.submissions import combine, validate_od_form
from utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/requests", tags=["OD request form"])

OD_REQUEST_TYPE = "OD Request"


def _with_user(r: ODRequestModel) -> dict:
    data = ODRequestSchema.model_validate(r).model_dump(mode="json")
    data["user"] = {"name": r.user.name, "sec": r.user.sec, "year": r.user.year, "email": r.user.email}
    return data


# ✅ [READ] requests with the nested student, e.g. ?status=1 for the approved report
@router.get("")
def read_requests(
    status: Optional[int] = Query(None),
    teamLeadId: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    records = query_requests(db, status, teamLeadId)
    return {
        "success": True,
        "data": [_with_user(r) for r in records],
        "message": f"{len(records)} request(s)"
    }


# ✅ [CREATE] OD form: one request per selected student, submitted by the team lead in session
@router.post("", status_code=201)
def submit_od_form(
    form: ODFormSubmit,
    db: Session = Depends(get_db),
    session: SessionData = Depends(require_role(ROLE_TEAMLEAD, ROLE_ADMIN)),
):
    error = validate_od_form(form)
    if error:
        raise ValidationError(error)

    user_ids = list(dict.fromkeys(form.user_ids))
    known = {u.id for u in db.query(UserModel.id).filter(UserModel.id.in_(user_ids)).all()}
    missing = [uid for uid in user_ids if uid not in known]
    if missing:
        raise ValidationError("Unknown student(s)", details={"user_ids": missing})

    day = form.date or datetime.now(timezone.utc).date()
    from_time = combine(day, form.from_time)
    to_time = combine(day, form.to_time)

    records = [
        ODRequestModel(
            user_id=user_id,
            reason=form.reason.strip(),
            description=form.description.strip(),
            from_time=from_time,
            to_time=to_time,
            request_type=OD_REQUEST_TYPE,
            teamlead_id=session["user_id"],
        )
        for user_id in user_ids
    ]
    try:
        db.add_all(records)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error saving OD form")
        raise

    logger.info(f"Team lead {session['user_id']} submitted {len(records)} OD request(s)")
    return {
        "success": True,
        "data": {"count": len(records), "ids": [r.id for r in records]},
        "message": "Requests sent successfully"
    }
