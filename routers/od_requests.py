import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Body, Depends, Query
from pydantic import TypeAdapter, ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config.settings import settings
from database.db import get_db
from models.od_requests import ODRequest as ODRequestModel
from models.users import User as UserModel
from schemas.common import paginate
from schemas.od_requests import (
    BulkResult, ModifyTimings, ODRequest as ODRequestSchema, ODRequestCreate, ODRequestListItem,
)
from services.approval import (
    ALL, BULK_ACTIONS, MODIFY_TIMINGS, STATUS_ACTIONS, QueueFilters, SelectionSet, build_facets, can_transition,
    filter_requests,
)
from services.time_validation import END_BEFORE_START_MESSAGE, to_naive_utc
from utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/od-request", tags=["OD requests"])

_id_list = TypeAdapter(List[int])


def flatten_request(r: ODRequestModel) -> dict:
    """request + the student's name/section/year in one flat row"""
    return ODRequestListItem(
        od_id=r.id,
        user_id=r.user_id,
        name=r.user.name,
        sec=r.user.sec,
        year=r.user.year,
        reason=r.reason,
        description=r.description,
        from_time=r.from_time,
        to_time=r.to_time,
        status=r.status,
        request_type=r.request_type,
        date=r.date,
    ).model_dump(mode="json")


def query_requests(db: Session, status: Optional[int] = None, team_lead_id: Optional[int] = None):
    query = db.query(ODRequestModel)
    if status is not None:
        query = query.filter(ODRequestModel.status == status)
    if team_lead_id is not None:
        query = query.filter(ODRequestModel.teamlead_id == team_lead_id)
    return query.order_by(ODRequestModel.date.desc(), ODRequestModel.id.desc()).all()


# ==========================================================
# [READ] list requests
# ==========================================================
@router.get("")
def list_requests(
    status: Optional[int] = Query(None),
    teamLeadId: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    try:
        records = query_requests(db, status, teamLeadId)
    except SQLAlchemyError:
        logger.exception("Error fetching OD requests")
        raise
    return [flatten_request(r) for r in records]


# ==========================================================
# [READ] approval queue: facets + filters + selection + one page
# ==========================================================
@router.get("/queue")
def approval_queue(
    status: int = Query(0),
    teamLeadId: Optional[int] = Query(None),
    reason: str = Query(ALL),
    year: str = Query(ALL),
    section: str = Query(ALL),
    search: str = Query(""),
    page: int = Query(1, ge=1),
    size: Optional[int] = Query(None, ge=1, le=200),
    selected: List[int] = Query([]),
    toggle: List[int] = Query([]),
    toggleAll: bool = Query(False),
    prevReason: Optional[str] = Query(None),
    prevYear: Optional[str] = Query(None),
    prevSection: Optional[str] = Query(None),
    prevSearch: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    rows = [flatten_request(r) for r in query_requests(db, status, teamLeadId)]
    filters = QueueFilters(reason=reason, year=year, section=section, search=search)
    filtered = filter_requests(rows, filters)
    visible_ids = [r["od_id"] for r in filtered]

    # ✅ selection is sent back by the client on every call; ids no longer in the queue are dropped
    selection = SelectionSet(selected)
    selection.retain(r["od_id"] for r in rows)
    previous = (prevReason, prevYear, prevSection, prevSearch)
    if any(p is not None for p in previous):
        previous_filters = QueueFilters(
            reason=prevReason or ALL, year=prevYear or ALL, section=prevSection or ALL, search=prevSearch or "",
        )
        if previous_filters != filters:
            selection.on_filter_change()
    for od_id in toggle:
        if od_id in visible_ids:
            selection.toggle(od_id)
    if toggleAll:
        selection.toggle_all(visible_ids)

    items, meta = paginate(filtered, page, size or settings.APPROVAL_PAGE_SIZE)
    return {
        "items": items,
        "facets": build_facets(rows),
        "filters": {**filters.__dict__, "is_default": filters.is_default()},
        "selection": {"ids": selection.ids, "all_selected": selection.all_selected(visible_ids)},
        "meta": meta.model_dump(),
    }


# ==========================================================
# [CREATE] one request
# ==========================================================
@router.post("", status_code=201)
def create_request(payload: ODRequestCreate, db: Session = Depends(get_db)):
    from_time = to_naive_utc(payload.from_time)
    to_time = to_naive_utc(payload.to_time)
    if from_time >= to_time:
        raise ValidationError(END_BEFORE_START_MESSAGE)

    for field, user_id in (("user_id", payload.user_id), ("teamlead_id", payload.teamlead_id)):
        if db.get(UserModel, user_id) is None:
            raise ValidationError(f"Unknown {field}: {user_id}")

    db_request = ODRequestModel(
        user_id=payload.user_id,
        reason=payload.reason,
        description=payload.description,
        teamlead_id=payload.teamlead_id,
        from_time=from_time,
        to_time=to_time,
        request_type=payload.request_type,
    )
    try:
        db.add(db_request)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Error creating OD request")
        raise
    db.refresh(db_request)
    logger.info(f"OD request {db_request.id} created for user {db_request.user_id}")
    return ODRequestSchema.model_validate(db_request).model_dump(mode="json")


# ==========================================================
# [UPDATE] bulk actions: ?action=bulk_approve | bulk_reject | modify_timings
# ==========================================================
def _bulk_update(db: Session, ids: List[int], values: dict) -> int:
    if not ids:
        return 0
    try:
        count = (
            db.query(ODRequestModel)
            .filter(ODRequestModel.id.in_(ids))
            .update(values, synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Bulk update failed for {len(ids)} request(s)")
        raise
    return count


def bulk_set_status(db: Session, ids: List[int], action: str) -> int:
    status = STATUS_ACTIONS[action]
    if ids:
        current = db.query(ODRequestModel.id, ODRequestModel.status).filter(ODRequestModel.id.in_(ids)).all()
        decided = [request_id for request_id, s in current if not can_transition(s, status)]
        if decided:
            # the update stays unconditional
            logger.info(f"{action}: overwriting {len(decided)} already decided request(s): {decided}")
    return _bulk_update(db, ids, {ODRequestModel.status: int(status)})


def modify_timings(db: Session, data: ModifyTimings) -> int:
    from_time = to_naive_utc(data.from_time)
    to_time = to_naive_utc(data.to_time)
    if from_time >= to_time:
        raise ValidationError(END_BEFORE_START_MESSAGE)
    return _bulk_update(db, data.requestIds, {
        ODRequestModel.from_time: from_time,
        ODRequestModel.to_time: to_time,
    })


@router.put("")
def bulk_action(
    action: Optional[str] = Query(None),
    payload: Any = Body(None),
    db: Session = Depends(get_db),
):
    if action not in BULK_ACTIONS:
        raise ValidationError("Invalid action", details={"allowed": list(BULK_ACTIONS)})

    try:
        if action == MODIFY_TIMINGS:
            count = modify_timings(db, ModifyTimings.model_validate(payload))
        else:
            count = bulk_set_status(db, _id_list.validate_python(payload), action)
    except PydanticValidationError as e:
        raise ValidationError(
            "Invalid request payload",
            details=[{"loc": [str(p) for p in err["loc"]], "msg": err["msg"]} for err in e.errors()],
        )

    logger.info(f"{action}: {count} request(s) updated")
    return BulkResult(count=count).model_dump()


# ==========================================================
# [DELETE] one request by id
# ==========================================================
@router.delete("")
def delete_request(id: Optional[str] = Query(None), db: Session = Depends(get_db)):
    if not id:
        raise ValidationError("Request ID is required")
    try:
        request_id = int(id)
    except ValueError:
        raise ValidationError("Request ID must be an integer")

    record = db.get(ODRequestModel, request_id)
    if record is None:
        raise NotFoundError("OD request not found")

    deleted = ODRequestSchema.model_validate(record).model_dump(mode="json")
    try:
        db.delete(record)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(f"Error deleting OD request {request_id}")
        raise
    logger.info(f"OD request {request_id} deleted")
    return deleted
