import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse, Response
from sqlalchemy.orm import Session

from database.db import get_db
from dependencies.security import SessionData, get_current_session
from models.od_requests import RequestStatus
from routers.od_requests import query_requests
from services.report_service import report_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/reports", tags=["Reports"])


# ✅ [HTML] printable letter + approved requests
@router.get("/approved", response_class=HTMLResponse)
def approved_report(
    teamLeadId: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    session: SessionData = Depends(get_current_session),
):
    requests = query_requests(db, int(RequestStatus.APPROVED), teamLeadId)
    return HTMLResponse(report_service.render_approved(requests))


# ✅ [PDF] same document as a download
@router.get("/approved/pdf")
def approved_report_pdf(
    teamLeadId: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    session: SessionData = Depends(get_current_session),
):
    requests = query_requests(db, int(RequestStatus.APPROVED), teamLeadId)
    pdf_content = report_service.generate_approved_pdf(requests)
    logger.info(f"Approved report PDF generated for user {session['user_id']} ({len(requests)} request(s))")
    return Response(
        content=pdf_content,
        media_type="application/pdf",
        headers={"Content-Disposition": "attachment; filename=approved_od_requests.pdf"}
    )
