# student_portal/routers/tracking.py
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database.session import get_db
from ..schemas.request import TrackedRequestOut
from ..services.tracking_service import TrackingService

router = APIRouter(prefix="/tracking", tags=["tracking"])


@router.get("", response_model=TrackedRequestOut)
def track_request(
    request_number: str = Query(..., min_length=1),
    submission_date: date = Query(...),
    db: Session = Depends(get_db),
):
    """Look up a request by its number and the day it was submitted"""
    result = TrackingService.track(db, request_number, submission_date)
    request = result.request
    return {
        "request_number": request.request_number,
        "status": request.status,
        "status_label": result.status_label,
        "service_type": request.service_type,
        "service_type_label": result.service_type_label,
        "admin_notes": request.admin_notes,
        "submission_date": request.submission_date,
        "created_at": request.created_at,
        "timeline": [d.to_dict() for d in result.timeline],
    }
