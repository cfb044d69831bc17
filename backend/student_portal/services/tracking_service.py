# student_portal/services/tracking_service.py
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database.models.request import Request
from ..exceptions import NotFound, UnexpectedError
from ..logging_config import logger
from .status_vocabulary import translate_service_type, translate_status
from .timeline_service import StatusDescriptor, TimelineService

NOT_FOUND_MESSAGE = "No request matches this number and date"


@dataclass
class TrackingResult:
    request: Request
    status_label: str
    service_type_label: str
    timeline: List[StatusDescriptor]


def normalize_request_number(request_number: str) -> str:
    return (request_number or "").strip().upper()


def day_window(day: date):
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)


class TrackingService:
    """Find a request by number + submission day and build its progress view"""

    @staticmethod
    def lookup(db: Session, request_number: str, submission_date: date) -> Request:
        """
        Request numbers can repeat, so the match is narrowed to requests
        created on the given calendar day. A wrong number and a wrong date
        produce the same NotFound.
        """
        number = normalize_request_number(request_number)
        if not number or submission_date is None:
            raise NotFound(NOT_FOUND_MESSAGE)

        start, end = day_window(submission_date)
        try:
            request = (
                db.query(Request)
                .filter(
                    Request.request_number == number,
                    Request.created_at >= start,
                    Request.created_at < end,
                )
                .order_by(Request.created_at.desc())
                .first()
            )
        except SQLAlchemyError as e:
            logger.exception("[Tracking] Lookup query failed")
            raise UnexpectedError("Failed to search for the request") from e

        if request is None:
            logger.info(f"[Tracking] No match for {number} on {submission_date.isoformat()}")
            raise NotFound(NOT_FOUND_MESSAGE)

        return request

    @staticmethod
    def track(db: Session, request_number: str, submission_date: date) -> TrackingResult:
        request = TrackingService.lookup(db, request_number, submission_date)
        return TrackingResult(
            request=request,
            status_label=translate_status(request.status),
            service_type_label=translate_service_type(request.service_type),
            timeline=TimelineService.generate(request.status, request.created_at),
        )

    @staticmethod
    def list_owner_requests(db: Session, session) -> List[Request]:
        """Caller's own requests, newest first"""
        return (
            db.query(Request)
            .filter(Request.owner_id == session.user_id)
            .order_by(Request.created_at.desc())
            .all()
        )

    @staticmethod
    def get_owner_request(db: Session, session, request_id: str) -> Request:
        request = db.query(Request).filter(Request.id == request_id).first()
        # Another student's request looks the same as a missing one
        if request is None or (request.owner_id != session.user_id and not session.is_admin):
            raise NotFound("No such request")
        return request
