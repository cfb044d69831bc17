# student_portal/services/admin_service.py
from typing import Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..database.models.request import Request, RequestStatus, RequestStatusChange
from ..database.models.user import User, UserRole
from ..exceptions import NotFound, ValidationError
from ..logging_config import logger
from .auth_service import CallerSession
from .status_vocabulary import PENDING_STATUSES, is_known_service_type, is_known_status

_UNSET = object()


class AdminService:
    """Back-office operations on requests and users"""

    @staticmethod
    def list_requests(
        db: Session,
        status: Optional[str] = None,
        service_type: Optional[str] = None,
        search: Optional[str] = None,
    ) -> List[Request]:
        """All requests, newest first, optionally filtered"""
        query = db.query(Request)

        if status and status != "all":
            query = query.filter(Request.status == status)
        if service_type and service_type != "all":
            query = query.filter(Request.service_type == service_type)
        if search and search.strip():
            query = query.filter(Request.request_number.ilike(f"%{search.strip()}%"))

        return query.order_by(Request.created_at.desc()).all()

    @staticmethod
    def get_request(db: Session, request_id: str) -> Request:
        request = db.query(Request).filter(Request.id == request_id).first()
        if not request:
            raise NotFound("No such request")
        return request

    @staticmethod
    def update_request(
        db: Session,
        admin: CallerSession,
        request_id: str,
        status: Optional[str] = None,
        admin_notes=_UNSET,
    ) -> Request:
        """
        Set status and/or admin notes.

        Any status may follow any other; the last write wins. A status change
        is recorded in the request's history.
        """
        request = AdminService.get_request(db, request_id)

        if status is not None:
            if not is_known_status(status):
                raise ValidationError(f"Unknown status '{status}'", details={"status": status})
            if status != request.status:
                db.add(RequestStatusChange(
                    request_id=request.id,
                    old_status=request.status,
                    new_status=status,
                    note=admin_notes if admin_notes is not _UNSET else None,
                    updated_by=admin.user_id,
                ))
                logger.info(
                    f"[Admin] {request.request_number}: {request.status} -> {status} by {admin.email}"
                )
                request.status = status

        if admin_notes is not _UNSET:
            request.admin_notes = (admin_notes or "").strip() or None

        db.commit()
        db.refresh(request)
        return request

    @staticmethod
    def request_history(db: Session, request_id: str) -> List[RequestStatusChange]:
        return AdminService.get_request(db, request_id).history

    @staticmethod
    def stats(db: Session) -> Dict:
        counts = dict(
            db.query(Request.status, func.count(Request.id)).group_by(Request.status).all()
        )
        total = sum(counts.values())
        completed = counts.get(RequestStatus.APPROVED.value, 0)
        pending = sum(counts.get(s, 0) for s in PENDING_STATUSES)
        rejected = counts.get(RequestStatus.REJECTED.value, 0)
        total_users = db.query(func.count(User.id)).scalar() or 0

        return {
            "total_requests": total,
            "completed_requests": completed,
            "pending_requests": pending,
            "rejected_requests": rejected,
            "total_users": total_users,
            "completion_rate": round(completed * 100 / total) if total else 0,
            "pending_rate": round(pending * 100 / total) if total else 0,
            "by_status": counts,
        }

    @staticmethod
    def list_users(db: Session) -> List[User]:
        return db.query(User).order_by(User.created_at.desc()).all()

    @staticmethod
    def set_user_role(db: Session, admin: CallerSession, user_id: str, role: str) -> User:
        if role not in {r.value for r in UserRole}:
            raise ValidationError(f"Unknown role '{role}'", details={"role": role})
        user = db.query(User).filter(User.id == user_id).first()
        if not user:
            raise NotFound("No such user")

        user.role = role
        db.commit()
        db.refresh(user)
        logger.info(f"[Admin] {user.email} role set to {role} by {admin.email}")
        return user


def validate_filters(status: Optional[str], service_type: Optional[str]) -> None:
    if status and status != "all" and not is_known_status(status):
        raise ValidationError(f"Unknown status '{status}'", details={"status": status})
    if service_type and service_type != "all" and not is_known_service_type(service_type):
        raise ValidationError(f"Unknown service type '{service_type}'", details={"service_type": service_type})
