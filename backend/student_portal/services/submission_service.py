# student_portal/services/submission_service.py
"""
Request submission: number the request, insert it, then store each attachment.

Attachments are handled one at a time in slot order (passport, certificate,
visa_request). The first failing attachment stops the batch. The request row
and any attachments already stored stay in place; the error carries the
request number so the applicant can still refer to it.

Per attachment:
    validate -> upload object -> insert ``files`` row
and if the row insert fails the object just uploaded is deleted again, so
every stored object has exactly one row and every row has its object.
"""
import random
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import BinaryIO, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..database.base import utcnow
from ..database.models.request import Request, RequestStatus
from ..database.models.uploaded_file import UploadedFile
from ..exceptions import AuthRequired, PortalError, UnexpectedError, ValidationError
from ..logging_config import logger
from .auth_service import CallerSession
from .status_vocabulary import ATTACHMENT_SLOTS, is_known_service_type
from .storage_service import StorageBackend, object_key
from .upload_policy import UploadPolicy

REQUEST_NUMBER_PATTERN = r"^REQ-\d{4}-\d{4}$"


def generate_request_number(today: Optional[date] = None, rng: Optional[random.Random] = None) -> str:
    """REQ-<year>-<0000..9999>. Not checked for collisions."""
    today = today or utcnow().date()
    rng = rng or random
    return f"REQ-{today.year}-{rng.randint(0, 9999):04d}"


@dataclass
class Attachment:
    """
    One uploaded document waiting to be stored.

    Either ``data`` holds the bytes already, or ``stream`` is read on demand.
    ``declared_size`` is the size the upload reported, so an oversized file
    can be refused before its bytes are pulled into memory.
    """
    file_type: str
    filename: str
    content_type: Optional[str]
    data: Optional[bytes] = None
    stream: Optional[BinaryIO] = None
    declared_size: Optional[int] = None

    @property
    def size_bytes(self) -> int:
        if self.data is None and self.declared_size is not None:
            return self.declared_size
        return len(self.read())

    def read(self) -> bytes:
        if self.data is None:
            self.data = self.stream.read() if self.stream is not None else b""
        return self.data


@dataclass
class SubmissionForm:
    service_type: str
    full_name_ar: Optional[str] = None
    full_name_en: Optional[str] = None
    university_name: Optional[str] = None
    major: Optional[str] = None
    additional_notes: Optional[str] = None


@dataclass
class SubmissionResult:
    request: Request
    files: List[UploadedFile] = field(default_factory=list)

    @property
    def request_number(self) -> str:
        return self.request.request_number


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _slot_order(attachment: Attachment) -> int:
    try:
        return ATTACHMENT_SLOTS.index(attachment.file_type)
    except ValueError:
        return len(ATTACHMENT_SLOTS)


class RequestSubmissionService:
    def __init__(self, storage: StorageBackend, policy: UploadPolicy, rng: Optional[random.Random] = None):
        self.storage = storage
        self.policy = policy
        self.rng = rng

    def submit(
        self,
        db: Session,
        session: Optional[CallerSession],
        form: SubmissionForm,
        attachments: Optional[List[Attachment]] = None,
        now: Optional[datetime] = None,
    ) -> SubmissionResult:
        if session is None:
            raise AuthRequired()

        if not is_known_service_type(form.service_type):
            raise ValidationError(
                f"Unknown service type '{form.service_type}'",
                details={"service_type": form.service_type},
            )

        # submission_date, the number's year and created_at come from one UTC reading
        now = now or utcnow()
        request = self._create_request(db, session, form, now)
        result = SubmissionResult(request=request)

        for attachment in sorted(attachments or [], key=_slot_order):
            try:
                result.files.append(self._store_attachment(db, session, request, attachment))
            except PortalError as e:
                e.details.setdefault("request_number", request.request_number)
                e.details.setdefault("request_id", request.id)
                e.details.setdefault("filename", attachment.filename)
                e.details.setdefault("file_type", attachment.file_type)
                e.details["files_stored"] = len(result.files)
                logger.warning(
                    f"[Submission] {request.request_number}: stopped at '{attachment.filename}' "
                    f"({attachment.file_type}) after {len(result.files)} file(s): {e.message}"
                )
                raise

        logger.info(
            f"[Submission] {request.request_number} complete with {len(result.files)} file(s)"
        )
        return result

    def _create_request(self, db: Session, session: CallerSession, form: SubmissionForm, now: datetime) -> Request:
        today = now.date()
        request = Request(
            owner_id=session.user_id,
            service_type=form.service_type,
            status=RequestStatus.SUBMITTED.value,
            request_number=generate_request_number(today, self.rng),
            submission_date=today,
            created_at=now,
            updated_at=now,
            full_name_ar=_blank_to_none(form.full_name_ar),
            full_name_en=_blank_to_none(form.full_name_en),
            university_name=_blank_to_none(form.university_name),
            major=_blank_to_none(form.major),
            additional_notes=_blank_to_none(form.additional_notes),
        )
        try:
            db.add(request)
            db.commit()
            db.refresh(request)
        except SQLAlchemyError as e:
            db.rollback()
            logger.exception("[Submission] Failed to create request")
            raise UnexpectedError("Failed to create the request") from e

        logger.info(
            f"[Submission] Created {request.request_number} ({request.service_type}) for user {session.user_id}"
        )
        return request

    def _store_attachment(self, db: Session, session: CallerSession, request: Request, attachment: Attachment) -> UploadedFile:
        # Policy check happens before any storage call for this file
        self.policy.validate(attachment.filename, attachment.content_type, attachment.size_bytes)
        declared = attachment.declared_size
        data = attachment.read()
        if declared is not None and declared != len(data):
            # Check what actually arrived
            self.policy.validate(attachment.filename, attachment.content_type, len(data))

        key = object_key(session.user_id, request.id, attachment.file_type, attachment.filename)
        stored_path = self.storage.upload(key, data, attachment.content_type)

        row = UploadedFile(
            request_id=request.id,
            file_type=attachment.file_type,
            file_path=stored_path,
            original_filename=attachment.filename,
            content_type=attachment.content_type,
            size_bytes=len(data),
        )
        try:
            db.add(row)
            db.commit()
            db.refresh(row)
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"[Submission] Metadata insert failed for {key}, removing stored object: {e}")
            self._discard_object(key)
            raise UnexpectedError(
                f"Failed to save file details for '{attachment.filename}'",
                details={"size_bytes": attachment.size_bytes},
            ) from e

        logger.info(f"[Submission] Stored {key} ({attachment.size_bytes} bytes)")
        return row

    def _discard_object(self, key: str) -> None:
        try:
            self.storage.delete(key)
        except PortalError as e:
            # The original failure is what the caller sees
            logger.error(f"[Submission] Could not remove orphaned object {key}: {e.message}")
