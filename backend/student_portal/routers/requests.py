# student_portal/routers/requests.py
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from ..database.models.uploaded_file import FileType
from ..database.session import get_db
from ..exceptions import ValidationError
from ..schemas.request import RequestOut, SubmissionResponse, UploadedFileOut
from ..services.auth_service import CallerSession
from ..services.status_vocabulary import primary_file_type
from ..services.submission_service import Attachment, RequestSubmissionService, SubmissionForm
from ..services.tracking_service import TrackingService
from .deps import get_caller_session, get_submission_service, require_session

router = APIRouter(prefix="/requests", tags=["requests"])


def _to_attachment(file_type: str, upload: UploadFile) -> Attachment:
    # Bytes are read only after the size check passes
    return Attachment(
        file_type=file_type,
        filename=upload.filename or "file",
        content_type=upload.content_type,
        stream=upload.file,
        declared_size=upload.size,
    )


@router.post("", response_model=SubmissionResponse, status_code=201)
def submit_request(
    service_type: str = Form(...),
    full_name_ar: Optional[str] = Form(None),
    full_name_en: Optional[str] = Form(None),
    university_name: Optional[str] = Form(None),
    major: Optional[str] = Form(None),
    additional_notes: Optional[str] = Form(None),
    passport_file: Optional[UploadFile] = File(None),
    certificate_file: Optional[UploadFile] = File(None),
    visa_file: Optional[UploadFile] = File(None),
    file: Optional[UploadFile] = File(None),
    session: Optional[CallerSession] = Depends(get_caller_session),
    service: RequestSubmissionService = Depends(get_submission_service),
    db: Session = Depends(get_db),
):
    """
    Submit a service request with up to three documents.

    `file` is a convenience field: it fills the slot the service type uses
    (passport for renewals, certificate for authentication services,
    visa_request for visas).
    """
    slots = {
        FileType.PASSPORT.value: passport_file,
        FileType.CERTIFICATE.value: certificate_file,
        FileType.VISA_REQUEST.value: visa_file,
    }
    if file is not None:
        slot = primary_file_type(service_type)
        if slots.get(slot) is not None:
            raise ValidationError(f"Two files were sent for the {slot} document", details={"file_type": slot})
        slots[slot] = file

    attachments = [_to_attachment(file_type, upload) for file_type, upload in slots.items() if upload is not None]

    form = SubmissionForm(
        service_type=service_type,
        full_name_ar=full_name_ar,
        full_name_en=full_name_en,
        university_name=university_name,
        major=major,
        additional_notes=additional_notes,
    )
    result = service.submit(db, session, form, attachments)

    return {
        "request_number": result.request_number,
        "request": result.request,
        "files": result.files,
    }


@router.get("/mine", response_model=List[RequestOut])
def my_requests(session: CallerSession = Depends(require_session), db: Session = Depends(get_db)):
    return TrackingService.list_owner_requests(db, session)


@router.get("/{request_id}/files", response_model=List[UploadedFileOut])
def request_files(request_id: str, session: CallerSession = Depends(require_session), db: Session = Depends(get_db)):
    return TrackingService.get_owner_request(db, session, request_id).files
