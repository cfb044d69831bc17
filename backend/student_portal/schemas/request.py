# student_portal/schemas/request.py
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict


class UploadedFileOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    request_id: str
    file_type: str
    file_path: str
    original_filename: Optional[str] = None
    content_type: Optional[str] = None
    size_bytes: Optional[int] = None
    uploaded_at: datetime


class RequestOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    owner_id: str
    service_type: str
    status: str
    request_number: str
    submission_date: date
    full_name_ar: Optional[str] = None
    full_name_en: Optional[str] = None
    university_name: Optional[str] = None
    major: Optional[str] = None
    additional_notes: Optional[str] = None
    admin_notes: Optional[str] = None
    created_at: datetime


class SubmissionResponse(BaseModel):
    request_number: str
    request: RequestOut
    files: List[UploadedFileOut]


class StatusDescriptorOut(BaseModel):
    status: str
    label: str
    date: str
    complete: bool


class TrackedRequestOut(BaseModel):
    """What an applicant sees when tracking a request"""
    request_number: str
    status: str
    status_label: str
    service_type: str
    service_type_label: str
    admin_notes: Optional[str] = None
    submission_date: date
    created_at: datetime
    timeline: List[StatusDescriptorOut]


class AdminRequestUpdate(BaseModel):
    status: Optional[str] = None
    admin_notes: Optional[str] = None


class StatusChangeOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    old_status: Optional[str] = None
    new_status: str
    note: Optional[str] = None
    updated_by: Optional[str] = None
    updated_at: datetime


class StatsOut(BaseModel):
    total_requests: int
    completed_requests: int
    pending_requests: int
    rejected_requests: int
    total_users: int
    completion_rate: int
    pending_rate: int
    by_status: Dict[str, int]
