# student_portal/services/status_vocabulary.py
"""
Request statuses, service types and their display labels.

STATUS_ORDER is the only ordering authority for progress display. ``rejected``
sits last even though an admin can reach it from any earlier status.
"""
from typing import Dict, Optional, Tuple

from ..database.models.request import RequestStatus, ServiceType
from ..database.models.uploaded_file import FileType

STATUS_ORDER: Tuple[str, ...] = (
    RequestStatus.SUBMITTED.value,
    RequestStatus.UNDER_REVIEW.value,
    RequestStatus.PROCESSING.value,
    RequestStatus.APPROVED.value,
    RequestStatus.REJECTED.value,
)

STATUS_LABELS: Dict[str, str] = {
    RequestStatus.SUBMITTED.value: "تم استلام الطلب",
    RequestStatus.UNDER_REVIEW.value: "قيد المراجعة",
    RequestStatus.PROCESSING.value: "قيد المعالجة",
    RequestStatus.APPROVED.value: "تمت الموافقة",
    RequestStatus.REJECTED.value: "تم الرفض",
}

SERVICE_TYPE_LABELS: Dict[str, str] = {
    ServiceType.CERTIFICATE_AUTHENTICATION.value: "توثيق الشهادات",
    ServiceType.CERTIFICATE_DOCUMENTATION.value: "توثيق الوثائق",
    ServiceType.MINISTRY_AUTHENTICATION.value: "توثيق وزاري",
    ServiceType.PASSPORT_RENEWAL.value: "تجديد جواز السفر",
    ServiceType.VISA_REQUEST.value: "طلب تأشيرة",
}

# Which attachment slot a single uploaded document fills for each service
PRIMARY_FILE_TYPE: Dict[str, str] = {
    ServiceType.PASSPORT_RENEWAL.value: FileType.PASSPORT.value,
    ServiceType.CERTIFICATE_AUTHENTICATION.value: FileType.CERTIFICATE.value,
    ServiceType.CERTIFICATE_DOCUMENTATION.value: FileType.CERTIFICATE.value,
    ServiceType.MINISTRY_AUTHENTICATION.value: FileType.CERTIFICATE.value,
    ServiceType.VISA_REQUEST.value: FileType.VISA_REQUEST.value,
}

# Upload order within one submission
ATTACHMENT_SLOTS: Tuple[str, ...] = (
    FileType.PASSPORT.value,
    FileType.CERTIFICATE.value,
    FileType.VISA_REQUEST.value,
)

PENDING_STATUSES: Tuple[str, ...] = (
    RequestStatus.SUBMITTED.value,
    RequestStatus.UNDER_REVIEW.value,
    RequestStatus.PROCESSING.value,
)


def translate_status(status: Optional[str]) -> Optional[str]:
    """Display label for a status; unknown values come back unchanged."""
    return STATUS_LABELS.get(status, status)


def translate_service_type(service_type: Optional[str]) -> Optional[str]:
    return SERVICE_TYPE_LABELS.get(service_type, service_type)


def status_index(status: Optional[str]) -> int:
    """Position in STATUS_ORDER, -1 when the status is unknown or missing."""
    try:
        return STATUS_ORDER.index(status)
    except ValueError:
        return -1


def primary_file_type(service_type: str) -> str:
    return PRIMARY_FILE_TYPE.get(service_type, FileType.OTHER.value)


def is_known_status(status: Optional[str]) -> bool:
    return status in STATUS_LABELS


def is_known_service_type(service_type: Optional[str]) -> bool:
    return service_type in SERVICE_TYPE_LABELS
