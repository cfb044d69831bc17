# student_portal/services/timeline_service.py
from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import List, Optional, Union

from ..database.models.request import RequestStatus
from .status_vocabulary import STATUS_ORDER, status_index, translate_status

# Display placeholders. Only the creation date is persisted, so reached later
# stages show UPDATED_MARKER rather than a date.
UPDATED_MARKER = "تم التحديث"
PENDING_MARKER = "في الانتظار"
REJECTED_MARKER = "تم الرفض"
DATE_FORMAT = "%Y-%m-%d"

_SKIPPED_BY_REJECTION = (
    RequestStatus.UNDER_REVIEW.value,
    RequestStatus.PROCESSING.value,
    RequestStatus.APPROVED.value,
)


@dataclass(frozen=True)
class StatusDescriptor:
    """One row of the progress timeline"""
    status: str
    label: str
    date: str
    complete: bool

    def to_dict(self) -> dict:
        return asdict(self)


def format_display_date(value: Union[datetime, date, str, None]) -> str:
    if value is None:
        return PENDING_MARKER
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    if not isinstance(value, (datetime, date)):
        return str(value)
    return value.strftime(DATE_FORMAT)


class TimelineService:
    """Turns a request's stored status into the five-step progress view"""

    @staticmethod
    def generate(status: Optional[str], created_at: Union[datetime, date, str, None]) -> List[StatusDescriptor]:
        """
        One descriptor per canonical status, in canonical order.

        - submitted: complete with the creation date
        - reached stages: complete with the "updated" marker
        - later stages: incomplete with the "pending" placeholder
        - when rejected, the intermediate stages are shown as not reached
        - unknown or missing status: every entry incomplete

        Never raises for malformed input.
        """
        current_index = status_index(status)
        rejected = status == RequestStatus.REJECTED.value

        timeline = []
        for index, stage in enumerate(STATUS_ORDER):
            if current_index == -1:
                date_text, complete = PENDING_MARKER, False
            elif stage == RequestStatus.SUBMITTED.value:
                date_text, complete = format_display_date(created_at), True
            elif rejected and stage in _SKIPPED_BY_REJECTION:
                date_text, complete = REJECTED_MARKER, False
            elif index <= current_index:
                date_text, complete = UPDATED_MARKER, True
            else:
                date_text, complete = PENDING_MARKER, False

            timeline.append(StatusDescriptor(
                status=stage,
                label=translate_status(stage),
                date=date_text,
                complete=complete,
            ))

        return timeline


def generate_status_timeline(status: Optional[str], created_at=None) -> List[StatusDescriptor]:
    return TimelineService.generate(status, created_at)
