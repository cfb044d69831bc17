# student_portal/database/models/request.py
from sqlalchemy import Column, String, ForeignKey, DateTime, Date, Text
from sqlalchemy.orm import relationship
import uuid
import enum
from ..base import Base, utcnow

class RequestStatus(str, enum.Enum):
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    PROCESSING = "processing"
    APPROVED = "approved"
    REJECTED = "rejected"

class ServiceType(str, enum.Enum):
    CERTIFICATE_AUTHENTICATION = "certificate_authentication"
    CERTIFICATE_DOCUMENTATION = "certificate_documentation"
    MINISTRY_AUTHENTICATION = "ministry_authentication"
    PASSPORT_RENEWAL = "passport_renewal"
    VISA_REQUEST = "visa_request"

class Request(Base):
    __tablename__ = "requests"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    service_type = Column(String(64), nullable=False)
    # Plain strings, not Enum columns: a value the code does not know must still load
    status = Column(String(32), nullable=False, default=RequestStatus.SUBMITTED.value, index=True)
    # Not unique-constrained: numbers are random and may collide, lookups narrow by date
    request_number = Column(String(16), nullable=False, index=True)
    submission_date = Column(Date, nullable=False)

    full_name_ar = Column(String, nullable=True)
    full_name_en = Column(String, nullable=True)
    university_name = Column(String, nullable=True)
    major = Column(String, nullable=True)
    additional_notes = Column(Text, nullable=True)
    admin_notes = Column(Text, nullable=True)

    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    owner = relationship("User", back_populates="requests")
    files = relationship("UploadedFile", back_populates="request", order_by="UploadedFile.uploaded_at")
    history = relationship(
        "RequestStatusChange",
        back_populates="request",
        order_by="RequestStatusChange.updated_at",
        cascade="all, delete-orphan",
    )

class RequestStatusChange(Base):
    __tablename__ = "request_status_history"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    request_id = Column(String(36), ForeignKey("requests.id"), nullable=False, index=True)
    old_status = Column(String(32), nullable=True)
    new_status = Column(String(32), nullable=False)
    note = Column(Text, nullable=True)
    updated_by = Column(String(36), ForeignKey("users.id"), nullable=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    request = relationship("Request", back_populates="history")
