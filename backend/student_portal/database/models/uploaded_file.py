# student_portal/database/models/uploaded_file.py
from sqlalchemy import Column, Integer, String, ForeignKey, DateTime
from sqlalchemy.orm import relationship
import uuid
import enum
from ..base import Base, utcnow

class FileType(str, enum.Enum):
    PASSPORT = "passport"
    CERTIFICATE = "certificate"
    VISA_REQUEST = "visa_request"
    OTHER = "other"

class UploadedFile(Base):
    __tablename__ = "files"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    request_id = Column(String(36), ForeignKey("requests.id"), nullable=False, index=True)
    file_type = Column(String(32), nullable=False)
    file_path = Column(String, nullable=False)  # object key: owner/request/type/filename
    original_filename = Column(String, nullable=True)
    content_type = Column(String, nullable=True)
    size_bytes = Column(Integer, nullable=True)
    uploaded_at = Column(DateTime, nullable=False, default=utcnow)

    # Relationships
    request = relationship("Request", back_populates="files")
