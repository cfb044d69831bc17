# student_portal/database/models/library_document.py
from sqlalchemy import Column, String, ForeignKey, DateTime, Text
import uuid
import enum
from ..base import Base, utcnow

class LibraryCategory(str, enum.Enum):
    MEDICAL = "Medical"
    ENGINEERING = "Engineering"
    IT = "IT"

class StudentCountry(str, enum.Enum):
    IRAQ = "Iraq"
    YEMEN = "Yemen"

class LibraryDocument(Base):
    __tablename__ = "student_library"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    file_url = Column(String, nullable=False)
    category = Column(String(32), nullable=False, index=True)
    country = Column(String(32), nullable=False, index=True)
    uploaded_by_admin_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
