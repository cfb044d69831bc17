# student_portal/database/models/user.py
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship
import uuid
import enum
from ..base import Base, utcnow

class UserRole(str, enum.Enum):
    STUDENT = "student"
    ADMIN = "admin"

class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    full_name_ar = Column(String, nullable=False)
    full_name_en = Column(String, nullable=False)
    phone_number = Column(String, nullable=True)
    role = Column(String(16), nullable=False, default=UserRole.STUDENT.value)
    created_at = Column(DateTime, nullable=False, default=utcnow)

    # Relationships
    requests = relationship("Request", back_populates="owner")
