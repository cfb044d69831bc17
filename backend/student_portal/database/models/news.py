# student_portal/database/models/news.py
from sqlalchemy import Column, String, Boolean, DateTime, Text
import uuid
from ..base import Base, utcnow

class NewsItem(Base):
    __tablename__ = "news"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    title = Column(String, nullable=False)
    content = Column(Text, nullable=False)
    image_url = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
