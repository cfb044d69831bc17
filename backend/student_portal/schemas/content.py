# student_portal/schemas/content.py
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NewsCreate(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    image_url: Optional[str] = None
    is_active: bool = True


class NewsActiveUpdate(BaseModel):
    is_active: bool


class NewsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    content: str
    image_url: Optional[str] = None
    is_active: bool
    created_at: datetime


class LibraryDocumentCreate(BaseModel):
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    file_url: str = Field(..., min_length=1)
    category: str
    country: str


class LibraryDocumentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: Optional[str] = None
    file_url: str
    category: str
    country: str
    created_at: datetime
