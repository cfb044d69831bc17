# student_portal/routers/content.py
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database.session import get_db
from ..schemas.content import LibraryDocumentOut, NewsOut
from ..services.content_service import LibraryService, NewsService

router = APIRouter(tags=["content"])


@router.get("/news", response_model=List[NewsOut])
def active_news(db: Session = Depends(get_db)):
    return NewsService.list_active(db)


@router.get("/library", response_model=List[LibraryDocumentOut])
def library(category: Optional[str] = None, country: Optional[str] = None, db: Session = Depends(get_db)):
    return LibraryService.list_documents(db, category=category, country=country)
