# student_portal/services/content_service.py
from typing import List, Optional

from sqlalchemy.orm import Session

from ..database.models.library_document import LibraryCategory, LibraryDocument, StudentCountry
from ..database.models.news import NewsItem
from ..exceptions import NotFound, ValidationError
from ..logging_config import logger
from .auth_service import CallerSession


class NewsService:
    @staticmethod
    def list_active(db: Session) -> List[NewsItem]:
        return (
            db.query(NewsItem)
            .filter(NewsItem.is_active.is_(True))
            .order_by(NewsItem.created_at.desc())
            .all()
        )

    @staticmethod
    def list_all(db: Session) -> List[NewsItem]:
        return db.query(NewsItem).order_by(NewsItem.created_at.desc()).all()

    @staticmethod
    def create(db: Session, title: str, content: str, image_url: Optional[str] = None, is_active: bool = True) -> NewsItem:
        item = NewsItem(title=title, content=content, image_url=image_url or None, is_active=is_active)
        db.add(item)
        db.commit()
        db.refresh(item)
        logger.info(f"[News] Created '{title}'")
        return item

    @staticmethod
    def set_active(db: Session, news_id: str, is_active: bool) -> NewsItem:
        item = NewsService._get(db, news_id)
        item.is_active = is_active
        db.commit()
        db.refresh(item)
        return item

    @staticmethod
    def delete(db: Session, news_id: str) -> None:
        item = NewsService._get(db, news_id)
        title = item.title
        db.delete(item)
        db.commit()
        logger.info(f"[News] Deleted '{title}'")

    @staticmethod
    def _get(db: Session, news_id: str) -> NewsItem:
        item = db.query(NewsItem).filter(NewsItem.id == news_id).first()
        if not item:
            raise NotFound("No such news item")
        return item


class LibraryService:
    @staticmethod
    def list_documents(db: Session, category: Optional[str] = None, country: Optional[str] = None) -> List[LibraryDocument]:
        query = db.query(LibraryDocument)
        if category:
            query = query.filter(LibraryDocument.category == category)
        if country:
            query = query.filter(LibraryDocument.country == country)
        return query.order_by(LibraryDocument.created_at.desc()).all()

    @staticmethod
    def create(
        db: Session,
        admin: CallerSession,
        title: str,
        file_url: str,
        category: str,
        country: str,
        description: Optional[str] = None,
    ) -> LibraryDocument:
        if category not in {c.value for c in LibraryCategory}:
            raise ValidationError(f"Unknown category '{category}'", details={"category": category})
        if country not in {c.value for c in StudentCountry}:
            raise ValidationError(f"Unknown country '{country}'", details={"country": country})

        document = LibraryDocument(
            title=title,
            description=description or None,
            file_url=file_url,
            category=category,
            country=country,
            uploaded_by_admin_id=admin.user_id,
        )
        db.add(document)
        db.commit()
        db.refresh(document)
        logger.info(f"[Library] Added '{title}' ({category}/{country})")
        return document

    @staticmethod
    def delete(db: Session, document_id: str) -> None:
        document = db.query(LibraryDocument).filter(LibraryDocument.id == document_id).first()
        if not document:
            raise NotFound("No such document")
        db.delete(document)
        db.commit()
