# student_portal/routers/admin.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from ..database.session import get_db
from ..schemas.content import LibraryDocumentCreate, LibraryDocumentOut, NewsActiveUpdate, NewsCreate, NewsOut
from ..schemas.request import AdminRequestUpdate, RequestOut, StatsOut, StatusChangeOut, UploadedFileOut
from ..schemas.user import RoleUpdate, UserOut
from ..services.admin_service import AdminService, validate_filters
from ..services.auth_service import CallerSession
from ..services.content_service import LibraryService, NewsService
from .deps import require_admin_session

router = APIRouter(prefix="/admin", tags=["admin"], dependencies=[Depends(require_admin_session)])


# Requests

@router.get("/requests", response_model=List[RequestOut])
def list_requests(
    status: Optional[str] = None,
    service_type: Optional[str] = None,
    search: Optional[str] = None,
    db: Session = Depends(get_db),
):
    validate_filters(status, service_type)
    return AdminService.list_requests(db, status=status, service_type=service_type, search=search)


@router.get("/requests/{request_id}", response_model=RequestOut)
def get_request(request_id: str, db: Session = Depends(get_db)):
    return AdminService.get_request(db, request_id)


@router.patch("/requests/{request_id}", response_model=RequestOut)
def update_request(
    request_id: str,
    payload: AdminRequestUpdate,
    admin: CallerSession = Depends(require_admin_session),
    db: Session = Depends(get_db),
):
    changes = payload.model_dump(exclude_unset=True)
    return AdminService.update_request(db, admin, request_id, **changes)


@router.get("/requests/{request_id}/files", response_model=List[UploadedFileOut])
def request_files(request_id: str, db: Session = Depends(get_db)):
    return AdminService.get_request(db, request_id).files


@router.get("/requests/{request_id}/history", response_model=List[StatusChangeOut])
def request_history(request_id: str, db: Session = Depends(get_db)):
    return AdminService.request_history(db, request_id)


@router.get("/stats", response_model=StatsOut)
def stats(db: Session = Depends(get_db)):
    return AdminService.stats(db)


# Users

@router.get("/users", response_model=List[UserOut])
def list_users(db: Session = Depends(get_db)):
    return AdminService.list_users(db)


@router.patch("/users/{user_id}/role", response_model=UserOut)
def set_user_role(
    user_id: str,
    payload: RoleUpdate,
    admin: CallerSession = Depends(require_admin_session),
    db: Session = Depends(get_db),
):
    return AdminService.set_user_role(db, admin, user_id, payload.role)


# News

@router.get("/news", response_model=List[NewsOut])
def list_news(db: Session = Depends(get_db)):
    return NewsService.list_all(db)


@router.post("/news", response_model=NewsOut, status_code=201)
def create_news(payload: NewsCreate, db: Session = Depends(get_db)):
    return NewsService.create(db, payload.title, payload.content, payload.image_url, payload.is_active)


@router.patch("/news/{news_id}", response_model=NewsOut)
def set_news_active(news_id: str, payload: NewsActiveUpdate, db: Session = Depends(get_db)):
    return NewsService.set_active(db, news_id, payload.is_active)


@router.delete("/news/{news_id}", status_code=204)
def delete_news(news_id: str, db: Session = Depends(get_db)):
    NewsService.delete(db, news_id)
    return Response(status_code=204)


# Reference library

@router.post("/library", response_model=LibraryDocumentOut, status_code=201)
def create_library_document(
    payload: LibraryDocumentCreate,
    admin: CallerSession = Depends(require_admin_session),
    db: Session = Depends(get_db),
):
    return LibraryService.create(
        db,
        admin,
        title=payload.title,
        file_url=payload.file_url,
        category=payload.category,
        country=payload.country,
        description=payload.description,
    )


@router.delete("/library/{document_id}", status_code=204)
def delete_library_document(document_id: str, db: Session = Depends(get_db)):
    LibraryService.delete(db, document_id)
    return Response(status_code=204)
