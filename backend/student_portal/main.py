# student_portal/main.py
import time

from fastapi import FastAPI, Request as HTTPRequest
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .database.base import Base
from .database.session import engine
from .config import settings
from .exceptions import PortalError, UnexpectedError
from .logging_config import generate_request_id, logger, set_request_id, setup_logging

# Import all models to ensure they're registered with Base
from .database.models.user import User
from .database.models.request import Request, RequestStatusChange
from .database.models.uploaded_file import UploadedFile
from .database.models.news import NewsItem
from .database.models.library_document import LibraryDocument

from .routers import admin, auth, content, requests, tracking
from .services.storage_service import get_storage

setup_logging()

app = FastAPI(
    title="Student Services Portal",
    description="Service requests with document uploads, status tracking and an admin back-office",
    version="1.0.0"
)

# CORS middleware for the web front-end
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Create all database tables
Base.metadata.create_all(bind=engine)


@app.middleware("http")
async def log_requests(request: HTTPRequest, call_next):
    set_request_id(request.headers.get("X-Request-ID") or generate_request_id())
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started) * 1000
    logger.info(f"HTTP {request.method} {request.url.path} - {response.status_code} ({duration_ms:.2f}ms)")
    return response


@app.exception_handler(PortalError)
async def portal_error_handler(request: HTTPRequest, exc: PortalError):
    if exc.status_code >= 500:
        logger.error(f"{exc.code}: {exc.message} {exc.details}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.to_dict()})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: HTTPRequest, exc: SQLAlchemyError):
    logger.exception("Database error", exc_info=exc)
    error = UnexpectedError()
    return JSONResponse(status_code=error.status_code, content={"error": error.to_dict()})


app.include_router(auth.router)
app.include_router(requests.router)
app.include_router(tracking.router)
app.include_router(content.router)
app.include_router(admin.router)


@app.get("/")
def root():
    return {
        "status": "ok",
        "service": "Student Services Portal API",
        "version": "1.0.0"
    }

@app.get("/health")
def health_check():
    return {
        "status": "healthy",
        "database": engine.url.get_backend_name(),
        "storage": get_storage().describe(),
        "max_upload_size_bytes": settings.MAX_UPLOAD_SIZE_BYTES,
    }

#   cd backend
#   uvicorn student_portal.main:app --reload
#   API docs (interactive): http://127.0.0.1:8000/docs
