# student_portal/database/session.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from ..config import settings


def _connect_args(database_url: str) -> dict:
    if database_url.startswith("sqlite"):
        # sqlite3 busy timeout; FastAPI may use the connection from another thread
        return {"check_same_thread": False, "timeout": settings.DATABASE_CONNECT_TIMEOUT}
    return {"connect_timeout": settings.DATABASE_CONNECT_TIMEOUT}


engine = create_engine(
    settings.DATABASE_URL,
    connect_args=_connect_args(settings.DATABASE_URL),
    pool_pre_ping=True,
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
