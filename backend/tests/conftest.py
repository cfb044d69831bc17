"""
Test configuration and fixtures
"""
import os
import tempfile
from datetime import datetime
from typing import AsyncGenerator, Generator

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool
from faker import Faker

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["STORAGE_BACKEND"] = "local"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="portal-uploads-")
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["BCRYPT_ROUNDS"] = "4"

from student_portal.main import app
from student_portal.database.base import Base
from student_portal.database.session import get_db
from student_portal.database.models.request import Request, RequestStatus
from student_portal.database.models.user import User, UserRole
from student_portal.routers.deps import get_upload_policy
from student_portal.services.auth_service import CallerSession, create_access_token, get_password_hash
from student_portal.services.storage_service import LocalStorage, get_storage
from student_portal.services.submission_service import RequestSubmissionService
from student_portal.services.upload_policy import UploadPolicy

fake = Faker()

# Small ceiling so oversized files stay cheap to build
TEST_MAX_UPLOAD_SIZE = 1024
PDF_BYTES = b"%PDF-1.4\n" + b"0" * 200


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def db_session(engine) -> Generator[Session, None, None]:
    """Fresh database session for each test"""
    TestSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def storage(tmp_path) -> LocalStorage:
    return LocalStorage(tmp_path / "uploads")


@pytest.fixture
def policy() -> UploadPolicy:
    return UploadPolicy(TEST_MAX_UPLOAD_SIZE, ["application/pdf"])


@pytest.fixture
def submission_service(storage, policy) -> RequestSubmissionService:
    return RequestSubmissionService(storage=storage, policy=policy)


@pytest.fixture
async def client(db_session, storage, policy) -> AsyncGenerator[AsyncClient, None]:
    """Test client wired to the per-test database and storage"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_upload_policy] = lambda: policy

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


def make_user(db: Session, role: str = UserRole.STUDENT.value, password: str = "testpassword123") -> User:
    user = User(
        email=fake.unique.email(),
        password_hash=get_password_hash(password),
        full_name_ar=fake.name(),
        full_name_en=fake.name(),
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_request(
    db: Session,
    owner: User,
    request_number: str = "REQ-2025-0042",
    status: str = RequestStatus.SUBMITTED.value,
    created_at: datetime = None,
    service_type: str = "passport_renewal",
) -> Request:
    created_at = created_at or datetime(2025, 3, 14, 10, 30)
    request = Request(
        owner_id=owner.id,
        service_type=service_type,
        status=status,
        request_number=request_number,
        submission_date=created_at.date(),
        created_at=created_at,
    )
    db.add(request)
    db.commit()
    db.refresh(request)
    return request


@pytest.fixture
def student(db_session) -> User:
    return make_user(db_session)


@pytest.fixture
def admin_user(db_session) -> User:
    return make_user(db_session, role=UserRole.ADMIN.value)


@pytest.fixture
def student_session(student) -> CallerSession:
    return CallerSession.for_user(student)


@pytest.fixture
def admin_session(admin_user) -> CallerSession:
    return CallerSession.for_user(admin_user)


@pytest.fixture
def auth_headers(student_session) -> dict:
    return {"Authorization": f"Bearer {create_access_token(student_session)}"}


@pytest.fixture
def admin_headers(admin_session) -> dict:
    return {"Authorization": f"Bearer {create_access_token(admin_session)}"}
