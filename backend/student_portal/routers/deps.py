# student_portal/routers/deps.py
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from ..exceptions import AuthRequired
from ..services.auth_service import CallerSession, decode_access_token, require_admin
from ..services.storage_service import StorageBackend, get_storage
from ..services.submission_service import RequestSubmissionService
from ..services.upload_policy import UploadPolicy

bearer = HTTPBearer(auto_error=False)


def get_caller_session(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
) -> Optional[CallerSession]:
    """Session from the bearer token, or None for anonymous callers"""
    if credentials is None:
        return None
    return decode_access_token(credentials.credentials)


def require_session(session: Optional[CallerSession] = Depends(get_caller_session)) -> CallerSession:
    if session is None:
        raise AuthRequired()
    return session


def require_admin_session(session: Optional[CallerSession] = Depends(get_caller_session)) -> CallerSession:
    return require_admin(session)


def get_upload_policy() -> UploadPolicy:
    return UploadPolicy.from_settings()


def get_submission_service(
    storage: StorageBackend = Depends(get_storage),
    policy: UploadPolicy = Depends(get_upload_policy),
) -> RequestSubmissionService:
    return RequestSubmissionService(storage=storage, policy=policy)
