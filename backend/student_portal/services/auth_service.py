# student_portal/services/auth_service.py
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import bcrypt
from jose import JWTError, jwt
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..config import settings
from ..database.models.user import User, UserRole
from ..exceptions import AuthRequired, Conflict, PermissionDenied
from ..logging_config import logger


@dataclass(frozen=True)
class CallerSession:
    """
    Identity of the logged-in caller.

    Built from the bearer token for each HTTP call and handed to whichever
    service needs to know who is acting. Logging out is dropping the token.
    """
    user_id: str
    email: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    @classmethod
    def for_user(cls, user: User) -> "CallerSession":
        return cls(user_id=user.id, email=user.email, role=user.role)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    # bcrypt only looks at the first 72 bytes
    password_bytes = plain_password.encode("utf-8")[:72]
    return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))


def get_password_hash(password: str) -> str:
    password_bytes = password.encode("utf-8")[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


def create_access_token(session: CallerSession, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    payload: Dict[str, Any] = {
        "sub": session.user_id,
        "email": session.email,
        "role": session.role,
        "exp": expire,
    }
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> CallerSession:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        raise AuthRequired("Your session has expired, please log in again") from e

    user_id = payload.get("sub")
    if not user_id:
        raise AuthRequired("Invalid session, please log in again")
    return CallerSession(user_id=user_id, email=payload.get("email", ""), role=payload.get("role", UserRole.STUDENT.value))


def require_admin(session: Optional[CallerSession]) -> CallerSession:
    if session is None:
        raise AuthRequired()
    if not session.is_admin:
        raise PermissionDenied("Administrator access required")
    return session


class AuthService:
    @staticmethod
    def signup(
        db: Session,
        email: str,
        password: str,
        full_name_ar: str,
        full_name_en: str,
        phone_number: Optional[str] = None,
    ) -> User:
        email = email.strip().lower()
        if db.query(User).filter(User.email == email).first():
            raise Conflict("An account with this email already exists")

        user = User(
            email=email,
            password_hash=get_password_hash(password),
            full_name_ar=full_name_ar,
            full_name_en=full_name_en,
            phone_number=phone_number or None,
            role=UserRole.STUDENT.value,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise Conflict("An account with this email already exists") from e
        db.refresh(user)

        logger.info(f"[Auth] Signup {email}")
        return user

    @staticmethod
    def login(db: Session, email: str, password: str) -> User:
        email = email.strip().lower()
        user = db.query(User).filter(User.email == email).first()
        if not user or not verify_password(password, user.password_hash):
            logger.warning(f"[Auth] Failed login for {email}")
            raise AuthRequired("Incorrect email or password")

        logger.info(f"[Auth] Login {email}")
        return user

    @staticmethod
    def get_user(db: Session, session: CallerSession) -> User:
        user = db.query(User).filter(User.id == session.user_id).first()
        if not user:
            raise AuthRequired("Account no longer exists, please log in again")
        return user
